"""Streamlit web app for the Lumina Studio editor."""

import logging

import streamlit as st

from lumina_studio.adjustments import ADJUSTMENT_RANGES
from lumina_studio.errors import PreconditionError, RenderError
from lumina_studio.executor import to_css
from lumina_studio.presets import get_presets
from lumina_studio.session import EditorSession
from lumina_studio.translations import LANGUAGES, is_rtl

logger = logging.getLogger(__name__)


def _get_session() -> EditorSession:
    """Get the editing session for this browser tab, creating it on first run."""
    if 'session' not in st.session_state:
        st.session_state.session = EditorSession()
        st.session_state.view_mode = 'editor'
    return st.session_state.session


def _sync_slider(name: str) -> None:
    session = st.session_state.session
    session.set_adjustment(name, st.session_state[f"adjust_{name}"])


def _run_action(session: EditorSession, func, *args):
    """Run a session action, showing precondition failures as warnings and service failures as errors."""
    try:
        result = func(*args)
    except PreconditionError as e:
        st.warning(str(e))
        return None
    if result is None and session.last_error:
        st.error(session.last_error)
    return result


def _render_sidebar(session: EditorSession) -> None:
    t = session.t
    st.sidebar.title(t('appTitle'))

    language = st.sidebar.radio(
        "Language / اللغة",
        LANGUAGES,
        index=LANGUAGES.index(session.language),
        format_func=lambda code: 'English' if code == 'en' else 'العربية',
        horizontal=True,
    )
    if language != session.language:
        session.set_language(language)
        st.rerun()

    uploaded_file = st.sidebar.file_uploader(t('uploadTitle'), type=["jpg", "jpeg", "png", "webp", "bmp", "tiff"],
                                             help=t('uploadDesc'))
    if uploaded_file is not None:
        upload_key = (uploaded_file.name, uploaded_file.size)
        if st.session_state.get('upload_key') != upload_key:
            st.session_state.upload_key = upload_key
            session.import_image(uploaded_file.getvalue(), mime_type=uploaded_file.type)
            st.session_state.view_mode = 'editor'

    if len(session.gallery):
        label = t('editor') if st.session_state.view_mode == 'gallery' else f"{t('gallery')} ({len(session.gallery)})"
        if st.sidebar.button(label, use_container_width=True):
            st.session_state.view_mode = 'editor' if st.session_state.view_mode == 'gallery' else 'gallery'
            st.rerun()

    if not session.has_image():
        return

    col1, col2, col3 = st.sidebar.columns(3)
    if col1.button(t('undo'), disabled=not session.history.can_undo(), use_container_width=True):
        session.undo()
        st.rerun()
    if col2.button(t('redo'), disabled=not session.history.can_redo(), use_container_width=True):
        session.redo()
        st.rerun()
    if col3.button(t('reset'), use_container_width=True):
        session.reset()
        st.rerun()

    if st.sidebar.button(t('download'), use_container_width=True):
        try:
            session.export()
        except RenderError:
            st.sidebar.error(t('renderError'))
    artifact = session.last_export
    if artifact is not None:
        st.sidebar.download_button(t('download') + f" {artifact.filename}", data=artifact.data,
                                   file_name=artifact.filename, mime=artifact.mime_type,
                                   use_container_width=True)


def _render_gallery(session: EditorSession) -> None:
    t = session.t
    st.subheader(t('gallery'))
    entries = session.gallery.entries()
    if not entries:
        st.info(t('galleryEmpty'))
        return

    columns = st.columns(4)
    for i, entry in enumerate(entries):
        with columns[i % 4]:
            st.image(entry.image.data, use_container_width=True)
            if st.button(t('edit'), key=f"gallery_load_{entry.id}"):
                session.load_from_gallery(entry.id)
                st.session_state.view_mode = 'editor'
                st.rerun()
            st.download_button(t('download'), data=entry.image.data, key=f"gallery_dl_{entry.id}",
                               file_name=f"lumina-gallery-{i}.png", mime=entry.image.mime_type)
            if st.button(t('delete'), key=f"gallery_rm_{entry.id}"):
                session.remove_from_gallery(entry.id)
                st.rerun()


def _render_editor(session: EditorSession) -> None:
    t = session.t
    if not session.has_image():
        st.info(t('uploadDesc'))
        return

    preview_col, tools_col = st.columns([3, 2])

    with preview_col:
        preview = session.preview()
        if preview is not None:
            st.image(preview, use_container_width=True)
        else:
            st.error(session.last_error or t('renderError'))
        if session.identify_result:
            st.info(f"**{t('identifyResult')}**\n\n{session.identify_result}")
        if session.last_error and preview is not None:
            st.error(session.last_error)

    with tools_col:
        tabs = st.tabs([t('filters'), t('adjust'), t('aiEdit'), t('erase'), t('identify')])

        with tabs[0]:  # Filters tab
            columns = st.columns(3)
            current_url = session.current().to_data_url()
            for i, preset in enumerate(get_presets()):
                with columns[i % 3]:
                    st.markdown(
                        f"""
                        <div style="background-image: url({current_url}); background-size: cover;
                        background-position: center; aspect-ratio: 1; border-radius: 10px;
                        filter: {to_css(preset.adjustments)};"></div>
                        """,
                        unsafe_allow_html=True
                    )
                    if st.button(t(preset.name_key), key=f"preset_{preset.id}", use_container_width=True):
                        session.apply_preset(preset.id)
                        st.rerun()

        with tabs[1]:  # Adjust tab
            values = session.adjustments.to_dict()
            for name, (minimum, maximum, _) in ADJUSTMENT_RANGES.items():
                key = f"adjust_{name}"
                st.session_state[key] = int(values[name])
                st.slider(t(name), int(minimum), int(maximum), key=key,
                          on_change=_sync_slider, args=(name,))

        with tabs[2]:  # AI Magic tab
            instruction = st.text_area(t('aiEdit'), placeholder=t('aiPromptPlaceholder'), key="ai_prompt")
            if st.button(t('generate'), disabled=session.is_loading('edit') or not instruction.strip(),
                         key="ai_generate"):
                with st.spinner(t('processing')):
                    result = _run_action(session, session.ai_edit, instruction)
                if result is not None:
                    st.rerun()

        with tabs[3]:  # Magic Eraser tab
            st.caption(t('eraseDesc'))
            target = st.text_input(t('erasePrompt'), placeholder=t('erasePlaceholder'), key="erase_prompt")
            if st.button(t('erase'), disabled=session.is_loading('erase') or not target.strip(),
                         key="erase_generate"):
                with st.spinner(t('processing')):
                    result = _run_action(session, session.erase, target)
                if result is not None:
                    st.rerun()

        with tabs[4]:  # Identify tab
            if st.button(t('identify'), disabled=session.is_loading('identify'), key="identify_run"):
                with st.spinner(t('identifyPrompt')):
                    result = _run_action(session, session.identify)
                if result is not None:
                    st.rerun()


def main():
    """Main function for the Streamlit web app."""
    st.set_page_config(page_title="Lumina Studio", page_icon="✨", layout="wide")
    session = _get_session()

    if is_rtl(session.language):
        st.markdown("<style>.main, .stSidebar {direction: rtl; text-align: right;}</style>",
                    unsafe_allow_html=True)

    _render_sidebar(session)

    if st.session_state.view_mode == 'gallery':
        _render_gallery(session)
    else:
        _render_editor(session)


if __name__ == "__main__":
    main()
