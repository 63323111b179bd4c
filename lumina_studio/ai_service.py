"""Generative AI image service for the Lumina Studio editor.

This module wraps the hosted Gemini models used to identify the content of an
image and to edit an image from a natural-language instruction.
"""

import logging
import os
from typing import Any, Dict, Optional

from google import genai
from google.genai import types

from .errors import ServiceError
from .history import ImageState
from .translations import translate, validate_language

# Set up logging
logger = logging.getLogger(__name__)

IDENTIFY_PROMPTS = {
    'en': 'Identify the main product or object in this image. Provide a concise, informative description.',
    'ar': 'حدد المنتج أو الكائن الرئيسي في هذه الصورة. قدم وصفًا موجزًا وغنيًا بالمعلومات باللغة العربية.',
}

ERASE_TEMPLATE = "Remove the {target} from this image and fill in the background seamlessly to look natural."

API_KEY_VARIABLES = ('GEMINI_API_KEY', 'GOOGLE_API_KEY', 'API_KEY')


def build_erase_instruction(target: str) -> str:
    """Build the edit instruction that removes ``target`` from an image."""
    return ERASE_TEMPLATE.format(target=target.strip())


def _api_key_from_env() -> str:
    for name in API_KEY_VARIABLES:
        value = os.environ.get(name)
        if value:
            return value
    return ''


class GeminiImageService:
    """Identifies and edits images with hosted Gemini models."""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """Initialize the image service.

        Args:
            config: Configuration dictionary for credentials, model names and timeout
        """
        self.config = config or {}
        self._validate_config()

        # Created on first use by _get_client()
        self.client = None

    def _validate_config(self) -> None:
        """Validate and set default configuration parameters."""
        defaults = {
            'api_key': _api_key_from_env(),
            'identify_model': os.environ.get('LUMINA_IDENTIFY_MODEL', 'gemini-2.5-flash'),
            'edit_model': os.environ.get('LUMINA_EDIT_MODEL', 'gemini-2.5-flash-image'),
            'timeout_ms': None,  # No request timeout unless configured
        }

        for key, value in defaults.items():
            if key not in self.config:
                self.config[key] = value

    def _get_client(self) -> genai.Client:
        """Create the Gemini client on first use.

        Raises:
            ServiceError: If no API key is configured
        """
        if self.client is not None:
            return self.client

        if not self.config['api_key']:
            raise ServiceError(
                "Missing Gemini API key. Set GEMINI_API_KEY (or GOOGLE_API_KEY / API_KEY)."
            )

        http_options = None
        if self.config['timeout_ms']:
            http_options = types.HttpOptions(timeout=int(self.config['timeout_ms']))

        logger.info("Creating Gemini client")
        self.client = genai.Client(api_key=self.config['api_key'], http_options=http_options)
        return self.client

    def _image_part(self, state: ImageState) -> types.Part:
        return types.Part.from_bytes(data=state.data, mime_type=state.mime_type)

    def identify(self, state: ImageState, language: str = 'en') -> str:
        """Describe the main product or object in an image.

        Args:
            state: Image to analyze
            language: Response language ('en' or 'ar')

        Returns:
            A short text description; the localized "No description found."
            when the model returns no text

        Raises:
            ServiceError: On missing credentials or any transport/model failure
        """
        language = validate_language(language)
        client = self._get_client()
        model = self.config['identify_model']

        logger.info(f"Identifying {state!r} with {model} ({language})")
        try:
            response = client.models.generate_content(
                model=model,
                contents=[IDENTIFY_PROMPTS[language], self._image_part(state)],
            )
            text = response.text
        except Exception as e:
            logger.error(f"Identify error: {e}")
            raise ServiceError(f"Image identification failed: {e}") from e

        if not text or not text.strip():
            logger.warning("Model returned no description")
            return translate('noDescription', language)
        return text.strip()

    def edit(self, state: ImageState, instruction: str) -> ImageState:
        """Edit an image according to a natural-language instruction.

        Args:
            state: Image to edit
            instruction: What to change (e.g. "Remove the cup")

        Returns:
            The edited image as a new state

        Raises:
            ServiceError: On missing credentials, transport/model failure,
                or when the response contains no image
        """
        client = self._get_client()
        model = self.config['edit_model']

        logger.info(f"Editing {state!r} with {model}: {instruction[:100]}")
        try:
            response = client.models.generate_content(
                model=model,
                contents=[instruction, self._image_part(state)],
                config=types.GenerateContentConfig(response_modalities=['TEXT', 'IMAGE']),
            )
        except Exception as e:
            logger.error(f"AI edit error: {e}")
            raise ServiceError(f"Image edit failed: {e}") from e

        # Extract image from response; it may contain text and/or inline data
        candidates = getattr(response, 'candidates', None) or []
        if candidates and candidates[0].content and candidates[0].content.parts:
            for part in candidates[0].content.parts:
                inline_data = getattr(part, 'inline_data', None)
                if inline_data is not None and inline_data.data:
                    return ImageState(
                        inline_data.data,
                        mime_type=inline_data.mime_type or 'image/png',
                        source='ai-edit',
                    )

        logger.error("AI edit response contained no image")
        raise ServiceError("No image generated.")
