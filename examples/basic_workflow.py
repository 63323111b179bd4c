"""Basic workflow example for Lumina Studio.

This example imports an image, renders every preset, and walks the edit
history with a second committed image.
"""

import os
import argparse
import logging
from pathlib import Path

from lumina_studio import EditorSession, ImageState, get_available_presets, save_image

# Set up logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


def main():
    """Run the basic workflow example."""
    parser = argparse.ArgumentParser(description="Lumina Studio basic workflow example")
    parser.add_argument("input", help="Input image file path")
    parser.add_argument("-o", "--output", help="Output directory (defaults to 'output')")
    args = parser.parse_args()

    input_path = Path(args.input)
    if not input_path.exists():
        logger.error(f"Input file does not exist: {input_path}")
        return 1

    output_dir = Path(args.output or "output")
    os.makedirs(output_dir, exist_ok=True)

    # Step 1: Import the image
    session = EditorSession()
    logger.info(f"Importing image: {input_path}")
    session.import_image(input_path.read_bytes())

    # Step 2: Render every preset
    for preset_id in get_available_presets():
        session.apply_preset(preset_id)
        preset_path = output_dir / f"{preset_id}_{input_path.stem}.png"
        save_image(session.preview(), str(preset_path))
        logger.info(f"Saved '{preset_id}' preview to: {preset_path}")

    # Step 3: Commit the dramatic render as a new history entry, then undo
    session.apply_preset("dramatic")
    artifact = session.export(add_to_gallery=False)
    session.import_image(input_path.read_bytes())
    session.commit(ImageState(artifact.data, mime_type=artifact.mime_type, source="export"))
    logger.info(f"History stats after commit: {session.history.get_stats()}")
    session.undo()
    logger.info(f"History stats after undo: {session.history.get_stats()}")

    return 0


if __name__ == "__main__":
    main()
