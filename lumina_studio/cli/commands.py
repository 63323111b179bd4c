"""CLI commands for the Lumina Studio editor."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from ..adjustments import ADJUSTMENT_RANGES
from ..errors import PreconditionError
from ..presets import get_available_presets, get_presets
from ..session import EditorSession
from ..translations import LANGUAGES, translate
from ..utils import is_supported_format, save_image

# Set up logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


def _open_session(input_path: Path, language: str = 'en') -> Optional[EditorSession]:
    """Create a session with ``input_path`` imported, or None if the file is missing."""
    if not input_path.exists():
        logger.error(f"Input file does not exist: {input_path}")
        return None

    session = EditorSession({'language': language})
    session.import_image(input_path.read_bytes())
    return session


def _output_path(args: argparse.Namespace, input_path: Path, prefix: str) -> Path:
    output = Path(args.output or f"{prefix}_{input_path.name}")
    if not is_supported_format(str(output)):
        output = output.with_suffix('.png')
    return output


def presets_command(args: argparse.Namespace) -> int:
    """List the available preset filters."""
    for preset in get_presets():
        values = ", ".join(f"{k}={v:g}" for k, v in preset.adjustments.to_dict().items())
        print(f"{preset.id:<10} {translate(preset.name_key):<12} {values}")
    return 0


def apply_command(args: argparse.Namespace) -> int:
    """Run the apply command.

    Args:
        args: Command line arguments

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    try:
        input_path = Path(args.input)
        session = _open_session(input_path)
        if session is None:
            return 1

        if args.preset:
            session.apply_preset(args.preset)

        for name in ADJUSTMENT_RANGES:
            value = getattr(args, name, None)
            if value is not None:
                session.set_adjustment(name, value)

        logger.info(f"Rendering with {session.adjustments!r}")
        result = session.preview()
        if result is None:
            logger.error(f"Could not render image: {input_path}")
            return 1

        output_path = _output_path(args, input_path, "edited")
        logger.info(f"Saving rendered image to: {output_path}")
        save_image(result, str(output_path))
        return 0
    except Exception as e:
        logger.error(f"Error applying adjustments: {e}")
        return 1


def identify_command(args: argparse.Namespace) -> int:
    """Print a description of the main object in an image."""
    try:
        session = _open_session(Path(args.input), args.lang)
        if session is None:
            return 1

        description = session.identify()
        if description is None:
            logger.error(session.last_error)
            return 1

        print(description)
        return 0
    except PreconditionError as e:
        logger.error(str(e))
        return 1


def edit_command(args: argparse.Namespace) -> int:
    """Edit an image with an instruction (or erase an object) and save the result."""
    input_path = Path(args.input)
    try:
        session = _open_session(input_path)
        if session is None:
            return 1

        if args.command == "erase":
            state = session.erase(args.target)
        else:
            state = session.ai_edit(args.instruction)
        if state is None:
            logger.error(session.last_error)
            return 1

        result = session.preview()
        if result is None:
            logger.error(session.last_error)
            return 1

        output_path = _output_path(args, input_path, args.command)
        logger.info(f"Saving edited image to: {output_path}")
        save_image(result, str(output_path))
        return 0
    except PreconditionError as e:
        logger.error(str(e))
        return 1
    except Exception as e:
        logger.error(f"Error editing image: {e}")
        return 1


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser for all subcommands."""
    parser = argparse.ArgumentParser(
        prog="lumina-edit",
        description="Photo editor with filter presets and AI-powered editing."
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    subparsers.add_parser("presets", help="List the available preset filters")

    apply_parser = subparsers.add_parser(
        "apply",
        help="Apply a preset and/or adjustments to an image"
    )
    apply_parser.add_argument("input", help="Input image file path")
    apply_parser.add_argument(
        "-p", "--preset",
        choices=get_available_presets(),
        help="Preset filter to apply before individual adjustments"
    )
    for name, (minimum, maximum, baseline) in ADJUSTMENT_RANGES.items():
        apply_parser.add_argument(
            f"--{name}",
            type=float,
            help=f"{name.capitalize()} ({minimum:g}-{maximum:g}, default {baseline:g})"
        )
    apply_parser.add_argument(
        "-o", "--output",
        help="Output image file path (defaults to 'edited_<input>')"
    )

    identify_parser = subparsers.add_parser(
        "identify",
        help="Describe the main product or object in an image"
    )
    identify_parser.add_argument("input", help="Input image file path")
    identify_parser.add_argument("--lang", choices=LANGUAGES, default="en", help="Response language")

    edit_parser = subparsers.add_parser("edit", help="Edit an image from a text instruction")
    edit_parser.add_argument("input", help="Input image file path")
    edit_parser.add_argument("instruction", help="What to change, e.g. 'Make it look like the 1980s'")
    edit_parser.add_argument("-o", "--output", help="Output image file path (defaults to 'edit_<input>')")

    erase_parser = subparsers.add_parser("erase", help="Remove an object from an image")
    erase_parser.add_argument("input", help="Input image file path")
    erase_parser.add_argument("target", help="Object to remove, e.g. 'cup'")
    erase_parser.add_argument("-o", "--output", help="Output image file path (defaults to 'erase_<input>')")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "presets":
        return presets_command(args)
    elif args.command == "apply":
        return apply_command(args)
    elif args.command == "identify":
        return identify_command(args)
    elif args.command in ("edit", "erase"):
        return edit_command(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
