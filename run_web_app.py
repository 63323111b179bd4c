#!/usr/bin/env python
"""Direct runner for the Lumina Studio web application."""

import logging
import sys
from pathlib import Path

import streamlit.web.cli as st_cli

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


def main():
    """Run the Streamlit web app directly."""
    app_path = Path(__file__).parent / "lumina_studio" / "web" / "app.py"
    sys.argv = ["streamlit", "run", str(app_path.resolve())]
    logger.info(f"Running Streamlit app at: {app_path.resolve()}")
    st_cli.main()


if __name__ == "__main__":
    main()
