"""Application bootstrap for Tag Canvas."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from PyQt6.QtWidgets import QApplication

from . import __version__
from .core.config import CanvasConfig, ConfigManager
from .ui.main_window import MainWindow

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[
        logging.StreamHandler(sys.stdout),
    ]
)

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command line arguments.

    Args:
        argv: Arguments without the program name, ``sys.argv[1:]`` if omitted

    Returns:
        Parsed arguments with ``image`` and ``config``
    """
    parser = argparse.ArgumentParser(
        prog="tag-canvas",
        description="Draw and edit tag areas over an image.",
    )
    parser.add_argument("image", type=Path, help="Image to annotate")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Canvas settings YAML file (default: tag_canvas.yaml)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def create_application() -> QApplication:
    """
    Create and configure the Qt application.

    Returns:
        Configured QApplication instance
    """
    app = QApplication(sys.argv)
    app.setApplicationName("Tag Canvas")
    app.setApplicationVersion(__version__)
    app.setOrganizationName("Tag Canvas")
    return app


def create_main_window(config: CanvasConfig, image: Path) -> MainWindow:
    """
    Create the main window and load the image into it.

    Returns:
        MainWindow instance
    """
    window = MainWindow(config)
    window.load_image(image)
    return window


def run(argv: Optional[List[str]] = None) -> int:
    """
    Run the Tag Canvas application.

    Returns:
        Exit code
    """
    args = parse_args(argv)
    logger.info("Starting Tag Canvas")

    try:
        config_manager = ConfigManager(args.config) if args.config else ConfigManager()
        config = config_manager.config
        app = create_application()
        logger.info("QApplication created")

        window = create_main_window(config, args.image)
        window.show()
        logger.info("MainWindow shown")

        return app.exec()

    except Exception as e:
        logger.error(f"Application error: {e}", exc_info=True)
        return 1


def main() -> None:
    """Main entry point for the application."""
    sys.exit(run())


if __name__ == "__main__":
    main()
