"""Pytest configuration and fixtures."""

import os
import pytest
import sys
from pathlib import Path

# Qt must not need a display while testing
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

# Add src to path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))


@pytest.fixture(scope="session")
def qapp():
    """Create a QApplication for tests that need it."""
    from PyQt6.QtWidgets import QApplication

    app = QApplication.instance()
    if app is None:
        app = QApplication([])

    yield app


@pytest.fixture
def temp_dir(tmp_path):
    """Provide a temporary directory for tests."""
    return tmp_path


@pytest.fixture
def backend(qapp):
    """A QGraphicsScene backend with nothing drawn."""
    from tag_canvas.ui.scene_backend import QtSceneBackend

    return QtSceneBackend()


@pytest.fixture
def canvas(backend):
    """An 800x600 canvas over a 1000x1000 image at scale 1."""
    from tag_canvas.core.canvas import TagCanvas

    canvas = TagCanvas(backend)
    canvas.set_viewport_size(800, 600)
    canvas.set_image_size(1000, 1000)
    return canvas


@pytest.fixture
def sample_config_yaml(tmp_path):
    """Create a sample canvas settings file."""
    yaml_path = tmp_path / "tag_canvas.yaml"
    yaml_path.write_text(
        "scaleStep: 0.5\n"
        "maxScale: 8.0\n"
        "labelHeight: 24\n"
        "panKey: Ctrl+Space\n"
    )
    return yaml_path
