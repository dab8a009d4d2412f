"""Configuration management for Tag Canvas."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

# Default configuration file path
DEFAULT_CONFIG_PATH = Path("tag_canvas.yaml")


@dataclass
class CanvasConfig:
    """
    Canvas settings.

    Covers zoom stepping, primitive styling and interaction preferences.
    """

    scale_step: float = 0.25
    max_scale: float = 16.0
    line_width: int = 2
    label_height: int = 20
    label_padding: int = 4  # Text inset inside the label background
    label_font_family: str = "Arial"
    label_font_px: int = 12
    label_text_color: str = "#ffffff"
    label_background_color: str = "#000000"
    handle_radius: int = 5
    empty_area_color: str = "#00000002"  # Near-transparent fill that still hit-tests
    drag_line_color: str = "#ffffff"
    fill_alpha_suffix: str = "20"  # Appended to a #RRGGBB color when filled
    cursor_pointer: bool = True  # Pointer cursor when hovering tag areas
    pan_key: str = "Space"
    labels_visible_by_default: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> CanvasConfig:
        """Create config from dictionary."""
        return cls(
            scale_step=data.get("scaleStep", 0.25),
            max_scale=data.get("maxScale", 16.0),
            line_width=data.get("lineWidth", 2),
            label_height=data.get("labelHeight", 20),
            label_padding=data.get("labelPadding", 4),
            label_font_family=data.get("labelFontFamily", "Arial"),
            label_font_px=data.get("labelFontPx", 12),
            label_text_color=data.get("labelTextColor", "#ffffff"),
            label_background_color=data.get("labelBackgroundColor", "#000000"),
            handle_radius=data.get("handleRadius", 5),
            empty_area_color=data.get("emptyAreaColor", "#00000002"),
            drag_line_color=data.get("dragLineColor", "#ffffff"),
            fill_alpha_suffix=data.get("fillAlphaSuffix", "20"),
            cursor_pointer=data.get("cursorPointer", True),
            pan_key=data.get("panKey", "Space"),
            labels_visible_by_default=data.get("labelsVisibleByDefault", False),
        )


class ConfigManager:
    """
    Read-only access to the canvas settings file.

    The file is parsed on first access to :attr:`config`. A file that is missing
    or unreadable yields the default settings.
    """

    def __init__(self, config_path: Path = DEFAULT_CONFIG_PATH) -> None:
        self.config_path = Path(config_path)
        self._config: Optional[CanvasConfig] = None

    @property
    def config(self) -> CanvasConfig:
        """Settings from the file, parsed once."""
        if self._config is None:
            self._config = self.load()
        return self._config

    def load(self) -> CanvasConfig:
        """
        Parse the settings file.

        Returns:
            CanvasConfig with the file's values over the defaults
        """
        if not self.config_path.exists():
            logger.info(f"No settings file at {self.config_path}, using defaults")
            return CanvasConfig()

        try:
            with open(self.config_path, "r") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            logger.error(f"Malformed settings file {self.config_path}: {e}")
            return CanvasConfig()
        except OSError as e:
            logger.error(f"Cannot read settings file {self.config_path}: {e}")
            return CanvasConfig()

        if not isinstance(data, dict):
            logger.error(f"Settings file {self.config_path} does not hold a mapping, using defaults")
            return CanvasConfig()

        logger.info(f"Loaded settings from {self.config_path}")
        return CanvasConfig.from_dict(data)
