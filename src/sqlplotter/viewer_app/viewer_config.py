# src/sqlplotter/viewer_app/viewer_config.py
"""
Viewer config persistence for sqlplotter (platformdirs + JSON).

Persisted items (schema v1):
- canvas pool size and canvas pixel size
- query history length
- last opened database path
- whether the example-query panel is shown

Behavior:
- If config file missing or unreadable -> defaults are used
- If schema_version mismatches:
  - default: reset to defaults
  - optional: keep loaded but update version
- Unknown keys in loaded JSON are ignored with warnings
- Out-of-range numbers are clamped
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from platformdirs import user_config_dir

from sqlplotter.utils.logging import get_logger
from sqlplotter.plot_engine.canvas_pool import (
    DEFAULT_CANVAS_HEIGHT,
    DEFAULT_CANVAS_WIDTH,
    DEFAULT_MAX_CANVASES,
)
from sqlplotter.viewer_app.query_history import DEFAULT_MAX_QUERY_HISTORY

logger = get_logger(__name__)

# Increment when you make a breaking change to the on-disk JSON schema.
SCHEMA_VERSION: int = 1

APP_NAME = "sqlplotter"
CONFIG_FILENAME = "viewer_config.json"

# (min, max) for clamped integer settings
_INT_RANGES: Dict[str, tuple[int, int]] = {
    "max_canvases": (1, 12),
    "canvas_width": (200, 4000),
    "canvas_height": (150, 4000),
    "max_query_history": (1, 100),
}


def _clamp_int(key: str, value: Any, default: int) -> int:
    lo, hi = _INT_RANGES[key]
    try:
        v = int(value)
    except (TypeError, ValueError):
        logger.warning(f"Invalid value {value!r} for '{key}' in viewer config, using {default}")
        return default
    return max(lo, min(hi, v))


@dataclass
class ViewerConfigData:
    """
    JSON-serializable config payload.

    Keep fields JSON-friendly: primitives only.
    """
    schema_version: int = SCHEMA_VERSION
    max_canvases: int = DEFAULT_MAX_CANVASES
    canvas_width: int = DEFAULT_CANVAS_WIDTH
    canvas_height: int = DEFAULT_CANVAS_HEIGHT
    max_query_history: int = DEFAULT_MAX_QUERY_HISTORY
    last_db_path: Optional[str] = None
    hints_visible: bool = False

    def to_json_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "schema_version": self.schema_version,
            "max_canvases": self.max_canvases,
            "canvas_width": self.canvas_width,
            "canvas_height": self.canvas_height,
            "max_query_history": self.max_query_history,
            "last_db_path": self.last_db_path,
            "hints_visible": self.hints_visible,
        }

    @classmethod
    def from_json_dict(cls, d: Dict[str, Any]) -> "ViewerConfigData":
        """
        Tolerant loader:
        - ignores unknown keys
        - tolerates partially missing values
        - clamps numbers into their allowed ranges
        """
        defaults = cls()
        known_keys = set(defaults.to_json_dict().keys())
        for key in d.keys():
            if key not in known_keys:
                logger.warning(f"Unknown key '{key}' in viewer config, ignoring")

        last_db_path = d.get("last_db_path")
        if last_db_path is not None and not isinstance(last_db_path, str):
            logger.warning("last_db_path is not a string, ignoring")
            last_db_path = None

        try:
            schema_version = int(d.get("schema_version", -1))
        except (TypeError, ValueError):
            schema_version = -1

        return cls(
            schema_version=schema_version,
            max_canvases=_clamp_int("max_canvases", d.get("max_canvases", defaults.max_canvases), defaults.max_canvases),
            canvas_width=_clamp_int("canvas_width", d.get("canvas_width", defaults.canvas_width), defaults.canvas_width),
            canvas_height=_clamp_int("canvas_height", d.get("canvas_height", defaults.canvas_height), defaults.canvas_height),
            max_query_history=_clamp_int(
                "max_query_history",
                d.get("max_query_history", defaults.max_query_history),
                defaults.max_query_history,
            ),
            last_db_path=last_db_path,
            hints_visible=bool(d.get("hints_visible", defaults.hints_visible)),
        )


class ViewerConfig:
    """
    Manager for loading/saving ViewerConfigData to disk.
    """

    def __init__(self, *, path: Path, data: Optional[ViewerConfigData] = None):
        self.path = path
        self.data = data if data is not None else ViewerConfigData()

    # -----------------------------
    # Construction / persistence
    # -----------------------------
    @staticmethod
    def default_config_path(
        app_name: str = APP_NAME,
        filename: str = CONFIG_FILENAME,
        app_author: str | None = None,
    ) -> Path:
        """
        Determine OS-appropriate per-user config path.

        macOS:   ~/Library/Application Support/sqlplotter/viewer_config.json
        Linux:   ~/.config/sqlplotter/viewer_config.json
        Windows: %APPDATA%\\sqlplotter\\viewer_config.json
        """
        return Path(user_config_dir(app_name, app_author)) / filename

    @classmethod
    def load(
        cls,
        *,
        config_path: Optional[Path] = None,
        app_name: str = APP_NAME,
        filename: str = CONFIG_FILENAME,
        app_author: str | None = None,
        schema_version: int = SCHEMA_VERSION,
        reset_on_version_mismatch: bool = True,
        create_if_missing: bool = False,
    ) -> "ViewerConfig":
        """
        Load config from disk.

        If file doesn't exist or is unreadable -> defaults.
        If schema mismatch:
          - reset_on_version_mismatch=True -> defaults
          - else -> keep loaded but overwrite schema_version

        If create_if_missing=True and file is missing -> immediately write defaults.
        """
        path = config_path or cls.default_config_path(app_name=app_name, filename=filename, app_author=app_author)
        default_data = ViewerConfigData(schema_version=schema_version)

        try:
            raw = path.read_text(encoding="utf-8")
            parsed = json.loads(raw)
            if not isinstance(parsed, dict):
                logger.warning(f"Viewer config file at {path} does not contain a dict, using defaults")
                return cls(path=path, data=default_data)

            loaded = ViewerConfigData.from_json_dict(parsed)

            if int(loaded.schema_version) != int(schema_version):
                if reset_on_version_mismatch:
                    logger.warning(
                        f"Viewer config schema version mismatch: loaded={loaded.schema_version}, "
                        f"expected={schema_version}, resetting to defaults"
                    )
                    cfg = cls(path=path, data=default_data)
                    if create_if_missing:
                        cfg.save()
                    return cfg
                loaded.schema_version = int(schema_version)

            return cls(path=path, data=loaded)
        except FileNotFoundError:
            logger.debug(f"Viewer config file not found at {path}, using defaults")
            cfg = cls(path=path, data=default_data)
            if create_if_missing:
                cfg.save()
            return cfg
        except json.JSONDecodeError as e:
            logger.warning(f"Viewer config file at {path} is not valid JSON: {e}, using defaults")
            return cls(path=path, data=default_data)
        except OSError as e:
            logger.warning(f"Error reading viewer config from {path}: {e}, using defaults")
            return cls(path=path, data=default_data)

    def save(self) -> None:
        """Write config to disk."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            json_str = json.dumps(self.data.to_json_dict(), indent=2)
            self.path.write_text(json_str, encoding="utf-8")
            logger.info(f"Saved viewer config to {self.path}")
        except Exception as e:
            logger.error(f"Error saving viewer config to {self.path}: {e}")
            raise

    def get_last_db_path(self) -> Optional[str]:
        return self.data.last_db_path

    def set_last_db_path(self, path: Optional[str]) -> None:
        self.data.last_db_path = path

    def set_hints_visible(self, visible: bool) -> None:
        self.data.hints_visible = bool(visible)
