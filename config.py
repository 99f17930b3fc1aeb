import json
import os
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv

load_dotenv()

# User config: loaded from ~/.welllog-viewer/config.json (primary)
# or project-root config.json (fallback).
CONFIG_PATH = Path.home() / ".welllog-viewer" / "config.json"
_LOCAL_CONFIG_PATH = Path(__file__).resolve().parent / "config.json"
_user_config: dict = {}


def _load_config() -> dict:
    # Project-local config.json as base, user home config overlaid on top
    merged: dict = {}
    for path in (_LOCAL_CONFIG_PATH, CONFIG_PATH):
        if path is not None and path.exists():
            try:
                with open(path, "r", encoding="utf-8") as f:
                    merged.update(json.load(f))
            except (json.JSONDecodeError, OSError):
                pass
    return merged


def get(key: str, default=None):
    """Get a config value by dot-separated key. E.g. get('chart.height', 700)"""
    keys = key.split(".")
    val = _user_config
    for k in keys:
        if isinstance(val, dict):
            val = val.get(k)
        else:
            return default
    return val if val is not None else default


_user_config = _load_config()


# ---- Data directory -----------------------------------------------------------
# Base directory for logs and exported charts.
# Priority: WELLLOG_VIEWER_DIR env var > "data_dir" config key > ~/.welllog-viewer

_data_dir: Optional[Path] = None


def get_data_dir() -> Path:
    """Return the resolved base data directory.

    Resolution order:
    1. ``WELLLOG_VIEWER_DIR`` environment variable (highest — useful for CI/Docker)
    2. ``"data_dir"`` key in config.json
    3. ``~/.welllog-viewer`` (default)
    """
    global _data_dir
    if _data_dir is not None:
        return _data_dir
    env_val = os.environ.get("WELLLOG_VIEWER_DIR")
    if env_val:
        _data_dir = Path(env_val).expanduser().resolve()
    else:
        configured = get("data_dir")
        if configured:
            _data_dir = Path(configured).expanduser().resolve()
        else:
            _data_dir = Path.home() / ".welllog-viewer"
    return _data_dir


def _reset_data_dir() -> None:
    """Reset the cached data directory (for testing only)."""
    global _data_dir
    _data_dir = None


# ---- Well service -------------------------------------------------------------

DEFAULT_API_BASE_URL = "http://localhost:5000/api"


def get_api_base_url() -> str:
    """Return the well service base URL without a trailing slash.

    Resolution order: WELLLOG_API_URL env var > "api_base_url" config key > default.
    """
    url = os.getenv("WELLLOG_API_URL") or get("api_base_url", DEFAULT_API_BASE_URL)
    return url.rstrip("/")


REQUEST_TIMEOUT = get("request_timeout", 30)
UPLOAD_TIMEOUT = get("upload_timeout", 120)

# ---- Viewer -------------------------------------------------------------------
MAX_CURVES = get("max_curves", 3)
EXCLUDED_CURVES = tuple(get("excluded_curves", ["Depth", "Time"]))
CHART_HEIGHT = get("chart_height", 700)
CLEANED_CHART_HEIGHT = get("cleaned_chart_height", 500)
