"""File I/O and path utilities."""

import logging
import shutil
import tempfile
import time
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)


def ensure_directory(path: str | Path) -> Path:
    """Ensure a directory exists, creating it if necessary."""
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def load_yaml(path: str | Path) -> dict[str, Any]:
    """Load a YAML file and return its contents as a dict."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"YAML file not found: {path}")
    with open(path) as f:
        return yaml.safe_load(f) or {}


def get_temp_directory(prefix: str = "temp_slides_") -> Path:
    """Create and return a temporary directory."""
    return Path(tempfile.mkdtemp(prefix=prefix))


def remove_directory(path: str | Path) -> bool:
    """Delete a directory tree.  Best effort: failures are logged, not raised."""
    path = Path(path)
    if not path.exists():
        return False
    try:
        shutil.rmtree(path)
    except OSError as e:
        logger.warning(f"Could not remove {path}: {e}")
        return False
    return True


def timestamped_output_path(directory: str | Path = ".", suffix: str = ".pptx") -> Path:
    """``<epoch_ms><suffix>`` inside *directory*."""
    return Path(directory) / f"{int(time.time() * 1000)}{suffix}"
