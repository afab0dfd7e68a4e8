import json
from pathlib import Path
from typing import Any

from common.logger import logger


def save_to_json(data, file_path):
    """Save data to JSON file and return True on success, False on failure."""
    path = Path(file_path)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)

        # Write then rename so an interrupted save never leaves half a file behind
        with tmp_path.open("w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=4)
        tmp_path.replace(path)

        return True
    except (TypeError, OSError) as e:
        logger.error(f"Error saving to JSON {path}: {e}")
        return False


def load_from_json(file_path, default: Any = None) -> Any:
    path = Path(file_path)
    if not path.exists():
        return default

    try:
        with path.open(encoding="utf-8") as f:
            return json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.error(f"Error loading JSON from {path}: {e}")
        return default
