"""Markdown resources shipped with the server (assistant instructions and guides).

The server loads them at startup with `load_resources()` and publishes the map
through `set_resource_map()`; tools read it back with `get_resource_map()`.
"""
import logging
from pathlib import Path
from typing import Dict, List, Tuple

logger = logging.getLogger(__name__)

RESOURCES_DIR = Path(__file__).resolve().parent.parent / "tools" / "resources"

resource_map: Dict[str, str] = {}


def load_resources(resources_dir: Path = RESOURCES_DIR) -> List[Tuple[Path, str]]:
    """Read every file in `resources_dir` as UTF-8 text, sorted by name."""
    if not resources_dir.is_dir():
        logger.warning("Resources directory %s not found", resources_dir)
        return []
    files = sorted(p for p in resources_dir.iterdir() if p.is_file())
    return [(p, p.read_text(encoding="utf-8")) for p in files]


def set_resource_map(mapping: Dict[str, str]) -> None:
    global resource_map
    resource_map = mapping


def get_resource_map() -> Dict[str, str]:
    return resource_map
