# src/library/catalog_file.py
from __future__ import annotations

import json
import logging
import os
from dataclasses import replace

from core.models import Item

logger = logging.getLogger(__name__)

DEMO_COLORS = ["#12c274", "#10b26a", "#0fb366", "#11a35f"]


class CatalogFileError(ValueError):
    pass


def load_catalog_file(path: str) -> list[Item]:
    """
    Reads a JSON list of track objects (or {"tracks": [...]}).
    Relative source paths resolve against the catalog file's folder.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise CatalogFileError(f"{path}: invalid JSON ({e})") from e

    if isinstance(data, dict):
        data = data.get("tracks")
    if not isinstance(data, list):
        raise CatalogFileError(f"{path}: expected a list of tracks")

    base_dir = os.path.dirname(os.path.abspath(path))
    items: list[Item] = []
    seen: set[str] = set()

    for n, entry in enumerate(data):
        if not isinstance(entry, dict) or "id" not in entry:
            raise CatalogFileError(f"{path}: track #{n} has no id")
        item = Item.from_dict(entry)
        if item.id in seen:
            raise CatalogFileError(f"{path}: duplicate track id {item.id!r}")
        seen.add(item.id)

        src = item.source_ref
        if src and "://" not in src and not src.startswith("data:") and not os.path.isabs(src):
            item = replace(item, source_ref=os.path.join(base_dir, src))
        items.append(item)

    logger.info("Loaded %d tracks from %s", len(items), path)
    return items


def demo_items(count: int = 12) -> list[Item]:
    """Sourceless tracks; each one plays the synthesized tone."""
    items = []
    for i in range(count):
        items.append(
            Item(
                id=str(i + 1),
                title=f"Demo track {i + 1}",
                artist=f"Channel {chr(ord('A') + i % 26)}",
                accent_color=DEMO_COLORS[i] if i < len(DEMO_COLORS) else None,
            )
        )
    return items
