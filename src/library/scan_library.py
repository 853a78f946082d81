# src/library/scan_library.py
from __future__ import annotations

import hashlib
import logging
import os

from mutagen import File as MutagenFile
from mutagen._util import MutagenError

from core.models import DEFAULT_ARTIST, Item

logger = logging.getLogger(__name__)

AUDIO_EXTS = {".mp3", ".m4a", ".flac", ".ogg", ".opus", ".wav"}


def iter_audio_paths(directories: list[str] | tuple[str, ...]) -> list[str]:
    paths: list[str] = []
    for root in directories:
        if not root or not os.path.isdir(root):
            logger.warning("Skipping missing music folder: %s", root)
            continue
        for dirpath, _, filenames in os.walk(root):
            for fn in filenames:
                ext = os.path.splitext(fn)[1].lower()
                if ext in AUDIO_EXTS:
                    paths.append(os.path.join(dirpath, fn))
    return sorted(paths)


def _first(audio, key: str) -> str | None:
    tags = getattr(audio, "tags", None)
    if not tags:
        return None
    try:
        v = tags.get(key)
    except (KeyError, ValueError):
        return None
    if not v:
        return None
    if isinstance(v, list):
        return (str(v[0]).strip() if v else None) or None
    s = str(v).strip()
    return s or None


def item_id_for_path(path: str) -> str:
    return hashlib.sha1(os.path.abspath(path).encode("utf-8")).hexdigest()[:12]


def item_from_path(path: str) -> Item:
    """
    Build an Item from tags where possible; unreadable files still become
    items titled after the file name.
    """
    title = None
    artist = None
    try:
        audio = MutagenFile(path, easy=True)
        if audio is not None:
            title = _first(audio, "title")
            artist = _first(audio, "artist")
    except (MutagenError, OSError) as e:
        logger.warning("Error reading tags from %s: %s", path, e)

    return Item(
        id=item_id_for_path(path),
        title=title or os.path.splitext(os.path.basename(path))[0],
        artist=artist or DEFAULT_ARTIST,
        source_ref=path,
    )


def scan_items(directories: list[str] | tuple[str, ...]) -> list[Item]:
    paths = iter_audio_paths(directories)
    items = [item_from_path(p) for p in paths]
    logger.info("Scanned %d tracks from %d folder(s)", len(items), len(directories))
    return items
