# core/config.py
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from core.utils import clamp, env_flag, safe_float

DEFAULT_VOLUME = 0.7


@dataclass(frozen=True)
class AppConfig:
    catalog_path: Optional[str] = None
    music_dirs: tuple[str, ...] = ()
    volume: float = DEFAULT_VOLUME
    autoplay_next: bool = True
    log_level: int = logging.INFO

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "AppConfig":
        env = os.environ if environ is None else environ

        catalog_path = (env.get("PLAYER_CATALOG") or "").strip() or None

        raw_dirs = env.get("PLAYER_MUSIC_DIRS") or ""
        music_dirs = tuple(d.strip() for d in raw_dirs.split(os.pathsep) if d.strip())

        volume = clamp(safe_float(env.get("PLAYER_VOLUME"), DEFAULT_VOLUME), 0.0, 1.0)

        level_name = (env.get("PLAYER_LOG_LEVEL") or "INFO").strip().upper()
        log_level = logging.getLevelName(level_name)
        if not isinstance(log_level, int):
            log_level = logging.INFO

        return cls(
            catalog_path=catalog_path,
            music_dirs=music_dirs,
            volume=volume,
            autoplay_next=env_flag(env.get("PLAYER_AUTOPLAY_NEXT"), default=True),
            log_level=log_level,
        )
