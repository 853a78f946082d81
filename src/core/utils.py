from __future__ import annotations

import math

TRUE_VALUES = {"1", "true", "yes", "on"}


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def format_time(seconds: float) -> str:
    """
    Format seconds as m:ss (minutes are not wrapped into hours).
    Negative or non-finite values render as 0:00.
    """
    try:
        sec = float(seconds)
    except (TypeError, ValueError):
        return "0:00"
    if not math.isfinite(sec) or sec < 0:
        sec = 0.0
    m = int(sec // 60)
    s = int(sec % 60)
    return f"{m}:{s:02d}"


def env_flag(value: str | None, default: bool = False) -> bool:
    if value is None or not value.strip():
        return default
    return value.strip().lower() in TRUE_VALUES


def safe_float(value, default: float) -> float:
    try:
        out = float(value)
    except (TypeError, ValueError):
        return default
    return out if math.isfinite(out) else default
