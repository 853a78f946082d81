# player/tone.py
from __future__ import annotations

import base64
import io
import math
import wave

SAMPLE_RATE = 8000
DURATION_S = 0.25
FREQUENCY_HZ = 440.0
AMPLITUDE = 0.35
WAV_MIME = "audio/wav"


def tone_samples(
    sample_rate: int = SAMPLE_RATE,
    duration_s: float = DURATION_S,
    frequency_hz: float = FREQUENCY_HZ,
    amplitude: float = AMPLITUDE,
) -> bytes:
    """
    Unsigned 8-bit mono sine, biased to the 0.5 midpoint and scaled to 0..255.
    """
    length = int(math.floor(sample_rate * duration_s))
    out = bytearray(length)
    for i in range(length):
        v = math.sin(2 * math.pi * frequency_hz * i / sample_rate)
        u8 = math.floor((v * amplitude + 0.5) * 255)
        out[i] = min(255, max(0, u8))
    return bytes(out)


def synthesize_tone(
    sample_rate: int = SAMPLE_RATE,
    duration_s: float = DURATION_S,
    frequency_hz: float = FREQUENCY_HZ,
    amplitude: float = AMPLITUDE,
) -> bytes:
    """
    Canonical PCM WAV file (44-byte header + samples) holding a short beep.

    Output is byte-identical for identical arguments.
    """
    data = tone_samples(sample_rate, duration_s, frequency_hz, amplitude)

    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(1)  # 8-bit unsigned
        wf.setframerate(sample_rate)
        wf.writeframes(data)
    return buf.getvalue()


def to_data_uri(payload: bytes, mime: str = WAV_MIME) -> str:
    return f"data:{mime};base64," + base64.b64encode(payload).decode("ascii")


def decode_data_uri(uri: str) -> tuple[str, bytes]:
    """
    Returns (mime, payload) for a base64 data URI. Raises ValueError otherwise.
    """
    if not uri.startswith("data:"):
        raise ValueError("not a data URI")
    header, sep, body = uri[5:].partition(",")
    if not sep or not header.endswith(";base64"):
        raise ValueError("only base64 data URIs are supported")
    mime = header[: -len(";base64")] or "application/octet-stream"
    return mime, base64.b64decode(body)


def is_data_uri(source: str) -> bool:
    return source.startswith("data:")


def tone_data_uri() -> str:
    return to_data_uri(synthesize_tone())
