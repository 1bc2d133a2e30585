"""Mono 16-bit PCM WAV reading and writing."""

from __future__ import annotations

import logging
import wave
from dataclasses import dataclass

import numpy as np

from backmask.errors import FormatError

logger = logging.getLogger(__name__)

PCM16_MAX = 32767
PCM16_MIN = -32768


@dataclass(frozen=True)
class WavInfo:
    path: str
    channels: int
    sample_width: int
    sample_rate: int
    frames: int
    peak: int

    @property
    def duration(self) -> float:
        return self.frames / self.sample_rate if self.sample_rate else 0.0


def _read_frames(path: str):
    with wave.open(path, "rb") as w:
        nchan = w.getnchannels()
        sampw = w.getsampwidth()
        rate = w.getframerate()
        nfrm = w.getnframes()
        raw = w.readframes(nfrm)
    return nchan, sampw, rate, nfrm, raw


def load_wav_pcm16(path: str) -> tuple[np.ndarray, int]:
    """Read a mono 16-bit WAV file.

    Returns:
        (samples, sample_rate) where samples is a 1-D int16 array.

    Raises:
        FormatError: if the file is not mono or not 16-bit.
    """
    nchan, sampw, rate, nfrm, raw = _read_frames(path)
    if sampw != 2:
        raise FormatError(f"{path}: only 16-bit PCM WAV is supported (got {8 * sampw}-bit)")
    if nchan != 1:
        raise FormatError(f"{path}: only mono WAV is supported (got {nchan} channels)")
    a = np.frombuffer(raw, dtype="<i2").astype(np.int16)
    logger.info(f"Read {a.size} samples at {rate} Hz from {path}")
    return a, rate


def save_wav_pcm16(path: str, samples, sample_rate: int) -> None:
    """Write a 1-D sequence of int16 samples as a mono 16-bit WAV file."""
    x = np.asarray(samples, dtype="<i2")
    if x.ndim != 1:
        raise FormatError(f"expected mono samples, got array of shape {x.shape}")
    with wave.open(path, "wb") as w:
        w.setnchannels(1)
        w.setsampwidth(2)
        w.setframerate(int(sample_rate))
        w.writeframes(x.tobytes())
    logger.info(f"Wrote {x.size} samples at {sample_rate} Hz to {path}")


def describe_wav(path: str) -> WavInfo:
    """Header fields plus the absolute peak of a WAV file (any layout)."""
    nchan, sampw, rate, nfrm, raw = _read_frames(path)
    peak = 0
    if sampw == 2 and raw:
        a = np.frombuffer(raw, dtype="<i2").astype(np.int32)
        peak = int(np.abs(a).max())
    return WavInfo(
        path=path,
        channels=nchan,
        sample_width=sampw,
        sample_rate=rate,
        frames=nfrm,
        peak=peak,
    )
