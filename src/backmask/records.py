"""
Sample-record ("dat") text format and its conversion to and from PCM.

A dat file looks like::

    ; Sample Rate 4
    0.0\t10
    0.25\t20
    0.5\t30
    0.75\t40

The first line is the header. Every other line is ``timestamp<TAB>amplitude``;
lines starting with ``;`` after the header are comments.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import IO, Iterable, Iterator, NamedTuple

import numpy as np

from backmask.errors import FormatError
from backmask.wavio import PCM16_MAX, PCM16_MIN, load_wav_pcm16, save_wav_pcm16

logger = logging.getLogger(__name__)

HEADER_PREFIX = "; Sample Rate"
COMMENT_PREFIX = ";"

# Amplitude convention -> scale between a PCM16 value and the text field.
# "raw" keeps integer sample values; "normalized" maps full scale to 1.0.
AMPLITUDE_SCALES = {
    "raw": 1.0,
    "normalized": float(PCM16_MAX),
}


class Sample(NamedTuple):
    timestamp: float
    amplitude: float


@dataclass
class SampleTrack:
    """A header (sample rate) plus its ordered samples."""

    sample_rate: int
    samples: list[Sample] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.samples)

    def amplitudes(self) -> list[float]:
        return [s.amplitude for s in self.samples]


def _scale_for(amplitude: str) -> float:
    try:
        return AMPLITUDE_SCALES[amplitude]
    except KeyError:
        valid = ", ".join(AMPLITUDE_SCALES)
        raise ValueError(f"Unknown amplitude convention {amplitude!r}; choose {valid}") from None


def timestamps(count: int, sample_rate: int) -> Iterator[float]:
    """Forward timestamps ``i / sample_rate`` for ``i`` in ``range(count)``."""
    for i in range(count):
        yield i / sample_rate


# =============================================================================
# Header and record lines
# =============================================================================


def format_header(sample_rate: int) -> str:
    return f"{HEADER_PREFIX} {int(sample_rate)}"


def parse_header(line: str | None) -> int:
    """Return the sample rate declared by a header line.

    Raises:
        FormatError: if the line is missing, lacks the marker, or the rate
            is not a positive integer.
    """
    if line is None:
        raise FormatError("Invalid .dat format: missing sample rate header")
    line = line.strip()
    if not line.startswith(HEADER_PREFIX):
        raise FormatError(f"Invalid .dat format: missing sample rate header (got {line!r})")
    value = line[len(HEADER_PREFIX):].strip()
    try:
        rate = int(value)
    except ValueError:
        raise FormatError(f"Invalid .dat format: bad sample rate {value!r}") from None
    if rate <= 0:
        raise FormatError(f"Invalid .dat format: sample rate must be positive, got {rate}")
    return rate


def _format_number(x: float) -> str:
    x = float(x)
    if x.is_integer():
        return str(int(x))
    return repr(x)


def format_sample(sample: Sample) -> str:
    return f"{float(sample.timestamp)!r}\t{_format_number(sample.amplitude)}"


def parse_sample(line: str, lineno: int = 0) -> Sample:
    """Parse one ``timestamp<TAB>amplitude`` line.

    Raises:
        FormatError: for a truncated record, extra fields, or a non-numeric
            field.
    """
    parts = line.rstrip("\r\n").split("\t")
    if len(parts) < 2:
        raise FormatError(f"line {lineno}: truncated record {line.rstrip()!r}")
    if len(parts) > 2:
        raise FormatError(f"line {lineno}: too many fields in {line.rstrip()!r}")
    try:
        timestamp = float(parts[0])
        amplitude = float(parts[1])
    except ValueError:
        raise FormatError(f"line {lineno}: unparsable record {line.rstrip()!r}") from None
    if not (math.isfinite(timestamp) and math.isfinite(amplitude)):
        raise FormatError(f"line {lineno}: non-finite value in {line.rstrip()!r}")
    return Sample(timestamp, amplitude)


# =============================================================================
# Whole tracks
# =============================================================================


def read_track(lines: Iterable[str]) -> SampleTrack:
    """Parse a complete dat stream. Nothing is returned until every line parsed."""
    it = iter(lines)
    header = next(it, None)
    track = SampleTrack(parse_header(header))
    for lineno, line in enumerate(it, start=2):
        if not line.strip() or line.startswith(COMMENT_PREFIX):
            continue
        track.samples.append(parse_sample(line, lineno))
    return track


def write_track(track: SampleTrack, fp: IO[str]) -> None:
    fp.write(format_header(track.sample_rate) + "\n")
    for sample in track.samples:
        fp.write(format_sample(sample) + "\n")


def load_track(path: str) -> SampleTrack:
    try:
        with open(path, "r", encoding="utf-8") as f:
            track = read_track(f)
    except UnicodeDecodeError:
        raise FormatError(f"{path}: not valid UTF-8 text") from None
    logger.info(f"Loaded {len(track)} records at {track.sample_rate} Hz from {path}")
    return track


def dump_track(track: SampleTrack, path: str) -> None:
    with open(path, "w", encoding="utf-8") as f:
        write_track(track, f)
    logger.info(f"Wrote {len(track)} records at {track.sample_rate} Hz to {path}")


# =============================================================================
# PCM <-> records
# =============================================================================


def track_from_pcm(pcm, sample_rate: int, amplitude: str = "raw") -> SampleTrack:
    """Decode signed 16-bit samples into a forward track stamped ``i / rate``."""
    if sample_rate <= 0:
        raise FormatError(f"sample rate must be positive, got {sample_rate}")
    scale = _scale_for(amplitude)
    values = np.asarray(pcm, dtype=np.int16).astype(np.float64) / scale
    samples = [
        Sample(t, float(v))
        for t, v in zip(timestamps(values.size, sample_rate), values)
    ]
    return SampleTrack(int(sample_rate), samples)


def track_to_pcm(track: SampleTrack, amplitude: str = "raw") -> np.ndarray:
    """Encode a track's amplitudes as int16, rounding and clamping to 16 bits."""
    scale = _scale_for(amplitude)
    values = np.asarray(track.amplitudes(), dtype=np.float64) * scale
    return np.clip(np.rint(values), PCM16_MIN, PCM16_MAX).astype(np.int16)


def wav_to_dat(wav_path: str, dat_path: str, amplitude: str = "raw") -> SampleTrack:
    pcm, rate = load_wav_pcm16(wav_path)
    track = track_from_pcm(pcm, rate, amplitude)
    dump_track(track, dat_path)
    logger.info(f"Converted {wav_path} to {dat_path}")
    return track


def dat_to_wav(dat_path: str, wav_path: str, amplitude: str = "raw") -> SampleTrack:
    track = load_track(dat_path)
    save_wav_pcm16(wav_path, track_to_pcm(track, amplitude), track.sample_rate)
    logger.info(f"Converted {dat_path} to {wav_path}")
    return track
