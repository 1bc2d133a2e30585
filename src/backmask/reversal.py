"""
Backmasking: reverse a track by draining it through a stack.

    LOADING   push every amplitude of the forward track
    DRAINING  pop until empty, re-stamping each value at i / rate
    DONE

Example usage:
    >>> from backmask.records import SampleTrack, Sample
    >>> track = SampleTrack(4, [Sample(0.0, 10), Sample(0.25, 20)])
    >>> reverse_track(track, "list").amplitudes()
    [20.0, 10.0]
"""

from __future__ import annotations

import enum
import logging
import os
import tempfile
from dataclasses import dataclass

from backmask.errors import ReversalError
from backmask.records import (
    Sample,
    SampleTrack,
    dat_to_wav,
    dump_track,
    load_track,
    wav_to_dat,
)
from backmask.stacks import SampleStack, make_stack

logger = logging.getLogger(__name__)

WORKDIR_ENV = "BACKMASK_WORKDIR"


class Stage(enum.Enum):
    LOADING = "loading"
    DRAINING = "draining"
    DONE = "done"


def _resolve_stack(stack: SampleStack | str) -> SampleStack:
    if isinstance(stack, str):
        return make_stack(stack)
    return stack


class Reversal:
    """One reversal run over a fully parsed forward track.

    The stack must be empty and belongs to this run; it is drained by the
    time ``run()`` returns.
    """

    def __init__(self, track: SampleTrack, stack: SampleStack | str = "array") -> None:
        self.track = track
        self.stack = _resolve_stack(stack)
        if not self.stack.is_empty():
            raise ValueError("Reversal needs an empty stack")
        self.stage = Stage.LOADING

    def _enter(self, stage: Stage) -> None:
        logger.debug(f"{type(self.stack).__name__}: {self.stage.value} -> {stage.value}")
        self.stage = stage

    def _load(self) -> int:
        loaded = 0
        for sample in self.track.samples:
            self.stack.push(sample.amplitude)
            loaded += 1
        held = self.stack.count()
        if held != loaded:
            raise ReversalError(f"stack holds {held} samples after loading {loaded}")
        return loaded

    def _drain(self, expected: int) -> list[Sample]:
        rate = self.track.sample_rate
        out: list[Sample] = []
        while not self.stack.is_empty():
            out.append(Sample(len(out) / rate, self.stack.pop()))
        if len(out) != expected:
            raise ReversalError(f"drained {len(out)} samples, expected {expected}")
        return out

    def run(self) -> SampleTrack:
        if self.stage is not Stage.LOADING:
            raise RuntimeError(f"Reversal already {self.stage.value}")
        loaded = self._load()
        self._enter(Stage.DRAINING)
        samples = self._drain(loaded)
        self._enter(Stage.DONE)
        return SampleTrack(self.track.sample_rate, samples)


def reverse_track(track: SampleTrack, stack: SampleStack | str = "array") -> SampleTrack:
    """Return ``track`` with its amplitudes in reverse order, re-stamped from 0."""
    return Reversal(track, stack).run()


def reverse_dat_file(src: str, dst: str, stack: SampleStack | str = "array") -> SampleTrack:
    """Reverse the dat file ``src`` into ``dst``, keeping its header."""
    track = load_track(src)
    reversed_track = reverse_track(track, stack)
    dump_track(reversed_track, dst)
    logger.info(f"Reversed {src} -> {dst}")
    return reversed_track


# =============================================================================
# WAV -> dat -> reversed dat -> WAV
# =============================================================================


@dataclass
class BackmaskResult:
    output_path: str
    sample_rate: int
    sample_count: int
    dat_path: str | None = None
    reversed_dat_path: str | None = None


def _resolve_workdir(output_wav: str, workdir: str | None) -> str:
    if workdir is None:
        workdir = os.environ.get(WORKDIR_ENV) or os.path.dirname(output_wav) or "."
    return workdir


def intermediate_paths(input_wav: str, output_wav: str, workdir: str | None = None) -> tuple[str, str]:
    """Paths of the forward and reversed dat files kept by a run."""
    workdir = _resolve_workdir(output_wav, workdir)
    stem = os.path.splitext(os.path.basename(input_wav))[0]
    return (
        os.path.join(workdir, f"{stem}.dat"),
        os.path.join(workdir, f"{stem}_reversed.dat"),
    )


def _check_kept_paths(paths: tuple[str, str], input_wav: str, output_wav: str) -> None:
    taken = {os.path.abspath(input_wav), os.path.abspath(output_wav)}
    for path in paths:
        if os.path.abspath(path) in taken:
            raise FileExistsError(f"intermediate file {path} would overwrite an input or output file")
        if os.path.exists(path):
            raise FileExistsError(f"refusing to overwrite existing file {path}")


def _run(
    input_wav: str,
    dat_path: str,
    reversed_path: str,
    output_wav: str,
    stack: SampleStack | str,
    amplitude: str,
) -> SampleTrack:
    wav_to_dat(input_wav, dat_path, amplitude)
    reverse_dat_file(dat_path, reversed_path, stack)
    return dat_to_wav(reversed_path, output_wav, amplitude)


def backmask_wav(
    input_wav: str,
    output_wav: str,
    stack: SampleStack | str = "array",
    *,
    keep: bool = False,
    workdir: str | None = None,
    amplitude: str = "raw",
) -> BackmaskResult:
    """Reverse a mono 16-bit WAV file through the dat format.

    Without ``keep`` the dat files live in a private temporary directory
    under ``workdir`` that is removed afterwards, even when a step fails.
    With ``keep`` they are written as ``<stem>.dat`` and
    ``<stem>_reversed.dat`` in ``workdir``; existing files are never
    overwritten (FileExistsError).
    """
    if keep:
        dat_path, reversed_path = intermediate_paths(input_wav, output_wav, workdir)
        _check_kept_paths((dat_path, reversed_path), input_wav, output_wav)
        os.makedirs(os.path.dirname(dat_path) or ".", exist_ok=True)
        track = _run(input_wav, dat_path, reversed_path, output_wav, stack, amplitude)
        return BackmaskResult(
            output_path=output_wav,
            sample_rate=track.sample_rate,
            sample_count=len(track),
            dat_path=dat_path,
            reversed_dat_path=reversed_path,
        )

    base = _resolve_workdir(output_wav, workdir)
    os.makedirs(base, exist_ok=True)
    with tempfile.TemporaryDirectory(prefix="backmask-", dir=base) as tmp:
        dat_path, reversed_path = intermediate_paths(input_wav, output_wav, tmp)
        track = _run(input_wav, dat_path, reversed_path, output_wav, stack, amplitude)
        logger.info(f"Removing intermediate files in {tmp}")

    return BackmaskResult(
        output_path=output_wav,
        sample_rate=track.sample_rate,
        sample_count=len(track),
    )
