"""
backmask - reverse mono 16-bit WAV audio by draining it through a stack.

Example usage:
    >>> import backmask
    >>> track = backmask.SampleTrack(4, [backmask.Sample(0.0, 10), backmask.Sample(0.25, 20)])
    >>> backmask.reverse_track(track, "array").amplitudes()
    [20.0, 10.0]
    >>> backmask.backmask_wav("voice.wav", "voice_reversed.wav", "list")  # doctest: +SKIP
"""

from backmask.errors import (
    # Exceptions
    BackmaskError,
    EmptyStackError,
    ConcurrentModificationError,
    FormatError,
    ReversalError,
)
from backmask.stacks import (
    # Stacks
    SampleStack,
    ArrayStack,
    ListStack,
    ListStackIterator,
    STACK_TYPES,
    make_stack,
)
from backmask.records import (
    # Sample records
    Sample,
    SampleTrack,
    format_header,
    parse_header,
    format_sample,
    parse_sample,
    read_track,
    write_track,
    load_track,
    dump_track,
    # PCM conversion
    AMPLITUDE_SCALES,
    track_from_pcm,
    track_to_pcm,
    wav_to_dat,
    dat_to_wav,
)
from backmask.reversal import (
    # Reversal
    Stage,
    Reversal,
    BackmaskResult,
    reverse_track,
    reverse_dat_file,
    backmask_wav,
)
from backmask.wavio import (
    # File I/O
    WavInfo,
    load_wav_pcm16,
    save_wav_pcm16,
    describe_wav,
)

__all__ = [
    # Exceptions
    "BackmaskError",
    "EmptyStackError",
    "ConcurrentModificationError",
    "FormatError",
    "ReversalError",
    # Stacks
    "SampleStack",
    "ArrayStack",
    "ListStack",
    "ListStackIterator",
    "STACK_TYPES",
    "make_stack",
    # Sample records
    "Sample",
    "SampleTrack",
    "format_header",
    "parse_header",
    "format_sample",
    "parse_sample",
    "read_track",
    "write_track",
    "load_track",
    "dump_track",
    # PCM conversion
    "AMPLITUDE_SCALES",
    "track_from_pcm",
    "track_to_pcm",
    "wav_to_dat",
    "dat_to_wav",
    # Reversal
    "Stage",
    "Reversal",
    "BackmaskResult",
    "reverse_track",
    "reverse_dat_file",
    "backmask_wav",
    # File I/O
    "WavInfo",
    "load_wav_pcm16",
    "save_wav_pcm16",
    "describe_wav",
]

__version__ = "0.1.0"
