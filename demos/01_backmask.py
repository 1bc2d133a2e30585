#!/usr/bin/env python3
"""
Demo 1: Backmasking

This demo shows the whole reversal path:
- Synthesizing a rising chirp as 16-bit PCM
- Converting it to the dat sample-record format
- Reversing it with both stack variants
- Writing the reversed WAV files
"""

import math
import os

import numpy as np

import backmask

# Create output directory (use BACKMASK_DEMO_OUTPUT env var or default to build)
OUTPUT_DIR = os.environ.get("BACKMASK_DEMO_OUTPUT", "build")
os.makedirs(OUTPUT_DIR, exist_ok=True)


def create_chirp(duration=1.0, sample_rate=22050):
    """Create a chirp sweeping 220 Hz -> 1760 Hz, so reversal is audible."""
    n = int(sample_rate * duration)
    t = np.arange(n) / sample_rate
    f0, f1 = 220.0, 1760.0
    phase = 2 * math.pi * (f0 * t + (f1 - f0) * t * t / (2 * duration))
    env = np.minimum(t / 0.05, 1.0)
    return (0.6 * 32767 * env * np.sin(phase)).astype(np.int16), sample_rate


print(f"backmask version: {backmask.__version__}")
print()

# =============================================================================
# Source sound
# =============================================================================

print("=== Source ===")

pcm, rate = create_chirp()
source_path = os.path.join(OUTPUT_DIR, "chirp.wav")
backmask.save_wav_pcm16(source_path, pcm, rate)
print(f"Wrote {source_path}: {pcm.size} samples at {rate} Hz")

# =============================================================================
# Sample records
# =============================================================================

print("\n=== Sample Records ===")

track = backmask.track_from_pcm(pcm, rate)
print(backmask.format_header(track.sample_rate))
for sample in track.samples[:3]:
    print(backmask.format_sample(sample))
print(f"... {len(track)} records")

# =============================================================================
# Reversal with each stack
# =============================================================================

print("\n=== Reversal ===")

for name in backmask.STACK_TYPES:
    out_path = os.path.join(OUTPUT_DIR, f"chirp_reversed_{name}.wav")
    result = backmask.backmask_wav(source_path, out_path, name)
    print(f"{name:>5}: {result.sample_count} samples -> {result.output_path}")

reversed_pcm, _ = backmask.load_wav_pcm16(os.path.join(OUTPUT_DIR, "chirp_reversed_array.wav"))
print(f"First sample now equals last original sample: {reversed_pcm[0] == pcm[-1]}")
