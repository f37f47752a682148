"""
Workload description and deterministic synthetic test-image generation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator

import numpy as np

logger = logging.getLogger(__name__)

# Reference workload: 8K UHD, 12-bit mono
WIDTH = 7680
HEIGHT = 4320
BITS_PER_SAMPLE = 12
COMPONENT_COUNT = 1
DEFAULT_SEED = 42

LCG_MULTIPLIER = 1103515245
LCG_INCREMENT = 12345
_STATE_MASK = 0xFFFFFFFF

# Noise range [-32, +31], ~1.5% of the 12-bit range
NOISE_SPAN = 64


@dataclass(frozen=True)
class FrameInfo:
    """Image layout, independent of pixel content."""

    width: int
    height: int
    bits_per_sample: int
    component_count: int = 1

    @property
    def max_value(self) -> int:
        return (1 << self.bits_per_sample) - 1

    @property
    def pixel_count(self) -> int:
        return self.width * self.height * self.component_count

    @property
    def bytes_per_sample(self) -> int:
        return (self.bits_per_sample + 7) // 8

    @property
    def raw_size_bytes(self) -> int:
        """Size of the uint16 sample buffer handed to the codec."""
        return self.pixel_count * np.dtype(np.uint16).itemsize


DEFAULT_FRAME = FrameInfo(WIDTH, HEIGHT, BITS_PER_SAMPLE, COMPONENT_COUNT)


def _jump_coefficients(count: int) -> tuple[np.ndarray, np.ndarray]:
    """Affine coefficients (a_k, c_k) with state_{k+1} = a_k * state_0 + c_k (mod 2**32)."""
    multipliers = np.empty(count, dtype=np.uint64)
    offsets = np.empty(count, dtype=np.uint64)
    a, c = 1, 0
    for k in range(count):
        a = (a * LCG_MULTIPLIER) & _STATE_MASK
        c = (c * LCG_MULTIPLIER + LCG_INCREMENT) & _STATE_MASK
        multipliers[k] = a
        offsets[k] = c
    return multipliers, offsets


def lcg_rows(seed: int, row_length: int, rows: int) -> Iterator[np.ndarray]:
    """Yield `rows` consecutive blocks of `row_length` LCG states following `seed`.

    Every state of a row is a jump of the last state of the previous row, so
    the concatenated rows equal the sequential recurrence exactly.
    """
    multipliers, offsets = _jump_coefficients(row_length)
    state = np.uint64(seed & _STATE_MASK)
    mask = np.uint64(_STATE_MASK)

    for _ in range(rows):
        # a_k, state < 2**32 so the product and sum stay below 2**64
        row = (multipliers * state + offsets) & mask
        state = row[-1]
        yield row


def lcg_states(seed: int, count: int, row_length: int | None = None) -> np.ndarray:
    """Return the first `count` LCG states following `seed`."""
    if count == 0:
        return np.empty(0, dtype=np.uint64)
    row_length = min(row_length or count, count)
    rows = -(-count // row_length)
    return np.concatenate(list(lcg_rows(seed, row_length, rows)))[:count]


def noise_from_states(states: np.ndarray) -> np.ndarray:
    """Map LCG states to the symmetric noise term."""
    rand = (states >> np.uint64(16)) & np.uint64(0x7FFF)
    return (rand % np.uint64(NOISE_SPAN)).astype(np.int64) - NOISE_SPAN // 2


def generate_test_image(frame: FrameInfo = DEFAULT_FRAME, seed: int = DEFAULT_SEED) -> np.ndarray:
    """Generate a gradient + deterministic noise image for `frame`.

    The base signal is the mean of a horizontal and a vertical ramp; every
    sample adds low-amplitude noise (similar to sensor noise in raw camera
    data) drawn from a 32-bit LCG advanced once per sample in row-major
    order. Identical `frame` and `seed` always yield identical samples.

    Returns:
        Read-only uint16 array of shape (height, width).
    """
    logger.debug(f"Generating {frame.width}x{frame.height} {frame.bits_per_sample}-bit image (seed={seed})")

    image = np.empty((frame.height, frame.width), dtype=np.uint16)
    max_value = np.uint64(frame.max_value)
    horizontal = np.arange(frame.width, dtype=np.uint64) * max_value // np.uint64(frame.width)

    for y, states in enumerate(lcg_rows(seed, frame.width, frame.height)):
        vertical = np.uint64(y) * max_value // np.uint64(frame.height)
        base = ((horizontal + vertical) // np.uint64(2)).astype(np.int64)
        image[y] = np.clip(base + noise_from_states(states), 0, frame.max_value)

    image.flags.writeable = False
    return image


def generate(width: int, height: int, bits_per_sample: int, seed: int = DEFAULT_SEED) -> np.ndarray:
    """Convenience wrapper building a single-component FrameInfo."""
    return generate_test_image(FrameInfo(width, height, bits_per_sample, 1), seed)
