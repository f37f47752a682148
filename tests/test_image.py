import numpy as np
import pytest

import codecbench.image as image_module
from codecbench.image import (
    DEFAULT_FRAME,
    FrameInfo,
    generate,
    generate_test_image,
    lcg_rows,
    lcg_states,
)


def _reference_image(frame: FrameInfo, seed: int) -> np.ndarray:
    """Sample-by-sample rendition of the generator recurrence."""
    out = np.empty((frame.height, frame.width), dtype=np.uint16)
    state = seed
    max_value = frame.max_value
    for y in range(frame.height):
        for x in range(frame.width):
            base = (x * max_value // frame.width + y * max_value // frame.height) // 2
            state = (state * 1103515245 + 12345) & 0xFFFFFFFF
            noise = ((state >> 16) & 0x7FFF) % 64 - 32
            out[y, x] = min(max(base + noise, 0), max_value)
    return out


def test_default_frame_constants():
    assert (DEFAULT_FRAME.width, DEFAULT_FRAME.height) == (7680, 4320)
    assert DEFAULT_FRAME.bits_per_sample == 12
    assert DEFAULT_FRAME.component_count == 1
    assert DEFAULT_FRAME.max_value == 4095
    assert DEFAULT_FRAME.raw_size_bytes == 7680 * 4320 * 2


def test_first_lcg_state():
    """The first sample consumes the state after one step from the seed."""
    assert int(lcg_states(42, 1)[0]) == (42 * 1103515245 + 12345) % 2**32


def test_lcg_states_match_sequential_recurrence():
    state = 42
    expected = []
    for _ in range(1000):
        state = (state * 1103515245 + 12345) % 2**32
        expected.append(state)

    # Uneven row length exercises the jump across row boundaries
    assert lcg_states(42, 1000, row_length=7).tolist() == expected
    assert lcg_states(42, 1000).tolist() == expected


@pytest.mark.parametrize("width,height,bits", [(64, 32, 12), (13, 9, 8), (5, 3, 16)])
def test_matches_reference(width, height, bits):
    frame = FrameInfo(width, height, bits)
    assert np.array_equal(generate_test_image(frame, seed=42), _reference_image(frame, 42))


def test_deterministic(small_frame):
    first = generate_test_image(small_frame, seed=42)
    second = generate_test_image(small_frame, seed=42)
    assert first.tobytes() == second.tobytes()


def test_seed_changes_output(small_frame):
    assert not np.array_equal(generate_test_image(small_frame, 42), generate_test_image(small_frame, 43))


def test_range_invariant():
    image = generate(256, 128, 12)
    assert image.dtype == np.uint16
    assert image.shape == (128, 256)
    assert image.min() >= 0
    assert image.max() <= 4095


def test_noise_is_bounded(small_frame):
    image = generate_test_image(small_frame).astype(np.int64)
    x = np.arange(small_frame.width)
    y = np.arange(small_frame.height)
    base = (x[None, :] * 4095 // 64 + y[:, None] * 4095 // 32) // 2
    noise = image - base
    # Clamping can only shrink the noise at the low end
    assert noise.max() <= 31
    assert noise.min() >= -32


def test_image_is_read_only(small_frame):
    image = generate_test_image(small_frame)
    with pytest.raises(ValueError):
        image[0, 0] = 1


def test_rows_continue_the_recurrence():
    rows = list(lcg_rows(42, 5, 3))
    assert [len(r) for r in rows] == [5, 5, 5]
    assert np.concatenate(rows).tolist() == lcg_states(42, 15).tolist()


def test_generator_draws_from_lcg_rows(small_frame, monkeypatch):
    calls = []
    real_rows = image_module.lcg_rows

    def recording_rows(seed, row_length, rows):
        calls.append((seed, row_length, rows))
        return real_rows(seed, row_length, rows)

    monkeypatch.setattr(image_module, "lcg_rows", recording_rows)
    image = generate_test_image(small_frame, seed=7)

    assert calls == [(7, 64, 32)]
    assert np.array_equal(image, _reference_image(small_frame, 7))
