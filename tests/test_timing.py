import time

import pytest

from codecbench.timing import SampleSet, TimingRecord


def test_timing_record_durations():
    record = TimingRecord("encode", start_ns=1_000_000, end_ns=3_500_000)
    assert record.duration_ns == 2_500_000
    assert record.duration_ms == 2.5
    assert record.to_dict()["duration_ms"] == 2.5


def test_sample_set_appends_in_arrival_order():
    samples = SampleSet("decode")
    for i in range(3):
        with samples.time(iteration=i) as ctx:
            time.sleep(0.001)
        assert ctx.record is not None

    assert len(samples) == 3
    assert [r.metadata["iteration"] for r in samples] == [0, 1, 2]
    assert all(d >= 1.0 for d in samples.durations_ms)
    assert all(r.name == "decode" for r in samples.records)


def test_failed_block_is_not_a_sample():
    samples = SampleSet("encode")
    with pytest.raises(RuntimeError):
        with samples.time():
            raise RuntimeError("codec failed")
    assert len(samples) == 0

