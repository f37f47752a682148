import json

import pytest

from codecbench.metrics import (
    BenchmarkReport,
    MetricsCollector,
    PhaseStats,
    compression_ratio,
    throughput_mb_s,
)

MIB = 1024 * 1024


def test_median_even_count_takes_upper_middle():
    stats = PhaseStats.from_durations("encode", [4.0, 1.0, 3.0, 2.0])
    assert stats.median_ms == 3.0


def test_median_odd_count():
    assert PhaseStats.from_durations("encode", [5.0, 1.0, 3.0]).median_ms == 3.0


def test_min_and_mean():
    durations = [12.5, 10.0, 30.0, 11.0]
    stats = PhaseStats.from_durations("decode", durations)
    assert stats.min_ms == 10.0
    assert stats.max_ms == 30.0
    assert stats.mean_ms == pytest.approx(15.875)
    assert stats.count == 4
    assert all(stats.min_ms <= d for d in durations)
    assert stats.min_ms <= stats.median_ms


def test_samples_are_not_reordered():
    durations = [3.0, 1.0, 2.0]
    PhaseStats.from_durations("encode", durations)
    assert durations == [3.0, 1.0, 2.0]


def test_single_sample():
    stats = PhaseStats.from_durations("encode", [7.0])
    assert stats.min_ms == stats.median_ms == stats.mean_ms == 7.0
    assert stats.std_ms == 0.0


def test_empty_samples_rejected():
    with pytest.raises(ValueError):
        PhaseStats.from_durations("encode", [])


def test_throughput():
    assert throughput_mb_s(MIB, 1000.0) == pytest.approx(1.0)
    assert throughput_mb_s(63 * MIB, 500.0) == pytest.approx(126.0)
    assert throughput_mb_s(MIB, 0.0) == float("inf")


def test_throughput_per_statistic():
    stats = PhaseStats.from_durations("encode", [100.0, 200.0, 300.0, 1000.0])
    throughput = stats.throughput(MIB)
    assert throughput["min"] == pytest.approx(10.0)
    assert throughput["median"] == pytest.approx(1 / 0.3)
    assert throughput["mean"] == pytest.approx(1 / 0.4)


def test_compression_ratio():
    assert compression_ratio(1000, 250) == 4.0
    assert compression_ratio(1000, 0) == float("inf")


def _report(**overrides) -> BenchmarkReport:
    fields = dict(
        width=64,
        height=32,
        bits_per_sample=12,
        component_count=1,
        loop_count=4,
        raw_size_bytes=4096,
        encoded_size=1024,
        encode_stats=PhaseStats.from_durations("encode", [2.0, 1.0, 4.0, 3.0]),
        decode_stats=PhaseStats.from_durations("decode", [1.0, 1.0, 2.0, 2.0]),
        verified=True,
    )
    fields.update(overrides)
    return BenchmarkReport(**fields)


def test_report_summary_values_order():
    values = _report().summary_values()
    assert list(values) == ["encode_median_ms", "decode_median_ms", "encode_MB_s", "decode_MB_s", "ratio"]
    assert values["encode_median_ms"] == 3.0
    assert values["decode_median_ms"] == 2.0
    assert values["ratio"] == 4.0
    assert values["encode_MB_s"] == pytest.approx(4096 / MIB / 0.003)


def test_report_summary_requires_decode():
    with pytest.raises(ValueError):
        _report(decode_stats=None).summary_values()


def test_report_to_dict_is_json_serializable():
    data = json.loads(json.dumps(_report().to_dict()))
    assert data["frame"] == {"width": 64, "height": 32, "bits_per_sample": 12, "component_count": 1}
    assert data["compression_ratio"] == 4.0
    assert data["phases"]["encode"]["median_ms"] == 3.0
    assert set(data["phases"]["decode"]["throughput_mb_s"]) == {"min", "median", "mean"}


def test_collector_exports(tmp_path):
    collector = MetricsCollector()
    for i in range(2):
        with collector.encode.time(iteration=i):
            pass
    with collector.decode.time(iteration=0):
        pass

    collector.export_json(tmp_path / "raw.json")
    collector.export_chrome_trace(tmp_path / "trace.json")

    raw = json.loads((tmp_path / "raw.json").read_text())
    assert len(raw["encode"]) == 2
    assert len(raw["decode"]) == 1

    trace = json.loads((tmp_path / "trace.json").read_text())
    assert [e["name"] for e in trace["traceEvents"]] == ["encode", "encode", "decode"]
    assert trace["traceEvents"][0]["ts"] == 0
