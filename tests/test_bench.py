from __future__ import annotations

import csv

import pytest

import cubes_bench
from cubes import ThreeSpace, StatsLogger
from cubes_bench import run_benchmark, time_generations

FIXTURE = ".#.\n..#\n###\n"


def test_time_generations_logs_each_generation(tmp_path):
    path = tmp_path / "stats.csv"
    logger = StatsLogger(path)
    logger.open()

    space = ThreeSpace.from_text(FIXTURE)
    times = time_generations(space, 3, logger)
    logger.close()

    assert len(times) == 3
    assert all(t >= 0 for t in times)

    with open(path, newline="") as fh:
        rows = list(csv.DictReader(fh))
    assert [r["gen"] for r in rows] == ["1", "2", "3"]
    assert rows[0]["active"] == "11"
    # examined is measured on the generation being stepped from
    assert int(rows[0]["examined"]) > 5


def test_time_generations_without_stats():
    space = ThreeSpace.from_text(FIXTURE)
    assert time_generations(space, 0) == []
    assert space.get_active_count() == 5
    with pytest.raises(ValueError):
        time_generations(space, -1)


def test_run_benchmark_line_timing_engines_agree(capsys):
    results = run_benchmark(
        generations=2,
        dims=(3, 4),
        engines=("sparse", "dense"),
        line_timing=True,
        text=FIXTURE,
    )
    out = capsys.readouterr().out

    assert results[(3, "sparse")] == results[(3, "dense")]
    assert results[(4, "sparse")] == results[(4, "dense")]
    assert "3D engines agree: yes" in out
    assert "4D engines agree: yes" in out
    assert "Per-Generation" in out


def test_main_parses_arguments(monkeypatch, tmp_path):
    seen = {}

    def fake_run(**kwargs):
        seen.update(kwargs)
        return {}

    monkeypatch.setattr(cubes_bench, "run_benchmark", fake_run)
    cubes_bench.main(["-n", "3", "--dims", "4", "--engine", "both",
                      "--line-timing", "--stats", str(tmp_path / "s.csv")])

    assert seen["generations"] == 3
    assert seen["dims"] == (4,)
    assert seen["engines"] == ("sparse", "dense")
    assert seen["line_timing"] is True
    assert seen["stats_path"] == tmp_path / "s.csv"


def test_main_rejects_negative_generations():
    with pytest.raises(SystemExit):
        cubes_bench.main(["-n", "-2"])


def test_run_benchmark_profiles_and_dumps(tmp_path, capsys):
    dump = tmp_path / "p.out"
    results = run_benchmark(
        generations=1,
        dims=(3,),
        line_timing=False,
        dump_path=str(dump),
        text=FIXTURE,
    )
    out = capsys.readouterr().out

    assert results == {(3, "sparse"): 11}
    assert dump.exists()
    assert "Wall time:" in out
    assert "By Self-Time" in out
    assert "3D sparse" in out
