"""Tests for the moodlog command line."""

import json

import pytest

from moodlog.__main__ import main
from tests.conftest import days_ago


@pytest.fixture
def data_dir(tmp_path):
    return str(tmp_path / "data")


def run(capsys, *argv):
    main(list(argv))
    return capsys.readouterr().out


def run_json(capsys, *argv):
    return json.loads(run(capsys, *argv))


def test_init_writes_config(capsys, data_dir, tmp_path):
    out = run(capsys, "init", "--data-dir", data_dir)
    assert "Initialized moodlog" in out
    config_text = (tmp_path / "data" / "moodlog.yaml").read_text(encoding="utf-8")
    assert "bucket_scheme: history" in config_text


def test_add_and_list(capsys, data_dir):
    record = run_json(capsys, "add", "7", "--note", "Had coffee today", "--data-dir", data_dir)
    assert record["mood_value"] == 7
    assert record["emoji"] == "🙂"
    records = run_json(capsys, "list", "--search", "coffee", "--data-dir", data_dir)
    assert [r["id"] for r in records] == [record["id"]]


def test_list_empty(capsys, data_dir):
    assert "No entries found." in run(capsys, "list", "--data-dir", data_dir)


def test_note_and_delete(capsys, data_dir):
    rid = run_json(capsys, "add", "4", "--note", "old", "--data-dir", data_dir)["id"]
    assert run_json(capsys, "note", rid, "new", "--data-dir", data_dir)["note"] == "new"
    assert run_json(capsys, "note", rid, "--data-dir", data_dir)["note"] is None
    assert run_json(capsys, "delete", rid, "--data-dir", data_dir) == {"deleted": rid}


def test_analytics_commands(capsys, data_dir):
    for n, value in zip((4, 3, 2, 1), (3, 7, 7, 9)):
        run(capsys, "add", str(value), "--at", days_ago(n).isoformat(), "--data-dir", data_dir)

    assert run_json(capsys, "average", "--data-dir", data_dir)["average"] == 6.5
    good = run_json(capsys, "list", "--bucket", "good", "--data-dir", data_dir)
    assert [r["mood_value"] for r in good] == [9, 7, 7]
    trend = run_json(capsys, "trend", "--period", "week", "--data-dir", data_dir)
    assert [p["mood_value"] for p in trend] == [3, 7, 7, 9]
    stats = run_json(capsys, "stats", "--data-dir", data_dir)
    assert stats["count"] == 4
    cells = run_json(capsys, "heatmap", "--days", "7", "--data-dir", data_dir)
    assert len(cells) == 4


def test_export(capsys, data_dir, tmp_path):
    run(capsys, "add", "6", "--data-dir", data_dir)
    out_path = tmp_path / "out.json"
    out = run(capsys, "export", "--format", "json", "--out", str(out_path), "--data-dir", data_dir)
    assert "Exported to" in out
    assert len(json.loads(out_path.read_text(encoding="utf-8"))) == 1


def test_seed(capsys, data_dir):
    assert run_json(capsys, "seed", "--days", "5", "--seed", "3", "--data-dir", data_dir) == {
        "created": 5
    }
    assert len(run_json(capsys, "list", "--data-dir", data_dir)) == 5


def test_config_file(capsys, tmp_path):
    data = tmp_path / "from_yaml"
    cfg = tmp_path / "moodlog.yaml"
    cfg.write_text(f"moodlog:\n  data_dir: {data}\n", encoding="utf-8")
    run(capsys, "add", "5", "--config", str(cfg))
    assert (data / "moodlog.db").exists()


def test_invalid_value_exits(capsys, data_dir):
    with pytest.raises(SystemExit) as info:
        main(["add", "0", "--data-dir", data_dir])
    assert info.value.code == 1
    assert "error:" in capsys.readouterr().err


def test_delete_missing_exits(capsys, data_dir):
    with pytest.raises(SystemExit) as info:
        main(["delete", "ghost", "--data-dir", data_dir])
    assert info.value.code == 1


def test_no_command_prints_help(capsys):
    main([])
    assert "usage" in capsys.readouterr().out.lower()


def test_list_period_newest_first(capsys, data_dir):
    run(capsys, "add", "3", "--at", days_ago(3).isoformat(), "--data-dir", data_dir)
    run(capsys, "add", "9", "--at", days_ago(1).isoformat(), "--data-dir", data_dir)
    records = run_json(capsys, "list", "--period", "week", "--data-dir", data_dir)
    assert [r["mood_value"] for r in records] == [9, 3]
    trend = run_json(capsys, "trend", "--period", "week", "--data-dir", data_dir)
    assert [p["mood_value"] for p in trend] == [3, 9]


def test_export_period_newest_first(capsys, data_dir, tmp_path):
    run(capsys, "add", "3", "--at", days_ago(3).isoformat(), "--data-dir", data_dir)
    run(capsys, "add", "9", "--at", days_ago(1).isoformat(), "--data-dir", data_dir)
    out_path = tmp_path / "week.json"
    run(capsys, "export", "--format", "json", "--out", str(out_path), "--period", "week",
        "--data-dir", data_dir)
    rows = json.loads(out_path.read_text(encoding="utf-8"))
    assert [r["mood_value"] for r in rows] == [9, 3]
