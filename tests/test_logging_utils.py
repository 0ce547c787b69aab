import csv
import json

from kepler_sweep.core.logging_utils import RunLogger


def test_creates_run_folder_with_headers(tmp_path):
    with RunLogger(tmp_path, "run") as logger:
        assert logger.run_dir == tmp_path / "run"
    header = (tmp_path / "run" / "timeseries.csv").read_text().splitlines()[0]
    assert header.split(",") == RunLogger.TIMESERIES_HEADER
    header = (tmp_path / "run" / "events.csv").read_text().splitlines()[0]
    assert header.split(",") == RunLogger.EVENTS_HEADER
    assert (tmp_path / "last_run.txt").read_text(encoding="utf-8") == "run"


def test_rows_are_buffered_until_threshold(tmp_path):
    logger = RunLogger(tmp_path, "run", timeseries_flush_threshold=3)
    path = logger.timeseries_path
    logger.log_ts([0, 0.0, 1.0, 2.0, 0.0, 0.0, 1.0, -0.5, 1.0, "live", 0.0])
    logger.log_ts([1, 0.1, 1.0, 2.0, 0.0, 0.0, 1.0, -0.5, 1.0, "live", 0.1])
    assert len(path.read_text().splitlines()) == 1
    logger.log_ts([2, 0.2, 1.0, 2.0, 0.0, 0.0, 1.0, -0.5, 1.0, "live", 0.2])
    assert len(path.read_text().splitlines()) == 4
    logger.close()


def test_event_details_survive_csv_parsing(tmp_path):
    logger = RunLogger(tmp_path, "run")
    details = {"area": 0.25, "note": 'say "hi", twice'}
    logger.log_event(12, "sweep_end", (0.5, -0.75), details)
    logger.close()

    with logger.events_path.open(newline="") as fh:
        rows = list(csv.DictReader(fh))
    assert len(rows) == 1
    assert rows[0]["tick"] == "12"
    assert rows[0]["type"] == "sweep_end"
    assert float(rows[0]["y"]) == -0.75
    assert json.loads(rows[0]["details"]) == details


def test_close_is_idempotent(tmp_path):
    logger = RunLogger(tmp_path, "run")
    logger.close()
    logger.close()
    assert logger.closed


def test_meta_is_written_as_json(tmp_path):
    with RunLogger(tmp_path, "run") as logger:
        logger.write_meta({"dt": 0.011, "subdivisions": 25})
    meta = json.loads((tmp_path / "run" / "meta.json").read_text(encoding="utf-8"))
    assert meta == {"dt": 0.011, "subdivisions": 25}


def test_existing_run_ids_get_a_suffix(tmp_path):
    first = RunLogger(tmp_path, "run")
    second = RunLogger(tmp_path, "run")
    third = RunLogger(tmp_path, "run")
    assert [first.run_id, second.run_id, third.run_id] == ["run", "run_1", "run_2"]
    assert (tmp_path / "last_run.txt").read_text(encoding="utf-8") == "run_2"
    for logger in (first, second, third):
        logger.close()


def test_default_run_id_is_timestamped(tmp_path):
    with RunLogger(tmp_path) as logger:
        assert logger.run_id.endswith("_run")


def test_bools_are_written_as_integers(tmp_path):
    assert RunLogger._format_value(True) == "1"
    assert RunLogger._format_value(0.5) == "0.5"
    assert RunLogger._format_value("replay") == "replay"
