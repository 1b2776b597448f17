import json
from pathlib import Path

from typer.testing import CliRunner

from fieldshape.cli import app

BENCH_DIR = Path(__file__).resolve().parents[1] / "bench" / "structural"

runner = CliRunner()


def test_check_valid_document():
    result = runner.invoke(app, ["check", str(BENCH_DIR / "F01_tree_through_array" / "schema.json")])
    assert result.exit_code == 0, result.output
    assert "[ok]" in result.output


def test_check_reports_cycle(tmp_path):
    report = tmp_path / "out" / "report.json"
    result = runner.invoke(app, [
        "check", str(BENCH_DIR / "F02_circular_object" / "schema.json"), "--report", str(report),
    ])
    assert result.exit_code == 1
    assert "[CYCLE]" in result.output

    payload = json.loads(report.read_text(encoding="utf-8"))
    assert payload["valid"] is False
    assert payload["kind"] == "CYCLE"
    assert payload["path"] == "object.x"


def test_check_extra_lists():
    schema = str(BENCH_DIR / "F06_relationship_unknown_list" / "schema.json")
    result = runner.invoke(app, ["check", schema])
    assert result.exit_code == 1
    assert "[RELATIONSHIP]" in result.output

    result = runner.invoke(app, ["check", schema, "--list", "Blah"])
    assert result.exit_code == 0, result.output


def test_describe_prints_metrics_and_initial_value():
    result = runner.invoke(app, [
        "describe", str(BENCH_DIR / "F01_tree_through_array" / "schema.json"), "--initial",
    ])
    assert result.exit_code == 0, result.output
    assert "Recursive:       True" in result.output
    assert '"label": "node"' in result.output
    assert '"children": []' in result.output


def test_bench_writes_csv(tmp_path):
    import pandas as pd

    out = tmp_path / "fields.csv"
    result = runner.invoke(app, ["bench", "--glob", str(BENCH_DIR / "*" / "schema.json"), "--out", str(out)])
    assert result.exit_code == 0, result.output

    df = pd.read_csv(out)
    assert len(df) == len(list(BENCH_DIR.glob("F*")))
    row = df[df["id"] == "F04_conditional_default_cycle"].iloc[0]
    assert not row["valid"]
    assert row["kind"] == "CYCLE"
    assert row["path"] == "conditional.false"


def test_log_level_option(tmp_path):
    from fieldshape.utils.logger import init_logger

    schema = str(BENCH_DIR / "F01_tree_through_array" / "schema.json")
    try:
        result = runner.invoke(app, ["--log-level", "DEBUG", "--log-dir", str(tmp_path), "check", schema])
        assert result.exit_code == 0, result.output
        assert "field schema accepted" in (tmp_path / "fieldshape.log").read_text(encoding="utf-8")

        result = runner.invoke(app, ["--log-level", "chatty", "check", schema])
        assert result.exit_code != 0
    finally:
        init_logger()
