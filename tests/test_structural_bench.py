import json
from pathlib import Path

import pytest

from fieldshape.loader.document import load_document
from fieldshape.structural.errors import FieldSchemaError
from fieldshape.structural.metrics import compute_field_metrics
from fieldshape.structural.validator import assert_valid_field

BENCH_DIR = Path(__file__).resolve().parents[1] / "bench" / "structural"


@pytest.mark.parametrize("case_dir", sorted(BENCH_DIR.glob("F*")), ids=lambda p: p.name)
def test_structural_bench(case_dir: Path):
    """
    Structural benchmark:
    - load schema.json
    - load expect.json
    - load + validate, then check validity, issue kind and path
    - for accepted schemas, check the recursion flag from the field graph
    """
    schema_file = case_dir / "schema.json"
    exp_file = case_dir / "expect.json"

    assert schema_file.exists(), f"Missing schema.json in {case_dir}"
    assert exp_file.exists(), f"Missing expect.json in {case_dir}"

    with exp_file.open("r", encoding="utf-8") as f:
        asserts = json.load(f).get("assert") or {}

    error = None
    doc = None
    try:
        doc = load_document(schema_file)
        assert_valid_field(doc.root, doc.lists)
    except FieldSchemaError as e:
        error = e

    valid = error is None
    assert valid == asserts["valid"], f"{case_dir.name}: valid={valid}, error={error}"

    if "kind" in asserts:
        assert error.tag == asserts["kind"], f"{case_dir.name}: kind={error.tag}"
    if "path" in asserts:
        assert error.path == asserts["path"], f"{case_dir.name}: path={error.path}"

    if "recursive" in asserts:
        metrics = compute_field_metrics(doc.root)
        assert metrics["recursive"] == asserts["recursive"], f"{case_dir.name}: {metrics}"

    if valid:
        # accepted schemas stay accepted
        assert_valid_field(doc.root, doc.lists)
