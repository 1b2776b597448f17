#!/usr/bin/env python3
# fieldshape/cli.py

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import typer

from fieldshape.fields.defaults import initial_value
from fieldshape.loader.document import FieldDocument, load_document
from fieldshape.structural.errors import FieldSchemaError
from fieldshape.structural.metrics import compute_field_metrics
from fieldshape.structural.validator import assert_valid_field
from fieldshape.utils.io import write_json
from fieldshape.utils.logger import get_logger, init_logger, resolve_level, set_level

app = typer.Typer(help="fieldshape CLI - check recursive field schemas before building editors from them")
log = get_logger("cli")


@app.callback()
def main(
    log_dir: Optional[Path] = typer.Option(None, "--log-dir", help="Also write logs to a rotating file in this directory"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="DEBUG, INFO, WARNING or ERROR (default: $LOG_LEVEL or INFO)"),
):
    """Validate field schema documents (JSON or YAML)."""
    try:
        level = resolve_level(log_level)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--log-level")
    if log_dir is not None:
        init_logger(level=level, log_dir=log_dir)
    else:
        set_level(level)


def _check_document(path: Path, extra_lists: Optional[List[str]]) -> Tuple[Dict[str, Any], Optional[FieldDocument]]:
    """
    Load and validate one document. Schema problems are reported in the
    result instead of raised; anything else propagates.
    """
    result: Dict[str, Any] = {"input": str(path), "valid": False, "kind": None, "path": None, "issue": None}
    try:
        doc = load_document(path)
        lists = set(doc.lists) | set(extra_lists or [])
        result["lists"] = sorted(lists)
        assert_valid_field(doc.root, lists)
    except FieldSchemaError as e:
        log.debug("%s rejected: %s", path, e)
        result.update(kind=e.tag, path=e.path, issue=f"[{e.tag}] {e}")
        return result, None
    result["valid"] = True
    return result, doc


def _print_metrics(m: Dict[str, Any]) -> None:
    print(f"Fields:          {m['n_fields']} {m['kinds']}")
    print(f"Edges:           {m['n_edges']} (eager={m['n_eager_edges']}, lazy={m['n_lazy_edges']})")
    print(f"Recursive:       {m['recursive']}")
    for p in m["recursive_fields"]:
        print(f"  - {p}")
    print(f"Eager acyclic:   {m['eager_acyclic']}")
    print(f"Max eager depth: {m['max_eager_depth']}")
    print(f"Lists used:      {', '.join(m['list_keys']) or '-'}")


@app.command()
def check(
    input: Path = typer.Argument(..., exists=True, readable=True, help="Path to a field schema document (.json/.yaml)"),
    lists: Optional[List[str]] = typer.Option(None, "--list", "-l", help="List name relationship fields may reference (repeatable)"),
    report: Optional[Path] = typer.Option(None, "--report", help="Write a JSON report to this path"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show schema metrics for valid documents"),
):
    """
    Check that a schema document describes a finite editor: every field needed
    for the default value is finite, object fields are stable and every
    relationship field points at a known list.
    """
    result, doc = _check_document(input, lists)

    if result["valid"]:
        print(f"[ok] {input}")
        if verbose:
            _print_metrics(compute_field_metrics(doc.root))
    else:
        print(f"[fail] {input}")
        print(f"- {result['issue']}")

    if report is not None:
        write_json(report, result)
        print(f"[ok] wrote report to {report}")

    if not result["valid"]:
        raise typer.Exit(code=1)


@app.command()
def describe(
    input: Path = typer.Argument(..., exists=True, readable=True, help="Path to a field schema document (.json/.yaml)"),
    lists: Optional[List[str]] = typer.Option(None, "--list", "-l", help="List name relationship fields may reference (repeatable)"),
    initial: bool = typer.Option(False, "--initial", help="Print the initial editor value as JSON"),
):
    """Validate a document, then print graph metrics for its fields."""
    result, doc = _check_document(input, lists)
    if not result["valid"]:
        print(f"- {result['issue']}")
        raise typer.Exit(code=1)

    m = compute_field_metrics(doc.root)
    _print_metrics(m)

    if initial:
        if not m["eager_acyclic"]:
            # the validator lets some shared-node shapes through; do not recurse forever
            log.warning("%s: eager fields form a cycle, skipping initial value", input)
            print("[warn] initial value skipped: eager fields form a cycle")
        else:
            print(json.dumps(initial_value(doc.root), ensure_ascii=False, indent=2))


@app.command()
def bench(
    glob: str = typer.Option("bench/structural/*/schema.json", "--glob", help="Glob for schema documents"),
    out: Path = typer.Option(Path("experiments/results/fields.csv"), "--out", help="CSV path to write results"),
    lists: Optional[List[str]] = typer.Option(None, "--list", "-l", help="List name added to every document (repeatable)"),
):
    """Check many schema documents and export a CSV report."""
    import glob as _glob
    import pandas as pd

    rows = []
    for fp_str in sorted(_glob.glob(glob)):
        fp = Path(fp_str)
        result, doc = _check_document(fp, lists)
        row = {
            "id": fp.parent.name if fp.stem == "schema" else fp.stem,
            "valid": result["valid"],
            "kind": result["kind"],
            "path": result["path"],
        }
        if doc is not None:
            m = compute_field_metrics(doc.root)
            row.update({
                "n_fields": m["n_fields"],
                "recursive": m["recursive"],
                "eager_acyclic": m["eager_acyclic"],
                "max_eager_depth": m["max_eager_depth"],
            })
        rows.append(row)
        log.info("%s: %s", fp, "ok" if result["valid"] else result["kind"])

    out.parent.mkdir(parents=True, exist_ok=True)
    pd.DataFrame(rows).to_csv(out, index=False)
    print(f"[ok] wrote {out} ({len(rows)} documents)")


if __name__ == "__main__":
    app()
