#!/usr/bin/env python3
# workflow_doctor/cli.py

import glob as _glob
from pathlib import Path
from typing import Optional

import typer

from workflow_doctor.health.report import format_issue, health_band, health_check, report_payload
from workflow_doctor.health.rules import Finding
from workflow_doctor.insight.genllm import InsightUnavailableError, default_model, generate_insight
from workflow_doctor.model.demos import list_demos, load_demo
from workflow_doctor.model.workflow import (
    Workflow,
    WorkflowFormatError,
    load_workflow,
    node_category,
    raw_view,
    short_type,
)
from workflow_doctor.session import DoctorSession
from workflow_doctor.utils.io import read_json, write_json
from workflow_doctor.utils.logger import init_logger

app = typer.Typer(help="Workflow Doctor - health checks and AI tips for n8n workflows")


@app.callback()
def main(
    log_dir: Optional[Path] = typer.Option(None, "--log-dir", help="Also write logs to a rotating file in this directory"),
):
    init_logger(log_dir=log_dir)


def _load(input: Optional[Path], demo: Optional[str]) -> Workflow:
    if input is not None and demo is not None:
        raise typer.BadParameter("Use either --input or --demo, not both")
    try:
        if demo is not None:
            return load_demo(demo)
        if input is None:
            raise typer.BadParameter("One of --input or --demo is required")
        return load_workflow(input)
    except KeyError as e:
        raise typer.BadParameter(e.args[0])
    except WorkflowFormatError as e:
        raise typer.BadParameter(str(e))


def _print_nodes(wf: Workflow) -> None:
    print(f"Workflow: {wf.name or '<unnamed>'} ({len(wf.nodes)} nodes)")
    for n in wf.nodes:
        print(f"  [{node_category(n):<7}] {n.name or '<unnamed>'} ({short_type(n)})")


@app.command()
def score(
    input: Optional[Path] = typer.Option(None, "--input", "-i", exists=True, readable=True, help="Path to n8n workflow JSON"),
    demo: Optional[str] = typer.Option(None, "--demo", help="Score a bundled demo workflow instead"),
    report: Optional[Path] = typer.Option(None, "--report", help="Write a JSON report to this path"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show node list and score detail"),
):
    """
    Compute the health score of a workflow and list the findings behind it.
    """
    wf = _load(input, demo)
    s, issues, detail = health_check(wf)

    if verbose:
        _print_nodes(wf)

    print(f"HealthScore: {s} ({health_band(s)})")
    if issues:
        print("Detected issues:")
        for it in issues:
            print(f"- {it}")

    if verbose:
        print("[debug] health detail:", {k: v for k, v in detail.items() if k not in ("findings", "explanation")})
        for rule, why in detail["explanation"].items():
            print(f"[debug] {rule}: {why}")

    if report is not None:
        findings = [Finding(**f) for f in detail["findings"]]
        write_json(report, report_payload(str(input or demo), s, findings, detail=detail))
        print(f"[ok] wrote report to {report}")


@app.command()
def analyze(
    input: Optional[Path] = typer.Option(None, "--input", "-i", exists=True, readable=True, help="Path to n8n workflow JSON"),
    demo: Optional[str] = typer.Option(None, "--demo", help="Analyze a bundled demo workflow instead"),
    model: Optional[str] = typer.Option(None, "--model", help="LLM model for tips (default: $WORKFLOW_DOCTOR_MODEL or gpt-4o-mini)"),
    report: Optional[Path] = typer.Option(None, "--report", help="Write a JSON report to this path"),
):
    """
    Run diagnostics: health score plus AI optimization tips.
    """
    session = DoctorSession()
    session.load(_load(input, demo))
    model = model or default_model()

    try:
        session.analyze(lambda wf: generate_insight(wf, model=model))
    except InsightUnavailableError as e:
        print(f"[error] {e}")
        raise typer.Exit(code=1)

    print(f"HealthScore: {session.score} ({health_band(session.score)})")
    for f in session.findings:
        print(f"- {format_issue(f)}")
    print(f"\nAI Optimization Tips ({session.insight.model}):")
    print(session.insight.text)

    if report is not None:
        payload = report_payload(
            str(input or demo), session.score, session.findings, insight=session.insight.to_dict()
        )
        write_json(report, payload)
        print(f"[ok] wrote report to {report}")


@app.command()
def raw(
    input: Optional[Path] = typer.Option(None, "--input", "-i", exists=True, readable=True, help="Path to n8n workflow JSON"),
    demo: Optional[str] = typer.Option(None, "--demo", help="Show a bundled demo workflow instead"),
):
    """
    Print the workflow export as pretty JSON (all source fields kept).
    """
    print(raw_view(_load(input, demo)))


@app.command()
def demos():
    """
    List the bundled demo workflows.
    """
    for name in list_demos():
        print(name)


@app.command()
def bench(
    glob: str = typer.Option("bench/health/*/workflow.json", "--glob", help="Glob for workflow JSON files"),
    out: Path = typer.Option(Path("experiments/results/health.csv"), "--out", help="CSV path to write results"),
):
    """
    Score a batch of workflows and export a CSV report.
    """
    import pandas as pd

    rows = []
    for fp_str in sorted(_glob.glob(glob)):
        fp = Path(fp_str)
        doc = read_json(fp)

        if not isinstance(doc, dict) or "nodes" not in doc:
            print(f"[skip] {fp} does not look like a workflow JSON (missing 'nodes'); skipping")
            continue

        try:
            s, issues, detail = health_check(doc)
        except WorkflowFormatError as e:
            print(f"[skip] {fp}: {e}")
            continue

        rows.append({
            "id": fp.parent.name,
            "file": str(fp),
            "nodes": detail["n_nodes"],
            "score": s,
            "band": detail["band"],
            "rules": ";".join(f["rule"] for f in detail["findings"]),
        })

    out.parent.mkdir(parents=True, exist_ok=True)
    pd.DataFrame(rows, columns=["id", "file", "nodes", "score", "band", "rules"]).to_csv(out, index=False)
    print(f"[ok] wrote {out} ({len(rows)} workflows)")


if __name__ == "__main__":
    app()
