from __future__ import annotations

import json
import sys

from .classify import AsymmetricConnection, ComparisonReport
from .coloring import danger, header, muted, ok, warn
from .models import MAX_TRACKED_SOURCES, Connection
from .table import ComparisonState, SourceRegistry


SUMMARY_TITLE = "summary of connections found:"
SUMMARY_LINES = (
    ("localhost_skipped", "localhost connections skipped"),
    ("pruned", "pruned (in state TIME_WAIT)"),
    ("symmetric", "symmetric (present on both sides)"),
    ("external", "external (only one side's data was supplied)"),
    ("asymmetric", "asymmetric (abandoned by one side)"),
    ("anomalous", "anomalous (more than two sources)"),
)


def format_asymmetric(entry: AsymmetricConnection, color: bool | None = None) -> str:
    return f"{entry.endpoint_a} <-> {entry.endpoint_b} only in {warn(entry.label, color)}"


def _format_count(key: str, count: int, color: bool | None) -> str:
    text = f"{count:7d}"
    if count and key in ("asymmetric", "anomalous"):
        return danger(text, color)
    if key == "symmetric":
        return ok(text, color)
    return text


def render_summary(report: ComparisonReport, color: bool | None = None) -> str:
    counts = report.counts
    lines = [header(SUMMARY_TITLE, color)]
    for key, description in SUMMARY_LINES:
        lines.append(f"    {_format_count(key, counts[key], color)} {description}")
    return "\n".join(lines)


def render_report(report: ComparisonReport, color: bool | None = None) -> str:
    lines = [format_asymmetric(entry, color) for entry in report.asymmetric]
    lines.append(render_summary(report, color))
    return "\n".join(lines)


def render_connection_dump(conn: Connection, sources: SourceRegistry) -> str:
    """Everything known about one connection, for the diagnostic stream."""
    lines = [f"    {str(conn.endpoint_a):>21} <-> {str(conn.endpoint_b):>21}"]
    for source_ip in conn.sources[:MAX_TRACKED_SOURCES]:
        lines.append(f"        source: {sources.label_for(source_ip)}")
    return "\n".join(lines)


def render_anomaly_warning(report: ComparisonReport, sources: SourceRegistry) -> str:
    if not report.anomalous:
        return ""
    total = len(report.anomalous)
    plural = "" if total == 1 else "s"
    lines = [
        danger(
            f"netcmp: {total} connection{plural} had more than two sources! example:",
            stream=sys.stderr,
        ),
        render_connection_dump(report.anomalous[0], sources),
    ]
    return "\n".join(lines)


def render_debug_dumps(
    report: ComparisonReport,
    sources: SourceRegistry,
    external_limit: int = 0,
) -> str:
    """Dumps of anomalous and external connections for ``-d`` mode.

    ``external_limit`` caps the external examples; 0 dumps all of them.
    """
    lines: list[str] = []
    for conn in report.anomalous:
        lines.append(warn("found connection with more than two sources:", stream=sys.stderr))
        lines.append(render_connection_dump(conn, sources))
    externals = report.external
    if external_limit > 0:
        externals = externals[:external_limit]
    for conn in externals:
        lines.append(warn("found connection involving IP for which we have no data:", stream=sys.stderr))
        lines.append(render_connection_dump(conn, sources))
    hidden = len(report.external) - len(externals)
    if hidden > 0:
        lines.append(muted(f"    ... {hidden} more external connections not shown", stream=sys.stderr))
    return "\n".join(lines)


def _connection_to_dict(conn: Connection, sources: SourceRegistry) -> dict[str, object]:
    return {
        "endpoint_a": str(conn.endpoint_a),
        "endpoint_b": str(conn.endpoint_b),
        "state": conn.state,
        "source_count": conn.source_count,
        "sources": [sources.label_for(ip) for ip in conn.sources],
    }


def build_json_report(report: ComparisonReport, state: ComparisonState) -> dict[str, object]:
    return {
        "files": list(state.files_read),
        "rows_ingested": state.rows_ingested,
        "counts": report.counts,
        "asymmetric": [
            {
                "endpoint_a": str(entry.endpoint_a),
                "endpoint_b": str(entry.endpoint_b),
                "state": entry.state,
                "only_in": entry.label,
            }
            for entry in report.asymmetric
        ],
        "anomalous": [_connection_to_dict(conn, state.sources) for conn in report.anomalous],
        "sources": [{"ip": source.ip, "label": source.label} for source in state.sources],
    }


def render_json(report: ComparisonReport, state: ComparisonState) -> str:
    return json.dumps(build_json_report(report, state), indent=2)
