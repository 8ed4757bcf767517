from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .models import TIME_WAIT, Connection, Endpoint
from .table import ComparisonState, SourceRegistry


class Outcome(str, Enum):
    PRUNED = "pruned"
    ANOMALOUS = "anomalous"
    SYMMETRIC = "symmetric"
    EXTERNAL = "external"
    ASYMMETRIC = "asymmetric"


@dataclass(frozen=True)
class AsymmetricConnection:
    endpoint_a: Endpoint
    endpoint_b: Endpoint
    state: str
    label: str


@dataclass
class ComparisonReport:
    localhost_skipped: int = 0
    pruned: int = 0
    symmetric: int = 0
    asymmetric: list[AsymmetricConnection] = field(default_factory=list)
    external: list[Connection] = field(default_factory=list)
    anomalous: list[Connection] = field(default_factory=list)

    @property
    def counts(self) -> dict[str, int]:
        return {
            "localhost_skipped": self.localhost_skipped,
            "pruned": self.pruned,
            "symmetric": self.symmetric,
            "external": len(self.external),
            "asymmetric": len(self.asymmetric),
            "anomalous": len(self.anomalous),
        }


def classify_connection(conn: Connection, sources: SourceRegistry) -> Outcome:
    if conn.state == TIME_WAIT:
        return Outcome.PRUNED
    if conn.source_count > 2:
        return Outcome.ANOMALOUS
    if conn.source_count == 2:
        return Outcome.SYMMETRIC
    if conn.endpoint_a.ip not in sources and conn.endpoint_b.ip not in sources:
        return Outcome.EXTERNAL
    return Outcome.ASYMMETRIC


def classify(state: ComparisonState) -> ComparisonReport:
    """Bucket every recorded connection, walking the table once in key order."""
    report = ComparisonReport(localhost_skipped=state.localhost_skipped)
    for conn in state.connections:
        outcome = classify_connection(conn, state.sources)
        if outcome is Outcome.PRUNED:
            report.pruned += 1
        elif outcome is Outcome.ANOMALOUS:
            report.anomalous.append(conn)
        elif outcome is Outcome.SYMMETRIC:
            report.symmetric += 1
        elif outcome is Outcome.EXTERNAL:
            report.external.append(conn)
        else:
            report.asymmetric.append(
                AsymmetricConnection(
                    endpoint_a=conn.endpoint_a,
                    endpoint_b=conn.endpoint_b,
                    state=conn.state,
                    label=state.sources.label_for(conn.sources[0]),
                )
            )
    return report
