from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator

from .models import Connection, ConnectionKey, Endpoint, NetstatRow, Source, normalize
from .netstat import read_netstat_file, source_label


class SourceRegistry:
    """Local IP addresses claimed by the input files, one label per IP."""

    def __init__(self) -> None:
        self._sources: dict[str, Source] = {}

    def __len__(self) -> int:
        return len(self._sources)

    def __contains__(self, ip: object) -> bool:
        return ip in self._sources

    def __iter__(self) -> Iterator[Source]:
        for ip in sorted(self._sources):
            yield self._sources[ip]

    def get(self, ip: str) -> Source | None:
        return self._sources.get(ip)

    def register(self, ip: str, label: str) -> Source:
        # First label wins; later claims on the same IP are ignored.
        source = self._sources.get(ip)
        if source is None:
            source = Source(ip=ip, label=label)
            self._sources[ip] = source
        return source

    def label_for(self, ip: str) -> str:
        source = self.get(ip)
        return source.label if source is not None else "-"


class ConnectionTable:
    """Connections keyed by their normalized endpoint pair."""

    def __init__(self) -> None:
        self._connections: dict[ConnectionKey, Connection] = {}

    def __len__(self) -> int:
        return len(self._connections)

    def __iter__(self) -> Iterator[Connection]:
        for key in sorted(self._connections):
            yield self._connections[key]

    def observe(self, local: Endpoint, remote: Endpoint, state: str, source: Source) -> Connection:
        """Record one report of a connection by ``source``.

        The state of the first report is kept; later reports only add to the
        source count.
        """
        key = normalize(local, remote)
        conn = self._connections.get(key)
        if conn is None:
            conn = Connection(endpoint_a=key[0], endpoint_b=key[1], state=state)
            self._connections[key] = conn
        conn.add_source(source.ip)
        return conn


@dataclass
class ComparisonState:
    localhost_skipped: int = 0
    rows_ingested: int = 0
    files_read: list[str] = field(default_factory=list)
    sources: SourceRegistry = field(default_factory=SourceRegistry)
    connections: ConnectionTable = field(default_factory=ConnectionTable)

    def ingest_row(self, label: str, row: NetstatRow) -> Connection | None:
        if row.is_loopback:
            self.localhost_skipped += 1
            return None
        source = self.sources.register(row.local.ip, label)
        self.rows_ingested += 1
        return self.connections.observe(row.local, row.remote, row.state, source)

    def ingest_rows(self, label: str, rows: Iterable[NetstatRow]) -> None:
        for row in rows:
            self.ingest_row(label, row)

    def ingest_file(self, path: Path, show_status: bool = True) -> str:
        label = source_label(path)
        self.ingest_rows(label, read_netstat_file(path, show_status=show_status))
        self.files_read.append(label)
        return label
