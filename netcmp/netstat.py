"""Reader for ``netstat -n -f inet -P tcp`` listings.

Each listing starts with a fixed four-line header::

    <blank line>
    TCP: IPv4
       Local Address        Remote Address    Swind Send-Q Rwind Recv-Q    State
    -------------------- -------------------- ----- ------ ----- ------ -----------

followed by one row per connection. A listing that deviates from this layout
is rejected as a whole.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterator

from .errors import (
    HeaderError,
    LineTooLong,
    MalformedEndpoint,
    RowError,
    RowFormatError,
    TruncatedRow,
    UnknownState,
)
from .models import MAX_PORT, TCP_STATES, Endpoint, NetstatRow
from .progress import build_statusbar


PROTOCOL_HEADER = "TCP: IPv4"
COLUMN_HEADERS = (
    "Local Address",
    "Remote Address",
    "Swind",
    "Send-Q",
    "Rwind",
    "Recv-Q",
    "State",
)

# local, remote, swind, send-q, rwind, recv-q, state
ROW_FIELDS = 7

_PORT_RE = re.compile(r"[0-9]+")
_MAX_PORT_DIGITS = len(str(MAX_PORT))


def source_label(filename: str | Path) -> str:
    """Label a listing by the final path segment of its filename."""
    text = str(filename)
    return text.rsplit("/", 1)[-1]


def parse_endpoint(token: str) -> Endpoint:
    """Parse a netstat ``a.b.c.d.port`` token.

    The port follows the last dot. The address part is kept verbatim.
    """
    ip, dot, port_text = token.rpartition(".")
    if not dot:
        raise MalformedEndpoint(f"bad IP/port pair: {token!r}")
    if not _PORT_RE.fullmatch(port_text) or len(port_text.lstrip("0")) > _MAX_PORT_DIGITS:
        raise MalformedEndpoint(f"bad TCP port: {token!r}")
    port = int(port_text)
    if port > MAX_PORT:
        raise MalformedEndpoint(f"bad TCP port: {token!r}")
    return Endpoint(ip=ip, port=port)


def parse_row(line: str) -> NetstatRow:
    tokens = line.split()
    if len(tokens) < ROW_FIELDS:
        raise TruncatedRow(f"expected {ROW_FIELDS} fields, found {len(tokens)}")
    local_token, remote_token = tokens[0], tokens[1]
    state = tokens[6]
    if state not in TCP_STATES:
        raise UnknownState(f'unexpected TCP state: "{state}"')
    return NetstatRow(
        local=parse_endpoint(local_token),
        remote=parse_endpoint(remote_token),
        state=state,
    )


def _is_separator(line: str) -> bool:
    return all(ch == "-" or ch.isspace() for ch in line.rstrip("\n"))


def _is_column_header(line: str) -> bool:
    return line.endswith("\n") and all(name in line for name in COLUMN_HEADERS)


_HEADER_CHECKS = (
    (lambda line: line == "\n", "expected blank line"),
    (lambda line: line == f"{PROTOCOL_HEADER}\n", f'expected "{PROTOCOL_HEADER}" header'),
    (_is_column_header, "expected column headers"),
    (_is_separator, "expected separator row"),
)


def _read_header(path: Path, handle) -> list[str]:
    lines: list[str] = []
    for line_number, (check, message) in enumerate(_HEADER_CHECKS, start=1):
        line = handle.readline()
        if not line:
            raise HeaderError(path, line_number, f"unexpected end of file ({message})")
        if not check(line):
            raise HeaderError(path, line_number, message)
        lines.append(line)
    return lines


def read_netstat_file(path: Path, show_status: bool = True) -> Iterator[NetstatRow]:
    """Yield the data rows of one listing, validating it as it goes.

    Raises ``HeaderError`` for a bad header, ``LineTooLong`` for a data line
    without a trailing newline and ``RowFormatError`` for an unparsable row.
    ``OSError`` from opening or reading the file propagates unchanged.

    Lines end at ``\\n`` only; a carriage return stays part of the line.
    Undecodable bytes are kept as ``\\xNN`` escapes.
    """
    size_bytes = path.stat().st_size
    status = build_statusbar(path, enabled=show_status)
    with path.open("r", encoding="utf-8", errors="backslashreplace", newline="\n") as handle, status:
        header_lines = _read_header(path, handle)
        consumed = sum(len(line) for line in header_lines)
        line_number = len(header_lines)
        while True:
            line = handle.readline()
            if not line:
                break
            line_number += 1
            consumed += len(line)
            if size_bytes:
                status.update(int(consumed * 100 / size_bytes))

            if line == "\n":
                continue
            if not line.endswith("\n"):
                raise LineTooLong(path, line_number, "line too long")
            try:
                row = parse_row(line)
            except RowError as exc:
                raise RowFormatError(
                    path, line_number, f"failed to process line {line_number}: {exc}"
                ) from exc
            yield row
