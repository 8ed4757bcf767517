from __future__ import annotations

from pathlib import Path


class NetcmpError(Exception):
    """Base class for every error netcmp reports as fatal."""


class RowError(NetcmpError):
    """A single netstat data row could not be parsed."""


class MalformedEndpoint(RowError):
    pass


class UnknownState(RowError):
    pass


class TruncatedRow(RowError):
    pass


class NetstatFormatError(NetcmpError):
    """An input file does not match the netstat layout."""

    def __init__(self, path: Path | str, line_number: int, message: str) -> None:
        self.path = Path(path)
        self.line_number = line_number
        self.message = message
        super().__init__(f"{self.path}:{line_number}: {message}")


class HeaderError(NetstatFormatError):
    pass


class LineTooLong(NetstatFormatError):
    pass


class RowFormatError(NetstatFormatError):
    pass


class ConfigError(NetcmpError):
    pass
