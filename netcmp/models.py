from __future__ import annotations

from dataclasses import dataclass, field


LOOPBACK_IP = "127.0.0.1"
MAX_PORT = 65535
MAX_SOURCE_COUNT = 255
MAX_TRACKED_SOURCES = 2

TIME_WAIT = "TIME_WAIT"
TCP_STATES = frozenset({
    "CLOSED",
    "IDLE",
    "BOUND",
    "LISTEN",
    "SYN_SENT",
    "SYN_RCVD",
    "ESTABLISHED",
    "CLOSE_WAIT",
    "FIN_WAIT_1",
    "CLOSING",
    "LAST_ACK",
    "FIN_WAIT_2",
    TIME_WAIT,
})


@dataclass(frozen=True, order=True)
class Endpoint:
    # Field order defines the total order: IP string first, then port.
    ip: str
    port: int

    def __str__(self) -> str:
        return f"{self.ip}:{self.port}"


ConnectionKey = tuple[Endpoint, Endpoint]


def normalize(first: Endpoint, second: Endpoint) -> ConnectionKey:
    """Order a pair of endpoints so both ends of a connection share one key."""
    if second < first:
        return (second, first)
    return (first, second)


@dataclass(frozen=True)
class Source:
    ip: str
    label: str


@dataclass(frozen=True)
class NetstatRow:
    local: Endpoint
    remote: Endpoint
    state: str

    @property
    def is_loopback(self) -> bool:
        return self.local.ip == LOOPBACK_IP or self.remote.ip == LOOPBACK_IP


@dataclass
class Connection:
    endpoint_a: Endpoint
    endpoint_b: Endpoint
    state: str
    source_count: int = 0
    # IP keys into the source registry, first two reports only.
    sources: list[str] = field(default_factory=list)

    @property
    def key(self) -> ConnectionKey:
        return (self.endpoint_a, self.endpoint_b)

    def add_source(self, source_ip: str) -> None:
        if len(self.sources) < MAX_TRACKED_SOURCES:
            self.sources.append(source_ip)
        if self.source_count < MAX_SOURCE_COUNT:
            self.source_count += 1
