from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

try:
    import tomllib  # Python 3.11+
except ModuleNotFoundError:  # pragma: no cover - fallback for 3.9/3.10
    import tomli as tomllib  # type: ignore[import-not-found]

from .errors import ConfigError


OUTPUT_FORMATS = ("text", "json")


@dataclass(frozen=True)
class ConfigLoadResult:
    path: Path | None
    data: dict[str, Any]


@dataclass(frozen=True)
class NetcmpSettings:
    debug: bool = False
    color: bool | None = None
    status: bool = True
    external_limit: int = 0
    output: str = "text"
    source: Path | None = field(default=None, compare=False)


DEFAULT_CONFIG_PATHS = [
    Path("netcmp.toml"),
    Path.home() / ".netcmp.toml",
    Path.home() / ".config" / "netcmp" / "config.toml",
]


def find_config(explicit: str | Path | None) -> Path | None:
    if explicit:
        return Path(explicit).expanduser()
    for candidate in DEFAULT_CONFIG_PATHS:
        if candidate.exists():
            return candidate
    return None


def load_config(path: Path | None) -> ConfigLoadResult:
    if not path:
        return ConfigLoadResult(path=None, data={})
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise ConfigError(f"cannot read config {path}: {exc.strerror or exc}") from exc
    try:
        data = tomllib.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"invalid config {path}: {exc}") from exc
    return ConfigLoadResult(path=path, data=data)


def _expect(table: dict[str, Any], key: str, kind: type, default: Any) -> Any:
    if key not in table:
        return default
    value = table[key]
    # bool is an int subclass; keep them apart.
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise ConfigError(f"config key '{key}' must be of type {kind.__name__}")
    return value


def settings_from_config(result: ConfigLoadResult) -> NetcmpSettings:
    table = result.data.get("netcmp", {})
    if not isinstance(table, dict):
        raise ConfigError("config section [netcmp] must be a table")
    external_limit = _expect(table, "external_limit", int, 0)
    if external_limit < 0:
        raise ConfigError("config key 'external_limit' must not be negative")
    output = _expect(table, "output", str, "text")
    if output not in OUTPUT_FORMATS:
        raise ConfigError(f"config key 'output' must be one of: {', '.join(OUTPUT_FORMATS)}")
    return NetcmpSettings(
        debug=_expect(table, "debug", bool, False),
        color=_expect(table, "color", bool, None),
        status=_expect(table, "status", bool, True),
        external_limit=external_limit,
        output=output,
        source=result.path,
    )
