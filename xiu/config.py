"""Loading of the server configuration from TOML."""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

_U16_MAX = 0xFFFF
_U32_MAX = 0xFFFFFFFF


class ConfigError(Exception):
    """Raised when the configuration cannot be read or is invalid."""


def _get(table: Mapping[str, Any], key: str, where: str) -> Any:
    if key not in table:
        raise ConfigError(f"missing field {key!r} in [{where}]")
    return table[key]


def _bool(table: Mapping[str, Any], key: str, where: str) -> bool:
    value = _get(table, key, where)
    if not isinstance(value, bool):
        raise ConfigError(f"field {key!r} in [{where}] must be a boolean")
    return value


def _int(table: Mapping[str, Any], key: str, where: str, maximum: int) -> int:
    value = _get(table, key, where)
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= maximum:
        raise ConfigError(f"field {key!r} in [{where}] must be an integer in 0..={maximum}")
    return value


def _str(table: Mapping[str, Any], key: str, where: str) -> str:
    value = _get(table, key, where)
    if not isinstance(value, str):
        raise ConfigError(f"field {key!r} in [{where}] must be a string")
    return value


def _table(value: Any, where: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigError(f"[{where}] must be a table")
    return value


@dataclass
class RtmpPullConfig:
    """A remote RTMP server to pull streams from."""

    enabled: bool
    address: str
    port: int

    @classmethod
    def from_mapping(cls, data: Any, where: str = "rtmp.pull") -> RtmpPullConfig:
        table = _table(data, where)
        return cls(
            enabled=_bool(table, "enabled", where),
            address=_str(table, "address", where),
            port=_int(table, "port", where, _U16_MAX),
        )


@dataclass
class RtmpPushConfig:
    """A remote RTMP server to push streams to."""

    enabled: bool
    address: str
    port: int

    @classmethod
    def from_mapping(cls, data: Any, where: str = "rtmp.push") -> RtmpPushConfig:
        table = _table(data, where)
        return cls(
            enabled=_bool(table, "enabled", where),
            address=_str(table, "address", where),
            port=_int(table, "port", where, _U16_MAX),
        )


@dataclass
class RtmpConfig:
    """The RTMP server and its relays."""

    enabled: bool
    port: int
    pull: RtmpPullConfig | None = None
    push: list[RtmpPushConfig] | None = None

    @classmethod
    def from_mapping(cls, data: Any, where: str = "rtmp") -> RtmpConfig:
        table = _table(data, where)
        pull = table.get("pull")
        push = table.get("push")
        if push is not None and not isinstance(push, list):
            raise ConfigError(f"[{where}.push] must be an array of tables")
        return cls(
            enabled=_bool(table, "enabled", where),
            port=_int(table, "port", where, _U32_MAX),
            pull=None if pull is None else RtmpPullConfig.from_mapping(pull, f"{where}.pull"),
            push=None
            if push is None
            else [RtmpPushConfig.from_mapping(item, f"{where}.push") for item in push],
        )


@dataclass
class HttpFlvConfig:
    """The HTTP-FLV server."""

    enabled: bool
    port: int

    @classmethod
    def from_mapping(cls, data: Any, where: str = "httpflv") -> HttpFlvConfig:
        table = _table(data, where)
        return cls(enabled=_bool(table, "enabled", where), port=_int(table, "port", where, _U32_MAX))


@dataclass
class HlsConfig:
    """The HLS server."""

    enabled: bool
    port: int

    @classmethod
    def from_mapping(cls, data: Any, where: str = "hls") -> HlsConfig:
        table = _table(data, where)
        return cls(enabled=_bool(table, "enabled", where), port=_int(table, "port", where, _U32_MAX))


class LogLevel(Enum):
    """Log levels."""

    INFO = "info"
    WARN = "warn"
    ERROR = "error"
    TRACE = "trace"
    DEBUG = "debug"


@dataclass
class LogConfig:
    """Logging settings."""

    level: str

    @classmethod
    def from_mapping(cls, data: Any, where: str = "log") -> LogConfig:
        return cls(level=_str(_table(data, where), "level", where))


@dataclass
class Config:
    """The whole configuration; every section is optional."""

    rtmp: RtmpConfig | None = None
    httpflv: HttpFlvConfig | None = None
    hls: HlsConfig | None = None
    log: LogConfig | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Config:
        def section(key: str, parser: Any) -> Any:
            value = data.get(key)
            return None if value is None else parser(value, key)

        return cls(
            rtmp=section("rtmp", RtmpConfig.from_mapping),
            httpflv=section("httpflv", HttpFlvConfig.from_mapping),
            hls=section("hls", HlsConfig.from_mapping),
            log=section("log", LogConfig.from_mapping),
        )


def loads(content: str) -> Config:
    """Parse a configuration from TOML text."""
    try:
        data = tomllib.loads(content)
    except tomllib.TOMLDecodeError as err:
        raise ConfigError(f"invalid TOML: {err}") from err
    return Config.from_mapping(data)


def load(cfg_path: str) -> Config:
    """Read and parse the configuration file at ``cfg_path``."""
    try:
        with open(cfg_path, encoding="utf-8") as handle:
            content = handle.read()
    except OSError as err:
        raise ConfigError(f"cannot read {cfg_path}: {err}") from err
    return loads(content)