# Copyright (c) 2025 PantherianCodeX. All Rights Reserved.

from __future__ import annotations

from enum import StrEnum


class EngineSource(StrEnum):
    """Which resolution branch produced a formatting engine."""

    LOCAL = "local"
    DEFAULT = "default"

    @classmethod
    def from_str(cls, raw: str) -> EngineSource:
        value = raw.strip().lower()
        try:
            return cls(value)
        except ValueError as exc:
            raise ValueError(f"Unknown engine source '{raw}'") from exc


class LogFormat(StrEnum):
    TEXT = "text"
    JSON = "json"

    @classmethod
    def from_str(cls, raw: str) -> LogFormat:
        value = raw.strip().lower()
        try:
            return cls(value)
        except ValueError as exc:
            raise ValueError(f"Unknown log format '{raw}'") from exc


class LogComponent(StrEnum):
    ENGINE = "engine"
    WORKSPACE = "workspace"
    DISPATCH = "dispatch"
    BRIDGE = "bridge"
    CONFIG = "config"
    CLI = "cli"


class DataFormat(StrEnum):
    JSON = "json"
    TABLE = "table"

    @classmethod
    def from_str(cls, raw: str) -> DataFormat:
        value = raw.strip().lower()
        try:
            return cls(value)
        except ValueError as exc:
            raise ValueError(f"Unknown data format '{raw}'") from exc


__all__ = ["DataFormat", "EngineSource", "LogComponent", "LogFormat"]
