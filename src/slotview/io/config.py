"""
Configuration for the slotview.io module.

Defines ReaderSettings, a frozen dataclass carrying runtime configuration for the
reader. Defaults pin the layout version shipped with this package
(slotview.core.versioning.LAYOUT_V) and keep read logging off.

Source of truth
- slotview.core.versioning.LAYOUT_V for the supported layout version.

Precedence
- environment (SLOTVIEW_*) > TOML (./slotview.toml [reader], or pyproject.toml
  [tool.slotview.reader]) > defaults.

Notes
- Values that are present but cannot be parsed raise ConfigError; unknown keys are ignored.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from slotview.core.layouts import published_versions
from slotview.core.versioning import LAYOUT_V, LayoutVersion, require_compatible

from .errors import ConfigError

_LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}
_TRUE = {"1", "true", "t", "yes", "y", "on"}
_FALSE = {"0", "false", "f", "no", "n", "off"}


@dataclass(frozen=True)
class ReaderSettings:
    """
    Runtime settings for PoolStateReader.

    Attributes:
        layout_major (int): Layout major version the caller was built against.
        layout_minor (int): Layout minor version the caller was built against.
        log_reads (bool): Emit a debug record for every derived slot and raw read.
        log_level (str): Sink level used by slotview.log.configure_logging(settings=...).

    Examples:
        >>> from slotview.io.config import ReaderSettings
        >>> ReaderSettings(log_reads=True)  # doctest: +ELLIPSIS
        ReaderSettings(...)
    """

    layout_major: int = LAYOUT_V.major
    layout_minor: int = LAYOUT_V.minor
    log_reads: bool = False
    log_level: str = "INFO"

    @classmethod
    def _apply_mapping(cls, base: ReaderSettings, cfg: dict[str, Any] | None) -> ReaderSettings:
        """Apply a loose config mapping onto ReaderSettings, returning a new instance."""
        if not isinstance(cfg, dict):
            return base

        s = base

        def _int(key: str, v: Any) -> int:
            if isinstance(v, bool):
                raise ConfigError(f"{key} must be an integer, got {v!r}")
            try:
                return int(v)
            except (TypeError, ValueError) as exc:
                raise ConfigError(f"{key} must be an integer, got {v!r}") from exc

        def _bool(key: str, v: Any) -> bool:
            if isinstance(v, bool):
                return v
            if isinstance(v, int):
                return bool(v)
            if isinstance(v, str):
                lo = v.strip().lower()
                if lo in _TRUE:
                    return True
                if lo in _FALSE:
                    return False
            raise ConfigError(f"{key} must be a boolean, got {v!r}")

        def _layout(v: Any) -> LayoutVersion:
            try:
                return LayoutVersion.parse(str(v))
            except ValueError as exc:
                raise ConfigError(str(exc)) from exc

        if "layout" in cfg:
            pinned = _layout(cfg["layout"])
            s = replace(s, layout_major=pinned.major, layout_minor=pinned.minor)
        for key in ("layout_major", "layout_minor"):
            if key in cfg:
                value = _int(key, cfg[key])
                if value < 0:
                    raise ConfigError(f"{key} must be non-negative, got {value}")
                s = replace(s, **{key: value})
        if "log_reads" in cfg:
            s = replace(s, log_reads=_bool("log_reads", cfg["log_reads"]))
        if "log_level" in cfg:
            level = str(cfg["log_level"]).strip().upper()
            if level not in _LOG_LEVELS:
                raise ConfigError(f"unknown log_level {cfg['log_level']!r}")
            s = replace(s, log_level=level)

        return s

    @classmethod
    def from_env(cls, base: ReaderSettings | None = None, prefix: str = "SLOTVIEW_") -> ReaderSettings:
        """
        Build ReaderSettings from environment variables. Precedence is env > base > defaults.

        Recognized variables:
            - SLOTVIEW_LAYOUT ("MAJOR.MINOR"; the component variables below win)
            - SLOTVIEW_LAYOUT_MAJOR
            - SLOTVIEW_LAYOUT_MINOR
            - SLOTVIEW_LOG_READS (1/0/true/false/yes/no/on/off)
            - SLOTVIEW_LOG_LEVEL
        """
        s = base or cls()

        mapping: dict[str, Any] = {}
        for key in ("layout", "layout_major", "layout_minor", "log_reads", "log_level"):
            v = os.getenv(prefix + key.upper())
            if v:
                mapping[key] = v

        return cls._apply_mapping(s, mapping)

    @classmethod
    def from_toml(cls, path: str | os.PathLike[str] | None = None) -> ReaderSettings:
        """
        Build ReaderSettings from a TOML file.

        Search order when `path` is None:
            1) ./slotview.toml (with either a [reader] table or top-level keys)
            2) ./pyproject.toml under [tool.slotview.reader]

        Returns defaults if no file is present.

        Raises:
            ConfigError: If a candidate file exists but is not valid TOML, or a
                section on the lookup path is not a table.
        """
        s = cls()

        cand: list[Path] = []
        if path is not None:
            cand.append(Path(path))
        else:
            cand.append(Path.cwd() / "slotview.toml")
            cand.append(Path.cwd() / "pyproject.toml")

        cfg: dict[str, Any] | None = None
        for p in cand:
            if not p.exists():
                continue
            try:
                with p.open("rb") as fh:
                    data = tomllib.load(fh)
            except tomllib.TOMLDecodeError as exc:
                raise ConfigError(f"invalid TOML in {p}: {exc}") from exc
            if p.name == "pyproject.toml":
                section = _table(data, "tool", p)
                section = _table(section, "slotview", p)
                cfg = _table(section, "reader", p)
            elif isinstance(data.get("reader"), dict):
                cfg = data["reader"]
            else:
                cfg = data
            if cfg:
                break

        return cls._apply_mapping(s, cfg)

    @classmethod
    def load(cls, path: str | os.PathLike[str] | None = None) -> ReaderSettings:
        """
        Load ReaderSettings applying precedence: environment > TOML > defaults.

        Args:
            path: Optional explicit TOML path. If None, search defaults (slotview.toml, pyproject.toml).
        """
        s = cls.from_toml(path)
        s = cls.from_env(base=s)
        return s

    @property
    def layout_version(self) -> LayoutVersion:
        return LayoutVersion(self.layout_major, self.layout_minor)


def _table(data: dict[str, Any], key: str, path: Path) -> dict[str, Any]:
    value = data.get(key, {})
    if not isinstance(value, dict):
        raise ConfigError(f"{path}: {key!r} must be a table, got {type(value).__name__}")
    return value


def check_layout_version(settings: ReaderSettings) -> None:
    """
    Ensure the settings and every published table pin the layout this package reads.

    The settings pin is what the caller was built against; the table pins catch a
    table left at an older version when LAYOUT_V was bumped.

    Raises:
        VersionMismatch: If the settings or any table pin a version other than LAYOUT_V.
    """
    require_compatible(settings.layout_version, "settings")
    for name, version in published_versions().items():
        require_compatible(version, f"table {name}")
