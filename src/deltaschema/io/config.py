"""
Configuration for deltaschema.

Defines DeltaSettings, a frozen dataclass carrying runtime configuration for the
CLI and IO layer. Settings load with precedence env > TOML > defaults.

Sources
- Environment: DELTASCHEMA_* variables.
- TOML: ./deltaschema.toml (either a [deltaschema] table or top-level keys), else
  [tool.deltaschema] in ./pyproject.toml.

Notes
- Wire names of the delta protocol are not configurable; see deltaschema.core.constants.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from .errors import IoConfigError

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
_TRUE = {"1", "true", "t", "yes", "y", "on"}
_FALSE = {"0", "false", "f", "no", "n", "off"}


@dataclass(frozen=True)
class DeltaSettings:
    """
    Runtime settings for deltaschema.

    Attributes:
        log_level (str): Root log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_json (bool): Emit JSON log lines instead of console-formatted ones.
        strict_classification (bool): Check replacement values against the field's
            delta type and raise UnclassifiableDelta on mismatch.
        indent (int): Indentation of written schema JSON; 0 writes compact canonical JSON.

    Examples:
        >>> from deltaschema.io.config import DeltaSettings
        >>> DeltaSettings(indent=4).indent
        4
    """

    log_level: str = "WARNING"
    log_json: bool = False
    strict_classification: bool = False
    indent: int = 2

    @classmethod
    def _apply_mapping(cls, base: DeltaSettings, cfg: dict[str, Any] | None) -> DeltaSettings:
        """Apply a loose config mapping onto DeltaSettings, returning a new instance."""
        if not isinstance(cfg, dict):
            return base

        s = base
        if "log_level" in cfg:
            level = str(cfg["log_level"]).strip().upper()
            if level not in _LOG_LEVELS:
                raise IoConfigError(f"unknown log_level {cfg['log_level']!r}")
            s = replace(s, log_level=level)
        if "log_json" in cfg:
            s = replace(s, log_json=_bool("log_json", cfg["log_json"]))
        if "strict_classification" in cfg:
            s = replace(
                s, strict_classification=_bool("strict_classification", cfg["strict_classification"])
            )
        if "indent" in cfg:
            try:
                indent = int(cfg["indent"])
            except (TypeError, ValueError) as exc:
                raise IoConfigError(f"indent must be an integer, got {cfg['indent']!r}") from exc
            if indent < 0:
                raise IoConfigError(f"indent must be non-negative, got {indent}")
            s = replace(s, indent=indent)
        return s

    @classmethod
    def from_env(cls, base: DeltaSettings | None = None, prefix: str = "DELTASCHEMA_") -> DeltaSettings:
        """
        Build DeltaSettings from environment variables. Precedence is env > base (if provided) > defaults.

        Recognized variables:
            - DELTASCHEMA_LOG_LEVEL
            - DELTASCHEMA_LOG_JSON (1/0/true/false/yes/no/on/off)
            - DELTASCHEMA_STRICT_CLASSIFICATION (1/0/true/false/yes/no/on/off)
            - DELTASCHEMA_INDENT
        """
        s = base or cls()
        mapping: dict[str, Any] = {}
        for key in ("log_level", "log_json", "strict_classification", "indent"):
            v = os.getenv(prefix + key.upper())
            if v:
                mapping[key] = v
        return cls._apply_mapping(s, mapping)

    @classmethod
    def from_toml(cls, path: str | os.PathLike[str] | None = None) -> DeltaSettings:
        """
        Build DeltaSettings from a TOML file.

        Search order when `path` is None:
            1) ./deltaschema.toml (with either a [deltaschema] table or direct keys)
            2) ./pyproject.toml under [tool.deltaschema]

        Returns defaults if no file is present.

        Raises:
            IoConfigError: If a candidate file exists but is not valid TOML.
        """
        s = cls()
        cand: list[Path] = []
        if path is not None:
            cand.append(Path(path))
        else:
            cand.append(Path.cwd() / "deltaschema.toml")
            cand.append(Path.cwd() / "pyproject.toml")

        for p in cand:
            if not p.exists():
                continue
            try:
                with p.open("rb") as fh:
                    data = tomllib.load(fh)
            except tomllib.TOMLDecodeError as exc:
                raise IoConfigError(f"invalid TOML in {p}: {exc}") from exc
            if p.name == "pyproject.toml":
                tool = data.get("tool", {})
                cfg = tool.get("deltaschema") if isinstance(tool, dict) else None
            elif isinstance(data.get("deltaschema"), dict):
                cfg = data["deltaschema"]
            else:
                cfg = data
            if cfg:
                return cls._apply_mapping(s, cfg)
        return s

    @classmethod
    def load(cls, path: str | os.PathLike[str] | None = None) -> DeltaSettings:
        """
        Load DeltaSettings applying precedence: environment > TOML > defaults.

        Args:
            path: Optional explicit TOML path. If None, search defaults (deltaschema.toml, pyproject.toml).
        """
        s = cls.from_toml(path)
        s = cls.from_env(base=s)
        return s


def _bool(key: str, v: Any) -> bool:
    if isinstance(v, bool):
        return v
    if isinstance(v, (int, float)):
        return bool(v)
    if isinstance(v, str):
        lo = v.strip().lower()
        if lo in _TRUE:
            return True
        if lo in _FALSE:
            return False
    raise IoConfigError(f"{key} must be a boolean, got {v!r}")
