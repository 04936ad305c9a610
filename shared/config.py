"""
elfscope Configuration Management
==================================

Centralized configuration for the elfscope toolkit using Python
dataclasses and TOML-based persistence.

Configuration is kept apart from code: every tunable lives in a
``config.toml`` next to the project root, and every key has a default
so the file itself is optional.

References:
    - PEP 681 -- Data Class Transforms (2022).
    - TOML v1.0.0 Specification. https://toml.io/en/v1.0.0
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib


# ---------------------------------------------------------------------------
# Default configuration file path relative to the project root
# ---------------------------------------------------------------------------
_DEFAULT_CONFIG_PATH: Path = Path(__file__).resolve().parent.parent / "config.toml"


# ========================== Tool-Specific Configs ==========================


@dataclass(frozen=False, slots=True)
class InspectorConfig:
    """Configuration for the ELF inspector.

    Controls how names pulled out of string tables are decoded, which
    reserved entries show up in section listings, and whether results
    print as tables or JSON by default.
    """

    string_encoding: str = "ascii"
    show_null_section: bool = False
    output_format: str = "table"  # "table" or "json"


# =========================== Global Settings ===============================


@dataclass(frozen=False, slots=True)
class GlobalConfig:
    """Global settings: logging verbosity, log file and debug mode."""

    log_level: str = "INFO"
    log_file: str = ""
    log_json: bool = False
    debug: bool = False


# =========================== Master Config =================================


@dataclass(frozen=False, slots=True)
class ScopeConfig:
    """Master configuration aggregating global and inspector settings.

    Usage:
        >>> config = ScopeConfig.load()                  # from default path
        >>> config = ScopeConfig.load("custom.toml")     # from custom path
        >>> print(config.inspector.string_encoding)
        'ascii'
    """

    global_settings: GlobalConfig = field(default_factory=GlobalConfig)
    inspector: InspectorConfig = field(default_factory=InspectorConfig)

    # ------------------------------------------------------------------ #
    #  TOML Loading
    # ------------------------------------------------------------------ #

    @classmethod
    def load(cls, path: str | Path | None = None) -> ScopeConfig:
        """Load configuration from a TOML file.

        If *path* is ``None`` the loader looks for ``config.toml`` in the
        project root.  Missing keys fall back to dataclass defaults.

        Args:
            path: Filesystem path to a TOML configuration file.
                  Defaults to ``<project_root>/config.toml``.

        Returns:
            A fully-populated :class:`ScopeConfig` instance.

        Raises:
            FileNotFoundError: If the specified path does not exist
                *and* was explicitly provided by the caller.
        """
        config_path = Path(path) if path is not None else _DEFAULT_CONFIG_PATH

        if not config_path.exists():
            if path is not None:
                raise FileNotFoundError(
                    f"Configuration file not found: {config_path}"
                )
            return cls()

        with open(config_path, "rb") as fh:
            raw: dict[str, Any] = tomllib.load(fh)

        return cls(
            global_settings=cls._build_section(GlobalConfig, raw.get("global", {})),
            inspector=cls._build_section(InspectorConfig, raw.get("inspector", {})),
        )

    @staticmethod
    def _build_section(cls: type, data: dict[str, Any]) -> Any:
        """Instantiate a dataclass *cls* using only the keys it declares.

        Unknown keys in the TOML source are ignored so that newer config
        files keep loading in older versions.
        """
        valid_keys = {f.name for f in cls.__dataclass_fields__.values()}  # type: ignore[attr-defined]
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        return cls(**filtered)

