"""
espwatch Configuration Management
==================================

Centralized configuration for espwatch using Python dataclasses and
TOML-based persistence.

Example ``espwatch.toml``::

    [global]
    log_level = "DEBUG"
    log_file = "logs/espwatch.log"
    log_json = true

    [scan]
    vendor_name = "Espressif"
    show_frames = true
    summary_width = 80

References:
    - Wiggins, A. (2011). The Twelve-Factor App. https://12factor.net/
    - TOML v1.0.0 Specification. https://toml.io/en/v1.0.0
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib


# ---------------------------------------------------------------------------
# Default configuration file path relative to the project root
# ---------------------------------------------------------------------------
_DEFAULT_CONFIG_PATH: Path = Path(__file__).resolve().parent.parent / "espwatch.toml"


@dataclass(frozen=False, slots=True)
class ScanConfig:
    """Settings for the capture scan and its device report."""

    vendor_name: str = "Espressif"
    show_frames: bool = True
    summary_width: int = 80


@dataclass(frozen=False, slots=True)
class GlobalConfig:
    """Logging and presentation settings shared by every command."""

    log_level: str = "INFO"
    log_file: Optional[str] = None
    log_json: bool = False
    color: bool = True


@dataclass(frozen=False, slots=True)
class WatchConfig:
    """Master configuration aggregating all sections.

    Usage:
        >>> config = WatchConfig.load()                  # from default path
        >>> config = WatchConfig.load("custom.toml")     # from custom path
        >>> print(config.scan.vendor_name)
        'Espressif'
    """

    global_settings: GlobalConfig = field(default_factory=GlobalConfig)
    scan: ScanConfig = field(default_factory=ScanConfig)

    @classmethod
    def load(cls, path: str | Path | None = None) -> WatchConfig:
        """Load configuration from a TOML file.

        If *path* is ``None`` the loader looks for ``espwatch.toml`` in the
        project root. Missing keys fall back to dataclass defaults.

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
            scan=cls._build_section(ScanConfig, raw.get("scan", {})),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialise the entire configuration tree to a plain dictionary."""
        return asdict(self)

    @staticmethod
    def _build_section(cls: type, data: dict[str, Any]) -> Any:
        """Instantiate a dataclass *cls* using only the keys it declares.

        Unknown keys in the TOML source are ignored.
        """
        valid_keys = {f.name for f in cls.__dataclass_fields__.values()}  # type: ignore[attr-defined]
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        return cls(**filtered)
