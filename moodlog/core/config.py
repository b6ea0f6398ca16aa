"""
moodlog.core.config — Configuration for the mood journal.

Supports loading from YAML, environment variables, and programmatic
construction.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

#: Environment variable consulted when no data directory is given.
DATA_DIR_ENV = "MOODLOG_DATA_DIR"

BUCKET_SCHEMES = frozenset({"history", "legacy"})
PERIODS = frozenset({"day", "week", "month", "year"})


def default_data_dir() -> Path:
    return Path(os.environ.get(DATA_DIR_ENV, "./moodlog_data"))


@dataclass
class Config:
    """
    Central configuration object.

    Construct directly, via ``Config.from_yaml(path)``, or via
    ``Config.from_data_dir(path)`` for quick bootstrap.
    """

    # -- storage ------------------------------------------------------------
    data_dir: Path = field(default_factory=default_data_dir)
    in_memory: bool = False  # discard everything on close

    # -- filtering ----------------------------------------------------------
    # "history": bad 1-4, neutral 5, good 6-10
    # "legacy":  bad 1-3, neutral 4-7, good 8-10
    bucket_scheme: str = "history"

    # -- analytics ----------------------------------------------------------
    heatmap_window_days: int = 30
    default_period: str = "week"

    # -- logging ------------------------------------------------------------
    structured_logging: bool = False  # emit JSON log lines when True
    log_level: str = "INFO"

    # -----------------------------------------------------------------------
    # Derived paths (all relative to data_dir)
    # -----------------------------------------------------------------------

    @property
    def db_path(self) -> Path:
        return self.data_dir / "moodlog.db"

    @property
    def export_dir(self) -> Path:
        return self.data_dir / "exports"

    @property
    def config_path(self) -> Path:
        return self.data_dir / "moodlog.yaml"

    @property
    def database(self) -> str:
        """Connection target for the store: a file path or ``:memory:``."""
        if self.in_memory:
            return ":memory:"
        return str(self.db_path)

    # -----------------------------------------------------------------------
    # Construction helpers
    # -----------------------------------------------------------------------

    def __post_init__(self) -> None:
        # normalise data_dir to an absolute Path
        self.data_dir = Path(self.data_dir).resolve()
        if self.bucket_scheme not in BUCKET_SCHEMES:
            raise ValueError(
                f"Unknown bucket_scheme {self.bucket_scheme!r}; "
                f"expected one of {sorted(BUCKET_SCHEMES)}"
            )
        if self.default_period not in PERIODS:
            raise ValueError(
                f"Unknown default_period {self.default_period!r}; "
                f"expected one of {sorted(PERIODS)}"
            )
        if self.heatmap_window_days <= 0:
            raise ValueError("heatmap_window_days must be positive")

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Config":
        """Load configuration from a YAML file.

        Any key in the YAML that matches a Config field is applied.
        Unknown keys are silently ignored so the file can carry
        application-level settings alongside moodlog config.
        """
        import yaml

        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, "r", encoding="utf-8") as fh:
            raw: Dict[str, Any] = yaml.safe_load(fh) or {}

        # pull the moodlog section if nested, else use top-level
        data = raw.get("moodlog", raw)

        if "data_dir" in data:
            data["data_dir"] = Path(data["data_dir"])

        known = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in data.items() if k in known}

        return cls(**filtered)

    @classmethod
    def from_data_dir(cls, data_dir: str | Path, **overrides: Any) -> "Config":
        """Quick constructor — just point at a data directory."""
        return cls(data_dir=Path(data_dir), **overrides)

    # -----------------------------------------------------------------------
    # Directory bootstrapping
    # -----------------------------------------------------------------------

    def ensure_directories(self) -> None:
        """Create all required directories if they don't exist."""
        for d in (self.data_dir, self.export_dir):
            d.mkdir(parents=True, exist_ok=True)

    # -----------------------------------------------------------------------
    # Serialisation
    # -----------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Serialise to a plain dict (YAML/JSON-safe)."""
        return {
            "data_dir": str(self.data_dir),
            "in_memory": self.in_memory,
            "bucket_scheme": self.bucket_scheme,
            "heatmap_window_days": self.heatmap_window_days,
            "default_period": self.default_period,
            "structured_logging": self.structured_logging,
            "log_level": self.log_level,
        }
