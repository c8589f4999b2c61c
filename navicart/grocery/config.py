"""TOML configuration loader for the grocery engine."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError:
        tomllib = None  # type: ignore[assignment]


@dataclass
class GeminiInferenceConfig:
    api_key: str = ""
    model: str = "gemini-2.0-flash"


@dataclass
class ClaudeInferenceConfig:
    api_key: str = ""
    model: str = "claude-sonnet-4-5-20250929"


@dataclass
class InferenceConfig:
    backend: str = "gemini"
    max_attempts: int = 3
    base_delay: float = 1.0
    gemini: GeminiInferenceConfig = field(default_factory=GeminiInferenceConfig)
    claude: ClaudeInferenceConfig = field(default_factory=ClaudeInferenceConfig)


@dataclass
class DatabaseConfig:
    path: str = "~/.config/navicart/grocery.db"


@dataclass
class ConsolidationConfig:
    auto: bool = True
    debounce_seconds: float = 1.0
    schedule: str = "*/30 * * * *"


@dataclass
class TaxonomyConfig:
    path: str = ""


@dataclass
class GroceryConfig:
    inference: InferenceConfig = field(default_factory=InferenceConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    consolidation: ConsolidationConfig = field(default_factory=ConsolidationConfig)
    taxonomy: TaxonomyConfig = field(default_factory=TaxonomyConfig)


def load_config(path: str | Path | None = None) -> GroceryConfig:
    """Load configuration from a TOML file.

    Falls back to defaults if no path is given or the file doesn't exist.
    API keys not set in the file are read from environment variables.

    Raises:
        ValueError: If a numeric setting is out of range.
    """
    raw: dict = {}

    if path is not None:
        p = Path(path)
        if p.exists():
            if tomllib is None:
                raise ImportError(
                    "tomli is required on Python < 3.11: pip install tomli"
                )
            with open(p, "rb") as f:
                raw = tomllib.load(f)

    inf = raw.get("inference", {})
    dbs = raw.get("database", {})
    con = raw.get("consolidation", {})
    tax = raw.get("taxonomy", {})

    gemini_cfg = inf.get("gemini", {})
    claude_cfg = inf.get("claude", {})

    # Resolve API keys: config file → environment variable
    gemini_api_key = gemini_cfg.get("api_key", "") or os.environ.get(
        "GEMINI_API_KEY", ""
    )
    claude_api_key = claude_cfg.get("api_key", "") or os.environ.get(
        "ANTHROPIC_API_KEY", ""
    )

    max_attempts = int(inf.get("max_attempts", 3))
    if max_attempts < 1:
        raise ValueError(f"inference.max_attempts must be at least 1: {max_attempts}")
    base_delay = float(inf.get("base_delay", 1.0))
    debounce = float(con.get("debounce_seconds", 1.0))
    if base_delay < 0 or debounce < 0:
        raise ValueError("Delays must not be negative")

    return GroceryConfig(
        inference=InferenceConfig(
            backend=inf.get("backend", "gemini"),
            max_attempts=max_attempts,
            base_delay=base_delay,
            gemini=GeminiInferenceConfig(
                api_key=gemini_api_key,
                model=gemini_cfg.get("model", "gemini-2.0-flash"),
            ),
            claude=ClaudeInferenceConfig(
                api_key=claude_api_key,
                model=claude_cfg.get("model", "claude-sonnet-4-5-20250929"),
            ),
        ),
        database=DatabaseConfig(
            path=dbs.get("path", "~/.config/navicart/grocery.db"),
        ),
        consolidation=ConsolidationConfig(
            auto=con.get("auto", True),
            debounce_seconds=debounce,
            schedule=con.get("schedule", "*/30 * * * *"),
        ),
        taxonomy=TaxonomyConfig(
            path=tax.get("path", ""),
        ),
    )
