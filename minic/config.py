"""
Analysis Configuration
======================
Resource limits and trace switch for one analysis session. Loaded from a
JSON file, from keyword overrides, or both.

Example config file:
    {
        "max_symbols": 100,
        "max_depth": 100,
        "max_lexeme_length": 99,
        "trace": false
    }
"""
from __future__ import annotations

import json
from dataclasses import dataclass, asdict, fields
from typing import Any


@dataclass
class AnalysisConfig:
    """Limits for one analysis. None means unbounded."""

    max_symbols: int | None = None         # CapacityError past this many live symbols
    max_depth: int | None = 100            # ParseError past this nesting depth
    max_lexeme_length: int | None = None   # LexicalError for longer words/numbers
    trace: bool = True                     # emit token/scope/symbol trace events

    def __post_init__(self):
        for name in ("max_symbols", "max_depth", "max_lexeme_length"):
            value = getattr(self, name)
            if value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer or null, got {value!r}")
            if value < 1:
                raise ValueError(f"{name} must be positive, got {value}")
        if not isinstance(self.trace, bool):
            raise ValueError(f"trace must be a boolean, got {self.trace!r}")

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AnalysisConfig:
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown config key(s): {', '.join(sorted(unknown))}")
        return cls(**data)

    def merged(self, **overrides: Any) -> AnalysisConfig:
        """Copy with every override that is not None applied."""
        data = self.to_dict()
        data.update({k: v for k, v in overrides.items() if v is not None})
        return AnalysisConfig.from_dict(data)


def load_config(path: str) -> AnalysisConfig:
    """Read an AnalysisConfig from a JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a JSON object")
    return AnalysisConfig.from_dict(data)
