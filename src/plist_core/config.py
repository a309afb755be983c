"""Document configuration."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class DocumentConfig:
    """Settings shared by row derivation and saving."""

    summary_limit: int = 50     # visible characters before the ellipsis
    ellipsis: str = "..."
    sort_keys: bool = True      # key order of the written XML

    def __post_init__(self) -> None:
        if self.summary_limit < 1:
            raise ValueError(f"summary_limit must be positive, got {self.summary_limit}")


DEFAULT_CONFIG = DocumentConfig()
