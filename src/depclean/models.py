"""Data models for depclean."""

from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class WalkDecision(str, Enum):
    """Outcome of visiting a single directory during the walk."""

    PRUNE_SILENT = "prune_silent"  # Skip set or hidden directory
    PRUNE_DEPTH = "prune_depth"  # Deeper than max depth
    MATCH_ACCEPTED = "match_accepted"  # Classified and reported
    MATCH_REJECTED = "match_rejected"  # Classified but too recent or too small
    DESCEND = "descend"  # Nothing applies, walk into children

    @property
    def is_terminal(self) -> bool:
        """Whether the walker stops descending after this decision."""
        return self is not WalkDecision.DESCEND


class EcosystemRule(BaseModel):
    """Classification rule for one ecosystem's dependency folders."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Ecosystem label shown in reports")
    candidate_names: tuple[str, ...] = Field(
        ...,
        description="Folder names or relative paths (e.g. 'vendor/bundle'), in priority order",
    )
    indicator: str = Field(
        "",
        description="File expected in the project root; empty or a glob means no check",
    )
    description: str = Field("", description="What these folders contain")

    @property
    def has_checkable_indicator(self) -> bool:
        """True when the indicator is a concrete filename we can stat."""
        return bool(self.indicator) and "*" not in self.indicator

    @staticmethod
    def is_compound(candidate: str) -> bool:
        return "/" in candidate


class Classification(BaseModel):
    """An accepted rule together with the candidate name that matched."""

    model_config = ConfigDict(frozen=True)

    rule: EcosystemRule
    matched_name: str


class ScanConfig(BaseModel):
    """Inputs for a single scan."""

    model_config = ConfigDict(frozen=True)

    root: Path = Field(..., description="Absolute directory to walk")
    max_depth: int = Field(5, ge=0, description="Maximum depth relative to root")
    cutoff: datetime = Field(
        ..., description="Matches modified after this point are too recent to report"
    )
    min_size_bytes: int = Field(0, description="Matches smaller than this are not reported")


class FoundDependency(BaseModel):
    """A dependency folder that passed every filter."""

    project_path: str = Field(..., description="Parent of the dependency folder")
    dep_path: str = Field(..., description="Absolute path of the dependency folder")
    dep_type: str = Field(..., description="Ecosystem name")
    size_bytes: int = Field(..., description="Total size of regular files beneath dep_path")
    last_modified: datetime = Field(..., description="Newest mtime anywhere under dep_path")
    days_since: int = Field(..., description="Whole days since last_modified")

    @property
    def size_human(self) -> str:
        """Human-readable size string (binary units)."""
        if self.size_bytes >= 1024**3:
            return f"{self.size_bytes / 1024**3:.2f} GB"
        elif self.size_bytes >= 1024**2:
            return f"{self.size_bytes / 1024**2:.2f} MB"
        elif self.size_bytes >= 1024:
            return f"{self.size_bytes / 1024:.2f} KB"
        else:
            return f"{self.size_bytes} B"


class DeletionResult(BaseModel):
    """Result of deleting one dependency folder."""

    dep_path: str = Field(..., description="Folder that was deleted")
    bytes_freed: int = Field(0, description="Bytes freed by the deletion")
    success: bool = Field(True, description="Whether deletion succeeded")
    error: Optional[str] = Field(None, description="Error message if failed")
    dry_run: bool = Field(False, description="Whether this was a dry run")


class CleanupSession(BaseModel):
    """All deletions performed after one confirmation."""

    timestamp: datetime = Field(default_factory=datetime.now)
    results: list[DeletionResult] = Field(default_factory=list)

    @property
    def total_bytes_freed(self) -> int:
        """Total bytes freed in this session."""
        return sum(r.bytes_freed for r in self.results if r.success)

    @property
    def success_count(self) -> int:
        """Number of successful deletions."""
        return sum(1 for r in self.results if r.success)

    @property
    def failure_count(self) -> int:
        """Number of failed deletions."""
        return sum(1 for r in self.results if not r.success)

    @property
    def has_failures(self) -> bool:
        return self.failure_count > 0
