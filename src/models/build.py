"""
Build Models
Pydantic v2 records for jobs, per-job outcomes and run summaries
"""

import os
from pathlib import Path
from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

JobStatus = Literal["success", "failed"]


# ==========================================
# CONFIGURATION
# ==========================================


class BuildSettings(BaseModel):
    """Resolved configuration for a single build run"""

    model_config = ConfigDict(extra="forbid", frozen=True)

    engine: str = "pdflatex"
    passes: int = Field(default=2, ge=1)
    shell_escape: bool = False
    output_dir: str = "pdf_output"
    log_file: str = "compilation_log.txt"
    source_extension: str = ".tex"
    artifact_extension: str = ".pdf"

    @field_validator("source_extension", "artifact_extension")
    @classmethod
    def _extension_has_dot(cls, value: str) -> str:
        if not value.startswith("."):
            raise ValueError(f"Extension must start with '.': {value!r}")
        return value

    @field_validator("engine")
    @classmethod
    def _engine_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Engine name must not be empty")
        return value.strip()

    def resolve_output_dir(self, root: Path) -> Path:
        """Output directory as an absolute path (relative values hang off root)"""
        output = Path(self.output_dir)
        if not output.is_absolute():
            output = root / output
        return output.resolve()


# ==========================================
# JOBS & RESULTS
# ==========================================


class BuildJob(BaseModel):
    """One discovered source document"""

    model_config = ConfigDict(extra="forbid", frozen=True)

    source_path: Path
    directory: Path
    base_name: str
    relative_dir: Path = Path(".")

    @classmethod
    def from_path(cls, source_path: Path, root: Path) -> "BuildJob":
        """
        Builds a job from an absolute source path.

        Args:
            source_path: Absolute path to the source document
            root: Discovery root, used to compute the mirrored directory

        Returns:
            BuildJob record
        """
        # Symlinked sources keep their location inside the tree, not their target
        source_path = Path(os.path.abspath(source_path))
        root = Path(os.path.abspath(root))
        directory = source_path.parent

        try:
            relative_dir = directory.relative_to(root)
        except ValueError:
            relative_dir = directory.relative_to(root.resolve())

        return cls(
            source_path=source_path,
            directory=directory,
            base_name=source_path.stem,
            relative_dir=relative_dir,
        )

    @property
    def file_name(self) -> str:
        return self.source_path.name


class JobResult(BaseModel):
    """Outcome of compiling one job; never mutated after creation"""

    model_config = ConfigDict(extra="forbid", frozen=True)

    job: BuildJob
    status: JobStatus
    artifact_path: Optional[Path] = None
    exit_codes: Tuple[int, ...] = ()
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status == "success"


class RunSummary(BaseModel):
    """Aggregate over all job results of one run"""

    model_config = ConfigDict(extra="forbid", frozen=True)

    total: int
    success_count: int
    failure_count: int
    failed_jobs: Tuple[BuildJob, ...] = ()
    results: Tuple[JobResult, ...] = ()

    @classmethod
    def from_results(cls, results: List[JobResult]) -> "RunSummary":
        """
        Reduces an ordered result sequence to a summary.
        Discovery order is preserved in failed_jobs.
        """
        success_count = sum(1 for r in results if r.status == "success")
        failed = tuple(r.job for r in results if r.status == "failed")

        return cls(
            total=len(results),
            success_count=success_count,
            failure_count=len(failed),
            failed_jobs=failed,
            results=tuple(results),
        )

    @property
    def has_failures(self) -> bool:
        return self.failure_count > 0
