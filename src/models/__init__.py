"""
Batch Presentation Builder - Data Models
"""

from .build import BuildJob, BuildSettings, JobResult, JobStatus, RunSummary

__all__ = [
    "BuildJob",
    "BuildSettings",
    "JobResult",
    "JobStatus",
    "RunSummary",
]
