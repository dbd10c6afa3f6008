"""
Build Log Module
Persists the per-run compilation log next to the sources.
The file is rewritten on every run, never appended to.
"""

from datetime import datetime
from pathlib import Path
from typing import List, Optional

from src.models.build import RunSummary
from src.utils.logging_config import get_logger

# Get logger for this module
logger = get_logger(__name__)


class BuildLogWriter:
    """Writes compilation_log.txt for a finished run"""

    def __init__(self, log_path: Path):
        self.log_path = Path(log_path)
        logger.debug(f"BuildLogWriter initialized with log_path={self.log_path}")

    def render(
        self,
        summary: RunSummary,
        root: Path,
        compiler_path: str,
        timestamp: Optional[datetime] = None,
    ) -> str:
        """
        Renders the log body.

        Args:
            summary: Finished run summary (results in discovery order)
            root: Root directory that was scanned
            compiler_path: Resolved path of the engine
            timestamp: Log timestamp, defaults to now

        Returns:
            Log text
        """
        timestamp = timestamp or datetime.now()

        lines: List[str] = [
            f"Compilation Log - {timestamp.strftime('%Y-%m-%d %H:%M:%S')}",
            f"Project: {root}",
            f"LaTeX: {compiler_path}",
            "",
            "Results:",
        ]
        for result in summary.results:
            lines.append(f"  {result.job.source_path}: {result.status.upper()}")
        lines.append("")
        lines.append(
            f"Total: {summary.total}, Success: {summary.success_count}, "
            f"Failed: {summary.failure_count}"
        )

        return "\n".join(lines) + "\n"

    def write(
        self,
        summary: RunSummary,
        root: Path,
        compiler_path: str,
        timestamp: Optional[datetime] = None,
    ) -> Path:
        """Overwrites the log file and returns its path"""
        content = self.render(summary, root, compiler_path, timestamp)

        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.log_path, "w", encoding="utf-8") as f:
            f.write(content)

        logger.info(f"Log saved to: {self.log_path}")
        return self.log_path
