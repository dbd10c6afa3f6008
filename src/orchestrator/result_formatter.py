"""
Result Formatter Module
Single Responsibility: Format job results and summary reports
"""

from pathlib import Path
from typing import List, Optional

from src.models.build import JobResult, RunSummary
from src.utils.logging_config import get_logger

logger = get_logger(__name__)

BANNER = "=" * 40


class ResultFormatter:
    """
    Formats job results and summary reports.
    Pure formatting - no business logic.
    """

    @staticmethod
    def generate_summary(results: List[JobResult]) -> RunSummary:
        """
        Aggregates job results into summary statistics.

        Args:
            results: Job results in discovery order

        Returns:
            RunSummary
        """
        summary = RunSummary.from_results(results)
        logger.debug(
            f"Summary: total={summary.total}, success={summary.success_count}, "
            f"failed={summary.failure_count}"
        )
        return summary

    @staticmethod
    def format_job_result(result: JobResult) -> str:
        if result.succeeded:
            artifact_name = result.artifact_path.name if result.artifact_path else ""
            return f"  SUCCESS: {artifact_name} -> {result.artifact_path}"

        line = f"  FAILED: {result.job.file_name}"
        if result.error:
            line += f" ({result.error})"
        return line

    @staticmethod
    def print_job_result(result: JobResult):
        """Prints formatted job result to console"""
        print(ResultFormatter.format_job_result(result))

    @staticmethod
    def format_header(title: str) -> str:
        return f"{BANNER}\n  {title}\n{BANNER}"

    @staticmethod
    def format_report(summary: RunSummary, output_dir: Optional[Path] = None) -> str:
        """
        Builds the human-readable end-of-run report.

        Args:
            summary: Run summary
            output_dir: Output tree root, shown when given

        Returns:
            Multi-line report text
        """
        lines = [
            ResultFormatter.format_header("Compilation Summary"),
            f"Total files:  {summary.total}",
            f"Successful:   {summary.success_count}",
            f"Failed:       {summary.failure_count}",
        ]

        if summary.has_failures:
            lines.append("")
            lines.append("Failed files:")
            lines.extend(f"  - {job.source_path}" for job in summary.failed_jobs)

        if output_dir is not None:
            lines.append("")
            lines.append(f"PDFs saved to: {output_dir}")

        lines.append(BANNER)
        return "\n".join(lines)

    @staticmethod
    def print_summary(summary: RunSummary, output_dir: Optional[Path] = None):
        """Prints formatted summary report to console"""
        print()
        print(ResultFormatter.format_report(summary, output_dir))
        print()
