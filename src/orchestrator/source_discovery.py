"""
Source Discovery Module
Single Responsibility: Find source documents and turn them into build jobs
"""

from pathlib import Path
from typing import Iterable, List, Optional

from src.models.build import BuildJob
from src.utils.logging_config import get_logger

logger = get_logger(__name__)


class SourceDiscovery:
    """
    Discovers source documents under a root directory.
    Pure filesystem reader - no compilation logic.
    """

    @staticmethod
    def discover_sources(
        root: Path,
        extension: str = ".tex",
        exclude_dirs: Optional[Iterable[Path]] = None,
    ) -> List[Path]:
        """
        Recursively discovers source files below root.

        Args:
            root: Directory to scan
            extension: Source suffix to match (e.g. ".tex")
            exclude_dirs: Directories whose contents are skipped (e.g. the output tree)

        Returns:
            Lexicographically sorted list of absolute file paths

        Raises:
            FileNotFoundError: If root doesn't exist
        """
        base_path = Path(root).resolve()

        if not base_path.is_dir():
            logger.error(f"Root directory not found: {root}")
            raise FileNotFoundError(f"Root directory not found: {root}")

        excluded = [Path(d).resolve() for d in (exclude_dirs or [])]

        sources = []
        for candidate in base_path.rglob(f"*{extension}"):
            if not candidate.is_file():
                continue

            relative = candidate.relative_to(base_path)
            # Hidden files and anything inside a hidden directory
            if any(part.startswith(".") for part in relative.parts):
                logger.debug(f"Skipping hidden path: {relative}")
                continue

            if any(SourceDiscovery._is_within(candidate, d) for d in excluded):
                logger.debug(f"Skipping excluded path: {relative}")
                continue

            sources.append(candidate)

        sources = sorted(sources, key=lambda p: str(p))
        logger.info(f"Discovered {len(sources)} {extension} files in {base_path}")

        return sources

    @staticmethod
    def build_jobs(sources: List[Path], root: Path) -> List[BuildJob]:
        """Wraps discovered paths into immutable jobs, keeping their order"""
        return [BuildJob.from_path(source, Path(root)) for source in sources]

    @staticmethod
    def _is_within(path: Path, directory: Path) -> bool:
        try:
            path.relative_to(directory)
        except ValueError:
            return False
        return True
