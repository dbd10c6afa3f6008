"""
Batch Orchestrator Module
Coordinates discovery, compilation, reporting and the persisted build log
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Union

from dotenv import load_dotenv
from pydantic import ValidationError

from src.compiler.latex_compiler import (
    Compiler,
    CompilerNotFoundError,
    LatexCompiler,
    MockLatexCompiler,
    resolve_compiler,
)
from src.config.settings import load_settings
from src.models.build import BuildJob, BuildSettings, JobResult, RunSummary
from src.orchestrator.compile_orchestrator import CompileOrchestrator
from src.orchestrator.result_formatter import ResultFormatter
from src.orchestrator.source_discovery import SourceDiscovery
from src.storage.build_log import BuildLogWriter
from src.utils.logging_config import get_logger

# Get logger for this module
logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURES = 1
EXIT_FATAL = 2


class BuildOrchestrator:
    """
    Builds every source document under a root directory.

    Workflow:
    1. Preflight: resolve the engine executable (fatal if missing)
    2. Discover source files (SourceDiscovery)
    3. For each job, in discovery order (CompileOrchestrator):
       a. Enter the job directory
       b. Run the compiler a fixed number of passes
       c. Copy the artifact into the mirrored output tree
    4. Summarize (ResultFormatter) and write the build log (BuildLogWriter)
    """

    def __init__(
        self,
        settings: Optional[BuildSettings] = None,
        compiler: Optional[Compiler] = None,
    ):
        """
        Initialize orchestrator.

        Args:
            settings: Build configuration (defaults to BuildSettings())
            compiler: Pre-built compiler; when omitted the engine named in
                settings is resolved on PATH at the start of run()
        """
        self.settings = settings or BuildSettings()
        self.compiler = compiler
        logger.info("Initializing BuildOrchestrator")
        logger.debug(f"Configuration: {self.settings.model_dump()}")

    def run(self, root: Union[str, Path, None] = None) -> RunSummary:
        """
        Main entry point: compiles all sources below root.

        Args:
            root: Directory to scan (defaults to the current directory)

        Returns:
            RunSummary for the run

        Raises:
            FileNotFoundError: If root doesn't exist
            CompilerNotFoundError: If the engine cannot be resolved
        """
        root_path = Path(root).resolve() if root is not None else Path.cwd()
        if not root_path.is_dir():
            logger.error(f"Root directory not found: {root_path}")
            raise FileNotFoundError(f"Root directory not found: {root_path}")

        self._print_banner(root_path)

        compiler, compiler_path = self._preflight()
        output_dir = self.settings.resolve_output_dir(root_path)

        sources = SourceDiscovery.discover_sources(
            root_path,
            extension=self.settings.source_extension,
            exclude_dirs=[output_dir],
        )
        jobs = SourceDiscovery.build_jobs(sources, root_path)
        print(f"Found {len(jobs)} {self.settings.source_extension} files\n")
        print(f"LaTeX compiler: {compiler_path}\n")
        print(f"Output directory: {output_dir}\n")

        compile_orchestrator = CompileOrchestrator(
            compiler,
            output_dir=output_dir,
            passes=self.settings.passes,
            artifact_extension=self.settings.artifact_extension,
        )
        results = self._compile_all(compile_orchestrator, jobs)

        summary = ResultFormatter.generate_summary(results)
        ResultFormatter.print_summary(summary, output_dir)

        self._write_log(summary, root_path, compiler_path)

        logger.info(
            f"Run complete: total={summary.total}, success={summary.success_count}, "
            f"failed={summary.failure_count}"
        )
        return summary

    def _write_log(self, summary: RunSummary, root: Path, compiler_path: str):
        """An unwritable log is reported but never ends the run"""
        log_path = root / self.settings.log_file
        try:
            BuildLogWriter(log_path).write(summary, root, compiler_path)
        except OSError as e:
            logger.error(
                f"Could not write build log {log_path}: {type(e).__name__}: {e}",
                exc_info=True,
            )
            print(f"WARNING: could not write log {log_path}: {e}", file=sys.stderr)
            return

        print(f"Log saved to: {log_path}")

    def _preflight(self):
        """Resolves the compiler before any job runs"""
        if self.compiler is not None:
            executable = getattr(self.compiler, "executable", type(self.compiler).__name__)
            return self.compiler, str(executable)

        compiler_path = resolve_compiler(self.settings.engine)
        compiler = LatexCompiler(compiler_path, shell_escape=self.settings.shell_escape)
        return compiler, compiler_path

    @staticmethod
    def _compile_all(
        compile_orchestrator: CompileOrchestrator, jobs: List[BuildJob]
    ) -> List[JobResult]:
        print(ResultFormatter.format_header("Starting Compilation"))
        print()

        results: List[JobResult] = []
        for job in jobs:
            result = compile_orchestrator.compile_job(job)
            results.append(result)
            ResultFormatter.print_job_result(result)
            print()

        return results

    @staticmethod
    def _print_banner(root: Path):
        print()
        print(ResultFormatter.format_header("LaTeX Beamer Presentation Compiler"))
        print(f"\nProject directory: {root}\n")


# ==========================================
# CLI ENTRY POINT
# ==========================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Compile every LaTeX presentation below a directory to PDF"
    )
    parser.add_argument(
        "--root",
        type=str,
        default=None,
        help="Directory to scan for sources (default: current directory)",
    )
    parser.add_argument(
        "--engine", type=str, default=None, help="LaTeX engine (default: pdflatex)"
    )
    parser.add_argument(
        "--passes", type=int, default=None, help="Compiler passes per file (default: 2)"
    )
    parser.add_argument(
        "--shell-escape",
        action="store_true",
        default=None,
        help="Pass -shell-escape to the engine",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output directory, relative to root unless absolute (default: pdf_output)",
    )
    parser.add_argument(
        "--log-dir",
        type=str,
        default=".deckbuild/logs",
        help="Directory for diagnostic logs (default: .deckbuild/logs)",
    )
    parser.add_argument(
        "--mock-compiler",
        action="store_true",
        help="Use mock compiler (no LaTeX installation required)",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Show debug logging on console"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    load_dotenv()

    from src.utils.logging_config import setup_logging

    setup_logging(
        log_dir=args.log_dir,
        console_level=logging.DEBUG if args.verbose else logging.WARNING,
    )
    logger.info(f"Arguments: {vars(args)}")

    try:
        settings = load_settings(
            {
                "engine": args.engine,
                "passes": args.passes,
                "shell_escape": args.shell_escape,
                "output_dir": args.output,
            }
        )
    except ValidationError as e:
        logger.critical(f"Invalid configuration: {e}")
        print(f"\nERROR: invalid configuration\n{e}", file=sys.stderr)
        return EXIT_FATAL

    compiler = MockLatexCompiler(settings.artifact_extension) if args.mock_compiler else None

    try:
        summary = BuildOrchestrator(settings, compiler=compiler).run(args.root)
    except (CompilerNotFoundError, FileNotFoundError) as e:
        logger.critical(f"Fatal error: {type(e).__name__}: {e}")
        print(f"\nERROR: {e}", file=sys.stderr)
        return EXIT_FATAL

    if summary.has_failures:
        logger.warning("Build completed with failures")
        return EXIT_FAILURES

    print("\nDone! All compilations complete.\n")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
