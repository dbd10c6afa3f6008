"""
Compile Orchestrator Module
Single Responsibility: Run the compiler passes for one job and relocate its artifact
"""

import shutil
from pathlib import Path
from typing import List

from src.compiler.latex_compiler import Compiler
from src.models.build import BuildJob, JobResult
from src.utils.logging_config import get_logger
from src.utils.workdir import working_directory

logger = get_logger(__name__)


class CompileOrchestrator:
    """
    Compiles a single job and converts every per-job problem into a failed result.
    Nothing raised while compiling or relocating escapes compile_job().
    """

    def __init__(
        self,
        compiler: Compiler,
        output_dir: Path,
        passes: int = 2,
        artifact_extension: str = ".pdf",
    ):
        """
        Initialize compile orchestrator.

        Args:
            compiler: Object exposing run(source_name, workdir) -> exit code
            output_dir: Root of the mirrored output tree
            passes: Number of compiler passes per job
            artifact_extension: Suffix of the artifact the compiler produces
        """
        if passes < 1:
            raise ValueError(f"passes must be at least 1, got {passes}")

        self.compiler = compiler
        self.output_dir = Path(output_dir)
        self.passes = passes
        self.artifact_extension = artifact_extension
        logger.debug(
            f"CompileOrchestrator initialized: output_dir={self.output_dir}, passes={passes}"
        )

    def compile_job(self, job: BuildJob) -> JobResult:
        """
        Runs all passes for a job, checks for its artifact and copies it out.

        Args:
            job: Job to compile

        Returns:
            JobResult with status "success" or "failed"
        """
        logger.info(f"Compiling: {job.file_name}")
        print(f"Compiling: {job.file_name}")

        exit_codes: List[int] = []
        try:
            with working_directory(job.directory):
                self._run_passes(job, exit_codes)

                artifact = job.directory / f"{job.base_name}{self.artifact_extension}"
                if not artifact.exists():
                    logger.warning(
                        f"No artifact produced for {job.source_path} "
                        f"(exit codes: {list(exit_codes)})"
                    )
                    return JobResult(
                        job=job, status="failed", exit_codes=tuple(exit_codes)
                    )

                destination = self._relocate(artifact, job)

        except Exception as e:
            logger.error(
                f"Compilation of {job.source_path} failed: {type(e).__name__}: {e}",
                exc_info=True,
            )
            return JobResult(
                job=job,
                status="failed",
                exit_codes=tuple(exit_codes),
                error=f"{type(e).__name__}: {e}",
            )

        logger.info(f"Artifact for {job.file_name} copied to {destination}")
        return JobResult(
            job=job,
            status="success",
            artifact_path=destination,
            exit_codes=tuple(exit_codes),
        )

    def destination_for(self, job: BuildJob) -> Path:
        """Mirrored output path for a job's artifact"""
        return (
            self.output_dir
            / job.relative_dir
            / f"{job.base_name}{self.artifact_extension}"
        )

    def _run_passes(self, job: BuildJob, exit_codes: List[int]):
        """
        Every pass runs regardless of the previous pass's exit code.
        Codes are appended as passes finish, so a pass that raises leaves
        the earlier codes in exit_codes.
        """
        for pass_number in range(1, self.passes + 1):
            print(f"  Pass {pass_number}/{self.passes}...")
            code = self.compiler.run(job.file_name, job.directory)
            logger.debug(
                f"{job.file_name} pass {pass_number}/{self.passes} exited with {code}"
            )
            exit_codes.append(code)

    def _relocate(self, artifact: Path, job: BuildJob) -> Path:
        destination = self.destination_for(job)

        if not destination.parent.exists():
            logger.debug(f"Creating output directory: {destination.parent}")
            destination.parent.mkdir(parents=True, exist_ok=True)

        shutil.copyfile(artifact, destination)
        return destination
