"""
LaTeX Compiler Module
Wraps the external typesetting engine behind a single run() capability
"""

import shutil
import subprocess
from pathlib import Path
from typing import List, Protocol

from src.utils.logging_config import get_logger

# Get logger for this module
logger = get_logger(__name__)

INSTALL_HINTS = (
    "Please install a LaTeX distribution first:\n"
    "  - Windows: Download MiKTeX from https://miktex.org\n"
    "  - Mac: Download MacTeX from https://www.tug.org/mactex\n"
    "  - Linux: Run: sudo apt install texlive-full"
)


class Compiler(Protocol):
    """Anything that can run one engine pass over a source file in a directory"""

    executable: str

    def run(self, source_name: str, workdir: Path) -> int: ...


class CompilerNotFoundError(RuntimeError):
    """Raised when the engine executable cannot be located before a run"""

    def __init__(self, engine: str):
        self.engine = engine
        super().__init__(f"{engine} not found!\n{INSTALL_HINTS}")


def resolve_compiler(engine: str = "pdflatex") -> str:
    """
    Resolves the engine's executable location on PATH.

    Args:
        engine: Executable name (or path) of the engine

    Returns:
        Absolute path to the executable

    Raises:
        CompilerNotFoundError: If the engine cannot be resolved
    """
    resolved = shutil.which(engine) if engine else None
    if not resolved:
        logger.error(f"LaTeX engine not found on PATH: {engine!r}")
        raise CompilerNotFoundError(engine)

    logger.info(f"LaTeX compiler: {resolved}")
    return resolved


class LatexCompiler:
    """
    Runs one pass of the external engine against a source file.
    Exit codes are reported, never interpreted.
    """

    def __init__(self, executable: str, shell_escape: bool = False):
        """
        Initialize compiler.

        Args:
            executable: Resolved path of the engine (see resolve_compiler)
            shell_escape: If True, pass -shell-escape to the engine
        """
        self.executable = executable
        self.shell_escape = shell_escape
        logger.debug(
            f"LatexCompiler initialized: executable={executable}, shell_escape={shell_escape}"
        )

    def build_command(self, source_name: str) -> List[str]:
        """Command line for one pass: <engine> -interaction=nonstopmode [-shell-escape] <file>"""
        cmd = [self.executable, "-interaction=nonstopmode"]
        if self.shell_escape:
            cmd.append("-shell-escape")
        cmd.append(source_name)
        return cmd

    def run(self, source_name: str, workdir: Path) -> int:
        """
        Runs a single blocking pass of the engine.

        Args:
            source_name: Source file name, resolved relative to workdir
            workdir: Directory the engine runs in

        Returns:
            Process exit code

        Raises:
            OSError: If the process cannot be started
        """
        cmd = self.build_command(source_name)
        logger.debug(f"Running: {' '.join(cmd)} (cwd={workdir})")

        result = subprocess.run(
            cmd,
            cwd=str(workdir),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            encoding="latin-1",
            errors="replace",
        )

        if result.returncode != 0:
            tail = "\n".join((result.stdout or "").splitlines()[-5:])
            logger.debug(
                f"{source_name} exited with {result.returncode}; last output:\n{tail}"
            )

        return result.returncode


class MockLatexCompiler:
    """
    Mock compiler for dry runs and testing.
    Writes a placeholder artifact instead of calling an engine.
    """

    executable = "mock-latex"

    def __init__(self, artifact_extension: str = ".pdf"):
        self.artifact_extension = artifact_extension

    def run(self, source_name: str, workdir: Path) -> int:
        artifact = Path(workdir) / (Path(source_name).stem + self.artifact_extension)
        artifact.write_bytes(b"%PDF-1.4\n% mock artifact\n")
        return 0
