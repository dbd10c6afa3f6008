"""
Shared fixtures: fake compilers and source trees
No LaTeX installation is needed to run the suite
"""

import logging
from pathlib import Path
from typing import List

import pytest


class ArtifactCompiler:
    """Writes <stem>.pdf on the given pass and records every call"""

    executable = "/usr/bin/fake-pdflatex"

    def __init__(self, exit_code: int = 0, write_on_pass: int = 1):
        self.exit_code = exit_code
        self.write_on_pass = write_on_pass
        self.calls: List[tuple] = []

    def run(self, source_name: str, workdir: Path) -> int:
        self.calls.append((source_name, Path.cwd()))
        passes_for_file = sum(1 for name, _ in self.calls if name == source_name)
        if passes_for_file >= self.write_on_pass:
            (Path(workdir) / (Path(source_name).stem + ".pdf")).write_bytes(b"%PDF-1.4\n")
        return self.exit_code


class NeverProducesCompiler:
    """Always exits non-zero and never writes an artifact"""

    executable = "/usr/bin/broken-pdflatex"

    def __init__(self):
        self.calls: List[str] = []

    def run(self, source_name: str, workdir: Path) -> int:
        self.calls.append(source_name)
        return 1


class RaisingCompiler:
    """Simulates an engine that cannot be started"""

    executable = "/usr/bin/missing-pdflatex"

    def __init__(self, fail_names=None):
        self.fail_names = set(fail_names or [])
        self.calls: List[str] = []

    def run(self, source_name: str, workdir: Path) -> int:
        self.calls.append(source_name)
        if not self.fail_names or source_name in self.fail_names:
            raise FileNotFoundError("[Errno 2] No such file or directory: 'pdflatex'")
        (Path(workdir) / (Path(source_name).stem + ".pdf")).write_bytes(b"%PDF-1.4\n")
        return 0


@pytest.fixture
def source_tree(tmp_path):
    """
    Creates a small project:
        a.tex, b.tex, .skip/c.tex, lectures/week1/deck.tex, notes.txt
    """
    root = tmp_path / "project"
    (root / ".skip").mkdir(parents=True)
    (root / "lectures" / "week1").mkdir(parents=True)

    for rel in ["a.tex", "b.tex", ".skip/c.tex", "lectures/week1/deck.tex"]:
        (root / rel).write_text("\\documentclass{beamer}\n", encoding="utf-8")
    (root / "notes.txt").write_text("not a source\n", encoding="utf-8")

    return root


@pytest.fixture
def restore_root_logging():
    """setup_logging() replaces root handlers; put the originals back afterwards"""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield
    for handler in root_logger.handlers:
        if handler not in handlers:
            handler.close()
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


@pytest.fixture
def fakes():
    """Fake compiler classes, so tests can pick constructor arguments"""

    class Fakes:
        Artifact = ArtifactCompiler
        NeverProduces = NeverProducesCompiler
        Raising = RaisingCompiler

    return Fakes
