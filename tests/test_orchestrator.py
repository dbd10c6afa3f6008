"""
End-to-end tests for BuildOrchestrator and the CLI entry point
Fake compilers stand in for pdflatex
"""

import os

import pytest

from src.compiler import latex_compiler
from src.compiler.latex_compiler import CompilerNotFoundError
from src.models.build import BuildSettings
from src.orchestrator import BuildOrchestrator
from src.orchestrator import batch_orchestrator
from src.orchestrator.batch_orchestrator import EXIT_FATAL, EXIT_OK, main


def test_full_run_builds_mirrored_tree(fakes, source_tree):
    summary = BuildOrchestrator(compiler=fakes.Artifact()).run(source_tree)

    output_dir = source_tree.resolve() / "pdf_output"
    assert summary.total == 3
    assert summary.success_count == 3
    assert (output_dir / "a.pdf").exists()
    assert (output_dir / "b.pdf").exists()
    assert (output_dir / "lectures" / "week1" / "deck.pdf").exists()
    assert not (output_dir / ".skip").exists()

    log_text = (source_tree / "compilation_log.txt").read_text(encoding="utf-8")
    assert "Total: 3, Success: 3, Failed: 0" in log_text
    assert "LaTeX: /usr/bin/fake-pdflatex" in log_text


def test_failures_do_not_abort_the_run(fakes, source_tree):
    compiler = fakes.NeverProduces()

    summary = BuildOrchestrator(compiler=compiler).run(source_tree)

    assert summary.total == 3
    assert summary.failure_count == 3
    assert summary.success_count == 0
    # Every job still got both passes
    assert compiler.calls == ["a.tex", "a.tex", "b.tex", "b.tex", "deck.tex", "deck.tex"]
    assert [job.file_name for job in summary.failed_jobs] == ["a.tex", "b.tex", "deck.tex"]


def test_invocation_fault_on_one_job_keeps_processing(fakes, source_tree):
    compiler = fakes.Raising(fail_names=["a.tex"])

    summary = BuildOrchestrator(compiler=compiler).run(source_tree)

    statuses = [(r.job.file_name, r.status) for r in summary.results]
    assert statuses == [("a.tex", "failed"), ("b.tex", "success"), ("deck.tex", "success")]
    assert summary.success_count + summary.failure_count == summary.total


def test_working_directory_unchanged_after_run(fakes, source_tree):
    before = os.getcwd()

    BuildOrchestrator(compiler=fakes.Raising()).run(source_tree)

    assert os.getcwd() == before


def test_passes_setting_is_respected(fakes, source_tree):
    compiler = fakes.Artifact()
    settings = BuildSettings(passes=3)

    BuildOrchestrator(settings, compiler=compiler).run(source_tree)

    assert len(compiler.calls) == 9


def test_missing_compiler_is_fatal_before_any_job(monkeypatch, source_tree):
    monkeypatch.setattr(latex_compiler.shutil, "which", lambda name: None)

    with pytest.raises(CompilerNotFoundError):
        BuildOrchestrator().run(source_tree)

    assert not (source_tree / "compilation_log.txt").exists()
    assert not (source_tree / "pdf_output").exists()


def test_empty_root_still_writes_log(fakes, tmp_path):
    summary = BuildOrchestrator(compiler=fakes.Artifact()).run(tmp_path)

    assert (summary.total, summary.success_count, summary.failure_count) == (0, 0, 0)
    log_text = (tmp_path / "compilation_log.txt").read_text(encoding="utf-8")
    assert "Total: 0, Success: 0, Failed: 0" in log_text


def test_symlinked_source_outside_root_is_compiled(fakes, tmp_path):
    """A link to a shared deck is built where the link sits, not where it points"""
    shared = tmp_path / "shared"
    shared.mkdir()
    (shared / "common.tex").write_text("\\documentclass{beamer}\n", encoding="utf-8")
    root = tmp_path / "root"
    root.mkdir()
    (root / "a.tex").write_text("\\documentclass{beamer}\n", encoding="utf-8")
    (root / "linked.tex").symlink_to(shared / "common.tex")

    summary = BuildOrchestrator(compiler=fakes.Artifact()).run(root)

    assert [r.job.file_name for r in summary.results] == ["a.tex", "linked.tex"]
    assert summary.success_count == 2
    assert (root / "pdf_output" / "linked.pdf").exists()
    assert summary.results[1].job.directory.resolve() == root.resolve()


def test_unwritable_log_does_not_end_the_run(fakes, source_tree, capsys):
    (source_tree / "compilation_log.txt").mkdir()

    summary = BuildOrchestrator(compiler=fakes.Artifact()).run(source_tree)

    assert summary.total == 3
    assert summary.success_count == 3
    assert "could not write log" in capsys.readouterr().err


def test_missing_root_raises(fakes, tmp_path):
    with pytest.raises(FileNotFoundError):
        BuildOrchestrator(compiler=fakes.Artifact()).run(tmp_path / "nonexistent")


def test_resolved_compiler_is_used_when_none_injected(monkeypatch, source_tree):
    monkeypatch.setattr(latex_compiler.shutil, "which", lambda name: "/usr/bin/pdflatex")
    commands = []

    def fake_run(cmd, **kwargs):
        commands.append(cmd)
        return latex_compiler.subprocess.CompletedProcess(cmd, 0, stdout="")

    monkeypatch.setattr(latex_compiler.subprocess, "run", fake_run)

    summary = BuildOrchestrator(BuildSettings(shell_escape=True)).run(source_tree)

    # The fake never writes a PDF, so every job fails, but the command shape is visible
    assert summary.failure_count == 3
    assert commands[0] == [
        "/usr/bin/pdflatex",
        "-interaction=nonstopmode",
        "-shell-escape",
        "a.tex",
    ]
    assert "LaTeX: /usr/bin/pdflatex" in (source_tree / "compilation_log.txt").read_text(
        encoding="utf-8"
    )


# ==========================================
# CLI
# ==========================================


@pytest.fixture
def cli_env(monkeypatch, restore_root_logging):
    monkeypatch.setattr(batch_orchestrator, "load_dotenv", lambda *a, **kw: False)
    for name in ["LATEX_ENGINE", "LATEX_PASSES", "LATEX_SHELL_ESCAPE", "PDF_OUTPUT_DIR"]:
        monkeypatch.delenv(name, raising=False)


def test_cli_mock_compiler_succeeds(cli_env, source_tree, tmp_path):
    code = main(
        [
            "--root",
            str(source_tree),
            "--mock-compiler",
            "--log-dir",
            str(tmp_path / "logs"),
        ]
    )

    assert code == EXIT_OK
    assert (source_tree / "pdf_output" / "lectures" / "week1" / "deck.pdf").exists()
    assert (tmp_path / "logs" / "deckbuild.log").exists()


def test_cli_missing_compiler_exits_fatal(cli_env, monkeypatch, source_tree, tmp_path):
    monkeypatch.setattr(latex_compiler.shutil, "which", lambda name: None)

    code = main(["--root", str(source_tree), "--log-dir", str(tmp_path / "logs")])

    assert code == EXIT_FATAL
    assert not (source_tree / "compilation_log.txt").exists()


def test_cli_invalid_passes_exits_fatal(cli_env, source_tree, tmp_path):
    code = main(
        ["--root", str(source_tree), "--passes", "0", "--log-dir", str(tmp_path / "logs")]
    )

    assert code == EXIT_FATAL


def test_cli_failures_exit_nonzero(cli_env, fakes, monkeypatch, source_tree, tmp_path):
    monkeypatch.setattr(
        batch_orchestrator, "MockLatexCompiler", lambda ext: fakes.NeverProduces()
    )

    code = main(
        ["--root", str(source_tree), "--mock-compiler", "--log-dir", str(tmp_path / "logs")]
    )

    assert code == batch_orchestrator.EXIT_FAILURES
