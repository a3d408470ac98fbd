"""Tests for the lunaria CLI (status, config show, config init)."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from lunaria.cli import app

runner = CliRunner()

CONFIG = """\
default_locale:
  label: English
  lang: en
locales:
  - label: Português
    lang: pt
files:
  - location: "docs/**/*.md"
"""


@pytest.fixture
def project(git_repo, monkeypatch):
    """A committed docs tree with lunaria.yaml at the repository root."""
    monkeypatch.chdir(git_repo.root)
    monkeypatch.setattr("pathlib.Path.home", lambda: git_repo.root / "fakehome")
    git_repo.write("lunaria.yaml", CONFIG)
    return git_repo


def _ci_lines(output: str) -> dict[str, tuple[str, str]]:
    lines = {}
    for line in output.splitlines():
        parts = line.split()
        if len(parts) == 3 and parts[1].startswith("latest="):
            lines[parts[0]] = (parts[1].removeprefix("latest="), parts[2].removeprefix("tracked="))
    return lines


# ── lunaria status ───────────────────────────────────────────────────


def test_status_ci_output(project):
    added = project.commit({"docs/a.md": "one"}, "Add a")
    typo = project.commit({"docs/a.md": "one!"}, "fix typo")
    b = project.commit({"docs/b.md": "b"}, "Add b")

    result = runner.invoke(app, ["status", "--ci"])

    assert result.exit_code == 0, result.output
    assert _ci_lines(result.output) == {
        "docs/a.md": (typo, added),
        "docs/b.md": (b, b),
    }


def test_status_writes_cache(project):
    added = project.commit({"docs/a.md": "one"}, "Add a")
    project.commit({"docs/a.md": "one!"}, "fix typo")

    result = runner.invoke(app, ["status", "--ci"])

    assert result.exit_code == 0, result.output
    cache_file = project.root / ".lunaria" / "cache" / "git.json"
    data = json.loads(cache_file.read_text())
    assert data["contents"] == {"docs/a.md": added}
    assert len(data["hash"]) == 64


def test_status_second_run_uses_cache(project):
    project.commit({"docs/a.md": "one"}, "Add a")
    first = runner.invoke(app, ["status", "--ci"])
    newer = project.commit({"docs/a.md": "two"}, "Rewrite a")

    second = runner.invoke(app, ["status", "--ci"])

    assert first.exit_code == 0 and second.exit_code == 0
    assert _ci_lines(second.output) == {"docs/a.md": (newer, newer)}


def test_status_force_writes_no_cache(project):
    project.commit({"docs/a.md": "one"}, "Add a")

    result = runner.invoke(app, ["status", "--ci", "--force"])

    assert result.exit_code == 0, result.output
    assert "docs/a.md" in _ci_lines(result.output)
    assert not (project.root / ".lunaria" / "cache" / "git.json").exists()


def test_status_explicit_paths(project):
    project.commit({"docs/a.md": "one", "docs/b.md": "b"}, "Add docs")

    result = runner.invoke(app, ["status", "--ci", "docs/b.md"])

    assert result.exit_code == 0, result.output
    assert list(_ci_lines(result.output)) == ["docs/b.md"]


def test_status_uncommitted_file_fails(project):
    project.commit({"docs/a.md": "one"}, "Add a")
    project.write("docs/draft.md", "wip")

    result = runner.invoke(app, ["status", "--ci"])

    assert result.exit_code == 1
    assert "Failed to find the git history" in result.output
    assert not (project.root / ".lunaria" / "cache" / "git.json").exists()


def test_status_no_tracked_files(project):
    result = runner.invoke(app, ["status"])
    assert result.exit_code == 0
    assert "No tracked files found" in result.output


def test_status_root_option(git_repo, tmp_path: Path, monkeypatch):
    elsewhere = tmp_path / "elsewhere"
    elsewhere.mkdir()
    monkeypatch.chdir(elsewhere)
    monkeypatch.setattr("pathlib.Path.home", lambda: elsewhere)
    cfg = elsewhere / "lunaria.yaml"
    cfg.write_text(CONFIG)
    head = git_repo.commit({"docs/a.md": "one"}, "Add a")

    result = runner.invoke(
        app, ["--config", str(cfg), "status", "--root", str(git_repo.root), "--ci"]
    )

    assert result.exit_code == 0, result.output
    assert _ci_lines(result.output) == {"docs/a.md": (head, head)}
    assert (git_repo.root / ".lunaria" / "cache" / "git.json").is_file()


def test_status_table_output(project):
    project.commit({"docs/a.md": "one"}, "Add a")

    result = runner.invoke(app, ["status"])

    assert result.exit_code == 0, result.output
    assert "Tracked files (1)" in result.output


# ── lunaria config ───────────────────────────────────────────────────


def test_config_init_creates_file(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("pathlib.Path.home", lambda: tmp_path / "fakehome")

    result = runner.invoke(app, ["config", "init"])

    assert result.exit_code == 0, result.output
    assert "ignored_keywords" in (tmp_path / "lunaria.yaml").read_text(encoding="utf-8")


def test_config_init_refuses_to_overwrite(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("pathlib.Path.home", lambda: tmp_path / "fakehome")
    (tmp_path / "lunaria.yaml").write_text("log_level: debug\n")

    result = runner.invoke(app, ["config", "init"])

    assert result.exit_code == 1
    assert "already exists" in result.output
    assert (tmp_path / "lunaria.yaml").read_text() == "log_level: debug\n"


def test_config_init_force_overwrites(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("pathlib.Path.home", lambda: tmp_path / "fakehome")
    (tmp_path / "lunaria.yaml").write_text("log_level: debug\n")

    result = runner.invoke(app, ["config", "init", "--force"])

    assert result.exit_code == 0, result.output
    assert "tracking:" in (tmp_path / "lunaria.yaml").read_text(encoding="utf-8")


def test_config_show(project):
    result = runner.invoke(app, ["config", "show"])
    assert result.exit_code == 0, result.output
    assert "docs/**/*.md" in result.output


def test_invalid_config_exits_with_error(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("pathlib.Path.home", lambda: tmp_path / "fakehome")
    (tmp_path / "lunaria.yaml").write_text("max_concurrent_processes: 1\n")

    result = runner.invoke(app, ["config", "show"])

    assert result.exit_code == 1
    assert "Invalid config" in result.output


def test_missing_config_path_exits_with_error(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    result = runner.invoke(app, ["--config", str(tmp_path / "nope.yaml"), "config", "show"])
    assert result.exit_code == 1
    assert "not found" in result.output


def test_config_show_uses_config_option(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("pathlib.Path.home", lambda: tmp_path / "fakehome")
    custom = tmp_path / "custom.yaml"
    custom.write_text('files:\n  - location: "content/**/*.mdx"\n')

    result = runner.invoke(app, ["--config", str(custom), "config", "show"])

    assert result.exit_code == 0, result.output
    assert "content/**/*.mdx" in result.output
