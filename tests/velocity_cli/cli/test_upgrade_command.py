from __future__ import annotations

import importlib
import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from tests.utils import write_tree
from velocity_cli import __version__, app as cli_app
from velocity_cli.upgrade import runner as runner_module
from velocity_cli.upgrade.errors import TemplateDownloadError

upgrade_module = importlib.import_module("velocity_cli.cli.commands.upgrade")

runner = CliRunner()


def _template(version: str = "2.0.0", min_cli: str = "1.0.0") -> dict[str, str]:
    return {
        "velocity-manifest.json": json.dumps(
            {
                "version": version,
                "minCliVersion": min_cli,
                "files": {"safe": ["src/lib/"], "protected": []},
                "dependencies": {"update": {"astro": "^5.0.0"}, "remove": [], "add": {}},
                "migrations": [
                    {"title": "Review pages", "description": "Check page markup.", "pattern": "<h1>"}
                ],
            }
        ),
        "src/lib/a.ts": "export const a = 2;\n",
    }


@pytest.fixture()
def fake_download(monkeypatch):
    calls: list[str] = []
    files = {"tree": _template()}

    def download(repo: str, destination: Path) -> None:
        calls.append(repo)
        write_tree(destination, files["tree"])

    monkeypatch.setattr(upgrade_module, "download_template", download)
    monkeypatch.setattr(runner_module, "git_has_uncommitted_changes", lambda _path: False)
    monkeypatch.delenv("VELOCITY_TEMPLATE_REPO", raising=False)
    download.calls = calls
    download.files = files
    return download


def _version(project: Path) -> str:
    return json.loads((project / ".velocity.json").read_text(encoding="utf-8"))["version"]


def test_cli_help_lists_upgrade() -> None:
    result = runner.invoke(cli_app, ["--help"])
    assert result.exit_code == 0
    assert "upgrade" in result.stdout


def test_upgrade_help_lists_options() -> None:
    result = runner.invoke(cli_app, ["upgrade", "--help"])
    assert result.exit_code == 0
    for option in ["--dry-run", "--yes", "--template", "--dir"]:
        assert option in result.stdout


def test_version_flag() -> None:
    result = runner.invoke(cli_app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_not_a_velocity_project(tmp_path: Path, fake_download) -> None:
    result = runner.invoke(cli_app, ["upgrade", "--dir", str(tmp_path)])

    assert result.exit_code == 1
    assert "Error:" in result.stdout
    assert "velocity.json" in result.stdout
    assert fake_download.calls == []


def test_upgrade_with_yes_applies_changes(velocity_project: Path, fake_download) -> None:
    result = runner.invoke(cli_app, ["upgrade", "--yes", "--dir", str(velocity_project)])

    assert result.exit_code == 0, result.stdout
    assert _version(velocity_project) == "2.0.0"
    assert (velocity_project / "src/lib/a.ts").read_text() == "export const a = 2;\n"
    package = json.loads((velocity_project / "package.json").read_text())
    assert package["dependencies"]["astro"] == "^5.0.0"
    assert "Manual steps required" in result.stdout
    assert "Upgrade complete!" in result.stdout
    assert fake_download.calls == ["southwellmedia/velocity"]


def test_confirmation_prompt_accepts_default(velocity_project: Path, fake_download) -> None:
    result = runner.invoke(cli_app, ["upgrade", "--dir", str(velocity_project)], input="\n")

    assert result.exit_code == 0, result.stdout
    assert _version(velocity_project) == "2.0.0"


def test_declined_confirmation_exits_cleanly(velocity_project: Path, fake_download) -> None:
    result = runner.invoke(cli_app, ["upgrade", "--dir", str(velocity_project)], input="n\n")

    assert result.exit_code == 0
    assert "Upgrade cancelled." in result.stdout
    assert _version(velocity_project) == "1.0.0"


def test_dry_run_changes_nothing(velocity_project: Path, fake_download) -> None:
    before = (velocity_project / "src/lib/a.ts").read_text()

    result = runner.invoke(cli_app, ["upgrade", "--dry-run", "--dir", str(velocity_project)])

    assert result.exit_code == 0, result.stdout
    assert "Dry run complete" in result.stdout
    assert (velocity_project / "src/lib/a.ts").read_text() == before
    assert _version(velocity_project) == "1.0.0"


def test_dirty_tree_declined(velocity_project: Path, fake_download, monkeypatch) -> None:
    monkeypatch.setattr(runner_module, "git_has_uncommitted_changes", lambda _path: True)

    result = runner.invoke(cli_app, ["upgrade", "--dir", str(velocity_project)], input="n\n")

    assert result.exit_code == 0
    assert "uncommitted changes" in result.stdout
    assert fake_download.calls == []


def test_cli_too_old(velocity_project: Path, fake_download) -> None:
    fake_download.files["tree"] = _template(min_cli="99.0.0")

    result = runner.invoke(cli_app, ["upgrade", "--yes", "--dir", str(velocity_project)])

    assert result.exit_code == 1
    assert "99.0.0" in result.stdout
    assert _version(velocity_project) == "1.0.0"


def test_download_failure(velocity_project: Path, monkeypatch) -> None:
    def download(repo: str, destination: Path) -> None:
        raise TemplateDownloadError("Template download failed with HTTP 404")

    monkeypatch.setattr(upgrade_module, "download_template", download)
    monkeypatch.setattr(runner_module, "git_has_uncommitted_changes", lambda _path: False)

    result = runner.invoke(cli_app, ["upgrade", "--yes", "--dir", str(velocity_project)])

    assert result.exit_code == 1
    assert "HTTP 404" in result.stdout


def test_template_option_overrides_env(velocity_project: Path, fake_download, monkeypatch) -> None:
    monkeypatch.setenv("VELOCITY_TEMPLATE_REPO", "env/repo")

    runner.invoke(cli_app, ["upgrade", "--yes", "--template", "acme/fork", "--dir", str(velocity_project)])

    assert fake_download.calls == ["acme/fork"]


def test_template_from_env(velocity_project: Path, fake_download, monkeypatch) -> None:
    monkeypatch.setenv("VELOCITY_TEMPLATE_REPO", "env/repo")

    runner.invoke(cli_app, ["upgrade", "--yes", "--dir", str(velocity_project)])

    assert fake_download.calls == ["env/repo"]


def test_malformed_package_json_exits_with_error(velocity_project: Path, fake_download) -> None:
    (velocity_project / "package.json").write_text("{broken", encoding="utf-8")

    result = runner.invoke(cli_app, ["upgrade", "--yes", "--dir", str(velocity_project)])

    assert result.exit_code == 1
    assert "Could not parse package.json" in result.stdout
