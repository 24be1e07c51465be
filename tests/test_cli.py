from __future__ import annotations

from pathlib import Path

from typer.testing import CliRunner

from vaultsite.cli import app


def _make_vault(root: Path) -> Path:
    root.mkdir(parents=True, exist_ok=True)
    (root / "index.md").write_text("---\npermalink: /\n---\nWelcome. Read [[guide]].\n", encoding="utf-8")
    (root / "guide.md").write_text("# Guide\n\nSteps go here.\n", encoding="utf-8")
    return root


def test_build_reports_counters(tmp_path: Path) -> None:
    runner = CliRunner()
    vault = _make_vault(tmp_path / "vault")
    site = tmp_path / "site"

    result = runner.invoke(app, ["build", str(vault), str(site)])
    assert result.exit_code == 0, result.output
    assert "Vault: total=2, updated=2" in result.output
    assert "Site: total=3, updated=2, deleted=0" in result.output
    assert "Pages: 2 rendered" in result.output
    assert (site / "index.html").exists()
    assert (site / "guide" / "index.html").exists()

    again = runner.invoke(app, ["build", str(vault), str(site)])
    assert again.exit_code == 0, again.output
    assert "Vault: total=2, updated=0" in again.output
    assert "Site: total=3, updated=0, deleted=0" in again.output


def test_build_applies_config_file_and_base_override(tmp_path: Path) -> None:
    runner = CliRunner()
    vault = _make_vault(tmp_path / "vault")
    config_file = tmp_path / "vaultsite.yml"
    config_file.write_text("site_name: Field Notes\nbase_url: /wiki/\n", encoding="utf-8")
    site = tmp_path / "site"

    result = runner.invoke(
        app,
        ["build", str(vault), str(site), "--config", str(config_file), "--base", "/docs/"],
    )
    assert result.exit_code == 0, result.output

    page = (site / "docs" / "guide" / "index.html").read_text(encoding="utf-8")
    assert "Field Notes" in page
    assert not (site / "wiki").exists()


def test_build_fails_for_missing_vault(tmp_path: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["build", str(tmp_path / "nope"), str(tmp_path / "site")])
    assert result.exit_code == 1
    assert "Build failed" in result.output


def test_build_rejects_invalid_base(tmp_path: Path) -> None:
    runner = CliRunner()
    vault = _make_vault(tmp_path / "vault")
    result = runner.invoke(app, ["build", str(vault), str(tmp_path / "site"), "--base", "docs"])
    assert result.exit_code == 1
    assert "Invalid configuration" in result.output


def test_build_reports_front_matter_errors(tmp_path: Path) -> None:
    runner = CliRunner()
    vault = _make_vault(tmp_path / "vault")
    (vault / "broken.md").write_text("---\ntags: [\n", encoding="utf-8")

    result = runner.invoke(app, ["build", str(vault), str(tmp_path / "site")])
    assert result.exit_code == 1
    assert "broken.md" in result.output.replace("\n", "")


def test_scan_counts_kinds(tmp_path: Path) -> None:
    runner = CliRunner()
    vault = _make_vault(tmp_path / "vault")
    (vault / "notes.pdf").write_bytes(b"%PDF")

    result = runner.invoke(app, ["scan", str(vault)])
    assert result.exit_code == 0, result.output
    assert "Vault: total=3, updated=3" in result.output
    assert "note=2" in result.output
    assert "other=1" in result.output


def test_scan_rejects_missing_vault(tmp_path: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["scan", str(tmp_path / "missing")])
    assert result.exit_code == 1
    assert "Vault not found" in result.output
