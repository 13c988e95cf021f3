import json
from pathlib import Path
import textwrap

import pytest
from click.testing import CliRunner

from storefront_e2e import cli as cli_module
from storefront_e2e.cli import cli
from storefront_e2e.utils.config import get_settings


def write_multi_doc_yaml(tmp_path: Path) -> Path:
    y = textwrap.dedent(
        """
        id: acme_credit_card
        title: Acme Credit Card
        ---
        id: acme_echeck
        title: Acme eCheck
        supports_token_editor: false
        """
    )
    p = tmp_path / "acme.yaml"
    p.write_text(y, encoding="utf-8")
    return p


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    monkeypatch.setenv("OUTPUT_DIR", str(tmp_path / "out"))
    # register the variables `run` overrides so they are restored afterwards
    for key in ("HEADLESS", "BROWSER_TYPE", "BASE_URL"):
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)
    yield monkeypatch
    get_settings.cache_clear()


def test_cli_profiles_with_multi_doc(tmp_path: Path):
    write_multi_doc_yaml(tmp_path)
    runner = CliRunner()
    result = runner.invoke(cli, ["profiles", "--dir", str(tmp_path), "--no-recursive"])
    assert result.exit_code == 0
    assert "Found 2 profile(s)" in result.output
    assert "[acme_echeck] Acme eCheck" in result.output


def test_cli_validate_with_dir(tmp_path: Path):
    write_multi_doc_yaml(tmp_path)
    runner = CliRunner()
    result = runner.invoke(cli, ["validate", "--dir", str(tmp_path), "--no-recursive"])
    assert result.exit_code == 0
    # Two OK lines for two docs
    assert result.output.count("OK  ") == 2


def test_cli_validate_reports_errors(tmp_path: Path):
    bad = tmp_path / "bad.yaml"
    bad.write_text("title: no id here\n", encoding="utf-8")
    runner = CliRunner()
    result = runner.invoke(cli, ["validate", str(bad)])
    assert result.exit_code == 1
    assert "ERR " in result.output
    assert "id" in result.output


def test_cli_validate_without_targets():
    result = CliRunner().invoke(cli, ["validate"])
    assert result.exit_code == 2


def test_cli_config_masks_secrets(monkeypatch):
    monkeypatch.setenv("DB_PASSWORD", "hunter2")
    get_settings.cache_clear()
    try:
        result = CliRunner().invoke(cli, ["config"])
    finally:
        get_settings.cache_clear()
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["DB_PASSWORD"] == "********"
    assert "hunter2" not in result.output


def test_cli_run_passes_targets_to_pytest(tmp_path: Path, clean_env):
    seen = {}

    def fake_main(args):
        seen["args"] = args
        seen["settings"] = get_settings()
        return 0

    clean_env.setattr(cli_module.pytest, "main", fake_main)

    runner = CliRunner()
    result = runner.invoke(cli, ["run", str(tmp_path), "--headed", "--browser", "firefox", "-k", "tokenization"])

    assert result.exit_code == 0
    assert seen["args"] == [str(tmp_path), "-k", "tokenization"]
    assert seen["settings"].HEADLESS is False
    assert seen["settings"].BROWSER_TYPE.value == "firefox"


def test_cli_run_propagates_pytest_exit_code(clean_env):
    clean_env.setattr(cli_module.pytest, "main", lambda args: 1)

    result = CliRunner().invoke(cli, ["run"])

    assert result.exit_code == 1
    assert "Done. exit=1" in result.output
