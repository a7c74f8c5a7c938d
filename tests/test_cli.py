import json

import pytest
from click.testing import CliRunner

from conftest import build_ddr

from s57catalog import profiles
from s57catalog.cli import cli


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    path = tmp_path / "config" / "config.toml"
    monkeypatch.setattr(profiles, "get_config_path", lambda: path)
    return path


@pytest.fixture
def runner():
    return CliRunner()


def invoke(runner, catalog, *args):
    return runner.invoke(cli, ["--catalog", str(catalog), *args])


def test_info(runner, catalog_file):
    result = invoke(runner, catalog_file, "info")
    assert result.exit_code == 0, result.output
    assert "Interchange level: 3" in result.output
    assert "0001>CATD" in result.output
    assert "Catalog Directory field" in result.output
    assert "RCID     I(10)" in result.output


def test_info_from_exchange_set_directory(runner, catalog_file):
    result = invoke(runner, catalog_file.parent.parent, "info")
    assert result.exit_code == 0, result.output
    assert str(catalog_file) in result.output


def test_list(runner, catalog_file):
    result = invoke(runner, catalog_file, "list")
    assert result.exit_code == 0, result.output
    assert "CATALOG.031" in result.output
    assert "US5GA20M/US5GA20M.000" in result.output
    assert "3 records" in result.output


def test_show(runner, catalog_file):
    result = invoke(runner, catalog_file, "show", "2")
    assert result.exit_code == 0, result.output
    assert "Record 2" in result.output
    assert "CATD (Catalog Directory field)" in result.output
    assert "CRCS     = A1B2C3D4" in result.output


def test_show_missing(runner, catalog_file):
    result = invoke(runner, catalog_file, "show", "42")
    assert result.exit_code == 0
    assert "Record 42 not found." in result.output


def test_export_json_to_stdout(runner, catalog_file):
    result = invoke(runner, catalog_file, "export", "--format", "json")
    assert result.exit_code == 0, result.output
    assert [d["id"] for d in json.loads(result.output)] == [1, 2, 3]


def test_export_csv_to_file(runner, catalog_file, tmp_path):
    out = tmp_path / "catalog.csv"
    result = invoke(runner, catalog_file, "export", "--format", "csv", "-o", str(out))
    assert result.exit_code == 0, result.output
    assert "Exported 3 records" in result.output
    assert out.read_text(encoding="utf-8").startswith("id,0001.DRID,CATD.RCNM")


def test_missing_catalog(runner, tmp_path):
    result = invoke(runner, tmp_path / "nope", "list")
    assert result.exit_code == 2
    assert "Catalog not found" in result.output


def test_no_catalog_configured(runner):
    result = runner.invoke(cli, ["list"])
    assert result.exit_code == 2
    assert "s57cat init" in result.output


def test_decoding_error_shows_chain(runner, tmp_path):
    path = tmp_path / "CATALOG.031"
    path.write_bytes(build_ddr(catd_formats=b"(A(2))"))
    result = invoke(runner, path, "list")
    assert result.exit_code == 1
    assert "could not parse catalog" in result.output
    assert "invalid data descriptive record" in result.output
    assert "'Catalog Directory field'" in result.output


def test_init_saves_default(runner, catalog_file, isolated_config):
    result = runner.invoke(cli, ["init"], input=f"{catalog_file.parent.parent}\n")
    assert result.exit_code == 0, result.output
    assert isolated_config.exists()
    assert profiles.load_config().default_catalog == catalog_file

    result = runner.invoke(cli, ["list"])
    assert result.exit_code == 0, result.output
    assert "3 records" in result.output


def test_init_reprompts(runner, catalog_file, tmp_path):
    result = runner.invoke(cli, ["init"], input=f"{tmp_path / 'empty'}\n{catalog_file}\n")
    assert result.exit_code == 0, result.output
    assert "No CATALOG.031 found" in result.output
