"""Tests for the intake CLI — argument parsing and the end-to-end flow."""

from __future__ import annotations

import json

import pytest
from fichas import LEGACY_FICHA, MODERN_FICHA_A, MODERN_FICHA_B, MODERN_FICHA_NO_CPF

from intake.__main__ import DEFAULT_DATABASE_URL, _build_parser, main
from intake.loaders import CaseStore


@pytest.fixture
def write_input(tmp_path):
    def _write(text: str) -> str:
        path = tmp_path / "fichas.txt"
        path.write_text(text, encoding="utf-8")
        return str(path)

    return _write


class TestCLIParser:
    """Argument parsing without running the intake flow."""

    def test_input_is_required(self):
        """Parser exits when no input is given."""
        with pytest.raises(SystemExit):
            _build_parser().parse_args([])

    def test_defaults(self, monkeypatch):
        """Overrides are unset and flags are off by default."""
        monkeypatch.delenv("INTAKE_DATABASE_URL", raising=False)
        args = _build_parser().parse_args(["fichas.txt"])

        assert args.input == "fichas.txt"
        assert args.cpf is None
        assert args.case_number is None
        assert args.dry_run is False
        assert args.json is False
        assert args.verbose is False
        assert args.database_url == DEFAULT_DATABASE_URL

    def test_database_url_from_environment(self, monkeypatch):
        """$INTAKE_DATABASE_URL replaces the built-in default."""
        monkeypatch.setenv("INTAKE_DATABASE_URL", "postgresql+psycopg://intake@db/processos")
        args = _build_parser().parse_args(["-"])

        assert args.database_url == "postgresql+psycopg://intake@db/processos"

    def test_overrides(self):
        """--cpf and --case-number are captured verbatim."""
        args = _build_parser().parse_args(
            ["-", "--cpf", "12345678901", "--case-number", "0001111-22.2023.8.24.0001", "-v"]
        )

        assert args.cpf == "12345678901"
        assert args.case_number == "0001111-22.2023.8.24.0001"
        assert args.verbose is True


class TestCLIMain:
    def test_dry_run_batch_prints_json(self, write_input, capsys):
        """A modern batch is assembled and dumped without touching a database."""
        main([write_input(MODERN_FICHA_A + "\n" + MODERN_FICHA_B), "--dry-run", "--json"])

        records = json.loads(capsys.readouterr().out)
        assert [r["case_number"] for r in records] == [
            "4010991-84.2025.8.26.0100",
            "1048585-23.2024.8.26.0100",
        ]
        assert records[0]["taxpayer_id"] == "095.076.756-55"
        assert records[0]["subject_matter"] == "Indenização por Dano Moral"

    def test_batch_drops_incomplete_records(self, write_input, capsys):
        main(
            [
                write_input("\n".join([MODERN_FICHA_A, MODERN_FICHA_NO_CPF, MODERN_FICHA_B])),
                "--dry-run",
                "--json",
            ]
        )

        records = json.loads(capsys.readouterr().out)
        assert len(records) == 2

    def test_legacy_with_form_overrides(self, write_input, capsys):
        main(
            [
                write_input(LEGACY_FICHA),
                "--cpf",
                "12345678901",
                "--case-number",
                "1001234-56.2021.8.24.0023",
                "--dry-run",
                "--json",
            ]
        )

        (record,) = json.loads(capsys.readouterr().out)
        assert record["taxpayer_id"] == "123.456.789-01"
        assert record["case_number"] == "1001234-56.2021.8.24.0023"
        assert record["active_party"]["lawyers"] == ["PEDRO ALVES"]

    def test_legacy_without_overrides_fails(self, write_input):
        """The legacy layout has no CPF, so the form value is mandatory."""
        with pytest.raises(SystemExit) as excinfo:
            main([write_input(LEGACY_FICHA), "--dry-run"])

        assert excinfo.value.code == 1

    def test_malformed_override_fails(self, write_input):
        with pytest.raises(SystemExit) as excinfo:
            main([write_input(LEGACY_FICHA), "--cpf", "123", "--case-number", "x", "--dry-run"])

        assert excinfo.value.code == 1

    def test_empty_input_fails(self, write_input):
        with pytest.raises(SystemExit) as excinfo:
            main([write_input("   \n"), "--dry-run"])

        assert excinfo.value.code == 1

    def test_missing_file_fails(self, tmp_path):
        with pytest.raises(SystemExit) as excinfo:
            main([str(tmp_path / "nao_existe.txt"), "--dry-run"])

        assert excinfo.value.code == 1

    def test_records_are_registered(self, write_input, tmp_path):
        """Without --dry-run the records land in the database."""
        database_url = f"sqlite:///{tmp_path}/data/processos.db"

        main([write_input(MODERN_FICHA_A + "\n" + MODERN_FICHA_B), "--database-url", database_url])

        with CaseStore.from_url(database_url) as store:
            assert store.statistics()["total_processes"] == 2
            assert len(store.find_cases_by_cpf("154.889.357-97")) == 1
