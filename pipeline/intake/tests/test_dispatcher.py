"""Tests for format detection, batch splitting and routing."""

from __future__ import annotations

from fichas import (
    MODERN_FICHA_A,
    MODERN_FICHA_B,
    MODERN_FICHA_NO_NUMBER,
)

from intake.parsers import IntakeMode, TextFormat, detect_format, parse_text, split_records
from intake.parsers.modern import ModernParser


class TestDetectFormat:
    def test_record_marker_means_modern(self):
        assert detect_format("📁 Ficha do Processo 1 de 1 📁") is TextFormat.MODERN

    def test_active_name_label_means_modern(self):
        assert detect_format("texto\n👤 Nome: MARIA") is TextFormat.MODERN

    def test_passive_name_label_means_modern(self):
        assert detect_format("🏢 Nome: EMPRESA") is TextFormat.MODERN

    def test_anything_else_is_legacy(self, legacy_ficha):
        assert detect_format(legacy_ficha) is TextFormat.LEGACY
        assert detect_format("Nome: MARIA") is TextFormat.LEGACY


class TestSplitRecords:
    def test_each_chunk_starts_with_its_marker(self, modern_batch):
        chunks = split_records(modern_batch)

        assert len(chunks) == 2
        assert all(chunk.startswith("📁 Ficha do Processo") for chunk in chunks)

    def test_chunks_are_trimmed(self, modern_batch):
        chunks = split_records("\n\n  " + modern_batch + "\n\n")

        assert chunks[0] == MODERN_FICHA_A
        assert chunks[1] == MODERN_FICHA_B

    def test_text_before_first_marker_is_its_own_chunk(self):
        chunks = split_records("cabeçalho copiado\n" + MODERN_FICHA_A)

        assert chunks[0] == "cabeçalho copiado"
        assert len(chunks) == 2

    def test_no_marker_gives_single_chunk(self):
        assert split_records("👤 Nome: MARIA") == ["👤 Nome: MARIA"]


class TestParseText:
    """End-to-end dispatch decisions."""

    def test_empty_input_extracts_nothing(self):
        """Blank input yields no format, no drafts and no warning."""
        for text in ("", "   \n\t  \n"):
            result = parse_text(text)

            assert result.format is None
            assert result.drafts == []
            assert result.chunks == 0
            assert result.mode is IntakeMode.NONE
            assert result.warning is None

    def test_single_modern_record(self):
        result = parse_text(MODERN_FICHA_B)

        assert result.format is TextFormat.MODERN
        assert result.mode is IntakeMode.SINGLE
        assert result.drafts[0].case_number == "1048585-23.2024.8.26.0100"

    def test_modern_batch(self, modern_batch):
        result = parse_text(modern_batch)

        assert result.mode is IntakeMode.BATCH
        assert [d.case_number for d in result.drafts] == [
            "4010991-84.2025.8.26.0100",
            "1048585-23.2024.8.26.0100",
        ]
        assert result.skipped == 0

    def test_chunks_are_parsed_in_isolation(self, modern_batch):
        """A batch draft equals the draft of its chunk parsed alone."""
        result = parse_text(modern_batch)

        assert result.drafts[0] == ModernParser().parse(MODERN_FICHA_A)
        assert result.drafts[1] == ModernParser().parse(MODERN_FICHA_B)

    def test_fields_do_not_leak_between_chunks(self):
        """The second record's start date never reaches the first one."""
        result = parse_text(MODERN_FICHA_A + "\n" + MODERN_FICHA_B)

        assert result.drafts[0].filing_year is None
        assert result.drafts[1].filing_year == 2024

    def test_chunk_without_case_number_is_dropped(self):
        text = "\n\n".join([MODERN_FICHA_A, MODERN_FICHA_NO_NUMBER, MODERN_FICHA_B])
        result = parse_text(text)

        assert result.chunks == 3
        assert len(result.drafts) == 2
        assert result.skipped == 1
        assert result.mode is IntakeMode.BATCH

    def test_modern_text_without_any_case_number_warns(self):
        result = parse_text(MODERN_FICHA_NO_NUMBER)

        assert result.format is TextFormat.MODERN
        assert result.mode is IntakeMode.NONE
        assert result.warning is not None

    def test_legacy_is_always_single(self, legacy_ficha):
        result = parse_text(legacy_ficha)

        assert result.format is TextFormat.LEGACY
        assert result.mode is IntakeMode.SINGLE
        assert result.chunks == 1
        assert result.drafts[0].active_party.main_name == "JOÃO DA SILVA"
