"""Tests for identifier generation."""

import re

import pytest

from qrmenu.services.identifiers import disambiguate, generate_identifier


class TestGenerateIdentifier:
    """Tests for generate_identifier()."""

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("Tatlılar", "tatlilar"),
            ("Sıcak İçecekler", "sicak-icecekler"),
            ("Soğuk İçecekler", "soguk-icecekler"),
            ("Şiş Köfte 2", "sis-kofte-2"),
            ("Ağaç Üzümü", "agac-uzumu"),
            ("Kâse Îmam Ûmit", "kase-imam-umit"),
        ],
    )
    def test_turkish_names(self, name, expected):
        assert generate_identifier(name) == expected

    def test_runs_of_separators_are_kept(self):
        assert generate_identifier("Çay & Kahve") == "cay---kahve"

    def test_punctuation_only_name(self):
        result = generate_identifier("!!! ???")

        assert result
        assert re.fullmatch(r"[a-z0-9-]+", result)

    def test_output_alphabet(self):
        result = generate_identifier("Ürün #1 (Özel) - 50% İndirim!")
        assert re.fullmatch(r"[a-z0-9-]+", result)

    def test_idempotent(self):
        first = generate_identifier("Sıcak İçecekler")
        assert generate_identifier(first) == first

    def test_empty_name(self):
        assert generate_identifier("") == ""


class TestDisambiguate:
    """Tests for disambiguate()."""

    def test_free_identifier_is_unchanged(self):
        assert disambiguate("kahve", ["cay"]) == "kahve"

    def test_first_collision_gets_suffix_two(self):
        assert disambiguate("kahve", ["kahve"]) == "kahve-2"

    def test_skips_taken_suffixes(self):
        assert disambiguate("kahve", ["kahve", "kahve-2", "kahve-3"]) == "kahve-4"

    def test_accepts_generator(self):
        taken = (doc_id for doc_id in ["tatlilar"])
        assert disambiguate("tatlilar", taken) == "tatlilar-2"
