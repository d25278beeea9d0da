import pytest

from uslex.legislation.citation import MatchQuality, validate_citation


class TestValidateCitation:
    """Tiered citation matching against the fixture database."""

    @pytest.mark.parametrize(
        "citation, jurisdiction, quality, short_name, section",
        [
            ("1798.100", None, MatchQuality.SECTION_EXACT, "CCPA/CPRA", "§ 1798.100"),
            ("§ 899-bb", "US-NY", MatchQuality.SECTION_EXACT, "SHIELD Act", "§ 899-bb"),
            ("Cal. Civ. Code § 1798.82", None, MatchQuality.SECTION_FUZZY, "CA Breach", "§ 1798.82"),
            ("CCPA/CPRA § 1798.105", "US-CA", MatchQuality.SECTION_FUZZY, "CCPA/CPRA", "§ 1798.105"),
            ("CFAA", None, MatchQuality.DOCUMENT_ONLY, "CFAA", "§ 1030(a)"),
            ("18 USC 1030", "US-FED", MatchQuality.DOCUMENT_ONLY, "CFAA", "§ 1030(a)"),
        ],
    )
    def test_tiers(self, store, citation, jurisdiction, quality, short_name, section):
        match = validate_citation(store, citation, jurisdiction)

        assert match.valid
        assert match.match_quality == quality
        assert match.document["short_name"] == short_name
        assert match.provision["section_number"] == section

    @pytest.mark.parametrize(
        "citation, jurisdiction",
        [
            ("Nonexistent Act 12345", None),
            ("CFAA", "US-CA"),
        ],
    )
    def test_no_document(self, store, citation, jurisdiction):
        match = validate_citation(store, citation, jurisdiction)

        assert not match.valid
        assert match.match_quality == MatchQuality.NONE
        assert match.document is None
        assert match.provision is None
