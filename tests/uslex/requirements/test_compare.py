import pytest

from uslex.core.exceptions import InputValidationError
from uslex.requirements.compare import compare, state_requirements


class TestCompare:
    """Side-by-side requirement rows across jurisdictions."""

    def test_breach_timelines(self, store):
        rows = compare(store, "breach_notification", "timeline", ["US-CA", "US-NY", "US-TX"])

        assert [row.jurisdiction for row in rows] == ["US-CA", "US-NY", "US-TX"]
        assert [row.notification_days for row in rows] == [None, 30, 60]
        assert rows[0].law_short_name == "CA Breach"
        assert rows[0].section_number == "§ 1798.82"
        assert rows[0].private_right_of_action is True
        assert rows[2].penalty_max == "$100 per individual per day, up to $250,000"
        assert rows[1].jurisdiction_name == "New York"

    def test_all_jurisdictions(self, store):
        rows = compare(store, "breach_notification", "timeline", ["all"])
        assert [row.jurisdiction for row in rows] == ["US-CA", "US-FL", "US-NY", "US-TX"]

    def test_missing_document_reference(self, store):
        rows = compare(store, "breach_notification", None, ["US-FL"])

        assert len(rows) == 1
        assert rows[0].law_title is None
        assert rows[0].section_number is None
        assert rows[0].notification_days == 30

    def test_whole_category(self, store):
        rows = compare(store, "privacy_rights", None, ["all"])
        assert [(row.jurisdiction, row.subcategory) for row in rows] == [("US-CA", "right_to_delete")]

    def test_empty_jurisdiction_list(self, store):
        assert compare(store, "breach_notification", "timeline", []) == []

    def test_unknown_jurisdiction_fails_whole_request(self, store):
        with pytest.raises(InputValidationError) as exc_info:
            compare(store, "breach_notification", "timeline", ["US-CA", "NY"])
        assert 'Did you mean "US-NY"' in str(exc_info.value)

    def test_blank_category(self, store):
        with pytest.raises(InputValidationError):
            compare(store, " ", None, ["all"])

    def test_unknown_category_is_empty(self, store):
        assert compare(store, "sector_specific", None, ["all"]) == []


class TestStateRequirements:
    def test_all_categories(self, store):
        rows = state_requirements(store, "us-ca")
        assert [(row.category, row.subcategory) for row in rows] == [
            ("breach_notification", "timeline"),
            ("privacy_rights", "right_to_delete"),
        ]
        assert rows[1].section_number == "§ 1798.105"
        assert rows[1].private_right_of_action is False

    def test_one_category(self, store):
        rows = state_requirements(store, "US-CA", "privacy_rights")
        assert len(rows) == 1

    def test_parent_section_links_first_child(self, store):
        rows = state_requirements(store, "US-FED")
        assert rows[0].section_number == "§ 1030(a)"
        assert rows[0].law_short_name == "CFAA"

    def test_jurisdiction_required(self, store):
        with pytest.raises(InputValidationError):
            state_requirements(store, "")
