"""Tests for the extraction strategies and the chain that orders them."""

import logging
from pathlib import Path

import pytest

from uslex.core.exceptions import UnknownParserError
from uslex.core.utils import load_html_file_to_soup
from uslex.legislation.parser import (
    ExtractionChain,
    LawServerParser,
    LeginfoParser,
    LegislatureParser,
    SimpleHtmlParser,
    extract,
    extract_section_links,
)
from uslex.legislation.parser.base import ProvisionParser
from uslex.legislation.parser.lawserver import split_lawserver_heading

TEST_DATA = Path(__file__).parents[2] / "test_data"

LEGINFO_URL = "https://leginfo.legislature.ca.gov/faces/codes_displayText.xhtml?lawCode=CIV&title=1.81."
LAWSERVER_URL = "https://www.lawserver.com/law/state/alaska/ak-statutes/alaska_statutes_45-48-010"
LISTING_URL = "https://www.lawserver.com/law/state/alaska/ak-statutes/alaska_statutes_chapter_45-48"

PLAIN_TEXT = (
    "Sec. 45.48.010. Disclosure of breach of security.\n"
    "(a) If a covered person owns or licenses personal information in any form that includes "
    "personal information on a state resident, the covered person shall disclose the breach.\n"
    "\n"
    "Sec. 45.48.020. Allowable delay in notification.\n"
    "An information collector may delay disclosing the breach if an appropriate law enforcement "
    "agency determines that disclosing the breach will interfere with a criminal investigation.\n"
)


def read_page(name: str) -> str:
    return (TEST_DATA / name).read_text(encoding="utf-8")


class BrokenParser(ProvisionParser):
    name = "broken"

    def parse_content(self, html, url):
        raise RuntimeError("unexpected markup")


class TestLeginfoParser:
    def test_law_section_blocks(self):
        provisions = LeginfoParser().parse_content(read_page("leginfo_civ_1798.html"), LEGINFO_URL)

        assert [p.section_number for p in provisions] == ["1798.81.5", "1798.82"]
        assert provisions[1].citation == "§ 1798.82"
        assert provisions[1].title == ""
        assert provisions[1].text.startswith("(a) A person or business that conducts business")
        assert "\n\n(b) A person or business that maintains" in provisions[1].text

    def test_chrome_is_removed(self):
        provisions = LeginfoParser().parse_content(read_page("leginfo_civ_1798.html"), LEGINFO_URL)
        combined = " ".join(p.text for p in provisions)
        assert "Privacy Policy" not in combined
        assert "codesSearch" not in combined

    def test_numbered_lines_without_section_blocks(self):
        html = (
            "<html><body><div id='codeLawContent'>"
            "<p>1798.29. (a) Any agency that owns or licenses computerized data that includes "
            "personal information shall disclose any breach of the security of the system.</p>"
            "<p>(b) Any agency that maintains computerized data shall notify the owner.</p>"
            "<p>1798.30. Each agency shall permit any individual to request a copy of records.</p>"
            "<p>(a) The request shall be made in writing.</p>"
            "</div></body></html>"
        )
        provisions = LeginfoParser().parse_content(html, LEGINFO_URL)
        assert [p.section_number for p in provisions] == ["1798.29", "1798.30"]
        assert provisions[0].text.endswith("shall notify the owner.")
        assert provisions[1].title == "Each agency shall permit any individual to request a copy of records."


class TestLawServerParser:
    def test_section_page(self):
        provisions = LawServerParser().parse_content(
            read_page("lawserver_ak_45_48_010.html"), LAWSERVER_URL
        )

        assert len(provisions) == 1
        provision = provisions[0]
        assert provision.section_number == "45.48.010"
        assert provision.title == "Disclosure of breach of security"
        assert provision.text.startswith("(a) If a covered person owns or licenses")
        assert "(b) An information collector" in provision.text

    def test_noise_is_dropped(self):
        provision = LawServerParser().parse_content(
            read_page("lawserver_ak_45_48_010.html"), LAWSERVER_URL
        )[0]
        for noise in ("attorney", "lawyer", "Previous section", "Terms Used", "Related"):
            assert noise not in provision.text

    @pytest.mark.parametrize(
        "heading, expected",
        [
            ("Alabama Code 8-38-1. Short title", ("8-38-1", "Short title")),
            (
                "California Civil Code 1798.100 – General Duties of Businesses",
                ("1798.100", "General Duties of Businesses"),
            ),
            ("Alaska Statutes 45.48.010 Disclosure", ("45.48.010", "Disclosure")),
            ("Terms of Service", (None, "Terms of Service")),
        ],
    )
    def test_split_heading(self, heading, expected):
        assert split_lawserver_heading(heading) == expected

    def test_page_without_section_heading(self):
        html = "<html><body><h1>Alaska Statutes</h1><p>Browse the statutes by title.</p></body></html>"
        assert LawServerParser().parse_content(html, LAWSERVER_URL) == []

    def test_section_links(self):
        links = extract_section_links(read_page("lawserver_ak_chapter_45_48.html"), LISTING_URL)
        assert links == [
            "https://www.lawserver.com/law/state/alaska/ak-statutes/alaska_statutes_45-48-010",
            "https://www.lawserver.com/law/state/alaska/ak-statutes/alaska_statutes_45-48-020",
        ]

    def test_section_links_filtered(self):
        links = extract_section_links(
            read_page("lawserver_ak_chapter_45_48.html"), LISTING_URL, section_filter=r"45-48-020"
        )
        assert links == [
            "https://www.lawserver.com/law/state/alaska/ak-statutes/alaska_statutes_45-48-020"
        ]


class TestLegislatureParser:
    def test_structured_section_elements(self):
        provisions = LegislatureParser().parse_content(read_page("legislature_sections.html"), "")

        assert [(p.section_number, p.title) for p in provisions] == [
            ("501.171", "Security of confidential personal information"),
            ("501.172", "Disposal of customer records"),
        ]
        assert provisions[0].text.startswith("(1) DEFINITIONS.")
        assert "site menu" not in provisions[0].text

    def test_section_blocks_inside_section_wrapper(self):
        html = (
            "<html><body><div id='content'><div class='sections-list'>"
            "<div class='section-body'><p>§ 10-1. Notice</p>"
            "<p>A data collector shall notify affected residents of a breach of security.</p></div>"
            "<div class='section-body'><p>§ 10-2. Penalties</p>"
            "<p>A violation of this chapter is an unfair trade practice.</p></div>"
            "</div></div></body></html>"
        )
        provisions = LegislatureParser().parse_content(html, "")

        assert [(p.section_number, p.title) for p in provisions] == [
            ("10-1", "Notice"),
            ("10-2", "Penalties"),
        ]
        assert "unfair trade practice" not in provisions[0].text

    def test_section_headings(self):
        provisions = LegislatureParser().parse_content(read_page("legislature_headings.html"), "")

        assert [(p.section_number, p.title) for p in provisions] == [
            ("6-1-716", "Notification of security breach"),
            ("6-1-713.5", "Protection of personal identifying information"),
        ]
        assert provisions[0].text.count("\n\n") == 1
        assert "thirty days" in provisions[0].text
        assert "reasonable security procedures" not in provisions[0].text

    def test_inline_bold_headings(self):
        html = (
            "<html><body><div id='content'>"
            "<p><b>Sec. 10.</b> Any state agency that owns computerized data shall disclose a breach.</p>"
            "<p>The disclosure shall be made without unreasonable delay.</p>"
            "<p><b>Sec. 11.</b> A state agency shall maintain reasonable security procedures.</p>"
            "</div></body></html>"
        )
        provisions = LegislatureParser().parse_content(html, "")
        assert [p.section_number for p in provisions] == ["10", "11"]
        assert provisions[0].text == (
            "Any state agency that owns computerized data shall disclose a breach.\n\n"
            "The disclosure shall be made without unreasonable delay."
        )

    def test_line_walk(self):
        html = (
            "<html><body><main>"
            "<p>Title 9A. Commercial Code. Revised through the current session of the legislature.</p>"
            "<p>19.255.010 Personal information, notice of security breaches.</p>"
            "<p>Any person or business that conducts business in this state shall disclose a breach.</p>"
            "<p>19.255.020 Liability of processors.</p>"
            "<p>A processor is liable for the reasonable cost of reissuing cards.</p>"
            "</main></body></html>"
        )
        provisions = LegislatureParser().parse_content(html, "")
        assert [p.section_number for p in provisions] == ["19.255.010", "19.255.020"]
        assert provisions[1].text == "A processor is liable for the reasonable cost of reissuing cards."

    def test_sibling_cap(self, caplog):
        paragraphs = "".join(f"<p>Paragraph {i} of the notice requirements.</p>" for i in range(105))
        html = f"<html><body><main><h2>Section 1-1-1. Notice</h2>{paragraphs}</main></body></html>"

        with caplog.at_level(logging.WARNING, logger="uslex.legislation.parser.legislature"):
            provisions = LegislatureParser().parse_content(html, "https://example.gov/statute")

        assert len(provisions) == 1
        assert "Paragraph 99 of" in provisions[0].text
        assert "Paragraph 100 of" not in provisions[0].text
        assert "truncated" in caplog.text

    def test_no_container(self):
        assert LegislatureParser().parse_content("<p>Too short.</p>", "") == []


class TestSimpleHtmlParser:
    def test_splits_plain_text(self):
        provisions = SimpleHtmlParser().parse_content(PLAIN_TEXT, "")

        assert [p.section_number for p in provisions] == ["45.48.010", "45.48.020"]
        assert [p.citation for p in provisions] == ["§ 45.48.010", "§ 45.48.020"]
        assert provisions[0].title == "Disclosure of breach of security."
        assert provisions[0].text.startswith("Disclosure of breach of security. (a) If a covered person")
        assert provisions[1].text.endswith("interfere with a criminal investigation.")

    def test_title_starting_with_number_is_kept(self):
        text = (
            "§ 7. 2020-01 amendments to the notice rules\n"
            "Notices sent after January 1, 2020 must name the categories of information exposed.\n"
        )
        provisions = SimpleHtmlParser().parse_content(text, "")

        assert [p.section_number for p in provisions] == ["7"]
        assert provisions[0].title == "2020-01 amendments to the notice rules"

    def test_unsectioned_page(self):
        html = "<p>This page has no citation markers, only a description of privacy rules.</p>"
        provisions = SimpleHtmlParser().parse_content(html, "")

        assert len(provisions) == 1
        assert provisions[0].section_number == "unknown"
        assert provisions[0].citation == "unknown"
        assert provisions[0].title == ""

    def test_slices_are_capped(self):
        text = "§ 1. Long section\n" + "lorem ipsum " * 2000
        provisions = SimpleHtmlParser().parse_content(text, "")
        assert len(provisions) == 1
        assert len(provisions[0].text) <= 10_000

    @pytest.mark.parametrize("html", ["", "   ", "<script>only()</script>"])
    def test_empty(self, html):
        assert SimpleHtmlParser().parse_content(html, "") == []


class TestExtractionChain:
    def test_strategy_order(self):
        def names(chain):
            return [strategy.name for strategy in chain.strategies]

        assert names(ExtractionChain.for_parser(url=LEGINFO_URL)) == [
            "leginfo", "legislature", "simple-html"
        ]
        assert names(ExtractionChain.for_parser("lawserver")) == [
            "lawserver", "legislature", "simple-html"
        ]
        assert names(ExtractionChain.for_parser(url="https://example.gov/code")) == [
            "legislature", "simple-html"
        ]
        assert names(ExtractionChain.for_parser("legislature", LEGINFO_URL)) == [
            "legislature", "simple-html"
        ]
        assert names(ExtractionChain.for_parser("simple-html")) == ["simple-html"]

    def test_unknown_parser(self):
        with pytest.raises(UnknownParserError, match="bogus"):
            ExtractionChain.for_parser("bogus")

    def test_site_parser_chosen_by_host(self):
        provisions = extract(read_page("leginfo_civ_1798.html"), LEGINFO_URL)
        assert [p.section_number for p in provisions] == ["1798.81.5", "1798.82"]

    def test_plain_text_falls_through(self):
        provisions = extract(PLAIN_TEXT)
        assert [p.section_number for p in provisions] == ["45.48.010", "45.48.020"]

    def test_unrecognised_page_is_kept(self):
        provisions = extract("<p>No markers here, just a notice about data privacy law.</p>")
        assert [p.section_number for p in provisions] == ["unknown"]

    def test_failing_strategy_is_skipped(self, caplog):
        chain = ExtractionChain([BrokenParser(), SimpleHtmlParser()])
        with caplog.at_level(logging.WARNING):
            provisions = chain.extract(PLAIN_TEXT, "https://example.gov/code")

        assert len(provisions) == 2
        assert "broken failed" in caplog.text

    def test_no_strategy_succeeds(self):
        assert ExtractionChain([BrokenParser()]).extract(PLAIN_TEXT) == []

    def test_deterministic(self):
        html = read_page("legislature_headings.html")
        assert extract(html) == extract(html)

    def test_empty_page(self):
        assert extract("") == []

    def test_soup_helper_reads_fixture(self):
        soup = load_html_file_to_soup(str(TEST_DATA / "lawserver_ak_45_48_010.html"))
        assert soup.find("h1").get_text().startswith("Alaska Statutes 45.48.010")
