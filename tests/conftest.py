"""Shared fixtures: a small provision database covering four jurisdictions."""

import json

import pytest
from fastapi.testclient import TestClient

from backend.api.app import create_app
from uslex.core.store import ProvisionStore
from uslex.legislation.models import SeedFile
from uslex.requirements.loader import load_classifications

SEED_DATA = {
    "US-FED": {
        "documents": [
            {
                "jurisdiction": "US-FED",
                "title": "Computer Fraud and Abuse Act",
                "identifier": "18 USC 1030",
                "short_name": "CFAA",
                "effective_date": "1986-10-16",
                "last_amended": "2008-09-26",
                "source_url": "https://uscode.house.gov/view.xhtml?req=granuleid:USC-prelim-title18-section1030",
            }
        ],
        "provisions": [
            {
                "document_index": 0,
                "jurisdiction": "US-FED",
                "section_number": "§ 1030(a)",
                "title": "Fraud and related activity in connection with computers",
                "text": (
                    "Whoever intentionally accesses a protected computer without authorization, "
                    "and as a result of such conduct recklessly causes damage, shall be punished "
                    "as provided in subsection (c) of this section."
                ),
                "order_index": 1,
            },
            {
                "document_index": 0,
                "jurisdiction": "US-FED",
                "section_number": "§ 1030(e)",
                "title": "Definitions",
                "text": (
                    "As used in this section, the term protected computer means a computer "
                    "exclusively for the use of a financial institution or the United States Government."
                ),
                "order_index": 2,
            },
        ],
    },
    "US-CA": {
        "documents": [
            {
                "jurisdiction": "US-CA",
                "title": "California Data Breach Notification Law",
                "identifier": "Cal. Civ. Code § 1798.82",
                "short_name": "CA Breach",
                "status": "amended",
                "effective_date": "2003-07-01",
            },
            {
                "jurisdiction": "US-CA",
                "title": "California Consumer Privacy Act",
                "identifier": "Cal. Civ. Code § 1798.100 et seq.",
                "short_name": "CCPA/CPRA",
                "status": "amended",
                "effective_date": "2020-01-01",
                "last_amended": "2023-01-01",
            },
        ],
        "provisions": [
            {
                "document_index": 0,
                "jurisdiction": "US-CA",
                "section_number": "§ 1798.82",
                "title": "Breach of security; disclosure",
                "text": (
                    "A person or business that conducts business in California, and that owns or "
                    "licenses computerized data that includes personal information, shall disclose "
                    "a breach of the security of the system following discovery or notification of "
                    "the breach in the most expedient time possible and without unreasonable delay."
                ),
                "order_index": 1,
            },
            {
                "document_index": 1,
                "jurisdiction": "US-CA",
                "section_number": "§ 1798.100",
                "title": "General duties of businesses that collect personal information",
                "text": (
                    "A business that controls the collection of a consumer's personal information "
                    "shall, at or before the point of collection, inform consumers of the categories "
                    "of personal information to be collected."
                ),
                "order_index": 1,
            },
            {
                "document_index": 1,
                "jurisdiction": "US-CA",
                "section_number": "§ 1798.105",
                "title": "Consumers' right to delete personal information",
                "text": (
                    "A consumer shall have the right to request that a business delete any personal "
                    "information about the consumer which the business has collected from the consumer."
                ),
                "order_index": 2,
            },
            {
                "document_index": 1,
                "jurisdiction": "US-CA",
                "section_number": "§ 1798.150",
                "title": "Personal information security breaches",
                "text": (
                    "Any consumer whose nonencrypted and nonredacted personal information is subject "
                    "to unauthorized access and exfiltration, theft, or disclosure as a result of the "
                    "business's violation of the duty to implement and maintain reasonable security "
                    "procedures may institute a civil action."
                ),
                "order_index": 3,
            },
        ],
    },
    "US-NY": {
        "documents": [
            {
                "jurisdiction": "US-NY",
                "title": "New York Information Security Breach and Notification Act",
                "identifier": "N.Y. Gen. Bus. Law § 899-aa",
                "short_name": "NY Breach",
                "status": "amended",
            },
            {
                "jurisdiction": "US-NY",
                "title": "Stop Hacks and Improve Electronic Data Security Act",
                "identifier": "N.Y. Gen. Bus. Law § 899-bb",
                "short_name": "SHIELD Act",
                "status": "in_force",
                "effective_date": "2020-03-21",
            },
        ],
        "provisions": [
            {
                "document_index": 0,
                "jurisdiction": "US-NY",
                "section_number": "§ 899-aa",
                "title": "Notification; person without valid authorization has acquired private information",
                "text": (
                    "Any person or business which owns or licenses computerized data which includes "
                    "private information shall disclose any breach of the security of the system "
                    "following discovery or notification of the breach to any resident of New York "
                    "state whose private information was accessed or acquired by a person without "
                    "valid authorization."
                ),
                "order_index": 1,
            },
            {
                "document_index": 1,
                "jurisdiction": "US-NY",
                "section_number": "§ 899-bb",
                "title": "Data security protections",
                "text": (
                    "Any person or business that owns or licenses computerized data which includes "
                    "private information of a resident of New York shall develop, implement and "
                    "maintain reasonable safeguards to protect the security, confidentiality and "
                    "integrity of the private information."
                ),
                "order_index": 1,
            },
        ],
    },
    "US-TX": {
        "documents": [
            {
                "jurisdiction": "US-TX",
                "title": "Texas Identity Theft Enforcement and Protection Act",
                "identifier": "Tex. Bus. & Com. Code ch. 521",
                "short_name": "TX Breach",
                "status": "amended",
                "effective_date": "2009-04-01",
            },
            {
                "jurisdiction": "US-TX",
                "title": "Texas Identity Theft Enforcement and Protection Act (former chapter 48)",
                "identifier": "Tex. Bus. & Com. Code ch. 48",
                "short_name": "TX ITEPA",
                "status": "repealed",
                "effective_date": "2005-09-01",
            },
        ],
        "provisions": [
            {
                "document_index": 0,
                "jurisdiction": "US-TX",
                "section_number": "§ 521.052",
                "title": "Business duty to protect sensitive personal information",
                "text": (
                    "A business shall implement and maintain reasonable procedures to protect from "
                    "unlawful use or disclosure any sensitive personal information collected or "
                    "maintained by the business in the regular course of business."
                ),
                "order_index": 1,
            },
            {
                "document_index": 0,
                "jurisdiction": "US-TX",
                "section_number": "§ 521.053",
                "title": "Notification required following breach of security of computerized data",
                "text": (
                    "A person who conducts business in this state and owns or licenses computerized "
                    "data that includes sensitive personal information shall disclose any breach of "
                    "system security to any individual whose sensitive personal information was "
                    "acquired by an unauthorized person. The notification shall be made without "
                    "unreasonable delay and not later than the 60th day after the date on which the "
                    "person determines that the breach occurred."
                ),
                "order_index": 2,
            },
            {
                "document_index": 1,
                "jurisdiction": "US-TX",
                "section_number": "§ 48.103",
                "title": "Notification required following breach of security",
                "text": "Repealed by Acts 2007, 80th Leg., R.S., Ch. 885, Sec. 2.47(1), eff. April 1, 2009.",
                "order_index": 1,
            },
        ],
    },
}

CLASSIFICATIONS = {
    "requirements": [
        {
            "jurisdiction": "US-CA",
            "category": "breach_notification",
            "subcategory": "timeline",
            "law_short_name": "CA Breach",
            "section_number": "1798.82",
            "summary_text": "Notify affected residents in the most expedient time possible and without unreasonable delay.",
            "notification_target": "Affected residents; Attorney General if more than 500 residents",
            "private_right_of_action": True,
        },
        {
            "jurisdiction": "US-CA",
            "category": "privacy_rights",
            "subcategory": "right_to_delete",
            "law_short_name": "CCPA/CPRA",
            "section_number": "§ 1798.105",
            "summary_text": "Consumers may request deletion of personal information a business collected from them.",
            "private_right_of_action": False,
        },
        {
            "jurisdiction": "US-NY",
            "category": "breach_notification",
            "subcategory": "timeline",
            "law_short_name": "NY Breach",
            "section_number": "899-aa",
            "summary_text": "Notify affected New York residents within 30 days of discovering the breach.",
            "notification_days": 30,
            "notification_target": "Affected residents, Attorney General, Department of State",
        },
        {
            "jurisdiction": "US-TX",
            "category": "breach_notification",
            "subcategory": "timeline",
            "law_short_name": "TX Breach",
            "section_number": "§ 521.053",
            "summary_text": "Notify affected individuals without unreasonable delay and within 60 days.",
            "notification_days": 60,
            "penalty_max": "$100 per individual per day, up to $250,000",
        },
        {
            "jurisdiction": "US-FED",
            "category": "cybersecurity",
            "subcategory": "security_requirements",
            "law_short_name": "CFAA",
            "section_number": "1030",
            "summary_text": "Unauthorized access to a protected computer is a federal offence.",
        },
        {
            "jurisdiction": "US-FL",
            "category": "breach_notification",
            "subcategory": "timeline",
            "law_short_name": "FIPA",
            "section_number": "501.171",
            "summary_text": "Notify affected Florida residents within 30 days.",
            "notification_days": 30,
        },
        {
            "jurisdiction": "US-XX",
            "category": "breach_notification",
            "subcategory": "timeline",
            "summary_text": "Not a real jurisdiction.",
        },
        {
            "jurisdiction": "US-CA",
            "category": "breach_notification",
            "subcategory": "carrier_pigeons",
            "summary_text": "Not a real subcategory.",
        },
    ]
}


@pytest.fixture
def seed_files() -> list[SeedFile]:
    return [SeedFile(**payload) for payload in SEED_DATA.values()]


@pytest.fixture
def classifications_file(tmp_path):
    path = tmp_path / "classifications.json"
    path.write_text(json.dumps(CLASSIFICATIONS), encoding="utf-8")
    return str(path)


@pytest.fixture
def store_path(tmp_path, seed_files, classifications_file):
    """A built provision database, as the ingest loader would leave it."""
    path = str(tmp_path / "uslex.db")
    with ProvisionStore(path) as store:
        for seed in seed_files:
            store.ingest_seed(seed)
        load_classifications(store, classifications_file)
        store.refresh_metadata()
    return path


@pytest.fixture
def store(store_path):
    """The database opened read-only, as the query tools see it."""
    with ProvisionStore(store_path, read_only=True) as store:
        yield store


@pytest.fixture
def client(store_path):
    """Return a TestClient for an app serving the fixture database."""
    with TestClient(create_app(store_path)) as test_client:
        yield test_client


@pytest.fixture
def document_id(store):
    """Look up a fixture document id by jurisdiction and short name."""

    def lookup(jurisdiction: str, short_name: str) -> int:
        return store.find_documents(jurisdiction, short_name=short_name)[0]["id"]

    return lookup
