import os

# Storage
DATA_DIR = os.environ.get("USLEX_DATA_DIR", os.path.join(os.getcwd(), "data"))
DB_PATH = os.environ.get("USLEX_DB_PATH", os.path.join(DATA_DIR, "database.db"))
SEED_DIR = os.environ.get("USLEX_SEED_DIR", os.path.join(DATA_DIR, "seed"))
MANIFEST_PATH = os.environ.get(
    "USLEX_MANIFEST_PATH", os.path.join(DATA_DIR, "manifests", "states.json")
)
CLASSIFICATIONS_FILE = "classifications.json"

# Ingest fetching
SOURCE_CACHE_DIR = os.environ.get(
    "USLEX_SOURCE_CACHE_DIR", os.path.join(DATA_DIR, "cache", "source")
)
FETCH_DELAY_SECONDS = float(os.environ.get("USLEX_FETCH_DELAY", "2.0"))
CACHE_TTL_SECONDS = int(os.environ.get("USLEX_CACHE_TTL", str(30 * 24 * 60 * 60)))  # 30 days
USER_AGENT = os.environ.get(
    "USLEX_USER_AGENT", "uslex/0.1 (statute ingestion; contact: opensource@uslex.dev)"
)

# Extraction bounds
MAX_PROVISION_CHARS = 10_000
MAX_TITLE_CHARS = 200
MAX_HEADING_SIBLINGS = 100
MIN_CONTAINER_CHARS = 100
SECTION_START_WINDOW = 50
UNKNOWN_SECTION = "unknown"

# Query limits
DEFAULT_SEARCH_LIMIT = 10
MAX_SEARCH_LIMIT = 50
DEFAULT_STANCE_LIMIT = 5
MAX_STANCE_LIMIT = 20
MAX_COMPARISON_ROWS = 200
MAX_REQUIREMENT_ROWS = 100
ALL_JURISDICTIONS = "all"

SCHEMA_VERSION = "1"

DISCLAIMER = (
    "Statute text is extracted from official and secondary publishers and may be "
    "incomplete or out of date. This is not legal advice; verify against the official source."
)
SOURCE_AUTHORITY = "State legislature websites and the US Code (uscode.house.gov)"

JURISDICTIONS = {
    "US-FED": "United States (Federal)",
    "US-AL": "Alabama",
    "US-AK": "Alaska",
    "US-AZ": "Arizona",
    "US-AR": "Arkansas",
    "US-CA": "California",
    "US-CO": "Colorado",
    "US-CT": "Connecticut",
    "US-DE": "Delaware",
    "US-DC": "District of Columbia",
    "US-FL": "Florida",
    "US-GA": "Georgia",
    "US-HI": "Hawaii",
    "US-ID": "Idaho",
    "US-IL": "Illinois",
    "US-IN": "Indiana",
    "US-IA": "Iowa",
    "US-KS": "Kansas",
    "US-KY": "Kentucky",
    "US-LA": "Louisiana",
    "US-ME": "Maine",
    "US-MD": "Maryland",
    "US-MA": "Massachusetts",
    "US-MI": "Michigan",
    "US-MN": "Minnesota",
    "US-MS": "Mississippi",
    "US-MO": "Missouri",
    "US-MT": "Montana",
    "US-NE": "Nebraska",
    "US-NV": "Nevada",
    "US-NH": "New Hampshire",
    "US-NJ": "New Jersey",
    "US-NM": "New Mexico",
    "US-NY": "New York",
    "US-NC": "North Carolina",
    "US-ND": "North Dakota",
    "US-OH": "Ohio",
    "US-OK": "Oklahoma",
    "US-OR": "Oregon",
    "US-PA": "Pennsylvania",
    "US-RI": "Rhode Island",
    "US-SC": "South Carolina",
    "US-SD": "South Dakota",
    "US-TN": "Tennessee",
    "US-TX": "Texas",
    "US-UT": "Utah",
    "US-VT": "Vermont",
    "US-VA": "Virginia",
    "US-WA": "Washington",
    "US-WV": "West Virginia",
    "US-WI": "Wisconsin",
    "US-WY": "Wyoming",
}

# Fixed requirement taxonomy: (category, subcategory, description)
REQUIREMENT_CATEGORIES = [
    ("breach_notification", "timeline", "Deadline for notifying affected individuals or regulators"),
    ("breach_notification", "definition", "Definition of a security breach and of personal information"),
    ("breach_notification", "scope", "Entities and data covered by the notification duty"),
    ("breach_notification", "notification_target", "Who must be notified (individuals, regulator, agencies)"),
    ("breach_notification", "exemptions", "Encryption safe harbors and other exemptions"),
    ("breach_notification", "penalties", "Civil penalties and enforcement for notification failures"),
    ("privacy_rights", "right_to_know", "Right to know what personal data is collected"),
    ("privacy_rights", "right_to_delete", "Right to request deletion of personal data"),
    ("privacy_rights", "right_to_opt_out", "Right to opt out of sale or targeted advertising"),
    ("privacy_rights", "right_to_correct", "Right to correct inaccurate personal data"),
    ("privacy_rights", "right_to_portability", "Right to obtain data in a portable format"),
    ("cybersecurity", "security_requirements", "Reasonable security procedures and practices"),
    ("cybersecurity", "risk_assessment", "Risk assessment obligations"),
    ("cybersecurity", "incident_response", "Incident response program requirements"),
    ("cybersecurity", "encryption", "Encryption mandates for personal data"),
    ("cybersecurity", "vendor_management", "Third-party service provider oversight"),
    ("sector_specific", "financial", "Financial sector data security rules"),
    ("sector_specific", "healthcare", "Healthcare data privacy and security rules"),
    ("sector_specific", "education", "Student data privacy rules"),
    ("sector_specific", "insurance", "Insurance data security rules"),
]
