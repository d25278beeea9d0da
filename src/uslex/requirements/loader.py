"""Load classified requirements from the classifications seed file."""

import json
import logging
import os
import sqlite3
from typing import Optional

from pydantic import ValidationError

from uslex.core.exceptions import InputValidationError
from uslex.core.store import ProvisionStore
from uslex.core.validate import validate_jurisdiction
from uslex.legislation.resolver import canonical_section, resolve
from uslex.requirements.models import Classification

logger = logging.getLogger(__name__)


def _match_document(store: ProvisionStore, entry: Classification) -> Optional[sqlite3.Row]:
    if not entry.law_short_name:
        return None
    exact = store.find_documents(entry.jurisdiction, short_name=entry.law_short_name)
    if exact:
        return exact[0]
    fuzzy = store.documents_containing(entry.law_short_name, entry.jurisdiction, limit=1)
    return fuzzy[0] if fuzzy else None


def load_classifications(store: ProvisionStore, path: str) -> int:
    """Replace the stored requirements of every jurisdiction named in ``path``.

    Entries for unknown jurisdictions or categories are skipped with a
    warning. A missing document or provision leaves the reference empty.

    Returns:
        The number of requirement rows written
    """
    if not os.path.exists(path):
        logger.info(f"No classifications file at {path}, skipping requirements")
        return 0

    with open(path, "r", encoding="utf-8") as f:
        raw_entries = json.load(f)["requirements"]

    rows = []
    jurisdictions: set[str] = set()
    for index, raw in enumerate(raw_entries):
        try:
            entry = Classification(**raw)
            entry.jurisdiction = validate_jurisdiction(entry.jurisdiction, required=True)
        except (ValidationError, InputValidationError) as e:
            logger.warning(f"Skipping classification {index}: {e}", extra={"entry": index})
            continue

        category_id = store.category_id(entry.category, entry.subcategory)
        if category_id is None:
            logger.warning(
                f"Skipping classification {index}: unknown category "
                f"{entry.category}/{entry.subcategory}",
                extra={"entry": index, "category": entry.category},
            )
            continue

        document = _match_document(store, entry)
        provision = None
        if document is not None and entry.section_number:
            matches = resolve(store, [document["id"]], canonical_section(entry.section_number))
            provision = matches[0] if matches else None
        elif entry.law_short_name:
            logger.warning(
                f"No document for {entry.jurisdiction} {entry.law_short_name}",
                extra={"jurisdiction": entry.jurisdiction, "short_name": entry.law_short_name},
            )

        jurisdictions.add(entry.jurisdiction)
        rows.append(
            {
                "jurisdiction": entry.jurisdiction,
                "category_id": category_id,
                "document_id": document["id"] if document is not None else None,
                "provision_id": provision["id"] if provision is not None else None,
                "summary_text": entry.summary_text,
                "notification_days": entry.notification_days,
                "notification_target": entry.notification_target,
                "applies_to": entry.applies_to,
                "threshold": entry.threshold,
                "penalty_max": entry.penalty_max,
                "private_right_of_action": (
                    None
                    if entry.private_right_of_action is None
                    else int(entry.private_right_of_action)
                ),
                "effective_date": entry.effective_date,
                "last_amended": entry.last_amended,
                "notes": entry.notes,
            }
        )

    if not rows:
        return 0
    written = store.replace_requirements(sorted(jurisdictions), rows)
    logger.info(
        f"Loaded {written} requirement rows for {len(jurisdictions)} jurisdictions",
        extra={"requirements": written, "jurisdictions": sorted(jurisdictions)},
    )
    return written
