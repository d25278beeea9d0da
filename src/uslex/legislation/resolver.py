"""Section lookup that tolerates differing citation granularity.

Some sources store one provision per subsection (``§ 1.1(a)``), others one
per whole section (``§ 1.1``). A request is first matched exactly, then
against its hierarchical relatives in either direction.
"""

import logging
import re
import sqlite3
from typing import Sequence

from uslex.core.store import ProvisionStore

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")
_SYMBOL_PREFIX = re.compile(r"^(§§?)\s*")


def canonical_section(value: str) -> str:
    """Bring a user-supplied section into the stored ``§ N`` form.

    >>> canonical_section("1798.82")
    '§ 1798.82'
    >>> canonical_section("§1798.82(a)")
    '§ 1798.82(a)'
    """
    value = _WHITESPACE.sub(" ", value).strip()
    if not value:
        return value
    if value[0].isdigit():
        return f"§ {value}"
    return _SYMBOL_PREFIX.sub(r"\1 ", value)


def resolve(
    store: ProvisionStore, document_ids: Sequence[int], section_number: str
) -> list[sqlite3.Row]:
    """Return the provisions of the given documents that answer a section request.

    An exact match wins. Failing that, every provision that is a child of
    the request (request is a strict prefix of it) or its parent (it is a
    strict prefix of the request) is returned, in document order.
    """
    if not document_ids or not section_number:
        return []

    exact = store.provisions_with_section(document_ids, section_number)
    if exact:
        return exact

    related = store.provisions_related_to_section(document_ids, section_number)
    if related:
        logger.debug(
            f"Section {section_number} resolved hierarchically to "
            f"{[row['section_number'] for row in related]}"
        )
    return related
