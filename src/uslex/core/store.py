"""SQLite provision store with an FTS5 index over provision text."""

import logging
import os
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Optional, Sequence

from uslex.core.exceptions import StoreUnavailableError
from uslex.core.utils import escape_like
from uslex.legislation.models import SeedFile
from uslex.settings import JURISDICTIONS, REQUIREMENT_CATEGORIES, SCHEMA_VERSION

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS jurisdictions (
    code TEXT PRIMARY KEY,
    name TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS legal_documents (
    id INTEGER PRIMARY KEY,
    jurisdiction TEXT NOT NULL,
    title TEXT NOT NULL,
    identifier TEXT,
    short_name TEXT,
    document_type TEXT DEFAULT 'statute',
    status TEXT DEFAULT 'in_force',
    effective_date TEXT,
    last_amended TEXT,
    source_url TEXT,
    created_at TEXT DEFAULT (datetime('now')),
    UNIQUE (jurisdiction, identifier, short_name)
);

CREATE TABLE IF NOT EXISTS legal_provisions (
    id INTEGER PRIMARY KEY,
    document_id INTEGER NOT NULL REFERENCES legal_documents(id) ON DELETE CASCADE,
    jurisdiction TEXT NOT NULL,
    section_number TEXT,
    title TEXT,
    text TEXT NOT NULL,
    order_index INTEGER NOT NULL,
    UNIQUE (document_id, order_index)
);

CREATE VIRTUAL TABLE IF NOT EXISTS provisions_fts USING fts5(
    section_number, title, text,
    content='legal_provisions',
    content_rowid='id',
    tokenize='unicode61'
);

CREATE TRIGGER IF NOT EXISTS provisions_ai AFTER INSERT ON legal_provisions BEGIN
    INSERT INTO provisions_fts(rowid, section_number, title, text)
    VALUES (new.id, new.section_number, new.title, new.text);
END;

CREATE TRIGGER IF NOT EXISTS provisions_ad AFTER DELETE ON legal_provisions BEGIN
    INSERT INTO provisions_fts(provisions_fts, rowid, section_number, title, text)
    VALUES ('delete', old.id, old.section_number, old.title, old.text);
END;

CREATE TRIGGER IF NOT EXISTS provisions_au AFTER UPDATE ON legal_provisions BEGIN
    INSERT INTO provisions_fts(provisions_fts, rowid, section_number, title, text)
    VALUES ('delete', old.id, old.section_number, old.title, old.text);
    INSERT INTO provisions_fts(rowid, section_number, title, text)
    VALUES (new.id, new.section_number, new.title, new.text);
END;

CREATE TABLE IF NOT EXISTS requirement_categories (
    id INTEGER PRIMARY KEY,
    category TEXT NOT NULL,
    subcategory TEXT NOT NULL,
    description TEXT,
    UNIQUE (category, subcategory)
);

CREATE TABLE IF NOT EXISTS state_requirements (
    id INTEGER PRIMARY KEY,
    jurisdiction TEXT NOT NULL,
    category_id INTEGER NOT NULL REFERENCES requirement_categories(id),
    document_id INTEGER REFERENCES legal_documents(id) ON DELETE SET NULL,
    provision_id INTEGER REFERENCES legal_provisions(id) ON DELETE SET NULL,
    summary_text TEXT NOT NULL,
    notification_days INTEGER,
    notification_target TEXT,
    applies_to TEXT,
    threshold TEXT,
    penalty_max TEXT,
    private_right_of_action INTEGER,
    effective_date TEXT,
    last_amended TEXT,
    notes TEXT
);

CREATE TABLE IF NOT EXISTS db_metadata (
    key TEXT PRIMARY KEY,
    value TEXT
);

CREATE INDEX IF NOT EXISTS idx_docs_jurisdiction ON legal_documents(jurisdiction);
CREATE INDEX IF NOT EXISTS idx_docs_short_name ON legal_documents(short_name);
CREATE INDEX IF NOT EXISTS idx_docs_identifier ON legal_documents(identifier);
CREATE INDEX IF NOT EXISTS idx_provs_jurisdiction ON legal_provisions(jurisdiction);
CREATE INDEX IF NOT EXISTS idx_provs_document_id ON legal_provisions(document_id);
CREATE INDEX IF NOT EXISTS idx_provs_section_number ON legal_provisions(section_number);
CREATE INDEX IF NOT EXISTS idx_requirements_jurisdiction ON state_requirements(jurisdiction);
CREATE INDEX IF NOT EXISTS idx_requirements_category ON state_requirements(category_id);
"""

_PROVISION_COLUMNS = """
    p.id, p.document_id, p.jurisdiction, p.section_number, p.title, p.text, p.order_index,
    d.title AS document_title, d.identifier, d.short_name
"""

_REQUIREMENT_COLUMNS = """
    sr.jurisdiction,
    j.name AS jurisdiction_name,
    rc.category,
    rc.subcategory,
    sr.summary_text AS summary,
    sr.notification_days,
    sr.notification_target,
    sr.applies_to,
    sr.threshold,
    sr.penalty_max,
    sr.private_right_of_action,
    d.title AS law_title,
    d.short_name AS law_short_name,
    p.section_number,
    sr.effective_date,
    sr.notes
"""

_REQUIREMENT_JOINS = """
    FROM state_requirements AS sr
    JOIN requirement_categories AS rc ON sr.category_id = rc.id
    LEFT JOIN jurisdictions AS j ON sr.jurisdiction = j.code
    LEFT JOIN legal_documents AS d ON sr.document_id = d.id
    LEFT JOIN legal_provisions AS p ON sr.provision_id = p.id
"""


def _placeholders(values: Sequence[Any]) -> str:
    return ", ".join("?" for _ in values)


class ProvisionStore:
    """SQLite-backed store of documents, provisions and classified requirements.

    Opened read-only at query time. The ingest loader opens it writable and
    writes one seed file per transaction.
    """

    def __init__(self, path: str | Path, read_only: bool = False):
        self.path = str(path)
        self.read_only = read_only

        if read_only:
            if not os.path.exists(self.path):
                raise StoreUnavailableError(f"Provision database not found at {self.path}")
            uri = f"{Path(self.path).resolve().as_uri()}?mode=ro"
            try:
                self.conn = sqlite3.connect(uri, uri=True, check_same_thread=False)
            except sqlite3.Error as e:
                raise StoreUnavailableError(f"Cannot open {self.path}: {e}") from e
        else:
            os.makedirs(os.path.dirname(os.path.abspath(self.path)), exist_ok=True)
            self.conn = sqlite3.connect(self.path)

        self.conn.row_factory = sqlite3.Row
        self.conn.execute("PRAGMA foreign_keys = ON")
        if not read_only:
            self._init_schema()

    def __enter__(self) -> "ProvisionStore":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self.conn.close()

    def _init_schema(self) -> None:
        with self.conn:
            self.conn.executescript(SCHEMA)
            self.conn.executemany(
                "INSERT OR IGNORE INTO jurisdictions (code, name) VALUES (?, ?)",
                JURISDICTIONS.items(),
            )
            self.conn.executemany(
                "INSERT OR IGNORE INTO requirement_categories (category, subcategory, description) "
                "VALUES (?, ?, ?)",
                REQUIREMENT_CATEGORIES,
            )

    # ------------------------------------------------------------------
    # Ingest

    def ingest_seed(self, seed: SeedFile) -> tuple[int, int]:
        """Write one seed file atomically, replacing documents with the same identity.

        Returns:
            The number of documents and provisions written
        """
        document_ids: list[int] = []
        with self.conn:
            for document in seed.documents:
                key = document.identifier or document.short_name
                stale = [
                    row["id"]
                    for row in self.conn.execute(
                        "SELECT id FROM legal_documents "
                        "WHERE jurisdiction = ? AND COALESCE(identifier, short_name) = ?",
                        (document.jurisdiction, key),
                    )
                ]
                if stale:
                    logger.info(f"Replacing {len(stale)} existing record(s) for {key}")
                    self.conn.execute(
                        f"DELETE FROM legal_provisions WHERE document_id IN ({_placeholders(stale)})",
                        stale,
                    )
                    self.conn.execute(
                        f"DELETE FROM legal_documents WHERE id IN ({_placeholders(stale)})", stale
                    )

                cursor = self.conn.execute(
                    """
                    INSERT INTO legal_documents (
                        jurisdiction, title, identifier, short_name, document_type, status,
                        effective_date, last_amended, source_url, created_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        document.jurisdiction,
                        document.title,
                        document.identifier,
                        document.short_name,
                        document.document_type.value,
                        document.status.value,
                        document.effective_date.isoformat() if document.effective_date else None,
                        document.last_amended.isoformat() if document.last_amended else None,
                        document.source_url,
                        document.created_at.isoformat(),
                    ),
                )
                document_ids.append(cursor.lastrowid)

            self.conn.executemany(
                """
                INSERT INTO legal_provisions (
                    document_id, jurisdiction, section_number, title, text, order_index
                ) VALUES (?, ?, ?, ?, ?, ?)
                """,
                [
                    (
                        document_ids[p.document_index],
                        p.jurisdiction,
                        p.section_number,
                        p.title,
                        p.text,
                        p.order_index,
                    )
                    for p in seed.provisions
                ],
            )
        return len(seed.documents), len(seed.provisions)

    def replace_requirements(
        self, jurisdictions: Sequence[str], rows: Iterable[dict[str, Any]]
    ) -> int:
        """Replace the classified requirements of some jurisdictions in one transaction."""
        columns = [
            "jurisdiction", "category_id", "document_id", "provision_id", "summary_text",
            "notification_days", "notification_target", "applies_to", "threshold",
            "penalty_max", "private_right_of_action", "effective_date", "last_amended", "notes",
        ]
        values = [tuple(row.get(column) for column in columns) for row in rows]
        with self.conn:
            self.conn.execute(
                f"DELETE FROM state_requirements WHERE jurisdiction IN ({_placeholders(jurisdictions)})",
                list(jurisdictions),
            )
            self.conn.executemany(
                f"INSERT INTO state_requirements ({', '.join(columns)}) "
                f"VALUES ({_placeholders(columns)})",
                values,
            )
        return len(values)

    def set_metadata(self, values: dict[str, Any]) -> None:
        with self.conn:
            self.conn.executemany(
                "INSERT OR REPLACE INTO db_metadata (key, value) VALUES (?, ?)",
                [(key, str(value)) for key, value in values.items()],
            )

    def refresh_metadata(self) -> dict[str, Any]:
        values = {
            "built_at": datetime.now(timezone.utc).isoformat(),
            "schema_version": SCHEMA_VERSION,
            **self.counts(),
        }
        self.set_metadata(values)
        return values

    # ------------------------------------------------------------------
    # Reads

    def get_metadata(self) -> dict[str, str]:
        return {
            row["key"]: row["value"]
            for row in self.conn.execute("SELECT key, value FROM db_metadata")
        }

    def counts(self) -> dict[str, int]:
        return {
            table: self.conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]
            for table in ("legal_documents", "legal_provisions", "state_requirements")
        }

    def category_id(self, category: str, subcategory: str) -> Optional[int]:
        row = self.conn.execute(
            "SELECT id FROM requirement_categories WHERE category = ? AND subcategory = ?",
            (category, subcategory),
        ).fetchone()
        return row["id"] if row else None

    def search(
        self, fts_query: str, jurisdictions: Optional[Sequence[str]], limit: int
    ) -> list[sqlite3.Row]:
        """Run an FTS5 MATCH query, best matches first (bm25 is lower-is-better).

        ``jurisdictions=None`` searches every jurisdiction.
        """
        sql = """
            SELECT
                d.jurisdiction,
                d.title AS document_title,
                d.identifier,
                d.short_name,
                p.section_number,
                p.title,
                snippet(provisions_fts, 2, '**', '**', '...', 32) AS snippet,
                bm25(provisions_fts) AS rank
            FROM provisions_fts
            JOIN legal_provisions AS p ON p.id = provisions_fts.rowid
            JOIN legal_documents AS d ON d.id = p.document_id
            WHERE provisions_fts MATCH ?
        """
        params: list[Any] = [fts_query]
        if jurisdictions is not None:
            sql += f" AND p.jurisdiction IN ({_placeholders(jurisdictions)})"
            params.extend(jurisdictions)
        sql += " ORDER BY rank LIMIT ?"
        params.append(limit)
        return self.conn.execute(sql, params).fetchall()

    def find_documents(
        self,
        jurisdiction: str,
        identifier: Optional[str] = None,
        short_name: Optional[str] = None,
    ) -> list[sqlite3.Row]:
        """Exact document lookup by identifier, else by short name."""
        if identifier:
            column, value = "identifier", identifier
        elif short_name:
            column, value = "short_name", short_name
        else:
            return []
        return self.conn.execute(
            f"SELECT * FROM legal_documents WHERE jurisdiction = ? AND {column} = ? ORDER BY id",
            (jurisdiction, value),
        ).fetchall()

    def documents_containing(
        self, text: str, jurisdiction: Optional[str] = None, limit: int = 10
    ) -> list[sqlite3.Row]:
        """Documents whose identifier, short name or title contains ``text``."""
        pattern = f"%{escape_like(text)}%"
        sql = """
            SELECT * FROM legal_documents
            WHERE (identifier LIKE ? ESCAPE '\\'
                   OR short_name LIKE ? ESCAPE '\\'
                   OR title LIKE ? ESCAPE '\\')
        """
        params: list[Any] = [pattern, pattern, pattern]
        if jurisdiction:
            sql += " AND jurisdiction = ?"
            params.append(jurisdiction)
        sql += " ORDER BY jurisdiction, id LIMIT ?"
        params.append(limit)
        return self.conn.execute(sql, params).fetchall()

    def documents_named_in(
        self, text: str, jurisdiction: Optional[str] = None, limit: int = 10
    ) -> list[sqlite3.Row]:
        """Documents whose identifier or short name occurs inside ``text``, longest first."""
        sql = """
            SELECT * FROM legal_documents
            WHERE ((length(short_name) > 2 AND instr(?, short_name) > 0)
                   OR (length(identifier) > 2 AND instr(?, identifier) > 0))
        """
        params: list[Any] = [text, text]
        if jurisdiction:
            sql += " AND jurisdiction = ?"
            params.append(jurisdiction)
        sql += """
            ORDER BY max(length(coalesce(short_name, '')), length(coalesce(identifier, ''))) DESC, id
            LIMIT ?
        """
        params.append(limit)
        return self.conn.execute(sql, params).fetchall()

    def list_documents(self, jurisdiction: Optional[str] = None) -> list[sqlite3.Row]:
        sql = """
            SELECT d.*, j.name AS jurisdiction_name, COUNT(p.id) AS provision_count
            FROM legal_documents AS d
            LEFT JOIN jurisdictions AS j ON d.jurisdiction = j.code
            LEFT JOIN legal_provisions AS p ON p.document_id = d.id
        """
        params: list[Any] = []
        if jurisdiction:
            sql += " WHERE d.jurisdiction = ?"
            params.append(jurisdiction)
        sql += " GROUP BY d.id ORDER BY d.jurisdiction, d.title"
        return self.conn.execute(sql, params).fetchall()

    def short_names(self, jurisdiction: str) -> list[str]:
        return [
            row[0]
            for row in self.conn.execute(
                "SELECT DISTINCT short_name FROM legal_documents "
                "WHERE jurisdiction = ? AND short_name IS NOT NULL ORDER BY short_name",
                (jurisdiction,),
            )
        ]

    def provisions(self, document_ids: Sequence[int]) -> list[sqlite3.Row]:
        return self.conn.execute(
            f"""
            SELECT {_PROVISION_COLUMNS}
            FROM legal_provisions AS p JOIN legal_documents AS d ON p.document_id = d.id
            WHERE p.document_id IN ({_placeholders(document_ids)})
            ORDER BY p.document_id, p.order_index
            """,
            list(document_ids),
        ).fetchall()

    def provisions_with_section(
        self, document_ids: Sequence[int], section_number: str
    ) -> list[sqlite3.Row]:
        return self.conn.execute(
            f"""
            SELECT {_PROVISION_COLUMNS}
            FROM legal_provisions AS p JOIN legal_documents AS d ON p.document_id = d.id
            WHERE p.document_id IN ({_placeholders(document_ids)}) AND p.section_number = ?
            ORDER BY p.document_id, p.order_index
            """,
            [*document_ids, section_number],
        ).fetchall()

    def provisions_related_to_section(
        self, document_ids: Sequence[int], section_number: str
    ) -> list[sqlite3.Row]:
        """Provisions that are a child or the parent of ``section_number`` by string prefix.

        Children are matched with LIKE on the escaped request. Parents are
        matched by comparing the request's leading characters with the stored
        value, so stored text is never read as a pattern.
        """
        return self.conn.execute(
            f"""
            SELECT {_PROVISION_COLUMNS}
            FROM legal_provisions AS p JOIN legal_documents AS d ON p.document_id = d.id
            WHERE p.document_id IN ({_placeholders(document_ids)})
              AND (
                (p.section_number LIKE ? ESCAPE '\\' AND length(p.section_number) > length(?)
                 AND substr(p.section_number, 1, length(?)) = ?)
                OR (length(p.section_number) < length(?)
                    AND substr(?, 1, length(p.section_number)) = p.section_number)
              )
            ORDER BY p.document_id, p.order_index
            """,
            [
                *document_ids,
                f"{escape_like(section_number)}%",
                section_number,
                section_number,
                section_number,
                section_number,
                section_number,
            ],
        ).fetchall()

    def provisions_with_section_containing(
        self, document_ids: Sequence[int], fragment: str
    ) -> list[sqlite3.Row]:
        return self.conn.execute(
            f"""
            SELECT {_PROVISION_COLUMNS}
            FROM legal_provisions AS p JOIN legal_documents AS d ON p.document_id = d.id
            WHERE p.document_id IN ({_placeholders(document_ids)})
              AND p.section_number LIKE ? ESCAPE '\\'
            ORDER BY p.document_id, p.order_index
            """,
            [*document_ids, f"%{escape_like(fragment)}%"],
        ).fetchall()

    def section_numbers(self, document_ids: Sequence[int], limit: int = 10) -> list[str]:
        return [
            row[0]
            for row in self.conn.execute(
                f"""
                SELECT section_number FROM legal_provisions
                WHERE document_id IN ({_placeholders(document_ids)}) AND section_number IS NOT NULL
                ORDER BY document_id, order_index LIMIT ?
                """,
                [*document_ids, limit],
            )
        ]

    def compare_requirements(
        self,
        category: str,
        subcategory: Optional[str],
        jurisdictions: Optional[Sequence[str]],
        limit: int,
    ) -> list[sqlite3.Row]:
        """Classified requirements for one category, ``jurisdictions=None`` meaning all."""
        sql = f"SELECT {_REQUIREMENT_COLUMNS} {_REQUIREMENT_JOINS} WHERE rc.category = ?"
        params: list[Any] = [category]
        if subcategory:
            sql += " AND rc.subcategory = ?"
            params.append(subcategory)
        if jurisdictions is not None:
            sql += f" AND sr.jurisdiction IN ({_placeholders(jurisdictions)})"
            params.extend(jurisdictions)
        sql += " ORDER BY sr.jurisdiction, rc.subcategory, sr.id LIMIT ?"
        params.append(limit)
        return self.conn.execute(sql, params).fetchall()

    def state_requirements(
        self, jurisdiction: str, category: Optional[str], limit: int
    ) -> list[sqlite3.Row]:
        sql = f"SELECT {_REQUIREMENT_COLUMNS} {_REQUIREMENT_JOINS} WHERE sr.jurisdiction = ?"
        params: list[Any] = [jurisdiction]
        if category:
            sql += " AND rc.category = ?"
            params.append(category)
        sql += " ORDER BY rc.category, rc.subcategory, sr.id LIMIT ?"
        params.append(limit)
        return self.conn.execute(sql, params).fetchall()

    def requirements_matching(
        self, tokens: Sequence[str], jurisdictions: Optional[Sequence[str]], limit: int
    ) -> list[sqlite3.Row]:
        """Classified requirements whose summary contains any of ``tokens``."""
        if not tokens:
            return []
        conditions = " OR ".join("sr.summary_text LIKE ? ESCAPE '\\'" for _ in tokens)
        sql = f"SELECT {_REQUIREMENT_COLUMNS} {_REQUIREMENT_JOINS} WHERE ({conditions})"
        params: list[Any] = [f"%{escape_like(token)}%" for token in tokens]
        if jurisdictions is not None:
            sql += f" AND sr.jurisdiction IN ({_placeholders(jurisdictions)})"
            params.extend(jurisdictions)
        sql += " ORDER BY sr.jurisdiction, rc.category, rc.subcategory, sr.id LIMIT ?"
        params.append(limit)
        return self.conn.execute(sql, params).fetchall()
