from datetime import datetime, timezone
from typing import Any

import psycopg
from psycopg.rows import dict_row

from docintake.database.connection import get_connection
from docintake.database.models import DocumentRecord
from docintake.fraud.models import FraudStatus
from docintake.processor.exceptions import DuplicateDocumentError
from docintake.processor.models import DOCUMENT_EXISTS, DocumentDraft

_COLUMNS = """
    id, filename, name, description, path, fingerprint, category, confidence,
    fraud_status, fraud_reason, extracted_text, uploaded_by, verified_by,
    verified_at, is_shared, shared_with, shared_by, shared_at, sharing_note,
    created_at
"""


class DocumentRepository:
    """Database operations for the documents table."""

    def find_by_fingerprint(self, fingerprint: str) -> DocumentRecord | None:
        """Find a document by content fingerprint. None if absent."""
        return self._fetch_one(
            f"SELECT {_COLUMNS} FROM documents WHERE fingerprint = %s",
            (fingerprint,),
        )

    def find_by_id(self, document_id: int) -> DocumentRecord | None:
        return self._fetch_one(
            f"SELECT {_COLUMNS} FROM documents WHERE id = %s",
            (document_id,),
        )

    def insert(self, draft: DocumentDraft) -> DocumentRecord:
        """Insert a new document row.

        Raises:
            DuplicateDocumentError: if the fingerprint is already stored.
        """
        try:
            with get_connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(
                        f"""
                        INSERT INTO documents
                        (filename, name, description, path, fingerprint, category,
                         confidence, fraud_status, fraud_reason, extracted_text,
                         uploaded_by)
                        VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                        RETURNING {_COLUMNS}
                        """,
                        (
                            draft.filename,
                            draft.name,
                            draft.description,
                            draft.path,
                            draft.fingerprint,
                            draft.category,
                            draft.confidence,
                            draft.fraud_status,
                            draft.fraud_reason,
                            draft.extracted_text,
                            draft.uploaded_by,
                        ),
                    )
                    row = cur.fetchone()
                conn.commit()
        except psycopg.errors.UniqueViolation as exc:
            raise DuplicateDocumentError(DOCUMENT_EXISTS) from exc

        if row is None:
            raise RuntimeError("INSERT into documents returned no row")
        return _to_record(row)

    def update_fraud_status(
        self,
        document_id: int,
        status: str,
        reason: str | None,
        reviewer_id: int,
    ) -> DocumentRecord | None:
        """Overwrite the fraud status of a document on behalf of a reviewer.

        Returns the updated document, or None if no document has this ID.

        Raises:
            ValueError: if *status* is not a known fraud status.
        """
        allowed = [s.value for s in FraudStatus]
        if status not in allowed:
            raise ValueError(f"Invalid fraud status. Allowed: {', '.join(allowed)}")

        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    UPDATE documents
                    SET fraud_status = %s,
                        fraud_reason = %s,
                        verified_by = %s,
                        verified_at = %s
                    WHERE id = %s
                    RETURNING {_COLUMNS}
                    """,
                    (
                        status,
                        reason or None,
                        reviewer_id,
                        datetime.now(timezone.utc),
                        document_id,
                    ),
                )
                row = cur.fetchone()
            conn.commit()

        return _to_record(row) if row is not None else None

    def _fetch_one(self, sql: str, params: tuple[Any, ...]) -> DocumentRecord | None:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(sql, params)
                row = cur.fetchone()
        return _to_record(row) if row is not None else None


def _to_record(row: dict[str, Any]) -> DocumentRecord:
    return DocumentRecord(
        id=row["id"],
        filename=row["filename"],
        name=row["name"],
        description=row["description"],
        path=row["path"],
        fingerprint=row["fingerprint"],
        category=row["category"],
        confidence=float(row["confidence"]),
        fraud_status=row["fraud_status"],
        fraud_reason=row["fraud_reason"],
        extracted_text=row["extracted_text"],
        uploaded_by=row["uploaded_by"],
        verified_by=row["verified_by"],
        verified_at=row["verified_at"],
        is_shared=row["is_shared"],
        shared_with=list(row["shared_with"] or []),
        shared_by=row["shared_by"],
        shared_at=row["shared_at"],
        sharing_note=row["sharing_note"],
        created_at=row["created_at"],
    )
