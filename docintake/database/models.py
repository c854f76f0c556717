from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class DocumentRecord:
    """Represents a row from the documents table."""

    id: int
    filename: str
    name: str
    path: str
    fingerprint: str
    category: str
    confidence: float
    fraud_status: str
    uploaded_by: int
    description: str | None = None
    fraud_reason: str | None = None
    extracted_text: str | None = None
    verified_by: int | None = None
    verified_at: datetime | None = None
    is_shared: bool = False
    shared_with: list[int] = field(default_factory=list)
    shared_by: int | None = None
    shared_at: datetime | None = None
    sharing_note: str | None = None
    created_at: datetime | None = None
