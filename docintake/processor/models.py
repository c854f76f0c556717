from dataclasses import dataclass
from pathlib import Path

from docintake.database.models import DocumentRecord

DOCUMENT_UPLOADED = "Document uploaded successfully!"
DOCUMENT_EXISTS = "Document already exists!"
DOCUMENT_NOT_FOUND = "Document not found!"
DOCUMENT_AUTHENTIC = "Document is authentic!"


@dataclass(frozen=True)
class IngestionRequest:
    """A single upload handed to the pipeline."""

    file_path: Path
    original_filename: str
    uploaded_by: int
    name: str
    description: str | None = None
    mime_type: str = "application/octet-stream"


@dataclass(frozen=True)
class DocumentDraft:
    """Everything the store needs to insert a document row."""

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


@dataclass(frozen=True)
class ProcessorResult:
    """Message and document returned to the caller."""

    message: str
    document: DocumentRecord
