from docintake.database.repositories.document_repository import DocumentRepository
from docintake.hashing.fingerprint import fingerprint
from docintake.logging.logger import Log
from docintake.processor.exceptions import DocumentNotFoundError
from docintake.processor.models import DOCUMENT_AUTHENTIC, DOCUMENT_NOT_FOUND, ProcessorResult


class DocumentVerifier:
    """Checks whether given content matches a stored document."""

    def __init__(self, doc_repo: DocumentRepository) -> None:
        self._doc_repo = doc_repo

    def verify(self, data: bytes) -> ProcessorResult:
        """Re-hash *data* and look up the matching document.

        Raises:
            DocumentNotFoundError: if no stored document has this content.
        """
        return self.verify_fingerprint(fingerprint(data))

    def verify_fingerprint(self, content_fingerprint: str) -> ProcessorResult:
        Log.info(f"Verifying document {content_fingerprint[:12]}")
        document = self._doc_repo.find_by_fingerprint(content_fingerprint.lower())
        if document is None:
            Log.info(f"No document matches {content_fingerprint[:12]}")
            raise DocumentNotFoundError(DOCUMENT_NOT_FOUND)
        Log.info(f"Document {document.id} matches {content_fingerprint[:12]}")
        return ProcessorResult(message=DOCUMENT_AUTHENTIC, document=document)
