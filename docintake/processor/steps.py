import shutil
from pathlib import Path

from docintake.classification.classifier import Classifier
from docintake.database.repositories.document_repository import DocumentRepository
from docintake.extraction.text_extractor import TextExtractor
from docintake.fraud.assessor import FraudAssessor
from docintake.hashing.fingerprint import fingerprint_file
from docintake.logging.logger import Log
from docintake.processor.exceptions import DuplicateDocumentError, InvalidUploadError
from docintake.processor.file_store import FileStore
from docintake.processor.models import DOCUMENT_EXISTS, DocumentDraft
from docintake.processor.pipeline import PipelineContext, PipelineStep


class ValidateRequestStep(PipelineStep):
    def run(self, context: PipelineContext) -> PipelineContext:
        request = context.request
        if not request.file_path.is_file():
            raise InvalidUploadError(f"No file uploaded: {request.file_path}")
        if not request.original_filename.strip():
            raise InvalidUploadError("Original filename is required")
        if not request.name.strip():
            raise InvalidUploadError("Document name is required")
        return context


class FingerprintStep(PipelineStep):
    def run(self, context: PipelineContext) -> PipelineContext:
        context.fingerprint = fingerprint_file(context.request.file_path)
        Log.info(
            f"Fingerprinted '{context.request.original_filename}': {context.fingerprint}"
        )
        return context


class DuplicateCheckStep(PipelineStep):
    def __init__(self, doc_repo: DocumentRepository) -> None:
        self._doc_repo = doc_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        existing = self._doc_repo.find_by_fingerprint(context.fingerprint)
        if existing is not None:
            Log.warning(
                f"'{context.request.original_filename}' duplicates document {existing.id}"
            )
            raise DuplicateDocumentError(DOCUMENT_EXISTS)
        return context


class ExtractTextStep(PipelineStep):
    def __init__(self, text_extractor: TextExtractor) -> None:
        self._text_extractor = text_extractor

    def run(self, context: PipelineContext) -> PipelineContext:
        request = context.request
        context.extracted_text = self._text_extractor.extract(
            request.file_path, mime_type=request.mime_type
        )
        Log.debug(f"Extracted text preview: {context.extracted_text[:100]!r}")
        return context


class ClassifyStep(PipelineStep):
    def __init__(self, classifier: Classifier) -> None:
        self._classifier = classifier

    def run(self, context: PipelineContext) -> PipelineContext:
        context.classification = self._classifier.classify(
            context.request.original_filename,
            context.extracted_text,
        )
        return context


class AssessFraudStep(PipelineStep):
    def __init__(self, assessor: FraudAssessor) -> None:
        self._assessor = assessor

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.classification is None:
            raise ValueError("PipelineContext.classification must be set before fraud checks")
        context.fraud_assessment = self._assessor.assess(
            context.extracted_text,
            context.classification.category,
            context.classification.confidence,
        )
        return context


class BuildDraftStep(PipelineStep):
    def __init__(self, file_store: FileStore) -> None:
        self._file_store = file_store

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.classification is None or context.fraud_assessment is None:
            raise ValueError(
                "PipelineContext.classification and fraud_assessment must be set "
                "before building the draft"
            )
        request = context.request
        stored_path = self._file_store.store(
            request.file_path,
            request.original_filename,
            context.classification.category,
        )
        Log.info(f"File saved at: {stored_path}")
        context.draft = DocumentDraft(
            filename=stored_path.name,
            name=request.name.strip(),
            description=request.description,
            path=str(stored_path),
            fingerprint=context.fingerprint,
            category=context.classification.category,
            confidence=context.classification.confidence,
            fraud_status=context.fraud_assessment.status.value,
            fraud_reason=context.fraud_assessment.reason,
            extracted_text=context.extracted_text,
            uploaded_by=request.uploaded_by,
        )
        return context


class PersistDocumentStep(PipelineStep):
    def __init__(self, doc_repo: DocumentRepository) -> None:
        self._doc_repo = doc_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.draft is None:
            raise ValueError("PipelineContext.draft must be set before persist")
        try:
            context.document = self._doc_repo.insert(context.draft)
        except DuplicateDocumentError:
            Log.warning(
                f"Fingerprint {context.fingerprint} was stored concurrently, "
                f"discarding {context.draft.path}"
            )
            self._discard(context.draft.path)
            raise
        except Exception:
            Log.error(
                f"Could not save document metadata, returning {context.draft.path} "
                f"to {context.request.file_path}"
            )
            self._restore(context.draft.path, context.request.file_path)
            raise
        Log.info(f"Document metadata saved: {context.document.id}")
        return context

    @staticmethod
    def _discard(path: str) -> None:
        try:
            Path(path).unlink(missing_ok=True)
        except OSError as exc:
            Log.warning(f"Could not remove {path}: {exc}")

    @staticmethod
    def _restore(stored_path: str, upload_path: Path) -> None:
        try:
            shutil.move(stored_path, upload_path)
        except OSError as exc:
            Log.warning(f"Could not return {stored_path} to {upload_path}: {exc}")
