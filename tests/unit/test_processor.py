from dataclasses import asdict
from pathlib import Path
from unittest.mock import MagicMock

import psycopg
import pytest

from docintake.classification.classifier import Classifier
from docintake.classification.models import Classification, RuleTable
from docintake.database.models import DocumentRecord
from docintake.database.repositories.document_repository import DocumentRepository
from docintake.extraction.text_extractor import OCR_FAILED_TEXT, TextExtractor
from docintake.fraud.assessor import FraudAssessor
from docintake.fraud.models import FraudAssessment, FraudStatus
from docintake.hashing.fingerprint import fingerprint
from docintake.processor.exceptions import DuplicateDocumentError, InvalidUploadError
from docintake.processor.file_store import FileStore
from docintake.processor.models import DocumentDraft, IngestionRequest
from docintake.processor.pipeline import PipelineContext
from docintake.processor.processor import Processor, build_steps
from docintake.processor.steps import AssessFraudStep, BuildDraftStep, PersistDocumentStep


class InMemoryDocumentRepository:
    """Document store keyed by fingerprint with a uniqueness constraint."""

    def __init__(self) -> None:
        self.documents: dict[str, DocumentRecord] = {}
        self.drafts: list[DocumentDraft] = []

    def find_by_fingerprint(self, content_fingerprint: str) -> DocumentRecord | None:
        return self.documents.get(content_fingerprint)

    def insert(self, draft: DocumentDraft) -> DocumentRecord:
        if draft.fingerprint in self.documents:
            raise DuplicateDocumentError("Document already exists!")
        self.drafts.append(draft)
        record = DocumentRecord(id=len(self.documents) + 1, **asdict(draft))
        self.documents[draft.fingerprint] = record
        return record


def _make_processor(
    tmp_path: Path,
    rule_table: RuleTable,
    extracted_text: str,
    doc_repo: object | None = None,
) -> tuple[Processor, MagicMock, InMemoryDocumentRepository]:
    extractor = MagicMock(spec=TextExtractor)
    extractor.extract.return_value = extracted_text
    repo = doc_repo if doc_repo is not None else InMemoryDocumentRepository()
    steps = build_steps(
        doc_repo=repo,  # type: ignore[arg-type]
        text_extractor=extractor,
        classifier=Classifier(rule_table),
        assessor=FraudAssessor(),
        file_store=FileStore(uploads_root=tmp_path / "uploads", clock=lambda: 1700000000.0),
    )
    return Processor(steps), extractor, repo  # type: ignore[return-value]


def _write_upload(tmp_path: Path, name: str, content: bytes) -> Path:
    incoming = tmp_path / "incoming"
    incoming.mkdir(exist_ok=True)
    path = incoming / name
    path.write_bytes(content)
    return path


def _request(path: Path, original_filename: str = "invoice_march.pdf") -> IngestionRequest:
    return IngestionRequest(
        file_path=path,
        original_filename=original_filename,
        uploaded_by=10,
        name="March invoice",
        description="Consulting, March",
        mime_type="application/pdf",
    )


class TestIngestion:
    def test_invoice_end_to_end(
        self, tmp_path: Path, default_rule_table: RuleTable, invoice_text: str
    ) -> None:
        processor, extractor, repo = _make_processor(tmp_path, default_rule_table, invoice_text)
        upload = _write_upload(tmp_path, "upload-1", b"%PDF invoice bytes")

        result = processor.process(_request(upload))

        assert result.message == "Document uploaded successfully!"
        assert len(repo.drafts) == 1
        draft = repo.drafts[0]
        assert draft.fingerprint == fingerprint(b"%PDF invoice bytes")
        assert draft.category == "invoice"
        assert draft.confidence == 0.8
        assert draft.fraud_status == "verified"
        assert draft.fraud_reason is None
        assert draft.extracted_text == invoice_text
        assert draft.name == "March invoice"
        assert draft.description == "Consulting, March"
        assert draft.uploaded_by == 10
        assert draft.filename == "1700000000000-invoice_march.pdf"
        assert draft.path == str(
            tmp_path / "uploads" / "invoice" / "1700000000000-invoice_march.pdf"
        )
        assert result.document.fingerprint == draft.fingerprint
        extractor.extract.assert_called_once_with(upload, mime_type="application/pdf")

    def test_moves_upload_into_store(
        self, tmp_path: Path, default_rule_table: RuleTable, invoice_text: str
    ) -> None:
        processor, _extractor, _repo = _make_processor(tmp_path, default_rule_table, invoice_text)
        upload = _write_upload(tmp_path, "upload-1", b"bytes")

        result = processor.process(_request(upload))

        assert not upload.exists()
        assert Path(result.document.path).read_bytes() == b"bytes"

    def test_unreadable_content_is_still_ingested(
        self, tmp_path: Path, default_rule_table: RuleTable
    ) -> None:
        processor, _extractor, repo = _make_processor(
            tmp_path, default_rule_table, OCR_FAILED_TEXT
        )
        upload = _write_upload(tmp_path, "upload-1", b"blurry photo")

        processor.process(_request(upload, original_filename="IMG_2201.jpg"))

        draft = repo.drafts[0]
        assert draft.category == "unclassified"
        assert draft.confidence == 0.0
        assert draft.fraud_status == "rejected"
        assert draft.fraud_reason == "Text too short to be legitimate"
        assert "unclassified" in draft.path


class TestDuplicates:
    def test_second_upload_of_same_bytes_is_duplicate(
        self, tmp_path: Path, default_rule_table: RuleTable, invoice_text: str
    ) -> None:
        processor, extractor, repo = _make_processor(tmp_path, default_rule_table, invoice_text)
        first = _write_upload(tmp_path, "upload-1", b"same bytes")
        processor.process(_request(first))
        second = _write_upload(tmp_path, "upload-2", b"same bytes")

        with pytest.raises(DuplicateDocumentError, match="Document already exists!"):
            processor.process(_request(second, original_filename="copy.pdf"))

        assert extractor.extract.call_count == 1
        assert len(repo.drafts) == 1
        assert second.exists()

    def test_different_bytes_are_not_duplicates(
        self, tmp_path: Path, default_rule_table: RuleTable, invoice_text: str
    ) -> None:
        processor, extractor, repo = _make_processor(tmp_path, default_rule_table, invoice_text)
        processor.process(_request(_write_upload(tmp_path, "upload-1", b"one")))
        processor.process(_request(_write_upload(tmp_path, "upload-2", b"two")))

        assert extractor.extract.call_count == 2
        assert len(repo.documents) == 2

    def test_concurrent_insert_discards_stored_file(
        self, tmp_path: Path, default_rule_table: RuleTable, invoice_text: str
    ) -> None:
        doc_repo = MagicMock(spec=DocumentRepository)
        doc_repo.find_by_fingerprint.return_value = None
        doc_repo.insert.side_effect = DuplicateDocumentError("Document already exists!")
        processor, _extractor, _repo = _make_processor(
            tmp_path, default_rule_table, invoice_text, doc_repo=doc_repo
        )

        with pytest.raises(DuplicateDocumentError):
            processor.process(_request(_write_upload(tmp_path, "upload-1", b"raced")))

        assert list((tmp_path / "uploads" / "invoice").iterdir()) == []


class TestPersistFailure:
    def test_database_error_returns_upload_to_original_path(
        self, tmp_path: Path, default_rule_table: RuleTable, invoice_text: str
    ) -> None:
        doc_repo = MagicMock(spec=DocumentRepository)
        doc_repo.find_by_fingerprint.return_value = None
        doc_repo.insert.side_effect = psycopg.OperationalError("connection lost")
        processor, _extractor, _repo = _make_processor(
            tmp_path, default_rule_table, invoice_text, doc_repo=doc_repo
        )
        upload = _write_upload(tmp_path, "upload-1", b"march invoice")

        with pytest.raises(psycopg.OperationalError, match="connection lost"):
            processor.process(_request(upload))

        assert upload.read_bytes() == b"march invoice"
        assert list((tmp_path / "uploads" / "invoice").iterdir()) == []

    def test_retry_after_database_error_succeeds(
        self, tmp_path: Path, default_rule_table: RuleTable, invoice_text: str
    ) -> None:
        repo = InMemoryDocumentRepository()
        real_insert = repo.insert
        attempts: list[int] = []

        def flaky_insert(draft: DocumentDraft) -> DocumentRecord:
            attempts.append(1)
            if len(attempts) == 1:
                raise psycopg.OperationalError("connection lost")
            return real_insert(draft)

        repo.insert = flaky_insert  # type: ignore[method-assign]
        processor, _extractor, _repo = _make_processor(
            tmp_path, default_rule_table, invoice_text, doc_repo=repo
        )
        upload = _write_upload(tmp_path, "upload-1", b"march invoice")

        with pytest.raises(psycopg.OperationalError):
            processor.process(_request(upload))
        result = processor.process(_request(upload))

        assert result.message == "Document uploaded successfully!"
        assert Path(result.document.path).read_bytes() == b"march invoice"
        assert not upload.exists()


class TestInvalidUploads:
    def test_missing_file(self, tmp_path: Path, default_rule_table: RuleTable) -> None:
        processor, extractor, _repo = _make_processor(tmp_path, default_rule_table, "")

        with pytest.raises(InvalidUploadError, match="No file uploaded"):
            processor.process(_request(tmp_path / "missing.pdf"))

        extractor.extract.assert_not_called()

    def test_missing_name(self, tmp_path: Path, default_rule_table: RuleTable) -> None:
        processor, _extractor, _repo = _make_processor(tmp_path, default_rule_table, "")
        upload = _write_upload(tmp_path, "upload-1", b"bytes")
        request = IngestionRequest(
            file_path=upload, original_filename="a.pdf", uploaded_by=1, name="  "
        )

        with pytest.raises(InvalidUploadError, match="Document name is required"):
            processor.process(request)

    def test_missing_original_filename(
        self, tmp_path: Path, default_rule_table: RuleTable
    ) -> None:
        processor, _extractor, _repo = _make_processor(tmp_path, default_rule_table, "")
        upload = _write_upload(tmp_path, "upload-1", b"bytes")

        with pytest.raises(InvalidUploadError, match="Original filename is required"):
            processor.process(_request(upload, original_filename=""))


class TestStepOrder:
    def test_steps_run_in_order(self, tmp_path: Path) -> None:
        calls: list[str] = []

        def step(name: str) -> MagicMock:
            mock = MagicMock()
            mock.run.side_effect = lambda ctx: (calls.append(name), ctx)[1]
            return mock

        final = MagicMock()

        def persist(ctx: PipelineContext) -> PipelineContext:
            calls.append("persist")
            ctx.document = MagicMock(spec=DocumentRecord)
            return ctx

        final.run.side_effect = persist
        processor = Processor([step("fingerprint"), step("extract"), final])

        processor.process(_request(tmp_path / "x.pdf"))

        assert calls == ["fingerprint", "extract", "persist"]

    def test_requires_persisted_document(self, tmp_path: Path) -> None:
        with pytest.raises(RuntimeError, match="without persisting"):
            Processor([]).process(_request(tmp_path / "x.pdf"))


class TestStepPreconditions:
    def test_fraud_step_requires_classification(self, tmp_path: Path) -> None:
        context = PipelineContext(request=_request(tmp_path / "x.pdf"))
        with pytest.raises(ValueError, match="classification must be set"):
            AssessFraudStep(FraudAssessor()).run(context)

    def test_draft_step_requires_assessment(self, tmp_path: Path) -> None:
        context = PipelineContext(
            request=_request(tmp_path / "x.pdf"),
            classification=Classification("invoice", 0.8, "filename"),
        )
        with pytest.raises(ValueError, match="fraud_assessment must be set"):
            BuildDraftStep(FileStore(uploads_root=tmp_path)).run(context)

    def test_persist_step_requires_draft(self, tmp_path: Path) -> None:
        context = PipelineContext(
            request=_request(tmp_path / "x.pdf"),
            fraud_assessment=FraudAssessment(FraudStatus.VERIFIED),
        )
        with pytest.raises(ValueError, match="draft must be set"):
            PersistDocumentStep(MagicMock(spec=DocumentRepository)).run(context)
