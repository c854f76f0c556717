from pathlib import Path

from docintake.classification.classifier import Classifier
from docintake.classification.models import RuleTable
from docintake.classification.rule_loader import load_rule_table
from docintake.config.settings import Settings
from docintake.database.repositories.document_repository import DocumentRepository
from docintake.extraction.text_extractor import TextExtractor
from docintake.fraud.assessor import FraudAssessor
from docintake.logging.logger import Log
from docintake.ocr.factory import OcrEngineFactory, RasterizerFactory
from docintake.processor.exceptions import ProcessorError
from docintake.processor.file_store import FileStore
from docintake.processor.models import DOCUMENT_UPLOADED, IngestionRequest, ProcessorResult
from docintake.processor.pipeline import PipelineContext, PipelineStep
from docintake.processor.steps import (
    AssessFraudStep,
    BuildDraftStep,
    ClassifyStep,
    DuplicateCheckStep,
    ExtractTextStep,
    FingerprintStep,
    PersistDocumentStep,
    ValidateRequestStep,
)


class Processor:
    """Runs the ingestion pipeline for one upload.

    Pipeline: validate -> fingerprint -> dedup -> extract -> classify ->
    fraud checks -> store file + draft -> persist.
    """

    def __init__(self, steps: list[PipelineStep]) -> None:
        self._steps = steps

    def process(self, request: IngestionRequest) -> ProcessorResult:
        Log.info(f"Upload request received: '{request.original_filename}'")
        context = PipelineContext(request=request)
        try:
            for step in self._steps:
                context = step.run(context)
        except ProcessorError as exc:
            Log.warning(f"Ingestion of '{request.original_filename}' stopped: {exc}")
            raise
        except Exception:
            Log.exception(f"Ingestion of '{request.original_filename}' failed")
            raise

        if context.document is None:
            raise RuntimeError("Pipeline finished without persisting a document")
        return ProcessorResult(message=DOCUMENT_UPLOADED, document=context.document)


def build_steps(
    doc_repo: DocumentRepository,
    text_extractor: TextExtractor,
    classifier: Classifier,
    assessor: FraudAssessor,
    file_store: FileStore,
) -> list[PipelineStep]:
    return [
        ValidateRequestStep(),
        FingerprintStep(),
        DuplicateCheckStep(doc_repo),
        ExtractTextStep(text_extractor),
        ClassifyStep(classifier),
        AssessFraudStep(assessor),
        BuildDraftStep(file_store),
        PersistDocumentStep(doc_repo),
    ]


def build_processor(
    settings: Settings,
    rule_table: RuleTable | None = None,
    doc_repo: DocumentRepository | None = None,
) -> Processor:
    """Build a Processor with all required adapters."""
    if rule_table is None:
        rules_path = Path(settings.category_rules_path) if settings.category_rules_path else None
        rule_table = load_rule_table(rules_path)
    Log.info(
        f"Loaded category rules v{rule_table.version}: "
        f"{len(rule_table.categories)} categories"
    )
    text_extractor = TextExtractor(
        rasterizer=RasterizerFactory.create(settings),
        ocr_engine=OcrEngineFactory.create(settings),
        language=settings.ocr_language,
    )
    steps = build_steps(
        doc_repo=doc_repo or DocumentRepository(),
        text_extractor=text_extractor,
        classifier=Classifier(rule_table),
        assessor=FraudAssessor(),
        file_store=FileStore(uploads_root=Path(settings.uploads_root)),
    )
    return Processor(steps)
