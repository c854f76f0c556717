from abc import ABC, abstractmethod
from dataclasses import dataclass

from docintake.classification.models import Classification
from docintake.database.models import DocumentRecord
from docintake.fraud.models import FraudAssessment
from docintake.processor.models import DocumentDraft, IngestionRequest


@dataclass(slots=True)
class PipelineContext:
    request: IngestionRequest
    fingerprint: str = ""
    extracted_text: str = ""
    classification: Classification | None = None
    fraud_assessment: FraudAssessment | None = None
    draft: DocumentDraft | None = None
    document: DocumentRecord | None = None


class PipelineStep(ABC):
    @abstractmethod
    def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
