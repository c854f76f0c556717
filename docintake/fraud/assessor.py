"""Heuristic fraud checks run against every ingested document.

Checks are evaluated in order and the first one that fires decides the
status:
1. Text shorter than 100 chars                     -> rejected
2. Text contains a known fake phrase               -> rejected
3. id-card without a run of 12+ ASCII digits       -> suspicious
4. Classification confidence below 0.4             -> suspicious
5. Otherwise                                       -> verified
"""

import re
from typing import ClassVar

from docintake.fraud.models import FraudAssessment, FraudStatus
from docintake.logging.logger import Log


class FraudAssessor:
    """Deterministic first-match fraud policy."""

    MIN_TEXT_LENGTH: ClassVar[int] = 100
    FAKE_PHRASES: ClassVar[tuple[str, ...]] = ("dummy", "test document")
    MIN_CONFIDENCE: ClassVar[float] = 0.4
    ID_CARD_CATEGORY: ClassVar[str] = "id-card"

    _ID_NUMBER_RE: ClassVar[re.Pattern[str]] = re.compile(r"\d{12}", re.ASCII)

    def assess(self, extracted_text: str, category: str, confidence: float) -> FraudAssessment:
        result = self._evaluate(extracted_text, category, confidence)
        Log.info(
            f"Fraud assessment: {result.status.value}"
            + (f" ({result.reason})" if result.reason else "")
        )
        return result

    def _evaluate(self, text: str, category: str, confidence: float) -> FraudAssessment:
        if len(text) < self.MIN_TEXT_LENGTH:
            return FraudAssessment(FraudStatus.REJECTED, "Text too short to be legitimate")

        lowered = text.lower()
        if any(phrase in lowered for phrase in self.FAKE_PHRASES):
            return FraudAssessment(FraudStatus.REJECTED, "Contains known fake phrases")

        if category == self.ID_CARD_CATEGORY and not self._ID_NUMBER_RE.search(text):
            return FraudAssessment(FraudStatus.SUSPICIOUS, "Missing valid ID pattern")

        if confidence < self.MIN_CONFIDENCE:
            return FraudAssessment(FraudStatus.SUSPICIOUS, "Low classification confidence")

        return FraudAssessment(FraudStatus.VERIFIED)
