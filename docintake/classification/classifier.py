"""Three-stage document classifier.

Stages run in order and the first one that produces a category wins:
1. Filename rules: keyword regex over the filename stem (confidence 0.8).
2. Text rules: literal phrase match in the extracted text (confidence 0.6).
3. Statistical: single-document TF-IDF score per category, normalized
   to [0, 1]; below the minimum score the document is unclassified.
"""

import re
from pathlib import PurePath
from typing import ClassVar

from docintake.classification.models import (
    UNCLASSIFIED,
    Classification,
    RuleTable,
)
from docintake.classification.tfidf import CategoryScorer, TermFrequencyModel
from docintake.logging.logger import Log

_SEPARATOR = r"[\s_\-.]*"


class Classifier:
    """Assigns a category and confidence to a document."""

    FILENAME_CONFIDENCE: ClassVar[float] = 0.8
    TEXT_CONFIDENCE: ClassVar[float] = 0.6
    MIN_SCORE: ClassVar[float] = 5.0
    SCORE_SCALE: ClassVar[float] = 50.0

    def __init__(self, rule_table: RuleTable, scorer: CategoryScorer | None = None) -> None:
        self._rule_table = rule_table
        self._scorer = scorer or CategoryScorer()
        self._filename_patterns: list[tuple[str, re.Pattern[str]]] = [
            (rule.name, self._compile_keywords(rule.filename_keywords))
            for rule in rule_table.categories
            if rule.filename_keywords
        ]

    @property
    def rule_table(self) -> RuleTable:
        return self._rule_table

    def classify(self, filename: str, extracted_text: str) -> Classification:
        """Classify a document by filename, then text, then TF-IDF score."""
        category = self._match_filename(filename)
        if category is not None:
            Log.info(f"Classified '{filename}' as {category} by filename")
            return Classification(category, self.FILENAME_CONFIDENCE, "filename")

        Log.debug(f"No filename rule matched '{filename}', checking extracted text")
        category = self._match_text(extracted_text)
        if category is not None:
            Log.info(f"Classified '{filename}' as {category} by text phrase")
            return Classification(category, self.TEXT_CONFIDENCE, "text")

        ranked = self.rank(extracted_text)
        if not ranked or ranked[0][1] < self.MIN_SCORE:
            Log.info(f"Could not classify '{filename}'")
            return Classification(UNCLASSIFIED, 0.0, "none")

        top_category, top_score = ranked[0]
        confidence = min(top_score / self.SCORE_SCALE, 1.0)
        Log.info(
            f"Classified '{filename}' as {top_category} by score "
            f"{top_score:.2f} (confidence {confidence:.2f})"
        )
        return Classification(top_category, confidence, "statistical")

    def rank(self, text: str) -> list[tuple[str, float]]:
        """Score every category against *text*, highest first.

        Equal scores keep the rule table's declaration order.
        """
        model = TermFrequencyModel(text)
        scores = [
            (rule.name, self._scorer.score(model, rule))
            for rule in self._rule_table.categories
        ]
        return sorted(scores, key=lambda item: -item[1])

    def _match_filename(self, filename: str) -> str | None:
        stem = PurePath(filename.replace("\\", "/")).stem
        for name, pattern in self._filename_patterns:
            if pattern.search(stem):
                return name
        return None

    def _match_text(self, text: str) -> str | None:
        lowered = text.lower()
        for rule in self._rule_table.categories:
            if any(phrase in lowered for phrase in rule.text_phrases):
                return rule.name
        return None

    @staticmethod
    def _compile_keywords(keywords: tuple[str, ...]) -> re.Pattern[str]:
        alternatives = [
            _SEPARATOR.join(re.escape(part) for part in keyword.split())
            for keyword in keywords
        ]
        return re.compile("|".join(alternatives), re.IGNORECASE)
