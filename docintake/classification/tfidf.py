"""Single-document TF-IDF scoring.

With only one document in the corpus the inverse document frequency of
every present term is the same constant, 1 + ln(1 / 2), so a term's weight
reduces to its raw count times that constant. The category score built on
top of it adds fixed bonuses; the scale of those numbers is what the
classifier threshold and confidence normalization are tuned against.
"""

import math
import re
from collections import Counter
from typing import ClassVar

from docintake.classification.models import CategoryRule

_TOKEN_RE = re.compile(r"[a-z]+")


class TermFrequencyModel:
    """Term counts for one lower-cased text, with TF-IDF weights."""

    MIN_TOKEN_LENGTH: ClassVar[int] = 3

    def __init__(self, text: str) -> None:
        self.text = text.lower()
        self.tokens = [
            token
            for token in _TOKEN_RE.findall(self.text)
            if len(token) >= self.MIN_TOKEN_LENGTH
        ]
        self._counts = Counter(self.tokens)
        self._document_count = 1

    def contains(self, term: str) -> bool:
        return term in self._counts

    def weight(self, term: str) -> float:
        count = self._counts.get(term, 0)
        if count == 0:
            return 0.0
        documents_with_term = 1
        idf = 1 + math.log(self._document_count / (1 + documents_with_term))
        return count * idf


class CategoryScorer:
    """Scores a TermFrequencyModel against a category's keywords and phrases."""

    KEYWORD_BONUS: ClassVar[float] = 3.0
    PHRASE_BONUS: ClassVar[float] = 10.0
    PHRASE_TOKEN_BONUS: ClassVar[float] = 2.0
    PHRASE_TOKEN_MIN_LENGTH: ClassVar[int] = 4

    def score(self, model: TermFrequencyModel, rule: CategoryRule) -> float:
        total = 0.0
        for keyword in rule.keywords:
            total += model.weight(keyword)
            if model.contains(keyword):
                total += self.KEYWORD_BONUS

        for phrase in rule.key_phrases:
            if phrase in model.text:
                total += self.PHRASE_BONUS
            matched = [
                token
                for token in phrase.split()
                if len(token) >= self.PHRASE_TOKEN_MIN_LENGTH and model.contains(token)
            ]
            if len(matched) > 1:
                total += self.PHRASE_TOKEN_BONUS * len(matched)
        return total
