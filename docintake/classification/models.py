from dataclasses import dataclass

UNCLASSIFIED = "unclassified"


@dataclass(frozen=True)
class CategoryRule:
    """Trigger words for one category across all three classification stages."""

    name: str
    filename_keywords: tuple[str, ...] = ()  # stage 1, regex over filename stem
    text_phrases: tuple[str, ...] = ()  # stage 2, literal substrings of the text
    keywords: tuple[str, ...] = ()  # stage 3, single terms
    key_phrases: tuple[str, ...] = ()  # stage 3, multi-word phrases


@dataclass(frozen=True)
class RuleTable:
    """Ordered, immutable set of category rules.

    Declaration order is evaluation order for the rule stages and the
    tie-break order for the statistical stage.
    """

    version: str
    categories: tuple[CategoryRule, ...]

    def category_names(self) -> list[str]:
        return [rule.name for rule in self.categories]

    def get(self, name: str) -> CategoryRule | None:
        for rule in self.categories:
            if rule.name == name:
                return rule
        return None


@dataclass(frozen=True)
class Classification:
    """Category assigned to a document and how it was reached."""

    category: str
    confidence: float
    method: str  # "filename", "text", "statistical" or "none"
