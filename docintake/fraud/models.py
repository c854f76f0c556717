from dataclasses import dataclass
from enum import Enum


class FraudStatus(str, Enum):
    """Trust label stored on a document."""

    PENDING = "pending"
    VERIFIED = "verified"
    SUSPICIOUS = "suspicious"
    REJECTED = "rejected"


@dataclass(frozen=True)
class FraudAssessment:
    """Outcome of the fraud checks. ``reason`` is set whenever not verified."""

    status: FraudStatus
    reason: str | None = None
