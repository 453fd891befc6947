"""
Request and result types passed across the classification core boundary.

Both are frozen: a request is passed by value into every backend attempt and
a result is never modified after the orchestrator builds it.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

# Wire keys of a classification result, in storage order. Factual fields
# (name, website, twitter, country, description) are never part of it.
RESULT_FIELDS: tuple[str, ...] = (
    "isEcosystemOrg",
    "type",
    "category",
    "subcategory",
    "role_summary",
    "confidence",
    "provider",
    "model",
    "needsReview",
    "degraded",
)


@dataclass(frozen=True)
class ClassificationRequest:
    """Organisation data handed over by the scraper."""

    name: str | None
    description: str | None = None
    website: str | None = None

    @classmethod
    def from_mapping(cls, data: dict | None) -> "ClassificationRequest":
        """
        Build a request from a scraped organisation dict.

        Extra keys (twitter, country, ...) are ignored; missing keys become
        ``None``.
        """
        data = data or {}
        return cls(
            name=data.get("name"),
            description=data.get("description"),
            website=data.get("website"),
        )

    @property
    def has_name(self) -> bool:
        return isinstance(self.name, str) and bool(self.name.strip())


@dataclass(frozen=True)
class ClassificationResult:
    """
    Normalised classification for one organisation.

    ``provider`` and ``model`` are ``None`` exactly when ``degraded`` is
    true.  Use :meth:`as_dict` for the storage/wire representation.
    """

    is_ecosystem_org: bool
    org_type: str
    category: str
    subcategory: str
    role_summary: str
    confidence: float
    provider: str | None = None
    model: str | None = None
    needs_review: bool = True
    degraded: bool = False

    def with_review_flags(self, needs_review: bool, degraded: bool) -> "ClassificationResult":
        return replace(self, needs_review=needs_review, degraded=degraded)

    def as_dict(self) -> dict:
        return {
            "isEcosystemOrg": self.is_ecosystem_org,
            "type": self.org_type,
            "category": self.category,
            "subcategory": self.subcategory,
            "role_summary": self.role_summary,
            "confidence": self.confidence,
            "provider": self.provider,
            "model": self.model,
            "needsReview": self.needs_review,
            "degraded": self.degraded,
        }
