"""
Fixed category → subcategory taxonomy for ecosystem organisations.

Shared read-only by the classification prompt, the orchestrator's review
flagging, and the record validator in src/pipeline/records.py.
"""

from __future__ import annotations

from types import MappingProxyType

TAXONOMY = MappingProxyType({
    "NETWORKING & COMMUNITY": (
        "General Business Community & Membership",
        "Events & Awards",
        "Sector-Specific Networks",
    ),
    "TALENT & EDUCATION": (
        "Universities & Research Institutions",
        "Training & Skills Development",
        "Entrepreneurship Education",
    ),
    "FUNDING & FINANCE": (
        "Venture Capital & Private Equity",
        "Angel Syndicates & Networks",
        "Public & Development Banks",
        "Crowdfunding Platforms",
    ),
    "SUPPORT INFRASTRUCTURE": (
        "Generalist Incubators & Accelerators",
        "Coworking & Workspace Providers",
        "Business Support Services",
    ),
    "GROWTH & INNOVATION": (
        "Innovation Centres (Sector-Focused)",
        "Corporate Innovation Programs",
        "Technology Transfer Offices",
    ),
    "POLICY & PUBLIC AGENCIES": (
        "National & Regional Enterprise Agencies",
        "Local Government Authorities",
        "Regulatory Bodies",
    ),
})

# Leaf assigned to records that could not be classified. The subcategory is
# deliberately outside the taxonomy lists so reviewers can filter on it.
DEFAULT_CATEGORY = "GROWTH & INNOVATION"
DEFAULT_SUBCATEGORY = "General Entity"

ORG_TYPES: tuple[str, ...] = (
    "startup", "vc", "incubator", "government", "community", "other",
)


def all_subcategories() -> list[str]:
    """Every subcategory across all categories, in taxonomy order."""
    return [sub for subs in TAXONOMY.values() for sub in subs]


def is_valid_category(category) -> bool:
    return isinstance(category, str) and category in TAXONOMY


def is_valid_subcategory(subcategory) -> bool:
    """True if ``subcategory`` appears under any category."""
    return isinstance(subcategory, str) and subcategory in all_subcategories()


def is_valid_pair(category, subcategory) -> bool:
    """True if ``subcategory`` belongs to ``category`` specifically."""
    return is_valid_category(category) and subcategory in TAXONOMY[category]


def is_default_leaf(category, subcategory) -> bool:
    return category == DEFAULT_CATEGORY and subcategory == DEFAULT_SUBCATEGORY


def format_taxonomy_for_prompt() -> str:
    """
    Render the taxonomy as the bullet list embedded in the prompt.

    Returns:
        One ``- CATEGORY: sub, sub, sub`` line per category.
    """
    return "\n".join(
        f"- {category}: {', '.join(subs)}" for category, subs in TAXONOMY.items()
    )
