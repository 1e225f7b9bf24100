"""Citation synthesis: rendering and enrichment.

Example:
    >>> from juuret.citations import render_as_child
    >>> print(render_as_child(father, as_child_family, network))
"""

from juuret.citations.dates import extract_marriage_year, normalize_date
from juuret.citations.enrichment import (
    as_parent_record,
    enrich_children,
    enrich_person,
    full_marriage_date,
)
from juuret.citations.renderer import (
    date_additions,
    format_child,
    format_date_additions,
    format_parent,
    is_target_child,
    nuclear_supplement,
    render_as_child,
    render_family,
    render_nuclear_with_supplement,
)

__all__ = [
    # Renderers
    "render_as_child",
    "render_family",
    "render_nuclear_with_supplement",
    "nuclear_supplement",
    # Line helpers
    "date_additions",
    "format_child",
    "format_date_additions",
    "format_parent",
    "is_target_child",
    # Dates
    "extract_marriage_year",
    "normalize_date",
    # Enrichment
    "as_parent_record",
    "enrich_children",
    "enrich_person",
    "full_marriage_date",
]
