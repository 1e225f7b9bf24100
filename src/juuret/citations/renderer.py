"""Citation text for a family, or for one person's place in a family.

All functions are pure. The exact prose (section order, prefixes, date
phrasing) is consumed downstream and pinned by golden-output tests.
"""
from __future__ import annotations

from juuret.citations.dates import extract_marriage_year, normalize_date
from juuret.citations.enrichment import as_parent_record, enrich_person, full_marriage_date
from juuret.models import Couple, Family, FamilyNetwork, Person

TARGET_PREFIX = "→ "
SIBLING_PREFIX = "  "

DEATH_DATE = "death date"
MARRIAGE_DATE = "marriage date"


# =============================================================================
# Line formatting
# =============================================================================


def format_parent(person: Person) -> str:
    line = person.display_name
    if person.birth_date:
        line += f", b {normalize_date(person.birth_date)}"
    if person.death_date:
        line += f", d {normalize_date(person.death_date)}"
    return line + "\n"


def format_child(child: Person) -> str:
    """Child line; the marriage shows as spouse plus year."""
    line = child.name
    if child.birth_date:
        line += f", b {normalize_date(child.birth_date)}"
    if child.is_married:
        year = extract_marriage_year(child.best_marriage_date) or child.best_marriage_date
        line += f", m {child.spouse}" + (f" {year}" if year else "")
    if child.death_date:
        line += f", d {normalize_date(child.death_date)}"
    return line + "\n"


def format_enriched_child(child: Person) -> str:
    """Child line showing a full marriage date when one is known."""
    full = full_marriage_date(child)
    if not full or not child.is_married:
        return format_child(child)
    line = child.name
    if child.birth_date:
        line += f", b {normalize_date(child.birth_date)}"
    line += f", m {child.spouse} {normalize_date(full)}"
    if child.death_date:
        line += f", d {normalize_date(child.death_date)}"
    return line + "\n"


def format_date_additions(additions: list[str]) -> str:
    """Fixed phrasing for the categories of date found elsewhere.

    >>> format_date_additions(["death date"])
    'death date is'
    >>> format_date_additions(["death date", "marriage date"])
    'marriage and death dates are'
    """
    if not additions:
        return ""
    if len(additions) == 1:
        return f"{additions[0]} is"
    if len(additions) == 2:
        return "marriage and death dates are"
    return f"{', '.join(additions[:-1])}, and {additions[-1]} are"


def date_additions(record: Person, linked: Person) -> list[str]:
    """Date categories ``linked`` has that ``record`` lacks."""
    additions = []
    if linked.death_date and not record.death_date:
        additions.append(DEATH_DATE)
    if linked.has_full_marriage_date and not record.has_full_marriage_date:
        additions.append(MARRIAGE_DATE)
    return additions


def is_target_child(child: Person, target: Person) -> bool:
    """Lenient match: same name, and birth dates agree unless one is missing."""
    if not child.name_matches(target.name):
        return False
    return child.birth_date == target.birth_date or child.birth_date is None or target.birth_date is None


# =============================================================================
# Sections
# =============================================================================


def _header(family: Family) -> str:
    return f"Information on {family.page_reference_string} includes:\n\n"


def _marriage_line(couple: Couple) -> str:
    date = couple.best_marriage_date
    return f"m {normalize_date(date)}\n" if date else ""


def _parents_section(family: Family) -> str:
    text = ""
    if family.father:
        text += format_parent(family.father)
    if family.mother:
        text += format_parent(family.mother)
    if family.primary_couple:
        text += _marriage_line(family.primary_couple)
    if family.additional_couples:
        text += "\nAdditional spouse(s):\n"
        for couple in family.additional_couples:
            if couple.wife:
                text += format_parent(couple.wife)
            text += _marriage_line(couple)
    return text


def _closing_sections(family: Family) -> str:
    text = ""
    if family.notes:
        text += "\nNotes:\n"
        text += "".join(f"• {note}\n" for note in family.notes)
    died = family.total_children_died_infancy
    if died > 0:
        text += f"\nChildren died in infancy: {died}\n"
    return text


# =============================================================================
# Public renderers
# =============================================================================


def render_family(family: Family) -> str:
    """Nuclear family citation: parents, marriages, children, notes."""
    text = _header(family) + _parents_section(family)
    if family.children:
        text += "\nChildren:\n"
        text += "".join(format_child(child) for child in family.children)
    for index, couple in enumerate(family.additional_couples):
        if couple.children:
            text += f"\nChildren with spouse {index + 2}:\n"
            text += "".join(format_child(child) for child in couple.children)
    return text + _closing_sections(family)


def render_as_child(person: Person, family: Family, network: FamilyNetwork | None = None) -> str:
    """Citation of ``family`` with ``person``'s line marked.

    With a network, the marked line carries dates from the family the
    person later headed, and an "Additional Information" sentence says
    which dates came from there.
    """
    linked = as_parent_record(person, network) if network is not None else None

    def child_line(child: Person) -> str:
        if not is_target_child(child, person):
            return SIBLING_PREFIX + format_child(child)
        if linked is None:
            return TARGET_PREFIX + format_child(child)
        return TARGET_PREFIX + format_enriched_child(enrich_person(child, linked[1]))

    text = _header(family) + _parents_section(family)
    text += "\nChildren:\n"
    text += "".join(child_line(child) for child in family.children)
    for index, couple in enumerate(family.additional_couples):
        if couple.children:
            text += f"\nChildren with spouse {index + 2}:\n"
            text += "".join(child_line(child) for child in couple.children)
    text += _closing_sections(family)

    if linked is not None:
        as_parent_family, parent_record = linked
        as_child_record = next((c for c in family.all_children if is_target_child(c, person)), person)
        additions = date_additions(as_child_record, parent_record)
        if additions:
            text += "\nAdditional Information:\n"
            text += (
                f"{person.name}'s {format_date_additions(additions)} found on "
                f"{as_parent_family.page_reference_string}\n"
            )
    return text


def nuclear_supplement(family: Family, network: FamilyNetwork) -> str:
    """'Additional information' lines for married children, or ''."""
    lines = []
    for child in family.married_children:
        linked = as_parent_record(child, network)
        if linked is None:
            continue
        as_parent_family, parent_record = linked
        additions = date_additions(child, parent_record)
        if additions:
            lines.append(
                f"{child.name}'s {format_date_additions(additions)} on "
                f"{as_parent_family.page_reference_string}"
            )
    if not lines:
        return ""
    return "\nAdditional information:\n" + "".join(f"{line}\n" for line in lines)


def render_nuclear_with_supplement(family: Family, network: FamilyNetwork) -> str:
    """:func:`render_family` followed by the married children's supplement."""
    return render_family(family) + nuclear_supplement(family, network)
