"""Merge dates from a person's linked record into another record of them.

The merge is idempotent: applying it twice with the same source gives the
same result as applying it once.
"""
from __future__ import annotations

from juuret.models import Family, FamilyNetwork, Person, is_full_date


def full_marriage_date(person: Person) -> str | None:
    """The person's complete marriage date, from either field."""
    if person.full_marriage_date:
        return person.full_marriage_date
    if person.has_full_marriage_date:
        return person.marriage_date
    return None


def enrich_person(record: Person, source: Person) -> Person:
    """Return ``record`` with gaps filled from ``source``.

    - death date only if absent
    - a full marriage date replaces a partial one, clearing the partial field
    - spouse only if absent
    """
    update: dict[str, str | None] = {}
    if not record.death_date and source.death_date:
        update["death_date"] = source.death_date

    source_full = full_marriage_date(source)
    if source_full and not record.has_full_marriage_date:
        update["full_marriage_date"] = source_full
        update["marriage_date"] = None

    if not (record.spouse and record.spouse.strip()) and source.spouse:
        update["spouse"] = source.spouse

    return record.model_copy(update=update) if update else record


def with_couple_details(family: Family, parent: Person) -> Person:
    """A parent's record completed with their couple's marriage date and partner."""
    for couple in family.couples:
        if parent not in couple.parents:
            continue
        update: dict[str, str] = {}
        couple_full = couple.full_marriage_date or (
            couple.marriage_date if is_full_date(couple.marriage_date) else None
        )
        if couple_full and not parent.has_full_marriage_date:
            update["full_marriage_date"] = couple_full
        elif couple.marriage_date and not parent.best_marriage_date:
            update["marriage_date"] = couple.marriage_date
        partner = couple.wife if parent == couple.husband else couple.husband
        if partner is not None and not parent.is_married:
            update["spouse"] = partner.display_name
        return parent.model_copy(update=update) if update else parent
    return parent


def as_parent_record(person: Person, network: FamilyNetwork) -> tuple[Family, Person] | None:
    """The family ``person`` heads and their own entry in it, if resolved.

    Marriage dates live on the couple in a parsed family, so the returned
    record carries the couple's date and partner.
    """
    family = network.as_parent_family(person)
    if family is None:
        return None
    parent = family.find_parent(person.name)
    if parent is None:
        return None
    return family, with_couple_details(family, parent)


def enrich_children(family: Family, network: FamilyNetwork) -> Family:
    """Copy of ``family`` whose married children carry their as-parent dates."""
    couples = []
    for couple in family.couples:
        children = []
        for child in couple.children:
            linked = as_parent_record(child, network) if child.is_married else None
            children.append(enrich_person(child, linked[1]) if linked else child)
        couples.append(couple.model_copy(update={"children": children}))
    return family.model_copy(update={"couples": couples})
