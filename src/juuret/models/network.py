"""Family network: a main family plus the families linked to its members.

Every map is keyed by :func:`identity_key` so that callers holding a display
name, a bare name, or differently spaced text all reach the same entry.
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

from juuret.models.family import Family
from juuret.models.person import Person

PersonRef = Person | str


def identity_key(text: str) -> str:
    """Normalize a name for map access: casefolded, whitespace collapsed."""
    return " ".join(text.split()).casefold()


def lookup_keys(who: PersonRef) -> list[str]:
    # display name first, bare name as fallback
    if isinstance(who, Person):
        keys = [identity_key(who.display_name), identity_key(who.name)]
        return list(dict.fromkeys(keys))
    return [identity_key(who)]


def _lookup(mapping: dict[str, Family], who: PersonRef) -> Family | None:
    for key in lookup_keys(who):
        family = mapping.get(key)
        if family is not None:
            return family
    return None


def _primary_key(who: PersonRef) -> str:
    return lookup_keys(who)[0]


class FamilyNetwork(BaseModel):
    """Resolved graph rooted at ``main_family``.

    Treated as an immutable value once returned by the resolver. The
    ``with_*`` methods return overlaid copies and never touch the original.
    """

    model_config = ConfigDict(frozen=True)

    main_family: Family
    as_child_families: dict[str, Family] = Field(
        default_factory=dict, description="Person identity -> family where they were a child"
    )
    as_parent_families: dict[str, Family] = Field(
        default_factory=dict, description="Person identity -> family they head as a parent"
    )
    spouse_as_child_families: dict[str, Family] = Field(
        default_factory=dict, description="Spouse name -> spouse's family of origin"
    )

    @model_validator(mode="after")
    def _main_family_not_keyed_by_own_id(self) -> FamilyNetwork:
        own = identity_key(self.main_family.family_id)
        for mapping in (self.as_child_families, self.as_parent_families, self.spouse_as_child_families):
            if own in mapping:
                raise ValueError(f"Network for {self.main_family.family_id} is keyed by its own id")
        return self

    # -- lookups -----------------------------------------------------------

    def as_child_family(self, who: PersonRef) -> Family | None:
        return _lookup(self.as_child_families, who)

    def as_parent_family(self, who: PersonRef) -> Family | None:
        return _lookup(self.as_parent_families, who)

    def spouse_as_child_family(self, spouse: str) -> Family | None:
        return _lookup(self.spouse_as_child_families, spouse)

    # -- copy-on-write overlays -------------------------------------------

    def with_as_child(self, who: PersonRef, family: Family) -> FamilyNetwork:
        updated = {**self.as_child_families, _primary_key(who): family}
        return self.model_copy(update={"as_child_families": updated})

    def with_as_parent(self, who: PersonRef, family: Family) -> FamilyNetwork:
        updated = {**self.as_parent_families, _primary_key(who): family}
        return self.model_copy(update={"as_parent_families": updated})

    def with_spouse_as_child(self, spouse: str, family: Family) -> FamilyNetwork:
        updated = {**self.spouse_as_child_families, _primary_key(spouse): family}
        return self.model_copy(update={"spouse_as_child_families": updated})

    # -- summaries ---------------------------------------------------------

    @property
    def total_resolved(self) -> int:
        return (
            len(self.as_child_families)
            + len(self.as_parent_families)
            + len(self.spouse_as_child_families)
        )

    def all_families(self) -> list[Family]:
        """Main family first, then each linked family once."""
        families = {self.main_family.family_id: self.main_family}
        for mapping in (self.as_child_families, self.as_parent_families, self.spouse_as_child_families):
            for family in mapping.values():
                families.setdefault(family.family_id, family)
        return list(families.values())

    def summary(self) -> str:
        lines = [
            f"Family network for {self.main_family.family_id}",
            f"  as-child families: {len(self.as_child_families)}",
            f"  as-parent families: {len(self.as_parent_families)}",
            f"  spouse as-child families: {len(self.spouse_as_child_families)}",
        ]
        for label, mapping in (
            ("as child", self.as_child_families),
            ("as parent", self.as_parent_families),
            ("spouse as child", self.spouse_as_child_families),
        ):
            for key, family in sorted(mapping.items()):
                lines.append(f"  {key} {label} -> {family.family_id}")
        return "\n".join(lines)
