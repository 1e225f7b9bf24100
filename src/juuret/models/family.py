"""Couple and Family records."""
from __future__ import annotations

from pydantic import Field

from juuret.models.person import Person, RecordModel


class Couple(RecordModel):
    """One marriage within a family record."""

    husband: Person
    wife: Person | None = Field(default=None, description="Absent when unknown")
    marriage_date: str | None = Field(default=None)
    full_marriage_date: str | None = Field(default=None)
    children: list[Person] = Field(default_factory=list, description="Birth order")
    children_died_infancy: int = Field(default=0, ge=0)
    couple_notes: list[str] = Field(default_factory=list)

    @property
    def best_marriage_date(self) -> str | None:
        return self.full_marriage_date or self.marriage_date

    @property
    def parents(self) -> list[Person]:
        return [self.husband] if self.wife is None else [self.husband, self.wife]


class Family(RecordModel):
    """A family block: the primary couple plus the husband's later marriages."""

    family_id: str = Field(description="Archive code, e.g. 'KORPI 6' or 'ISO-PEITSO III 2'")
    page_references: list[str] = Field(default_factory=list)
    couples: list[Couple] = Field(default_factory=list, description="Primary couple first")
    notes: list[str] = Field(default_factory=list)
    note_definitions: dict[str, str] = Field(default_factory=dict)

    # -- derived views -----------------------------------------------------

    @property
    def primary_couple(self) -> Couple | None:
        return self.couples[0] if self.couples else None

    @property
    def additional_couples(self) -> list[Couple]:
        return self.couples[1:]

    @property
    def father(self) -> Person | None:
        couple = self.primary_couple
        return couple.husband if couple else None

    @property
    def mother(self) -> Person | None:
        couple = self.primary_couple
        return couple.wife if couple else None

    @property
    def children(self) -> list[Person]:
        couple = self.primary_couple
        return list(couple.children) if couple else []

    @property
    def all_children(self) -> list[Person]:
        return [child for couple in self.couples for child in couple.children]

    @property
    def all_parents(self) -> list[Person]:
        """Husband and wife of every couple; the shared husband appears once."""
        seen: set[tuple[str, str | None]] = set()
        parents: list[Person] = []
        for couple in self.couples:
            for parent in couple.parents:
                key = (parent.display_name.casefold(), parent.birth_date)
                if key not in seen:
                    seen.add(key)
                    parents.append(parent)
        return parents

    @property
    def married_children(self) -> list[Person]:
        return [child for child in self.all_children if child.is_married]

    @property
    def all_persons(self) -> list[Person]:
        return self.all_parents + self.all_children

    @property
    def total_children_died_infancy(self) -> int:
        return sum(couple.children_died_infancy for couple in self.couples)

    @property
    def page_reference_string(self) -> str:
        if len(self.page_references) == 1:
            return f"page {self.page_references[0]}"
        return f"pages {', '.join(self.page_references)}"

    # -- lookups -----------------------------------------------------------

    def find_person(self, name: str) -> Person | None:
        return next((p for p in self.all_persons if p.name_matches(name)), None)

    def find_parent(self, name: str) -> Person | None:
        return next((p for p in self.all_parents if p.name_matches(name)), None)

    def find_child(self, name: str) -> Person | None:
        return next((c for c in self.all_children if c.name_matches(name)), None)

    def couple_for_child(self, child: Person) -> Couple | None:
        for couple in self.couples:
            if child in couple.children:
                return couple
        return None

    def validate_structure(self) -> list[str]:
        """Return human-readable warnings; an empty list means well-formed."""
        warnings: list[str] = []
        if not self.family_id.strip():
            warnings.append("Family ID is empty")
        if not self.couples:
            warnings.append("Family has no couples")
        if not self.page_references:
            warnings.append("No page references")
        for index, couple in enumerate(self.couples, start=1):
            if not couple.husband.name.strip():
                warnings.append(f"Couple {index} has no husband name")
        return warnings
