"""Person record as described in one family block."""
from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

FULL_DATE_PATTERN = re.compile(r"^\d{1,2}\.\d{1,2}\.\d{4}$")


def is_full_date(value: str | None) -> bool:
    """True for a complete ``day.month.year`` date such as ``14.10.1773``."""
    return bool(value) and FULL_DATE_PATTERN.match(value.strip()) is not None


class RecordModel(BaseModel):
    """Base for immutable records decoded from the parser's camelCase JSON."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        # the parser emits null for absent values, including collections
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class Person(RecordModel):
    """An individual as one family record describes them.

    The same human appears in several records (as a child, as a parent), each
    with its own partial view of their dates. Identity is not globally
    unique; ``display_name`` is the preferred key.
    """

    name: str = Field(description="Given name as written in the record")
    patronymic: str | None = Field(default=None, description="e.g. 'Matint.' or 'Erikinp.'")
    birth_date: str | None = Field(default=None)
    death_date: str | None = Field(default=None)
    marriage_date: str | None = Field(
        default=None, description="Marriage date as recorded, often a 2-digit year"
    )
    full_marriage_date: str | None = Field(
        default=None, description="Complete day.month.year marriage date"
    )
    spouse: str | None = Field(default=None, description="Spouse name, free text")
    as_child_reference: str | None = Field(
        default=None, description="Family where this person appears as a child"
    )
    as_parent_reference: str | None = Field(
        default=None, description="Family this person founded as a parent"
    )
    family_search_id: str | None = Field(default=None)
    note_markers: list[str] = Field(default_factory=list)

    @property
    def display_name(self) -> str:
        if self.patronymic and self.patronymic.strip():
            return f"{self.name} {self.patronymic.strip()}"
        return self.name

    @property
    def best_marriage_date(self) -> str | None:
        return self.full_marriage_date or self.marriage_date

    @property
    def is_married(self) -> bool:
        return bool(self.spouse and self.spouse.strip())

    @property
    def has_full_marriage_date(self) -> bool:
        return self.full_marriage_date is not None or is_full_date(self.marriage_date)

    def name_matches(self, other: str) -> bool:
        """Case-insensitive comparison against the bare name."""
        return self.name.strip().casefold() == other.strip().casefold()
