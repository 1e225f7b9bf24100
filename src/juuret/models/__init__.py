"""Record model: persons, couples, families and the resolved family network."""

from juuret.models.family import Couple, Family
from juuret.models.network import FamilyNetwork, PersonRef, identity_key, lookup_keys
from juuret.models.person import Person, is_full_date

__all__ = [
    "Couple",
    "Family",
    "FamilyNetwork",
    "Person",
    "PersonRef",
    "identity_key",
    "is_full_date",
    "lookup_keys",
]
