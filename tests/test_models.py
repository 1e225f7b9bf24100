"""Tests for the record model and family network."""
from __future__ import annotations

import pytest
from pydantic import ValidationError

from juuret.models import Couple, Family, FamilyNetwork, Person, identity_key, is_full_date

from sample_data import iso_peitso, korpi_5, korpi_6


@pytest.fixture
def remarried() -> Family:
    """A husband with two marriages."""
    juho = Person(name="Juho", patronymic="Matinp.", birth_date="1800")
    return Family(
        family_id="TALO 1",
        page_references=["5"],
        couples=[
            Couple(
                husband=juho,
                wife=Person(name="Anna", patronymic="Heikint.", birth_date="1802", death_date="1830"),
                marriage_date="1825",
                children=[Person(name="Kalle", birth_date="1826", spouse="Kaisa", marriage_date="49")],
            ),
            Couple(
                husband=juho,
                wife=Person(name="Liisa", patronymic="Eliaant.", birth_date="1805"),
                marriage_date="n 1832",
                children=[Person(name="Eeva", birth_date="1833")],
                children_died_infancy=1,
            ),
        ],
    )


class TestPerson:
    """Tests for Person derived fields."""

    def test_display_name_with_patronymic(self):
        person = Person(name="Matti", patronymic="Erikinp.")
        assert person.display_name == "Matti Erikinp."

    def test_display_name_without_patronymic(self):
        assert Person(name="Maria").display_name == "Maria"
        assert Person(name="Maria", patronymic="  ").display_name == "Maria"

    def test_best_marriage_date_prefers_full(self):
        person = Person(name="Maria", marriage_date="82", full_marriage_date="14.10.1882")
        assert person.best_marriage_date == "14.10.1882"
        assert Person(name="Maria", marriage_date="82").best_marriage_date == "82"

    def test_is_married_requires_spouse_name(self):
        assert Person(name="Maria", spouse="Elias").is_married
        assert not Person(name="Maria", spouse="  ").is_married
        assert not Person(name="Maria", marriage_date="82").is_married

    def test_full_marriage_date_detection(self):
        assert Person(name="A", full_marriage_date="14.10.1882").has_full_marriage_date
        assert Person(name="A", marriage_date="4.3.1867").has_full_marriage_date
        assert not Person(name="A", marriage_date="82").has_full_marriage_date
        assert not Person(name="A", marriage_date="1882").has_full_marriage_date

    def test_is_full_date(self):
        assert is_full_date("04.03.1867")
        assert is_full_date(" 4.3.1867 ")
        assert not is_full_date("1867")
        assert not is_full_date(None)

    def test_validates_camel_case_json(self):
        """Parser output uses camelCase keys and nulls."""
        person = Person.model_validate(
            {
                "name": "Matti",
                "patronymic": "Erikinp.",
                "birthDate": "09.10.1826",
                "deathDate": None,
                "asChildReference": "KORPI 5",
                "familySearchId": "ABCD-123",
                "noteMarkers": None,
            }
        )
        assert person.birth_date == "09.10.1826"
        assert person.death_date is None
        assert person.as_child_reference == "KORPI 5"
        assert person.family_search_id == "ABCD-123"
        assert person.note_markers == []

    def test_is_immutable(self):
        person = Person(name="Matti")
        with pytest.raises(ValidationError):
            person.name = "Juho"


class TestFamily:
    """Tests for Family derived views and lookups."""

    def test_primary_couple_views(self):
        family = korpi_6()
        assert family.father.display_name == "Matti Erikinp."
        assert family.mother.display_name == "Brita Matint."
        assert [c.name for c in family.children] == ["Maria", "Juho"]

    def test_married_children(self):
        assert [c.name for c in korpi_6().married_children] == ["Maria"]

    def test_all_parents_shares_remarried_husband(self, remarried: Family):
        assert [p.display_name for p in remarried.all_parents] == [
            "Juho Matinp.",
            "Anna Heikint.",
            "Liisa Eliaant.",
        ]

    def test_children_views_across_couples(self, remarried: Family):
        assert [c.name for c in remarried.children] == ["Kalle"]
        assert [c.name for c in remarried.all_children] == ["Kalle", "Eeva"]
        assert [c.name for c in remarried.married_children] == ["Kalle"]
        assert len(remarried.all_persons) == 5
        assert remarried.total_children_died_infancy == 1

    def test_page_reference_string(self):
        assert korpi_6().page_reference_string == "pages 105, 106"
        assert iso_peitso().page_reference_string == "page 210"

    def test_find_is_case_insensitive(self):
        family = korpi_6()
        assert family.find_parent("matti").display_name == "Matti Erikinp."
        assert family.find_child("MARIA").birth_date == "27.03.1863"
        assert family.find_person("juho").name == "Juho"
        assert family.find_parent("Maria") is None

    def test_couple_for_child(self, remarried: Family):
        eeva = remarried.find_child("Eeva")
        assert remarried.couple_for_child(eeva) is remarried.couples[1]

    def test_validate_structure(self):
        assert korpi_6().validate_structure() == []
        empty = Family(family_id=" ")
        warnings = empty.validate_structure()
        assert "Family ID is empty" in warnings
        assert "Family has no couples" in warnings
        assert "No page references" in warnings

    def test_validates_parser_json(self):
        family = Family.model_validate(
            {
                "familyId": "KORPI 6",
                "pageReferences": ["105", "106"],
                "couples": [
                    {
                        "husband": {"name": "Matti", "patronymic": "Erikinp."},
                        "wife": None,
                        "marriageDate": "14.10.1850",
                        "children": [{"name": "Maria", "spouse": "Elias Iso-Peitso"}],
                        "childrenDiedInfancy": None,
                    }
                ],
                "notes": None,
            }
        )
        assert family.mother is None
        assert family.primary_couple.children_died_infancy == 0
        assert family.notes == []
        assert family.married_children[0].spouse == "Elias Iso-Peitso"


class TestFamilyNetwork:
    """Tests for network lookups and overlays."""

    @pytest.fixture
    def network(self) -> FamilyNetwork:
        return FamilyNetwork(
            main_family=korpi_6(),
            as_child_families={identity_key("Matti Erikinp."): korpi_5()},
            as_parent_families={identity_key("Maria"): iso_peitso()},
        )

    def test_identity_key(self):
        assert identity_key("  Matti   Erikinp. ") == "matti erikinp."

    def test_lookup_by_display_name(self, network: FamilyNetwork):
        matti = korpi_6().father
        assert network.as_child_family(matti).family_id == "KORPI 5"
        assert network.as_child_family("MATTI ERIKINP.").family_id == "KORPI 5"

    def test_lookup_falls_back_to_bare_name(self, network: FamilyNetwork):
        """An enriched record of Maria still finds the entry stored under her bare name."""
        maria = Person(name="Maria", patronymic="Matint.")
        assert network.as_parent_family(maria).family_id == "ISO-PEITSO III 2"

    def test_missing_lookup(self, network: FamilyNetwork):
        assert network.as_child_family(korpi_6().mother) is None
        assert network.spouse_as_child_family("Elias Iso-Peitso") is None

    def test_overlay_returns_copy(self, network: FamilyNetwork):
        matti = korpi_6().father
        overlaid = network.with_as_parent(matti, network.main_family)

        assert overlaid.as_parent_family(matti).family_id == "KORPI 6"
        assert network.as_parent_family(matti) is None
        assert len(network.as_parent_families) == 1
        assert len(overlaid.as_parent_families) == 2

    def test_spouse_overlay(self, network: FamilyNetwork):
        overlaid = network.with_spouse_as_child("Elias Iso-Peitso", iso_peitso())
        assert overlaid.spouse_as_child_family("elias iso-peitso") is not None
        assert network.spouse_as_child_families == {}

    def test_rejects_own_id_as_key(self):
        with pytest.raises(ValidationError):
            FamilyNetwork(main_family=korpi_6(), as_child_families={"korpi 6": korpi_5()})

    def test_all_families_and_totals(self, network: FamilyNetwork):
        ids = [f.family_id for f in network.all_families()]
        assert ids == ["KORPI 6", "KORPI 5", "ISO-PEITSO III 2"]
        assert network.total_resolved == 2

    def test_summary(self, network: FamilyNetwork):
        summary = network.summary()
        assert summary.startswith("Family network for KORPI 6")
        assert "matti erikinp. as child -> KORPI 5" in summary
        assert "maria as parent -> ISO-PEITSO III 2" in summary
