"""Tests for citation rendering and enrichment."""
from __future__ import annotations

import pytest

from juuret.citations import (
    enrich_children,
    enrich_person,
    extract_marriage_year,
    format_child,
    format_date_additions,
    is_target_child,
    normalize_date,
    render_as_child,
    render_family,
    render_nuclear_with_supplement,
)
from juuret.models import Couple, Family, FamilyNetwork, Person

from sample_data import iso_peitso, korpi_5, korpi_6

KORPI_6_CITATION = (
    "Information on pages 105, 106 includes:\n"
    "\n"
    "Matti Erikinp., b 09.10.1826, d 10.02.1896\n"
    "Brita Matint., b 02.03.1833, d 11.04.1896\n"
    "m 14.10.1850\n"
    "\n"
    "Children:\n"
    "Maria, b 27.03.1863, m Elias Iso-Peitso 1882\n"
    "Juho, b 15.01.1866\n"
    "\n"
    "Notes:\n"
    "• Lapsena kuollut 4.\n"
    "\n"
    "Children died in infancy: 4\n"
)


@pytest.fixture
def network() -> FamilyNetwork:
    family = korpi_6()
    return (
        FamilyNetwork(main_family=family)
        .with_as_child(family.father, korpi_5())
        .with_as_parent(family.find_child("Maria"), iso_peitso())
    )


class TestDates:
    """Tests for date normalization and marriage years."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("n 1850", "about 1850"),
            ("1850", "1850"),
            ("3.4.1850", "3.4.1850"),
            (" 14.10.1882 ", "14.10.1882"),
            ("1850-luvulla", "1850-luvulla"),
        ],
    )
    def test_normalize_date(self, raw, expected):
        assert normalize_date(raw) == expected

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("04.03.1867", "1867"),
            ("14", "1814"),
            ("∞ 82", "1882"),
            ("1867", "1867"),
            ("syksyllä", None),
            (None, None),
        ],
    )
    def test_extract_marriage_year(self, raw, expected):
        assert extract_marriage_year(raw) == expected

    def test_unreadable_marriage_date_renders_raw(self):
        child = Person(name="Kaisa", spouse="Juho", marriage_date="syksyllä")
        assert format_child(child) == "Kaisa, m Juho syksyllä\n"

    def test_marriage_without_date(self):
        assert format_child(Person(name="Kaisa", spouse="Juho")) == "Kaisa, m Juho\n"


class TestDateAdditions:
    """Tests for the fixed supplement phrasing."""

    def test_single(self):
        assert format_date_additions(["death date"]) == "death date is"
        assert format_date_additions(["marriage date"]) == "marriage date is"

    def test_two(self):
        assert format_date_additions(["death date", "marriage date"]) == "marriage and death dates are"

    def test_three_or_more(self):
        assert (
            format_date_additions(["birth date", "death date", "marriage date"])
            == "birth date, death date, and marriage date are"
        )

    def test_empty(self):
        assert format_date_additions([]) == ""


class TestEnrichment:
    """Tests for the merge rule."""

    def test_fills_gaps_and_replaces_partial_marriage(self):
        record = Person(name="Maria", marriage_date="82", spouse="Elias Iso-Peitso")
        source = Person(name="Maria", death_date="12.12.1930", full_marriage_date="14.10.1882", spouse="Elias Juhonp.")

        merged = enrich_person(record, source)

        assert merged.death_date == "12.12.1930"
        assert merged.full_marriage_date == "14.10.1882"
        assert merged.marriage_date is None
        assert merged.spouse == "Elias Iso-Peitso"
        assert record.marriage_date == "82"

    def test_keeps_existing_values(self):
        record = Person(name="Maria", death_date="1930", full_marriage_date="1.1.1882", spouse="Elias")
        source = Person(name="Maria", death_date="12.12.1930", full_marriage_date="14.10.1882", spouse="Eljas")
        assert enrich_person(record, source) == record

    def test_full_date_in_marriage_field_counts(self):
        merged = enrich_person(Person(name="Maria", marriage_date="82"), Person(name="Maria", marriage_date="14.10.1882"))
        assert merged.full_marriage_date == "14.10.1882"
        assert merged.marriage_date is None

    def test_partial_source_does_not_override(self):
        record = Person(name="Maria", marriage_date="82")
        assert enrich_person(record, Person(name="Maria", marriage_date="1882")) == record

    def test_fills_missing_spouse(self):
        merged = enrich_person(Person(name="Maria"), Person(name="Maria", spouse="Elias"))
        assert merged.spouse == "Elias"

    def test_idempotent(self):
        record = Person(name="Maria", marriage_date="82")
        source = Person(name="Maria", death_date="12.12.1930", full_marriage_date="14.10.1882", spouse="Elias")
        once = enrich_person(record, source)
        assert enrich_person(once, source) == once

    def test_enrich_children_uses_as_parent_family(self, network: FamilyNetwork):
        enriched = enrich_children(network.main_family, network)
        maria = enriched.find_child("Maria")

        assert maria.death_date == "12.12.1930"
        assert maria.full_marriage_date == "14.10.1882"
        assert network.main_family.find_child("Maria").death_date is None
        assert enriched.find_child("Juho") == network.main_family.find_child("Juho")


class TestRenderFamily:
    """Golden-output tests for the nuclear family citation."""

    def test_korpi_6(self):
        assert render_family(korpi_6()) == KORPI_6_CITATION

    def test_additional_spouses_and_their_children(self):
        juho = Person(name="Juho", patronymic="Matinp.", birth_date="1800")
        family = Family(
            family_id="TALO 1",
            page_references=["5"],
            couples=[
                Couple(
                    husband=juho,
                    wife=Person(name="Anna", patronymic="Heikint.", birth_date="1802", death_date="1830"),
                    marriage_date="1825",
                    children=[Person(name="Kalle", birth_date="1826")],
                ),
                Couple(
                    husband=juho,
                    wife=Person(name="Liisa", patronymic="Eliaant.", birth_date="1805"),
                    marriage_date="n 1832",
                    children=[Person(name="Eeva", birth_date="1833")],
                ),
            ],
        )
        assert render_family(family) == (
            "Information on page 5 includes:\n"
            "\n"
            "Juho Matinp., b 1800\n"
            "Anna Heikint., b 1802, d 1830\n"
            "m 1825\n"
            "\n"
            "Additional spouse(s):\n"
            "Liisa Eliaant., b 1805\n"
            "m about 1832\n"
            "\n"
            "Children:\n"
            "Kalle, b 1826\n"
            "\n"
            "Children with spouse 2:\n"
            "Eeva, b 1833\n"
        )

    def test_minimal_family(self):
        family = Family(family_id="TALO 2", page_references=["7"], couples=[Couple(husband=Person(name="Juho"))])
        assert render_family(family) == "Information on page 7 includes:\n\nJuho\n"

    def test_nuclear_with_supplement(self, network: FamilyNetwork):
        assert render_nuclear_with_supplement(korpi_6(), network) == (
            KORPI_6_CITATION
            + "\n"
            + "Additional information:\n"
            + "Maria's marriage and death dates are on page 210\n"
        )

    def test_nuclear_without_new_information(self):
        network = FamilyNetwork(main_family=korpi_6())
        assert render_nuclear_with_supplement(korpi_6(), network) == KORPI_6_CITATION


class TestRenderAsChild:
    """Golden-output tests for a person's citation in their parents' family."""

    def test_target_match_is_lenient_on_birth_date(self):
        child = Person(name="Maria", birth_date="27.03.1863")
        assert is_target_child(child, Person(name="maria"))
        assert is_target_child(child, Person(name="Maria", birth_date="27.03.1863"))
        assert not is_target_child(child, Person(name="Maria", birth_date="1.1.1870"))
        assert not is_target_child(child, Person(name="Juho"))

    def test_marks_target_without_network(self):
        maria = korpi_6().find_child("Maria")
        text = render_as_child(maria, korpi_6())

        assert "\nChildren:\n→ Maria, b 27.03.1863, m Elias Iso-Peitso 1882\n  Juho, b 15.01.1866\n" in text
        assert "Additional Information" not in text

    def test_child_with_as_parent_family(self, network: FamilyNetwork):
        maria = korpi_6().find_child("Maria")
        assert render_as_child(maria, korpi_6(), network) == (
            "Information on pages 105, 106 includes:\n"
            "\n"
            "Matti Erikinp., b 09.10.1826, d 10.02.1896\n"
            "Brita Matint., b 02.03.1833, d 11.04.1896\n"
            "m 14.10.1850\n"
            "\n"
            "Children:\n"
            "→ Maria, b 27.03.1863, m Elias Iso-Peitso 14.10.1882, d 12.12.1930\n"
            "  Juho, b 15.01.1866\n"
            "\n"
            "Notes:\n"
            "• Lapsena kuollut 4.\n"
            "\n"
            "Children died in infancy: 4\n"
            "\n"
            "Additional Information:\n"
            "Maria's marriage and death dates are found on page 210\n"
        )

    def test_parent_with_own_family_overlay(self, network: FamilyNetwork):
        """A parent's citation in their childhood family, enriched from the family they head."""
        matti = korpi_6().father
        overlay = network.with_as_parent(matti, network.main_family)

        assert render_as_child(matti, korpi_5(), overlay) == (
            "Information on pages 100, 101 includes:\n"
            "\n"
            "Erik Matinp., b 11.03.1798, d 1860\n"
            "Kaisa Jaakont., b about 1800\n"
            "m 1820\n"
            "\n"
            "Children:\n"
            "→ Matti, b 09.10.1826, m Brita Matint. 14.10.1850, d 10.02.1896\n"
            "\n"
            "Children died in infancy: 2\n"
            "\n"
            "Additional Information:\n"
            "Matti's marriage and death dates are found on pages 105, 106\n"
        )
        assert network.as_parent_family(matti) is None

    def test_single_addition(self, network: FamilyNetwork):
        maria = korpi_6().find_child("Maria").model_copy(update={"marriage_date": "14.10.1882"})
        family = korpi_6()
        couple = family.primary_couple.model_copy(update={"children": [maria, family.find_child("Juho")]})
        family = family.model_copy(update={"couples": [couple]})

        text = render_as_child(maria, family, network)
        assert text.endswith("\nAdditional Information:\nMaria's death date is found on page 210\n")

    def test_empty_children_heading_always_present(self):
        family = Family(family_id="TALO 2", page_references=["7"], couples=[Couple(husband=Person(name="Juho"))])
        text = render_as_child(Person(name="Kalle"), family)
        assert text == "Information on page 7 includes:\n\nJuho\n\nChildren:\n"
