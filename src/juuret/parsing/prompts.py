"""Prompts for turning a family block into structured JSON."""
from __future__ import annotations


FAMILY_EXTRACTION_PROMPT = """\
You extract structured data from Finnish family-register transcriptions
("Juuret Kälviällä"). Each block describes one family: a header with the
family id and page references, the parents, their marriage, the children
("Lapset"), and notes.

## Notation

- ★ birth date, † death date, ∞ marriage date. Dates are day.month.year or
  a bare year; a 2-digit year after ∞ is a partial marriage year.
- "n" before a year means "about".
- {Korpi 5} after a parent is the family where that person was a child;
  record it as asChildReference in uppercase: "KORPI 5".
- A family id after a child's spouse (e.g. "Iso-Peitso III 2") is the family
  that child founded; record it as asParentReference in uppercase.
- <ABCD-123> is a FamilySearch id; record it as familySearchId.
- "Lapsena kuollut 4." means four children died in infancy.
- Patronymics end in "p." (son) or "t." (daughter), e.g. "Matti Erikinp.".
- A later "II puoliso" / "III puoliso" section is the husband's next marriage;
  record it as another couple after the first one.

## Output

Return a single JSON object, no prose and no markdown:

{
  "familyId": "KORPI 6",
  "pageReferences": ["105", "106"],
  "couples": [
    {
      "husband": {"name": "Matti", "patronymic": "Erikinp.", "birthDate": "09.10.1726",
                  "deathDate": "10.02.1796", "asChildReference": "KORPI 5"},
      "wife": {"name": "Brita", "patronymic": "Matint.", "birthDate": "02.03.1733",
               "deathDate": "11.04.1796", "asChildReference": "SIKALA 5"},
      "marriageDate": "14.10.1750",
      "fullMarriageDate": "14.10.1750",
      "children": [
        {"name": "Maria", "birthDate": "27.03.1763", "marriageDate": "82",
         "spouse": "Elias Iso-Peitso", "asParentReference": "ISO-PEITSO III 2"}
      ],
      "childrenDiedInfancy": 4,
      "coupleNotes": []
    }
  ],
  "notes": ["Lapsena kuollut 4."],
  "noteDefinitions": {}
}

## Rules

- Use null for anything the text does not state. Never guess.
- Keep every date exactly as written.
- Person fields: name, patronymic, birthDate, deathDate, marriageDate,
  fullMarriageDate, spouse, asChildReference, asParentReference,
  familySearchId, noteMarkers.
- Children stay in the order they are listed.
"""


def build_user_message(family_id: str, text: str) -> str:
    return f"""\
FAMILY ID: {family_id}

TEXT:
{text}

Respond with valid JSON only.
"""
