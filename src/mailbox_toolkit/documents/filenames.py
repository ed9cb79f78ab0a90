"""
Output filenames.

Filenames are ASCII so they survive email attachments and USB sticks
formatted with old filesystems: Icelandic letters are transliterated
(``ð`` -> ``d``, ``þ`` -> ``th``, ``æ`` -> ``ae``, ``ö`` -> ``o``) and other
accents are stripped.
"""

from __future__ import annotations

import hashlib
import re
import unicodedata
from datetime import date
from typing import Optional, Union

from mailbox_toolkit.documents.models import DocumentType

_TRANSLITERATIONS = str.maketrans({
    "ð": "d", "Ð": "D",
    "þ": "th", "Þ": "Th",
    "æ": "ae", "Æ": "Ae",
    "ö": "o", "Ö": "O",
    "ø": "o", "Ø": "O",
    "ß": "ss",
})

_NON_SLUG = re.compile(r"[^a-z0-9]+")

TITLE_DIGEST_LENGTH = 6


def transliterate(text: str) -> str:
    """Reduce ``text`` to ASCII."""
    text = unicodedata.normalize("NFC", text).translate(_TRANSLITERATIONS)
    decomposed = unicodedata.normalize("NFKD", text)
    return decomposed.encode("ascii", "ignore").decode("ascii")


def slugify(text: str) -> str:
    """
    Lowercase ASCII slug with single hyphens.

    Example:
        >>> slugify("Þórsgata 5, bakhús")
        'thorsgata-5-bakhus'
    """
    return _NON_SLUG.sub("-", transliterate(text).lower()).strip("-")


def document_filename(
    doc_type: Union[DocumentType, str],
    building_title: Optional[str],
    on_date: date,
) -> str:
    """
    Filename for a generated document.

    Format is ``{kind}-{building}-{digest}-{YYYY-MM-DD}.pdf``. The digest is
    taken from the exact title, so titles that slugify alike ("Hátún 10",
    "Hatun 10") still get different names. Both parts are left out when
    the title is blank.

    Example:
        >>> document_filename(DocumentType.MAILBOX_LABELS, "Hátún 10", date(2024, 3, 1))
        'postkassamerki-hatun-10-af5448-2024-03-01.pdf'
    """
    kind = DocumentType(doc_type).file_stem
    parts = [kind]
    title = unicodedata.normalize("NFC", (building_title or "").strip())
    if title:
        building = slugify(title)
        if building:
            parts.append(building)
        parts.append(title_digest(title))
    parts.append(on_date.isoformat())
    return "-".join(parts) + ".pdf"


def title_digest(title: str) -> str:
    """Short stable hex digest of a building title."""
    return hashlib.sha1(title.encode("utf-8")).hexdigest()[:TITLE_DIGEST_LENGTH]
