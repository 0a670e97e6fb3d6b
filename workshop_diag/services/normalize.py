import re
import unicodedata
from typing import List

_COMBINING_MARKS = re.compile("[\u0300-\u036f]")


def normalize_text(text: str) -> str:
    """Lower-case and strip diacritics so "Ruído" and "ruido" compare equal."""
    decomposed = unicodedata.normalize("NFD", text or "")
    return _COMBINING_MARKS.sub("", decomposed).lower()


def normalize_symptoms(symptoms: List[str]) -> List[str]:
    return [normalize_text(s) for s in symptoms]
