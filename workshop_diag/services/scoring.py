import math
from typing import Iterable, List, Optional, Sequence

from workshop_diag.schemas import Problem
from workshop_diag.services.normalize import normalize_symptoms

MAX_SCORE = 100
# Share of the score that comes from cataloged symptom overlap
SYMPTOM_WEIGHT = 70
# Multiplier applied to the name/description keyword match (0-100)
TEXT_WEIGHT = 0.30
# Shorter words (articles, prepositions) are ignored in keyword matching
MIN_WORD_LENGTH = 3


def _round_half_up(value: float) -> int:
    # builtin round() uses banker's rounding; scores round .5 upwards
    return int(math.floor(value + 0.5))


def _symptoms_overlap(reported: str, cataloged: str) -> bool:
    return reported in cataloged or cataloged in reported


def _mentions_any_word(symptom: str, haystack: str) -> bool:
    return any(len(word) >= MIN_WORD_LENGTH and word in haystack for word in symptom.split())


def text_ratio(symptoms: Sequence[str], texts: Iterable[Optional[str]]) -> float:
    """Percentage of symptoms with at least one keyword present in ``texts``.

    Unrounded so weighted callers can sum before rounding once.
    """
    if not symptoms:
        return 0.0
    haystack = " ".join(t or "" for t in texts).lower()
    matched = sum(1 for s in normalize_symptoms(list(symptoms)) if _mentions_any_word(s, haystack))
    return min(float(MAX_SCORE), matched / len(symptoms) * MAX_SCORE)


def text_match(symptoms: Sequence[str], texts: Iterable[Optional[str]]) -> int:
    return _round_half_up(text_ratio(symptoms, texts))


def score(reported_symptoms: Sequence[str], problem: Problem) -> int:
    """Relevance (0-100) of ``problem`` to the raw symptom phrases a customer reported."""
    texts = [problem.name, problem.description]
    if not reported_symptoms:
        return 0
    if not problem.symptoms:
        return text_match(reported_symptoms, texts)

    reported: List[str] = normalize_symptoms(list(reported_symptoms))
    cataloged: List[str] = normalize_symptoms(problem.symptoms)
    match_count = sum(
        1 for r in reported if any(_symptoms_overlap(r, c) for c in cataloged)
    )

    symptom_score = match_count / len(reported) * SYMPTOM_WEIGHT
    text_score = text_ratio(reported_symptoms, texts) * TEXT_WEIGHT
    return _round_half_up(min(float(MAX_SCORE), symptom_score + text_score))
