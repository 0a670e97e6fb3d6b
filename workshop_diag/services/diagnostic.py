import logging
from typing import List, Optional, Sequence

from workshop_diag.schemas import ProblemCategory, Suggestion
from workshop_diag.services.catalog import CatalogReader
from workshop_diag.services.scoring import MAX_SCORE, score

logger = logging.getLogger(__name__)


class DiagnosticService:
    """Suggests likely problems for reported symptoms.

    Stateless apart from the injected catalog reader; the catalog read is
    the only I/O and its failures reach the caller unchanged.
    """

    def __init__(self, catalog: CatalogReader):
        self._catalog = catalog

    async def suggest_problems(
        self,
        symptoms: Sequence[str],
        category: Optional[ProblemCategory] = None,
    ) -> List[Suggestion]:
        """Problems matching ``symptoms``, most relevant first.

        Problems scoring 0 are left out. Equal scores keep catalog order
        (higher severity first).
        """
        if not symptoms:
            return []

        try:
            problems = await self._catalog.find_active_problems(category)
        except Exception:
            logger.error("Failed to load problem catalog for suggestions (category=%s)", category)
            raise

        scored = (Suggestion.from_problem(p, score(symptoms, p)) for p in problems)
        suggestions = sorted(
            (s for s in scored if s.match_score > 0),
            key=lambda s: s.match_score,
            reverse=True,
        )
        logger.info("Suggested %d problems for %d symptoms", len(suggestions), len(symptoms))
        return suggestions

    async def get_problems_by_category(self, category: ProblemCategory) -> List[Suggestion]:
        try:
            problems = await self._catalog.find_active_problems(category)
        except Exception:
            logger.error("Failed to load problems for category %s", category)
            raise
        return [Suggestion.from_problem(p, MAX_SCORE) for p in problems]
