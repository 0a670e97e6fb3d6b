from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ProblemCategory(str, Enum):
    ENGINE = "motor"
    SUSPENSION = "suspensao"
    ELECTRICAL = "eletrica"
    COOLING = "refrigeracao"
    BRAKES = "freios"
    TRANSMISSION = "transmissao"
    TIRES = "pneus"
    AIR_CONDITIONING = "ar_condicionado"
    FUEL = "combustivel"
    EXHAUST = "escape"
    LIGHTING = "iluminacao"
    BATTERY = "bateria"
    RADIATOR = "radiador"
    STEERING = "direcao"
    OTHER = "outros"


class ProblemSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return SEVERITY_RANK[self]


SEVERITY_RANK = {
    ProblemSeverity.LOW: 0,
    ProblemSeverity.MEDIUM: 1,
    ProblemSeverity.HIGH: 2,
    ProblemSeverity.CRITICAL: 3,
}


class Problem(BaseModel):
    """A catalog entry describing one diagnosable mechanical issue.

    Read-only to the suggestion engine; records are owned by whoever
    maintains the catalog store.
    """

    id: str
    name: str
    category: ProblemCategory
    severity: ProblemSeverity
    symptoms: List[str] = Field(default_factory=list)
    description: Optional[str] = None
    solutions: List[str] = Field(default_factory=list)
    estimated_cost: Optional[float] = Field(default=None, ge=0)
    is_active: bool = True


class Suggestion(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    problem_id: str
    name: str
    category: ProblemCategory
    severity: ProblemSeverity
    estimated_cost: Optional[float] = None
    description: Optional[str] = None
    solutions: List[str] = Field(default_factory=list)
    match_score: int = Field(ge=0, le=100)

    @classmethod
    def from_problem(cls, problem: Problem, match_score: int) -> "Suggestion":
        return cls(
            problem_id=problem.id,
            name=problem.name,
            category=problem.category,
            severity=problem.severity,
            estimated_cost=problem.estimated_cost or None,
            description=problem.description or None,
            solutions=list(problem.solutions),
            match_score=match_score,
        )


class SuggestRequest(BaseModel):
    symptoms: List[str]
    category: Optional[ProblemCategory] = None
