"""Result and report schemas."""

import datetime as dt
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field


# ============== Evaluation results ==============


class StudentResultRow(BaseModel):
    """One line of an evaluation result sheet."""

    student_id: UUID
    student_name: str
    gender: str | None
    student_number: str | None
    notes: dict[str, Decimal] = Field(description="Notes keyed by subject id")
    total: Decimal
    moyenne: Decimal
    rank: int | None
    is_absent: bool = False


class GenderCounts(BaseModel):
    garcons: int = 0
    filles: int = 0
    total: int = 0


class EvaluationStatistics(BaseModel):
    """Class-level statistics for one evaluation."""

    moyenne_classe: Decimal
    moyenne_max: Decimal
    moyenne_min: Decimal
    total_max: Decimal
    total_min: Decimal
    nombre_admis: int
    nombre_non_admis: int
    inscrits: GenderCounts
    presents: GenderCounts
    admis: GenderCounts
    pourcentage_admis: int
    moyenne_admission: Decimal


class SubjectColumn(BaseModel):
    id: UUID
    name: str


class EvaluationResults(BaseModel):
    """Result sheet of an evaluation."""

    class_id: UUID
    class_name: str
    evaluation_id: UUID
    evaluation_name: str
    school_year: str | None
    subjects: list[SubjectColumn]
    rows: list[StudentResultRow]
    statistics: EvaluationStatistics


# ============== Statistics and comparison ==============


class DistributionBand(BaseModel):
    """Moyennes falling in [min, max)."""

    range: str
    min: Decimal
    max: Decimal
    count: int
    percentage: Decimal


class Quartiles(BaseModel):
    q1: Decimal
    q2: Decimal
    q3: Decimal


class EvaluationFullStatistics(BaseModel):
    """Spread of the moyennes of an evaluation."""

    evaluation_id: UUID
    inscrits: int
    presents: int
    absents: int
    moyenne_classe: Decimal
    mediane: Decimal
    ecart_type: Decimal = Field(description="Sample standard deviation")
    taux_reussite: Decimal = Field(description="Share of present students at or above admission")
    quartiles: Quartiles
    distribution: list[DistributionBand]
    outliers: list[Decimal]
    moyenne_admission: Decimal
    max_note: int


class EvaluationCompareRequest(BaseModel):
    evaluation_ids: list[UUID] = Field(..., min_length=2, max_length=20)


class EvaluationSummary(BaseModel):
    evaluation_id: UUID
    evaluation_name: str
    date: dt.date
    class_id: UUID
    class_name: str
    presents: int
    moyenne_classe: Decimal
    moyenne_max: Decimal
    moyenne_min: Decimal
    mediane: Decimal
    taux_reussite: Decimal


class EvaluationComparison(BaseModel):
    """Several evaluations side by side."""

    comparisons: list[EvaluationSummary]
    best_evaluation_id: UUID
    worst_evaluation_id: UUID
    total: int


# ============== Annual report ==============


class StudentBilan(BaseModel):
    """Annual averages and decision of a student."""

    student_id: UUID
    student_name: str
    gender: str | None
    moy_compo1: Decimal | None
    moy_compo2: Decimal | None
    moy_compo3: Decimal | None
    moy_annuelle: Decimal | None
    moy_compo_passage: Decimal | None
    mga: Decimal | None
    decision: str
    rank: int | None = None


class BilanStats(BaseModel):
    inscrits: GenderCounts
    presents: GenderCounts
    abandons: GenderCounts
    admis: GenderCounts
    redoublement: GenderCounts
    pourcentage_admis: int
    moyenne_generale_classe: Decimal | None


class ThresholdSummary(BaseModel):
    moyenne_admission: Decimal
    moyenne_redoublement: Decimal
    max_note: int


class AnnualReport(BaseModel):
    """Bilan annuel of a class for a school year."""

    class_id: UUID
    class_name: str
    school_year_id: UUID
    school_year: str
    students: list[StudentBilan]
    stats: BilanStats
    threshold: ThresholdSummary
