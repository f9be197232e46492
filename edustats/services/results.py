"""Evaluation results: moyennes, ranks and class statistics."""

import statistics
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from edustats.models.evaluation import Evaluation
from edustats.models.school_class import SchoolClass
from edustats.models.school_year import SchoolYear
from edustats.models.student import Student
from edustats.models.subject import Subject
from edustats.services import class_average_config as config_service
from edustats.services import class_threshold as threshold_service
from edustats.services import formula as formula_service
from edustats.services import note as note_service
from edustats.services import student as student_service
from edustats.services import subject as subject_service
from edustats.services.class_threshold import Thresholds

ZERO = Decimal("0.00")
ONE_PLACE = Decimal("0.1")
DISTRIBUTION_BINS = 5


@dataclass
class GradeRow:
    """A student's notes and moyenne for one evaluation."""

    student: Student
    notes: dict[UUID, Decimal] = field(default_factory=dict)
    total: Decimal = ZERO
    moyenne: Decimal = ZERO
    rank: int | None = None
    is_absent: bool = False


@dataclass
class GradeSheet:
    """Everything needed to display or export an evaluation."""

    school_class: SchoolClass
    evaluation: Evaluation
    subjects: list[Subject]
    students: list[Student]
    rows: list[GradeRow]
    formula: str
    thresholds: Thresholds

    @property
    def present_rows(self) -> list[GradeRow]:
        return [row for row in self.rows if not row.is_absent]


def competition_ranks(values: list[Decimal]) -> list[int]:
    """
    Rank values from highest to lowest, ties sharing a rank.

    >>> competition_ranks([Decimal("12"), Decimal("15"), Decimal("12"), Decimal("9")])
    [2, 1, 2, 4]
    """
    first_position: dict[Decimal, int] = {}
    for position, value in enumerate(sorted(values, reverse=True), start=1):
        first_position.setdefault(value, position)
    return [first_position[value] for value in values]


def gender_counts(students: list[Student]) -> dict:
    """Boys, girls and total of a group of students."""
    return {
        "garcons": sum(1 for student in students if student.gender == "M"),
        "filles": sum(1 for student in students if student.gender == "F"),
        "total": len(students),
    }


def percentage(part: int, whole: int) -> int:
    """Whole-number percentage, rounded half up."""
    if whole == 0:
        return 0
    return int((Decimal(part) * 100 / Decimal(whole)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


async def build_grade_sheet(
    db: AsyncSession, school_class: SchoolClass, evaluation: Evaluation
) -> GradeSheet:
    """
    Compute every student's moyenne for an evaluation.

    A student is present when at least one of their notes is not marked
    absent. Absent students keep a row without rank.
    """
    subjects = await subject_service.get_class_subjects(db, school_class.id)
    students = await student_service.get_active_students(db, school_class.id)
    notes = await note_service.get_evaluation_notes(db, evaluation.id)
    config = await config_service.get_effective_config(db, school_class)
    thresholds = await threshold_service.get_effective_thresholds(db, school_class.id)

    notes_by_student: dict[UUID, list] = {}
    for note in notes:
        notes_by_student.setdefault(note.student_id, []).append(note)

    subject_names = {subject.id: subject.name for subject in subjects}
    rows = []
    for student in students:
        present = [note for note in notes_by_student.get(student.id, []) if not note.is_absent]
        row = GradeRow(student=student, is_absent=not present)
        if present:
            row.notes = {
                note.subject_id: Decimal(note.value)
                for note in present
                if note.subject_id in subject_names
            }
            row.total = formula_service.round_half_up(sum(row.notes.values(), ZERO))
            named_notes = {
                name: row.notes.get(subject_id) for subject_id, name in subject_names.items()
            }
            row.moyenne = formula_service.compute_moyenne(config["formula"], named_notes)
        rows.append(row)

    present_rows = [row for row in rows if not row.is_absent]
    for row, rank in zip(present_rows, competition_ranks([row.moyenne for row in present_rows])):
        row.rank = rank

    rows.sort(key=lambda row: (row.is_absent, row.rank or 0, row.student.name))

    return GradeSheet(
        school_class=school_class,
        evaluation=evaluation,
        subjects=subjects,
        students=students,
        rows=rows,
        formula=config["formula"],
        thresholds=thresholds,
    )


def compute_statistics(sheet: GradeSheet) -> dict:
    """Class recap of an evaluation against the admission threshold."""
    present = sheet.present_rows
    admission = sheet.thresholds.moyenne_admission
    admitted = [row for row in present if row.moyenne >= admission]
    moyennes = [row.moyenne for row in present]
    totals = [row.total for row in present]

    return {
        "moyenne_classe": (
            formula_service.round_half_up(sum(moyennes, ZERO) / len(moyennes)) if moyennes else ZERO
        ),
        "moyenne_max": max(moyennes, default=ZERO),
        "moyenne_min": min(moyennes, default=ZERO),
        "total_max": max(totals, default=ZERO),
        "total_min": min(totals, default=ZERO),
        "nombre_admis": len(admitted),
        "nombre_non_admis": len(present) - len(admitted),
        "inscrits": gender_counts(sheet.students),
        "presents": gender_counts([row.student for row in present]),
        "admis": gender_counts([row.student for row in admitted]),
        "pourcentage_admis": percentage(len(admitted), len(sheet.students)),
        "moyenne_admission": admission,
    }


async def get_evaluation_results(
    db: AsyncSession, school_class: SchoolClass, evaluation: Evaluation
) -> dict:
    """Result sheet of an evaluation, ready for EvaluationResults."""
    sheet = await build_grade_sheet(db, school_class, evaluation)
    school_year = await db.get(SchoolYear, evaluation.school_year_id)

    return {
        "class_id": school_class.id,
        "class_name": school_class.name,
        "evaluation_id": evaluation.id,
        "evaluation_name": evaluation.nom,
        "school_year": school_year.name if school_year else None,
        "subjects": [{"id": subject.id, "name": subject.name} for subject in sheet.subjects],
        "rows": [
            {
                "student_id": row.student.id,
                "student_name": row.student.name,
                "gender": row.student.gender,
                "student_number": row.student.student_number,
                "notes": {str(subject_id): value for subject_id, value in row.notes.items()},
                "total": row.total,
                "moyenne": row.moyenne,
                "rank": row.rank,
                "is_absent": row.is_absent,
            }
            for row in sheet.rows
        ],
        "statistics": compute_statistics(sheet),
    }


def _median(values: list[Decimal]) -> Decimal:
    return formula_service.round_half_up(Decimal(statistics.median(values))) if values else ZERO


def quartiles(values: list[Decimal]) -> dict:
    """
    Q1, Q2 and Q3 as medians of the lower half, whole series and upper half.

    The middle value of an odd series belongs to neither half.
    """
    ordered = sorted(values)
    half = len(ordered) // 2
    return {
        "q1": _median(ordered[:half]),
        "q2": _median(ordered),
        "q3": _median(ordered[len(ordered) - half:]),
    }


def score_distribution(values: list[Decimal], max_note: int) -> list[dict]:
    """
    Count moyennes in five equal bands from 0 to max_note.

    A value on a boundary falls in the upper band; the last band also
    takes max_note and anything above it.
    """
    if not values:
        return []

    size = Decimal(max_note) / DISTRIBUTION_BINS
    bands = []
    for index in range(DISTRIBUTION_BINS):
        low, high = size * index, size * (index + 1)
        last = index == DISTRIBUTION_BINS - 1
        count = sum(1 for value in values if value >= low and (last or value < high))
        bands.append(
            {
                "range": f"{low:f}-{high:f}",
                "min": low,
                "max": high,
                "count": count,
                "percentage": (Decimal(count) * 100 / len(values)).quantize(
                    ONE_PLACE, rounding=ROUND_HALF_UP
                ),
            }
        )
    return bands


def outliers(values: list[Decimal]) -> list[Decimal]:
    """Values beyond 1.5 interquartile ranges from Q1 or Q3."""
    if len(values) < 4:
        return []
    bounds = quartiles(values)
    spread = (bounds["q3"] - bounds["q1"]) * Decimal("1.5")
    return sorted(
        value for value in values if value < bounds["q1"] - spread or value > bounds["q3"] + spread
    )


def compute_full_statistics(sheet: GradeSheet) -> dict:
    """Spread of an evaluation's moyennes: median, deviation, quartiles and bands."""
    moyennes = [row.moyenne for row in sheet.present_rows]
    admission = sheet.thresholds.moyenne_admission
    succeeded = sum(1 for value in moyennes if value >= admission)

    return {
        "inscrits": len(sheet.students),
        "presents": len(moyennes),
        "absents": len(sheet.students) - len(moyennes),
        "moyenne_classe": (
            formula_service.round_half_up(sum(moyennes, ZERO) / len(moyennes)) if moyennes else ZERO
        ),
        "mediane": _median(moyennes),
        "ecart_type": (
            formula_service.round_half_up(Decimal(statistics.stdev(moyennes)))
            if len(moyennes) > 1
            else ZERO
        ),
        "taux_reussite": (
            (Decimal(succeeded) * 100 / len(moyennes)).quantize(ONE_PLACE, rounding=ROUND_HALF_UP)
            if moyennes
            else Decimal("0.0")
        ),
        "quartiles": quartiles(moyennes),
        "distribution": score_distribution(moyennes, sheet.thresholds.max_note),
        "outliers": outliers(moyennes),
        "moyenne_admission": admission,
        "max_note": sheet.thresholds.max_note,
    }


async def get_full_statistics(
    db: AsyncSession, school_class: SchoolClass, evaluation: Evaluation
) -> dict:
    sheet = await build_grade_sheet(db, school_class, evaluation)
    return {"evaluation_id": evaluation.id, **compute_full_statistics(sheet)}


async def compare_evaluations(
    db: AsyncSession, evaluations: list[tuple[SchoolClass, Evaluation]]
) -> dict:
    """
    Side by side summary of several evaluations.

    best and worst point at the evaluations with the highest and lowest
    class average; the first one listed wins a tie.
    """
    comparisons = []
    for school_class, evaluation in evaluations:
        sheet = await build_grade_sheet(db, school_class, evaluation)
        full = compute_full_statistics(sheet)
        moyennes = [row.moyenne for row in sheet.present_rows]
        comparisons.append(
            {
                "evaluation_id": evaluation.id,
                "evaluation_name": evaluation.nom,
                "date": evaluation.date,
                "class_id": school_class.id,
                "class_name": school_class.name,
                "presents": full["presents"],
                "moyenne_classe": full["moyenne_classe"],
                "moyenne_max": max(moyennes, default=ZERO),
                "moyenne_min": min(moyennes, default=ZERO),
                "mediane": full["mediane"],
                "taux_reussite": full["taux_reussite"],
            }
        )

    best = max(comparisons, key=lambda item: item["moyenne_classe"])
    worst = min(comparisons, key=lambda item: item["moyenne_classe"])
    return {
        "comparisons": comparisons,
        "best_evaluation_id": best["evaluation_id"],
        "worst_evaluation_id": worst["evaluation_id"],
        "total": len(comparisons),
    }
