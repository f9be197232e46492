"""Annual report (bilan annuel) of a class."""

from decimal import Decimal
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from edustats.models.school_class import SchoolClass
from edustats.models.school_year import SchoolYear
from edustats.models.student import Student
from edustats.services import class_threshold as threshold_service
from edustats.services import evaluation as evaluation_service
from edustats.services import results as results_service
from edustats.services import student as student_service
from edustats.services.formula import round_half_up

# Evaluation names the report is built from
COMPOSITIONS = {
    "EVALUATION N°1": "moy_compo1",
    "EVALUATION N°2": "moy_compo2",
    "EVALUATION N°3": "moy_compo3",
}
COMPOSITION_PASSAGE = "COMPOSITION DE PASSAGE"

DECISION_ADMIS = "ADMIS"
DECISION_REDOUBLER = "REDOUBLER"


def _key(name: str) -> str:
    return " ".join(name.upper().split())


def compute_mga(
    compo_moyennes: list[Decimal | None], compo_passage: Decimal | None
) -> tuple[Decimal | None, Decimal | None]:
    """
    Annual average and MGA of a student.

    The annual average is the mean of the available compositions. The MGA
    weights the end-of-year composition twice: (annual + 2 x passage) / 3.
    """
    available = [value for value in compo_moyennes if value is not None]
    if not available:
        return None, None

    moy_annuelle = sum(available, Decimal("0")) / len(available)
    if compo_passage is None:
        return round_half_up(moy_annuelle), None

    mga = (moy_annuelle + 2 * compo_passage) / 3
    return round_half_up(moy_annuelle), round_half_up(mga)


def decide(mga: Decimal | None, admission: Decimal) -> str:
    """ADMIS at or above the admission threshold, REDOUBLER below, blank without MGA."""
    if mga is None:
        return ""
    return DECISION_ADMIS if mga >= admission else DECISION_REDOUBLER


async def build_annual_report(
    db: AsyncSession, school_class: SchoolClass, school_year: SchoolYear
) -> dict:
    """Compute the bilan annuel of a class for one school year."""
    students = await student_service.get_active_students(db, school_class.id)
    thresholds = await threshold_service.get_effective_thresholds(db, school_class.id)
    evaluations = await evaluation_service.get_evaluations(
        db, school_class.id, school_year_id=school_year.id
    )

    # student id -> report field -> moyenne, present students only
    by_student: dict[UUID, dict[str, Decimal]] = {}
    wanted = {**COMPOSITIONS, COMPOSITION_PASSAGE: "moy_compo_passage"}
    for evaluation in evaluations:
        field = wanted.pop(_key(evaluation.nom), None)
        if field is None:
            continue
        sheet = await results_service.build_grade_sheet(db, school_class, evaluation)
        for row in sheet.present_rows:
            by_student.setdefault(row.student.id, {})[field] = row.moyenne

    rows = []
    for student in students:
        values = by_student.get(student.id, {})
        compos = [values.get(field) for field in COMPOSITIONS.values()]
        passage = values.get("moy_compo_passage")
        moy_annuelle, mga = compute_mga(compos, passage)
        rows.append(
            {
                "student_id": student.id,
                "student_name": student.name,
                "gender": student.gender,
                "moy_compo1": compos[0],
                "moy_compo2": compos[1],
                "moy_compo3": compos[2],
                "moy_annuelle": moy_annuelle,
                "moy_compo_passage": passage,
                "mga": mga,
                "decision": decide(mga, thresholds.moyenne_admission),
                "rank": None,
            }
        )

    ranked = [row for row in rows if row["mga"] is not None]
    for row, rank in zip(ranked, results_service.competition_ranks([row["mga"] for row in ranked])):
        row["rank"] = rank
    rows.sort(key=lambda row: (row["mga"] is None, -(row["mga"] or 0), row["student_name"]))

    def having(predicate) -> list[Student]:
        return [student for student in students if predicate(student)]

    decisions = {row["student_id"]: row["decision"] for row in rows}
    mgas = [row["mga"] for row in ranked]
    admitted = having(lambda s: decisions[s.id] == DECISION_ADMIS)

    return {
        "class_id": school_class.id,
        "class_name": school_class.name,
        "school_year_id": school_year.id,
        "school_year": school_year.name,
        "students": rows,
        "stats": {
            "inscrits": results_service.gender_counts(students),
            "presents": results_service.gender_counts(having(lambda s: s.id in by_student)),
            "abandons": results_service.gender_counts(having(lambda s: s.id not in by_student)),
            "admis": results_service.gender_counts(admitted),
            "redoublement": results_service.gender_counts(
                having(lambda s: decisions[s.id] == DECISION_REDOUBLER)
            ),
            "pourcentage_admis": results_service.percentage(len(admitted), len(students)),
            "moyenne_generale_classe": (
                round_half_up(sum(mgas, Decimal("0")) / len(mgas)) if mgas else None
            ),
        },
        "threshold": {
            "moyenne_admission": thresholds.moyenne_admission,
            "moyenne_redoublement": thresholds.moyenne_redoublement,
            "max_note": thresholds.max_note,
        },
    }
