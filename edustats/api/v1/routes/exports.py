"""Document export routes: bulletins, annual reports and student lists."""

from enum import Enum
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from edustats.api.v1.routes.classes import get_owned_class
from edustats.api.v1.routes.evaluations import get_owned_evaluation
from edustats.api.v1.routes.school_years import get_owned_school_year
from edustats.core.database import get_db
from edustats.core.deps import ActiveUser
from edustats.exports import pdf, spreadsheet, word
from edustats.exports.common import (
    CSV_MEDIA_TYPE,
    DEFAULT_STUDENT_FIELDS,
    DOCX_MEDIA_TYPE,
    PDF_MEDIA_TYPE,
    STUDENT_FIELDS,
    XLSX_MEDIA_TYPE,
    safe_filename,
)
from edustats.services import annual_report as annual_report_service
from edustats.services import results as results_service
from edustats.services import student as student_service

router = APIRouter(prefix="/exports", tags=["Exports"])


class DocumentFormat(str, Enum):
    PDF = "pdf"
    DOCX = "docx"


class ListFormat(str, Enum):
    PDF = "pdf"
    XLSX = "xlsx"
    CSV = "csv"


# ============== Helper Functions ==============


def attachment(content: bytes, media_type: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


def parse_fields(fields: str | None) -> list[str]:
    """Comma separated student columns, in the order given."""
    if not fields:
        return list(DEFAULT_STUDENT_FIELDS)

    selected = [field.strip() for field in fields.split(",") if field.strip()]
    unknown = [field for field in selected if field not in STUDENT_FIELDS]
    if unknown or not selected:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown student fields: {', '.join(unknown)}. "
            f"Allowed: {', '.join(STUDENT_FIELDS)}",
        )
    return selected


# ============== Endpoints ==============


@router.get("/moyennes/{evaluation_id}")
async def export_bulletin(
    evaluation_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
    format: DocumentFormat = Query(DocumentFormat.PDF, description="pdf or docx"),
) -> Response:
    """Moyennes bulletin of an evaluation with the official header and recap."""
    evaluation = await get_owned_evaluation(db, evaluation_id, current_user)
    school_class = await get_owned_class(db, evaluation.class_id, current_user)

    results = await results_service.get_evaluation_results(db, school_class, evaluation)
    filename = safe_filename("moyennes", school_class.name, evaluation.nom)

    if format == DocumentFormat.DOCX:
        return attachment(
            word.bulletin_docx(results, current_user), DOCX_MEDIA_TYPE, f"{filename}.docx"
        )
    return attachment(
        pdf.bulletin_pdf(results, current_user), PDF_MEDIA_TYPE, f"{filename}.pdf"
    )


@router.get("/annual-report")
async def export_annual_report(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
    class_id: UUID = Query(..., description="Class ID"),
    school_year_id: UUID = Query(..., description="School year ID"),
    format: DocumentFormat = Query(DocumentFormat.PDF, description="pdf or docx"),
) -> Response:
    """Bilan annuel of a class as PDF or Word."""
    school_class = await get_owned_class(db, class_id, current_user)
    school_year = await get_owned_school_year(db, school_year_id, current_user)

    report = await annual_report_service.build_annual_report(db, school_class, school_year)
    filename = safe_filename("bilan_annuel", school_class.name, school_year.name)

    if format == DocumentFormat.DOCX:
        return attachment(
            word.annual_report_docx(report, current_user), DOCX_MEDIA_TYPE, f"{filename}.docx"
        )
    return attachment(
        pdf.annual_report_pdf(report, current_user), PDF_MEDIA_TYPE, f"{filename}.pdf"
    )


@router.get("/classes/{class_id}/students")
async def export_students(
    class_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
    format: ListFormat = Query(ListFormat.PDF, description="pdf, xlsx or csv"),
    fields: str | None = Query(
        None, description="Comma separated columns: name, gender, student_number, birth_date"
    ),
) -> Response:
    """Student list of a class with the selected columns."""
    school_class = await get_owned_class(db, class_id, current_user)
    selected = parse_fields(fields)

    students = await student_service.get_active_students(db, school_class.id)
    filename = safe_filename("eleves", school_class.name)

    if format == ListFormat.XLSX:
        return attachment(
            spreadsheet.students_xlsx(students, selected), XLSX_MEDIA_TYPE, f"{filename}.xlsx"
        )
    if format == ListFormat.CSV:
        return attachment(
            spreadsheet.students_csv(students, selected), CSV_MEDIA_TYPE, f"{filename}.csv"
        )
    return attachment(
        pdf.students_pdf(school_class.name, students, selected), PDF_MEDIA_TYPE, f"{filename}.pdf"
    )
