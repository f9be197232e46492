"""Word documents built with python-docx."""

from io import BytesIO

from docx import Document
from docx.enum.section import WD_ORIENT
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Pt

from edustats.exports import common
from edustats.models.user import User


def _new_document(wide: bool = False):
    document = Document()
    style = document.styles["Normal"]
    style.font.name = "Arial"
    style.font.size = Pt(10)
    if wide:
        section = document.sections[0]
        section.orientation = WD_ORIENT.LANDSCAPE
        section.page_width, section.page_height = section.page_height, section.page_width
    return document


def _header(document, user: User, school_year: str | None) -> None:
    left, right = common.official_header(user, school_year)
    table = document.add_table(rows=1, cols=2)
    left_cell, right_cell = table.rows[0].cells
    left_cell.text = ""
    right_cell.text = ""
    for cell, lines, align in (
        (left_cell, left, WD_ALIGN_PARAGRAPH.LEFT),
        (right_cell, right, WD_ALIGN_PARAGRAPH.RIGHT),
    ):
        paragraph = cell.paragraphs[0]
        paragraph.alignment = align
        for index, line in enumerate(lines):
            run = paragraph.add_run(line)
            run.bold = True
            if index < len(lines) - 1:
                run.add_break()

    document.add_paragraph()
    for line in common.school_lines(user):
        document.add_paragraph(line)


def _grid(document, data: list[list[str]]) -> None:
    table = document.add_table(rows=len(data), cols=len(data[0]))
    table.style = "Table Grid"
    for row_index, values in enumerate(data):
        cells = table.rows[row_index].cells
        for col_index, value in enumerate(values):
            cells[col_index].text = value
            if row_index == 0:
                for run in cells[col_index].paragraphs[0].runs:
                    run.bold = True


def _title(document, text: str) -> None:
    paragraph = document.add_paragraph()
    paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER
    run = paragraph.add_run(text)
    run.bold = True
    run.font.size = Pt(14)


def _to_bytes(document) -> bytes:
    buffer = BytesIO()
    document.save(buffer)
    return buffer.getvalue()


def bulletin_docx(results: dict, user: User) -> bytes:
    """Moyennes of an evaluation with the class recap."""
    document = _new_document(wide=len(results["subjects"]) > 5)
    _header(document, user, results["school_year"])
    _title(document, f"RÉSULTATS - {results['evaluation_name']} - CLASSE DE {results['class_name']}")
    _grid(document, common.bulletin_table(results))
    document.add_paragraph()
    document.add_paragraph("Récapitulatif").runs[0].bold = True
    _grid(document, common.bulletin_recap(results["statistics"]))
    return _to_bytes(document)


def annual_report_docx(report: dict, user: User) -> bytes:
    """Bilan annuel of a class."""
    document = _new_document(wide=True)
    _header(document, user, report["school_year"])
    _grid(document, common.annual_recap(report["stats"]))
    document.add_paragraph()
    _title(document, f"BILAN ANNUEL - CLASSE DE {report['class_name']}")
    _grid(document, common.annual_table(report))
    return _to_bytes(document)
