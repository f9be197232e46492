"""PDF documents built with reportlab."""

from io import BytesIO
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from edustats.exports import common
from edustats.models.user import User

GRID_STYLE = [
    ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
    ("TEXTCOLOR", (0, 0), (-1, 0), colors.black),
    ("GRID", (0, 0), (-1, -1), 0.5, colors.black),
    ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
    ("FONTSIZE", (0, 0), (-1, -1), 8),
]


def _document(buffer: BytesIO, wide: bool = False) -> SimpleDocTemplate:
    return SimpleDocTemplate(
        buffer,
        pagesize=landscape(A4) if wide else A4,
        rightMargin=12 * mm,
        leftMargin=12 * mm,
        topMargin=12 * mm,
        bottomMargin=12 * mm,
    )


def _header(user: User, school_year: str | None, styles, width: float) -> list:
    left, right = common.official_header(user, school_year)
    header = Table(
        [
            [
                Paragraph("<br/>".join(escape(line) for line in left), styles["Normal"]),
                Paragraph("<br/>".join(escape(line) for line in right), styles["Normal"]),
            ]
        ],
        colWidths=[width * 0.6, width * 0.4],
    )
    header.setStyle(
        TableStyle(
            [
                ("VALIGN", (0, 0), (-1, -1), "TOP"),
                ("ALIGN", (1, 0), (1, 0), "RIGHT"),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
            ]
        )
    )
    story = [header, Spacer(1, 6)]
    for line in common.school_lines(user):
        story.append(Paragraph(escape(line), styles["Normal"]))
    story.append(Spacer(1, 8))
    return story


def _grid(data: list[list[str]], first_column_bold: bool = False) -> Table:
    table = Table(data, repeatRows=1)
    style = list(GRID_STYLE)
    if first_column_bold:
        style.append(("FONTNAME", (0, 0), (0, -1), "Helvetica-Bold"))
        style.append(("BACKGROUND", (0, 1), (0, -1), colors.whitesmoke))
    table.setStyle(TableStyle(style))
    return table


def bulletin_pdf(results: dict, user: User) -> bytes:
    """Moyennes of an evaluation with the class recap."""
    buffer = BytesIO()
    doc = _document(buffer, wide=len(results["subjects"]) > 5)
    styles = getSampleStyleSheet()

    story = _header(user, results["school_year"], styles, doc.width)
    story.append(
        Paragraph(
            escape(
                f"RÉSULTATS - {results['evaluation_name']} - CLASSE DE {results['class_name']}"
            ),
            styles["Heading2"],
        )
    )
    story.append(Spacer(1, 6))
    story.append(_grid(common.bulletin_table(results)))
    story.append(Spacer(1, 12))
    story.append(Paragraph("Récapitulatif", styles["Heading3"]))
    story.append(_grid(common.bulletin_recap(results["statistics"]), first_column_bold=True))
    story.append(Spacer(1, 12))
    story.append(Paragraph("Signature", styles["Normal"]))

    doc.build(story)
    return buffer.getvalue()


def annual_report_pdf(report: dict, user: User) -> bytes:
    """Bilan annuel of a class."""
    buffer = BytesIO()
    doc = _document(buffer, wide=True)
    styles = getSampleStyleSheet()

    story = _header(user, report["school_year"], styles, doc.width)
    story.append(Paragraph(escape(f"BILAN ANNUEL - CLASSE DE {report['class_name']}"), styles["Heading2"]))
    story.append(Spacer(1, 6))
    story.append(_grid(common.annual_recap(report["stats"]), first_column_bold=True))
    story.append(Spacer(1, 10))
    story.append(_grid(common.annual_table(report)))

    doc.build(story)
    return buffer.getvalue()


def students_pdf(class_name: str, students: list, fields: list[str]) -> bytes:
    """Plain student list with the selected columns."""
    buffer = BytesIO()
    doc = _document(buffer)
    styles = getSampleStyleSheet()

    data = [["N°"] + [common.STUDENT_FIELDS[field] for field in fields]]
    for index, student in enumerate(students, start=1):
        data.append(
            [str(index)] + [common.student_field_value(student, field) for field in fields]
        )

    story = [
        Paragraph(escape(f"Liste des élèves - {class_name}"), styles["Title"]),
        Paragraph(f"Effectif : {len(students)}", styles["Normal"]),
        Spacer(1, 8),
        _grid(data),
    ]
    doc.build(story)
    return buffer.getvalue()
