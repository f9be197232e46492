"""Student lists as XLSX (openpyxl) or CSV."""

import csv
from io import BytesIO, StringIO

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill

from edustats.exports import common

SHEET_NAME = "Liste des élèves"
HEADER_FILL = PatternFill(start_color="F0F0F0", end_color="F0F0F0", fill_type="solid")


def _rows(students: list, fields: list[str]) -> list[list[str]]:
    return [[common.student_field_value(student, field) for field in fields] for student in students]


def students_xlsx(students: list, fields: list[str]) -> bytes:
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = SHEET_NAME

    sheet.append([common.STUDENT_FIELDS[field] for field in fields])
    for cell in sheet[1]:
        cell.font = Font(bold=True)
        cell.fill = HEADER_FILL

    rows = _rows(students, fields)
    for row in rows:
        sheet.append(row)

    for index, field in enumerate(fields):
        width = max([len(common.STUDENT_FIELDS[field])] + [len(row[index]) for row in rows])
        sheet.column_dimensions[sheet.cell(row=1, column=index + 1).column_letter].width = width + 2

    output = BytesIO()
    workbook.save(output)
    return output.getvalue()


def students_csv(students: list, fields: list[str]) -> bytes:
    output = StringIO()
    writer = csv.writer(output, quoting=csv.QUOTE_ALL)
    writer.writerow([common.STUDENT_FIELDS[field] for field in fields])
    writer.writerows(_rows(students, fields))
    # BOM so spreadsheet software detects UTF-8
    return ("\ufeff" + output.getvalue()).encode("utf-8")
