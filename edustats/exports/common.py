"""Helpers shared by the document exporters."""

import re
from decimal import Decimal

from edustats.models.user import User

PDF_MEDIA_TYPE = "application/pdf"
DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
CSV_MEDIA_TYPE = "text/csv; charset=utf-8"

# Student list columns, in display order
STUDENT_FIELDS = {
    "name": "Nom",
    "gender": "Genre",
    "student_number": "Numéro élève",
    "birth_date": "Date de naissance",
}
DEFAULT_STUDENT_FIELDS = ("name", "gender", "student_number")

NOT_SET = "Non renseigné"


def fmt(value: Decimal | float | int | None) -> str:
    """Two-decimal display of a grade, '-' when missing."""
    if value is None:
        return "-"
    return f"{Decimal(value):.2f}"


def safe_filename(*parts: str) -> str:
    """Join parts into an ASCII-only file name stem."""
    stem = "_".join(part for part in parts if part)
    return re.sub(r"[^A-Za-z0-9_-]+", "_", stem).strip("_") or "export"


def official_header(user: User, school_year: str | None) -> tuple[list[str], list[str]]:
    """Left and right blocks of the ministry letterhead."""
    region = (user.direction_regionale or NOT_SET).upper()
    left = [
        "MINISTERE DE L'EDUCATION NATIONALE",
        "ET DE L'ALPHABETISATION",
        f"DIRECTION REGIONALE {region}",
        f"INSPECTION DE L'ENSEIGNEMENT PRESCOLAIRE ET PRIMAIRE {region}",
    ]
    right = [
        "REPUBLIQUE DE CÔTE D'IVOIRE",
        "UNION - DISCIPLINE - TRAVAIL",
        f"ANNEE SCOLAIRE : {school_year or '-'}",
    ]
    return left, right


def school_lines(user: User) -> list[str]:
    title = "Maîtresse" if user.gender == "F" else "Maître"
    return [
        f"Ecole : {user.establishment or NOT_SET}",
        f"Secteur Pédagogique : {user.secteur_pedagogique or NOT_SET}",
        f"{title} : {user.last_name.upper()} {user.first_name.upper()}",
    ]


def student_field_value(student, field: str) -> str:
    value = getattr(student, field, None)
    if value is None:
        return ""
    if field == "birth_date":
        return value.strftime("%d/%m/%Y")
    return str(value)


def bulletin_table(results: dict) -> list[list[str]]:
    """Header plus one line per present student."""
    subjects = results["subjects"]
    table = [
        ["N°", "Nom et prénoms", "Matricule", "Sexe"]
        + [subject["name"] for subject in subjects]
        + ["Total", "Moyenne", "Rang"]
    ]
    present = [row for row in results["rows"] if not row["is_absent"]]
    for index, row in enumerate(present, start=1):
        notes = row["notes"]
        table.append(
            [
                f"{index:02d}",
                row["student_name"],
                row["student_number"] or "-",
                row["gender"] or "-",
            ]
            + [fmt(notes.get(str(subject["id"]))) for subject in subjects]
            + [fmt(row["total"]), fmt(row["moyenne"]), str(row["rank"])]
        )
    return table


def gender_recap(rows: list[tuple[str, dict]]) -> list[list[str]]:
    """G / F / T table from labelled gender counts."""
    table = [["", "G", "F", "T"]]
    for label, counts in rows:
        table.append([label, str(counts["garcons"]), str(counts["filles"]), str(counts["total"])])
    return table


def bulletin_recap(statistics: dict) -> list[list[str]]:
    return gender_recap(
        [
            ("Inscrits", statistics["inscrits"]),
            ("Présents", statistics["presents"]),
            ("Admis", statistics["admis"]),
        ]
    ) + [
        ["Moyenne de la classe", fmt(statistics["moyenne_classe"]), "", ""],
        ["Plus forte moyenne", fmt(statistics["moyenne_max"]), "", ""],
        ["Plus faible moyenne", fmt(statistics["moyenne_min"]), "", ""],
        ["Pourcentage d'admis", f"{statistics['pourcentage_admis']} %", "", ""],
    ]


def annual_table(report: dict) -> list[list[str]]:
    table = [
        [
            "N°",
            "Nom de l'élève",
            "Sexe",
            "MOY. COMPO N°1",
            "MOY. COMPO N°2",
            "MOY. COMPO N°3",
            "MOY. ANNUELLE",
            "MOY. COMPO DE PASSAGE",
            "MGA",
            "DÉCISION",
        ]
    ]
    for index, student in enumerate(report["students"], start=1):
        table.append(
            [
                f"{index:02d}",
                student["student_name"],
                student["gender"] or "-",
                fmt(student["moy_compo1"]),
                fmt(student["moy_compo2"]),
                fmt(student["moy_compo3"]),
                fmt(student["moy_annuelle"]),
                fmt(student["moy_compo_passage"]),
                fmt(student["mga"]),
                student["decision"] or "-",
            ]
        )
    return table


def annual_recap(stats: dict) -> list[list[str]]:
    return gender_recap(
        [
            ("EFFECTIF EN DÉBUT D'ANNÉE", stats["inscrits"]),
            ("ABANDON (S)", stats["abandons"]),
            ("EFFECTIF EN FIN D'ANNÉE", stats["presents"]),
            ("ADMIS", stats["admis"]),
            ("REDOUBLEMENT", stats["redoublement"]),
        ]
    ) + [
        ["POURCENTAGE D'ADMIS", f"{stats['pourcentage_admis']} %", "", ""],
        ["MOYENNE GÉNÉRALE DE LA CLASSE", fmt(stats["moyenne_generale_classe"]), "", ""],
    ]
