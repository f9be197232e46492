"""Tests for evaluation results and statistics."""

from datetime import date
from decimal import Decimal

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from edustats.models.evaluation import Evaluation
from edustats.models.school_class import SchoolClass
from edustats.models.student import Student
from edustats.models.subject import Subject
from edustats.models.user import User
from edustats.services.results import (
    competition_ranks,
    outliers,
    percentage,
    quartiles,
    score_distribution,
)
from tests.conftest import auth_header, grade_grid, record_notes


class TestRanking:
    def test_ties_share_rank(self):
        values = [Decimal(v) for v in ("15", "10", "10", "7.5")]

        assert competition_ranks(values) == [1, 2, 2, 4]

    def test_order_is_kept(self):
        values = [Decimal(v) for v in ("9", "12", "12", "14", "9")]

        assert competition_ranks(values) == [4, 2, 2, 1, 4]

    def test_empty(self):
        assert competition_ranks([]) == []

    @pytest.mark.parametrize(
        "part,whole,expected",
        [(3, 5, 60), (1, 3, 33), (2, 3, 67), (1, 8, 13), (0, 0, 0)],
    )
    def test_percentage(self, part: int, whole: int, expected: int):
        assert percentage(part, whole) == expected


class TestEvaluationResults:
    async def test_result_sheet(
        self,
        client: AsyncClient,
        db: AsyncSession,
        teacher: User,
        teacher_token: str,
        students: list[Student],
        subjects: list[Subject],
        evaluation: Evaluation,
    ):
        await record_notes(db, teacher, evaluation, subjects, grade_grid(students))

        response = await client.get(
            f"/api/v1/results/evaluations/{evaluation.id}", headers=auth_header(teacher_token)
        )

        assert response.status_code == 200
        data = response.json()
        assert data["class_name"] == "6ème A"
        assert data["evaluation_name"] == "EVALUATION N°1"
        assert data["school_year"] == "2025-2026"
        assert [s["name"] for s in data["subjects"]] == ["Français", "Maths"]

        rows = [(r["student_name"], r["rank"], r["is_absent"]) for r in data["rows"]]
        assert rows == [
            ("Konan Marie", 1, False),
            ("Kouassi Jean", 2, False),
            ("Traoré Awa", 2, False),
            ("Zadi Luc", 4, False),
            ("Yao Paul", None, True),
        ]

        first = data["rows"][0]
        assert Decimal(first["total"]) == Decimal("30")
        assert Decimal(first["moyenne"]) == Decimal("15")
        assert Decimal(first["notes"][str(subjects[1].id)]) == Decimal("16")
        assert data["rows"][-1]["notes"] == {}

    async def test_statistics(
        self,
        client: AsyncClient,
        db: AsyncSession,
        teacher: User,
        teacher_token: str,
        students: list[Student],
        subjects: list[Subject],
        evaluation: Evaluation,
    ):
        await record_notes(db, teacher, evaluation, subjects, grade_grid(students))

        response = await client.get(
            f"/api/v1/results/evaluations/{evaluation.id}", headers=auth_header(teacher_token)
        )

        stats = response.json()["statistics"]
        assert Decimal(stats["moyenne_classe"]) == Decimal("10.63")
        assert Decimal(stats["moyenne_max"]) == Decimal("15")
        assert Decimal(stats["moyenne_min"]) == Decimal("7.5")
        assert Decimal(stats["total_max"]) == Decimal("30")
        assert Decimal(stats["total_min"]) == Decimal("15")
        assert stats["nombre_admis"] == 3
        assert stats["nombre_non_admis"] == 1
        assert stats["inscrits"] == {"garcons": 3, "filles": 2, "total": 5}
        assert stats["presents"] == {"garcons": 2, "filles": 2, "total": 4}
        assert stats["admis"] == {"garcons": 1, "filles": 2, "total": 3}
        assert stats["pourcentage_admis"] == 60
        assert Decimal(stats["moyenne_admission"]) == Decimal("10")

    async def test_empty_evaluation(
        self,
        client: AsyncClient,
        teacher_token: str,
        students: list[Student],
        evaluation: Evaluation,
    ):
        response = await client.get(
            f"/api/v1/results/evaluations/{evaluation.id}", headers=auth_header(teacher_token)
        )

        stats = response.json()["statistics"]
        assert all(row["is_absent"] for row in response.json()["rows"])
        assert Decimal(stats["moyenne_classe"]) == Decimal("0")
        assert stats["pourcentage_admis"] == 0

    async def test_other_teacher_gets_404(
        self, client: AsyncClient, other_token: str, evaluation: Evaluation
    ):
        response = await client.get(
            f"/api/v1/results/evaluations/{evaluation.id}", headers=auth_header(other_token)
        )

        assert response.status_code == 404


def decimals(*values: str) -> list[Decimal]:
    return [Decimal(value) for value in values]


class TestSpread:
    def test_quartiles_odd_series(self):
        bounds = quartiles(decimals("16", "8", "12", "10", "14"))

        assert bounds == {"q1": Decimal("9"), "q2": Decimal("12"), "q3": Decimal("15")}

    def test_quartiles_empty(self):
        assert quartiles([]) == {"q1": Decimal("0"), "q2": Decimal("0"), "q3": Decimal("0")}

    def test_distribution_boundaries(self):
        bands = score_distribution(decimals("3.99", "4", "20", "21"), 20)

        assert [band["range"] for band in bands] == ["0-4", "4-8", "8-12", "12-16", "16-20"]
        assert [band["count"] for band in bands] == [1, 1, 0, 0, 2]
        assert [band["percentage"] for band in bands] == decimals("25", "25", "0", "0", "50")

    def test_distribution_other_scale(self):
        bands = score_distribution(decimals("9"), 10)

        assert [band["range"] for band in bands] == ["0-2", "2-4", "4-6", "6-8", "8-10"]
        assert bands[-1]["count"] == 1

    def test_distribution_empty(self):
        assert score_distribution([], 20) == []

    def test_outliers(self):
        assert outliers(decimals("10", "10", "10", "11", "11", "20")) == decimals("20")
        assert outliers(decimals("7.5", "10", "10", "15")) == []
        assert outliers(decimals("1", "20")) == []


class TestEvaluationStatistics:
    async def test_full_statistics(
        self,
        client: AsyncClient,
        db: AsyncSession,
        teacher: User,
        teacher_token: str,
        students: list[Student],
        subjects: list[Subject],
        evaluation: Evaluation,
    ):
        await record_notes(db, teacher, evaluation, subjects, grade_grid(students))

        response = await client.get(
            f"/api/v1/results/evaluations/{evaluation.id}/statistics",
            headers=auth_header(teacher_token),
        )

        assert response.status_code == 200
        stats = response.json()
        assert (stats["inscrits"], stats["presents"], stats["absents"]) == (5, 4, 1)
        assert Decimal(stats["moyenne_classe"]) == Decimal("10.63")
        assert Decimal(stats["mediane"]) == Decimal("10")
        # sqrt(29.6875 / 3)
        assert Decimal(stats["ecart_type"]) == Decimal("3.15")
        assert Decimal(stats["taux_reussite"]) == Decimal("75")
        assert {key: Decimal(value) for key, value in stats["quartiles"].items()} == {
            "q1": Decimal("8.75"),
            "q2": Decimal("10"),
            "q3": Decimal("12.5"),
        }
        assert stats["outliers"] == []
        assert stats["max_note"] == 20

    async def test_distribution(
        self,
        client: AsyncClient,
        db: AsyncSession,
        teacher: User,
        teacher_token: str,
        students: list[Student],
        subjects: list[Subject],
        evaluation: Evaluation,
    ):
        await record_notes(db, teacher, evaluation, subjects, grade_grid(students))

        response = await client.get(
            f"/api/v1/results/evaluations/{evaluation.id}/distribution",
            headers=auth_header(teacher_token),
        )

        assert response.status_code == 200
        bands = response.json()
        assert [band["count"] for band in bands] == [0, 1, 2, 1, 0]
        assert [Decimal(band["percentage"]) for band in bands] == decimals(
            "0", "25", "50", "25", "0"
        )

    async def test_no_notes(
        self,
        client: AsyncClient,
        teacher_token: str,
        students: list[Student],
        evaluation: Evaluation,
    ):
        response = await client.get(
            f"/api/v1/results/evaluations/{evaluation.id}/statistics",
            headers=auth_header(teacher_token),
        )

        stats = response.json()
        assert stats["presents"] == 0
        assert Decimal(stats["ecart_type"]) == Decimal("0")
        assert stats["distribution"] == []


class TestCompareEvaluations:
    async def test_compare(
        self,
        client: AsyncClient,
        db: AsyncSession,
        teacher: User,
        teacher_token: str,
        school_class: SchoolClass,
        students: list[Student],
        subjects: list[Subject],
        evaluation: Evaluation,
    ):
        await record_notes(db, teacher, evaluation, subjects, grade_grid(students))
        second = Evaluation(
            class_id=school_class.id,
            school_year_id=school_class.school_year_id,
            nom="EVALUATION N°2",
            date=date(2026, 2, 12),
        )
        db.add(second)
        await db.commit()
        await record_notes(
            db,
            teacher,
            second,
            subjects,
            [(students[0], ("10", "10")), (students[1], ("12", "12"))],
        )

        response = await client.post(
            "/api/v1/results/evaluations/compare",
            headers=auth_header(teacher_token),
            json={"evaluation_ids": [str(evaluation.id), str(second.id)]},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        summaries = {item["evaluation_name"]: item for item in data["comparisons"]}
        assert Decimal(summaries["EVALUATION N°1"]["moyenne_classe"]) == Decimal("10.63")
        assert Decimal(summaries["EVALUATION N°2"]["moyenne_classe"]) == Decimal("11")
        assert summaries["EVALUATION N°2"]["presents"] == 2
        assert data["best_evaluation_id"] == str(second.id)
        assert data["worst_evaluation_id"] == str(evaluation.id)

    async def test_needs_two_evaluations(
        self, client: AsyncClient, teacher_token: str, evaluation: Evaluation
    ):
        response = await client.post(
            "/api/v1/results/evaluations/compare",
            headers=auth_header(teacher_token),
            json={"evaluation_ids": [str(evaluation.id)]},
        )

        assert response.status_code == 422

    async def test_other_teacher_evaluation(
        self,
        client: AsyncClient,
        db: AsyncSession,
        other_teacher: User,
        teacher_token: str,
        evaluation: Evaluation,
    ):
        foreign_class = SchoolClass(user_id=other_teacher.id, name="5ème B")
        db.add(foreign_class)
        await db.flush()
        foreign = Evaluation(
            class_id=foreign_class.id,
            school_year_id=evaluation.school_year_id,
            nom="EVALUATION N°1",
            date=date(2025, 11, 20),
        )
        db.add(foreign)
        await db.commit()

        response = await client.post(
            "/api/v1/results/evaluations/compare",
            headers=auth_header(teacher_token),
            json={"evaluation_ids": [str(evaluation.id), str(foreign.id)]},
        )

        assert response.status_code == 404
