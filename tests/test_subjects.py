"""Tests for subjects API."""

from decimal import Decimal

from httpx import AsyncClient

from edustats.models.evaluation import Evaluation
from edustats.models.school_class import SchoolClass
from edustats.models.student import Student
from edustats.models.subject import Subject
from tests.conftest import auth_header


class TestSubjects:
    async def test_create_subject(
        self, client: AsyncClient, teacher_token: str, school_class: SchoolClass
    ):
        response = await client.post(
            "/api/v1/subjects",
            headers=auth_header(teacher_token),
            json={"class_id": str(school_class.id), "name": "Maths", "coefficient": "2"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Maths"
        assert Decimal(data["coefficient"]) == Decimal("2")

    async def test_default_coefficient(
        self, client: AsyncClient, teacher_token: str, school_class: SchoolClass
    ):
        response = await client.post(
            "/api/v1/subjects",
            headers=auth_header(teacher_token),
            json={"class_id": str(school_class.id), "name": "EPS"},
        )

        assert Decimal(response.json()["coefficient"]) == Decimal("1")

    async def test_duplicate_name_in_class(
        self,
        client: AsyncClient,
        teacher_token: str,
        school_class: SchoolClass,
        subjects: list[Subject],
    ):
        response = await client.post(
            "/api/v1/subjects",
            headers=auth_header(teacher_token),
            json={"class_id": str(school_class.id), "name": "maths"},
        )

        assert response.status_code == 409

    async def test_zero_coefficient(
        self, client: AsyncClient, teacher_token: str, school_class: SchoolClass
    ):
        response = await client.post(
            "/api/v1/subjects",
            headers=auth_header(teacher_token),
            json={"class_id": str(school_class.id), "name": "EPS", "coefficient": "0"},
        )

        assert response.status_code == 422

    async def test_foreign_class(
        self, client: AsyncClient, other_token: str, school_class: SchoolClass
    ):
        response = await client.post(
            "/api/v1/subjects",
            headers=auth_header(other_token),
            json={"class_id": str(school_class.id), "name": "Maths"},
        )

        assert response.status_code == 404

    async def test_list_by_class(
        self,
        client: AsyncClient,
        teacher_token: str,
        school_class: SchoolClass,
        subjects: list[Subject],
    ):
        response = await client.get(
            "/api/v1/subjects",
            headers=auth_header(teacher_token),
            params={"class_id": str(school_class.id)},
        )

        data = response.json()
        assert data["total"] == 2
        assert [s["name"] for s in data["items"]] == ["Français", "Maths"]

    async def test_update_subject(
        self, client: AsyncClient, teacher_token: str, subjects: list[Subject]
    ):
        response = await client.patch(
            f"/api/v1/subjects/{subjects[1].id}",
            headers=auth_header(teacher_token),
            json={"name": "Mathématiques", "coefficient": "3"},
        )

        assert response.status_code == 200
        assert response.json()["name"] == "Mathématiques"
        assert Decimal(response.json()["coefficient"]) == Decimal("3")

    async def test_rename_onto_existing(
        self, client: AsyncClient, teacher_token: str, subjects: list[Subject]
    ):
        response = await client.patch(
            f"/api/v1/subjects/{subjects[1].id}",
            headers=auth_header(teacher_token),
            json={"name": "Français"},
        )

        assert response.status_code == 409

    async def test_delete_subject(
        self, client: AsyncClient, teacher_token: str, subjects: list[Subject]
    ):
        response = await client.delete(
            f"/api/v1/subjects/{subjects[0].id}", headers=auth_header(teacher_token)
        )
        assert response.status_code == 204

        response = await client.get(
            f"/api/v1/subjects/{subjects[0].id}", headers=auth_header(teacher_token)
        )
        assert response.status_code == 404

    async def test_delete_subject_with_notes(
        self,
        client: AsyncClient,
        teacher_token: str,
        subjects: list[Subject],
        students: list[Student],
        evaluation: Evaluation,
    ):
        await client.post(
            "/api/v1/notes",
            headers=auth_header(teacher_token),
            json={
                "student_id": str(students[0].id),
                "subject_id": str(subjects[0].id),
                "evaluation_id": str(evaluation.id),
                "value": "12",
            },
        )

        response = await client.delete(
            f"/api/v1/subjects/{subjects[0].id}", headers=auth_header(teacher_token)
        )

        assert response.status_code == 409

    async def test_other_teacher_gets_404(
        self, client: AsyncClient, other_token: str, subjects: list[Subject]
    ):
        response = await client.get(
            f"/api/v1/subjects/{subjects[0].id}", headers=auth_header(other_token)
        )

        assert response.status_code == 404
