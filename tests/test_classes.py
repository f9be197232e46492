"""Tests for classes API."""

from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from edustats.models.school_class import SchoolClass
from edustats.models.school_year import SchoolYear
from edustats.models.student import Student
from tests.conftest import auth_header


class TestCreateClass:
    async def test_create_class(
        self, client: AsyncClient, teacher_token: str, school_year: SchoolYear
    ):
        response = await client.post(
            "/api/v1/classes",
            headers=auth_header(teacher_token),
            json={"name": "CM2 B", "level": "CM2", "school_year_id": str(school_year.id)},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "CM2 B"
        assert data["school_year_id"] == str(school_year.id)
        assert data["student_count"] == 0

    async def test_duplicate_name(
        self, client: AsyncClient, teacher_token: str, school_class: SchoolClass
    ):
        response = await client.post(
            "/api/v1/classes",
            headers=auth_header(teacher_token),
            json={"name": "6ème a"},
        )

        assert response.status_code == 409

    async def test_name_reusable_after_delete(
        self, client: AsyncClient, teacher_token: str, school_class: SchoolClass
    ):
        await client.delete(
            f"/api/v1/classes/{school_class.id}", headers=auth_header(teacher_token)
        )

        response = await client.post(
            "/api/v1/classes",
            headers=auth_header(teacher_token),
            json={"name": "6ème A"},
        )

        assert response.status_code == 201

    async def test_foreign_school_year(
        self, client: AsyncClient, other_token: str, school_year: SchoolYear
    ):
        response = await client.post(
            "/api/v1/classes",
            headers=auth_header(other_token),
            json={"name": "CE1", "school_year_id": str(school_year.id)},
        )

        assert response.status_code == 404

    async def test_blank_name(self, client: AsyncClient, teacher_token: str):
        response = await client.post(
            "/api/v1/classes", headers=auth_header(teacher_token), json={"name": "  "}
        )

        assert response.status_code == 422


class TestListClasses:
    async def test_list_with_student_counts(
        self,
        client: AsyncClient,
        db: AsyncSession,
        teacher_token: str,
        school_class: SchoolClass,
    ):
        other_class = SchoolClass(user_id=school_class.user_id, name="5ème B", level="5ème")
        db.add(other_class)
        db.add_all(
            [
                Student(class_id=school_class.id, name="Kouassi Jean", gender="M"),
                Student(class_id=school_class.id, name="Konan Marie", gender="F"),
                Student(class_id=school_class.id, name="Parti Eleve", is_active=False),
            ]
        )
        await db.commit()

        response = await client.get("/api/v1/classes", headers=auth_header(teacher_token))

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        counts = {item["name"]: item["student_count"] for item in data["items"]}
        assert counts == {"5ème B": 0, "6ème A": 2}

    async def test_search(
        self, client: AsyncClient, db: AsyncSession, teacher_token: str, school_class: SchoolClass
    ):
        db.add(SchoolClass(user_id=school_class.user_id, name="CM2", level="Primaire"))
        await db.commit()

        response = await client.get(
            "/api/v1/classes", headers=auth_header(teacher_token), params={"search": "prim"}
        )

        assert [item["name"] for item in response.json()["items"]] == ["CM2"]

    async def test_other_teacher_sees_nothing(
        self, client: AsyncClient, other_token: str, school_class: SchoolClass
    ):
        response = await client.get("/api/v1/classes", headers=auth_header(other_token))
        assert response.json()["total"] == 0

        response = await client.get(
            f"/api/v1/classes/{school_class.id}", headers=auth_header(other_token)
        )
        assert response.status_code == 404


class TestUpdateDeleteClass:
    async def test_update_class(
        self, client: AsyncClient, teacher_token: str, school_class: SchoolClass
    ):
        response = await client.patch(
            f"/api/v1/classes/{school_class.id}",
            headers=auth_header(teacher_token),
            json={"name": "6ème A1"},
        )

        assert response.status_code == 200
        assert response.json()["name"] == "6ème A1"
        assert response.json()["level"] == "6ème"

    async def test_delete_deactivates_students(
        self,
        client: AsyncClient,
        db: AsyncSession,
        teacher_token: str,
        school_class: SchoolClass,
    ):
        db.add(Student(class_id=school_class.id, name="Kouassi Jean"))
        await db.commit()

        response = await client.delete(
            f"/api/v1/classes/{school_class.id}", headers=auth_header(teacher_token)
        )
        assert response.status_code == 204

        response = await client.get(
            f"/api/v1/classes/{school_class.id}", headers=auth_header(teacher_token)
        )
        assert response.status_code == 404

        result = await db.execute(
            select(Student.is_active).where(Student.class_id == school_class.id)
        )
        assert result.scalars().all() == [False]
