"""Tests for students API."""

from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from edustats.models.school_class import SchoolClass
from edustats.models.student import Student
from edustats.models.user import User
from tests.conftest import auth_header

ROSTER = (
    "LISTE DES ÉLÈVES - CLASSE DE 6ème A\n"
    "1. KOUASSI Jean\n"
    "2. KONAN Marie\n"
    "3. KOUASSI Jean\n"
    "Effectif total: 3\n"
)


class TestCreateStudent:
    async def test_create_student(
        self, client: AsyncClient, teacher_token: str, school_class: SchoolClass
    ):
        response = await client.post(
            f"/api/v1/classes/{school_class.id}/students",
            headers=auth_header(teacher_token),
            json={
                "name": "Kouassi Jean",
                "gender": "M",
                "student_number": "12345A",
                "birth_date": "2014-03-12",
            },
        )

        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Kouassi Jean"
        assert data["gender"] == "M"
        assert data["class_id"] == str(school_class.id)
        assert data["school_year_id"] == str(school_class.school_year_id)
        assert data["is_active"] is True

    async def test_duplicate_student_number(
        self, client: AsyncClient, teacher_token: str, school_class: SchoolClass
    ):
        payload = {"name": "Kouassi Jean", "student_number": "12345A"}
        await client.post(
            f"/api/v1/classes/{school_class.id}/students",
            headers=auth_header(teacher_token),
            json=payload,
        )

        response = await client.post(
            f"/api/v1/classes/{school_class.id}/students",
            headers=auth_header(teacher_token),
            json={**payload, "name": "Konan Marie"},
        )

        assert response.status_code == 409

    async def test_invalid_gender(
        self, client: AsyncClient, teacher_token: str, school_class: SchoolClass
    ):
        response = await client.post(
            f"/api/v1/classes/{school_class.id}/students",
            headers=auth_header(teacher_token),
            json={"name": "Kouassi Jean", "gender": "X"},
        )

        assert response.status_code == 422

    async def test_foreign_class(
        self, client: AsyncClient, other_token: str, school_class: SchoolClass
    ):
        response = await client.post(
            f"/api/v1/classes/{school_class.id}/students",
            headers=auth_header(other_token),
            json={"name": "Kouassi Jean"},
        )

        assert response.status_code == 404


class TestBulkCreate:
    async def test_bulk_create(
        self, client: AsyncClient, teacher_token: str, school_class: SchoolClass
    ):
        response = await client.post(
            f"/api/v1/classes/{school_class.id}/students/bulk",
            headers=auth_header(teacher_token),
            json={
                "students": [
                    {"name": "Kouassi Jean", "student_number": "1"},
                    {"name": "Konan Marie", "student_number": "2"},
                    {"name": "Yao Paul"},
                ]
            },
        )

        assert response.status_code == 201
        assert len(response.json()) == 3

    async def test_bulk_number_twice_creates_nothing(
        self, client: AsyncClient, teacher_token: str, school_class: SchoolClass
    ):
        response = await client.post(
            f"/api/v1/classes/{school_class.id}/students/bulk",
            headers=auth_header(teacher_token),
            json={
                "students": [
                    {"name": "Kouassi Jean", "student_number": "1"},
                    {"name": "Konan Marie", "student_number": "1"},
                ]
            },
        )
        assert response.status_code == 409

        listing = await client.get(
            f"/api/v1/classes/{school_class.id}/students", headers=auth_header(teacher_token)
        )
        assert listing.json()["total"] == 0

    async def test_bulk_number_already_used(
        self,
        client: AsyncClient,
        db: AsyncSession,
        teacher_token: str,
        school_class: SchoolClass,
    ):
        db.add(Student(class_id=school_class.id, name="Yao Paul", student_number="7"))
        await db.commit()

        response = await client.post(
            f"/api/v1/classes/{school_class.id}/students/bulk",
            headers=auth_header(teacher_token),
            json={"students": [{"name": "Kouassi Jean", "student_number": "7"}]},
        )

        assert response.status_code == 409

    async def test_bulk_empty(
        self, client: AsyncClient, teacher_token: str, school_class: SchoolClass
    ):
        response = await client.post(
            f"/api/v1/classes/{school_class.id}/students/bulk",
            headers=auth_header(teacher_token),
            json={"students": []},
        )

        assert response.status_code == 422


class TestListStudents:
    async def test_list_filters(
        self,
        client: AsyncClient,
        db: AsyncSession,
        teacher_token: str,
        school_class: SchoolClass,
    ):
        db.add_all(
            [
                Student(class_id=school_class.id, name="Yao Paul", gender="M"),
                Student(class_id=school_class.id, name="Konan Marie", gender="F"),
                Student(class_id=school_class.id, name="Kouassi Jean", gender="M"),
                Student(class_id=school_class.id, name="Parti Eleve", is_active=False),
            ]
        )
        await db.commit()
        url = f"/api/v1/classes/{school_class.id}/students"

        response = await client.get(url, headers=auth_header(teacher_token))
        data = response.json()
        assert data["total"] == 3
        assert [s["name"] for s in data["items"]] == ["Konan Marie", "Kouassi Jean", "Yao Paul"]

        response = await client.get(
            url, headers=auth_header(teacher_token), params={"gender": "M"}
        )
        assert response.json()["total"] == 2

        response = await client.get(
            url, headers=auth_header(teacher_token), params={"search": "kou"}
        )
        assert [s["name"] for s in response.json()["items"]] == ["Kouassi Jean"]

        response = await client.get(
            url, headers=auth_header(teacher_token), params={"is_active": False}
        )
        assert [s["name"] for s in response.json()["items"]] == ["Parti Eleve"]


class TestUpdateDeleteStudent:
    async def test_update_student(
        self,
        client: AsyncClient,
        db: AsyncSession,
        teacher_token: str,
        school_class: SchoolClass,
    ):
        student = Student(class_id=school_class.id, name="Kouassi Jean")
        db.add(student)
        await db.commit()

        response = await client.patch(
            f"/api/v1/students/{student.id}",
            headers=auth_header(teacher_token),
            json={"name": "Kouassi Jean-Marc", "gender": "M"},
        )

        assert response.status_code == 200
        assert response.json()["name"] == "Kouassi Jean-Marc"
        assert response.json()["gender"] == "M"

    async def test_move_to_own_class(
        self,
        client: AsyncClient,
        db: AsyncSession,
        teacher: User,
        teacher_token: str,
        school_class: SchoolClass,
    ):
        target = SchoolClass(user_id=teacher.id, name="6ème B")
        student = Student(class_id=school_class.id, name="Kouassi Jean")
        db.add_all([target, student])
        await db.commit()

        response = await client.patch(
            f"/api/v1/students/{student.id}",
            headers=auth_header(teacher_token),
            json={"class_id": str(target.id)},
        )

        assert response.status_code == 200
        assert response.json()["class_id"] == str(target.id)

    async def test_move_to_foreign_class(
        self,
        client: AsyncClient,
        db: AsyncSession,
        other_teacher: User,
        teacher_token: str,
        school_class: SchoolClass,
    ):
        target = SchoolClass(user_id=other_teacher.id, name="CM2")
        student = Student(class_id=school_class.id, name="Kouassi Jean")
        db.add_all([target, student])
        await db.commit()

        response = await client.patch(
            f"/api/v1/students/{student.id}",
            headers=auth_header(teacher_token),
            json={"class_id": str(target.id)},
        )

        assert response.status_code == 404

    async def test_soft_delete(
        self,
        client: AsyncClient,
        db: AsyncSession,
        teacher_token: str,
        school_class: SchoolClass,
    ):
        student = Student(class_id=school_class.id, name="Kouassi Jean")
        db.add(student)
        await db.commit()

        response = await client.delete(
            f"/api/v1/students/{student.id}", headers=auth_header(teacher_token)
        )
        assert response.status_code == 204

        response = await client.get(
            f"/api/v1/students/{student.id}", headers=auth_header(teacher_token)
        )
        assert response.status_code == 200
        assert response.json()["is_active"] is False

    async def test_other_teacher_gets_404(
        self,
        client: AsyncClient,
        db: AsyncSession,
        other_token: str,
        school_class: SchoolClass,
    ):
        student = Student(class_id=school_class.id, name="Kouassi Jean")
        db.add(student)
        await db.commit()

        response = await client.get(
            f"/api/v1/students/{student.id}", headers=auth_header(other_token)
        )

        assert response.status_code == 404


class TestImportStudents:
    async def import_roster(
        self, client: AsyncClient, token: str, class_id, content: bytes, **params
    ):
        return await client.post(
            f"/api/v1/classes/{class_id}/students/import",
            headers=auth_header(token),
            params=params,
            files={"file": ("liste.txt", content, "text/plain")},
        )

    async def test_preview(
        self, client: AsyncClient, teacher_token: str, school_class: SchoolClass
    ):
        response = await self.import_roster(
            client, teacher_token, school_class.id, ROSTER.encode()
        )

        assert response.status_code == 200
        data = response.json()
        assert data["total_processed"] == 3
        assert data["success_count"] == 2
        assert data["duplicate_count"] == 1
        assert data["created"] == []
        assert [(s["first_name"], s["last_name"]) for s in data["students"]] == [
            ("Kouassi", "Jean"),
            ("Konan", "Marie"),
        ]

        listing = await client.get(
            f"/api/v1/classes/{school_class.id}/students", headers=auth_header(teacher_token)
        )
        assert listing.json()["total"] == 0

    async def test_commit_then_reimport(
        self, client: AsyncClient, teacher_token: str, school_class: SchoolClass
    ):
        response = await self.import_roster(
            client, teacher_token, school_class.id, ROSTER.encode(), commit=True
        )
        assert response.status_code == 200
        assert sorted(s["name"] for s in response.json()["created"]) == [
            "Konan Marie",
            "Kouassi Jean",
        ]

        response = await self.import_roster(
            client, teacher_token, school_class.id, ROSTER.encode(), commit=True
        )
        data = response.json()
        assert data["success_count"] == 0
        assert data["duplicate_count"] == 3
        assert data["created"] == []

    async def test_latin1_text(
        self, client: AsyncClient, teacher_token: str, school_class: SchoolClass
    ):
        response = await self.import_roster(
            client, teacher_token, school_class.id, "1. KOFFI Hélène\n".encode("latin-1")
        )

        assert response.status_code == 200
        student = response.json()["students"][0]
        assert (student["first_name"], student["last_name"]) == ("Koffi", "Hélène")

    async def test_empty_file(
        self, client: AsyncClient, teacher_token: str, school_class: SchoolClass
    ):
        response = await self.import_roster(client, teacher_token, school_class.id, b"")

        assert response.status_code == 400

    async def test_unsupported_type(
        self, client: AsyncClient, teacher_token: str, school_class: SchoolClass
    ):
        response = await client.post(
            f"/api/v1/classes/{school_class.id}/students/import",
            headers=auth_header(teacher_token),
            files={"file": ("liste.doc", b"KOUASSI Jean", "application/msword")},
        )

        assert response.status_code == 400
