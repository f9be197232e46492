"""Tests for class average configurations and thresholds."""

from decimal import Decimal

from httpx import AsyncClient

from edustats.models.school_class import SchoolClass
from edustats.models.subject import Subject
from tests.conftest import auth_header


class TestAverageConfigs:
    async def test_default_config(
        self,
        client: AsyncClient,
        teacher_token: str,
        school_class: SchoolClass,
        subjects: list[Subject],
    ):
        response = await client.get(
            f"/api/v1/class-average-configs/class/{school_class.id}",
            headers=auth_header(teacher_token),
        )

        assert response.status_code == 200
        data = response.json()
        assert data["is_default"] is True
        assert data["id"] is None
        assert data["formula"] == "=(Français + Maths) ÷ 2"
        assert Decimal(data["divisor"]) == Decimal("2")

    async def test_save_then_replace_config(
        self,
        client: AsyncClient,
        teacher_token: str,
        school_class: SchoolClass,
        subjects: list[Subject],
    ):
        first = await client.post(
            "/api/v1/class-average-configs",
            headers=auth_header(teacher_token),
            json={
                "class_id": str(school_class.id),
                "divisor": "3",
                "formula": "=(Français + Maths × 2) ÷ 3",
            },
        )
        assert first.status_code == 200
        assert first.json()["is_default"] is False

        second = await client.post(
            "/api/v1/class-average-configs",
            headers=auth_header(teacher_token),
            json={
                "class_id": str(school_class.id),
                "divisor": "4",
                "formula": "=(Français × 2 + Maths × 2) ÷ 4",
            },
        )
        assert second.json()["id"] == first.json()["id"]

        effective = await client.get(
            f"/api/v1/class-average-configs/class/{school_class.id}",
            headers=auth_header(teacher_token),
        )
        assert effective.json()["formula"] == "=(Français × 2 + Maths × 2) ÷ 4"

        listing = await client.get(
            "/api/v1/class-average-configs", headers=auth_header(teacher_token)
        )
        assert listing.json()["total"] == 1

    async def test_formula_with_unknown_subject(
        self,
        client: AsyncClient,
        teacher_token: str,
        school_class: SchoolClass,
        subjects: list[Subject],
    ):
        response = await client.post(
            "/api/v1/class-average-configs",
            headers=auth_header(teacher_token),
            json={
                "class_id": str(school_class.id),
                "divisor": "2",
                "formula": "=(Anglais + Maths) ÷ 2",
            },
        )

        assert response.status_code == 422
        assert "Anglais" in response.json()["detail"]

    async def test_update_and_delete_config(
        self,
        client: AsyncClient,
        teacher_token: str,
        school_class: SchoolClass,
        subjects: list[Subject],
    ):
        created = await client.post(
            "/api/v1/class-average-configs",
            headers=auth_header(teacher_token),
            json={"class_id": str(school_class.id), "divisor": "1", "formula": "=Maths"},
        )
        config_id = created.json()["id"]

        response = await client.patch(
            f"/api/v1/class-average-configs/{config_id}",
            headers=auth_header(teacher_token),
            json={"formula": "=Français"},
        )
        assert response.status_code == 200
        assert response.json()["formula"] == "=Français"

        response = await client.patch(
            f"/api/v1/class-average-configs/{config_id}",
            headers=auth_header(teacher_token),
            json={"formula": "=Maths +"},
        )
        assert response.status_code == 422

        response = await client.delete(
            f"/api/v1/class-average-configs/{config_id}", headers=auth_header(teacher_token)
        )
        assert response.status_code == 204

        effective = await client.get(
            f"/api/v1/class-average-configs/class/{school_class.id}",
            headers=auth_header(teacher_token),
        )
        assert effective.json()["is_default"] is True

    async def test_foreign_class(
        self, client: AsyncClient, other_token: str, school_class: SchoolClass
    ):
        response = await client.get(
            f"/api/v1/class-average-configs/class/{school_class.id}",
            headers=auth_header(other_token),
        )

        assert response.status_code == 404


class TestFormulaPreview:
    async def test_preview(self, client: AsyncClient, teacher_token: str):
        response = await client.post(
            "/api/v1/class-average-configs/preview",
            headers=auth_header(teacher_token),
            json={
                "formula": "=(Maths + Français × 2) ÷ 3",
                "notes": {"Maths": "12", "Français": "15"},
            },
        )

        assert response.status_code == 200
        assert Decimal(response.json()["result"]) == Decimal("14")

    async def test_preview_division_by_zero(self, client: AsyncClient, teacher_token: str):
        response = await client.post(
            "/api/v1/class-average-configs/preview",
            headers=auth_header(teacher_token),
            json={"formula": "=Maths / 0", "notes": {"Maths": "12"}},
        )

        assert response.status_code == 422
        assert response.json()["detail"] == "Division by zero in formula"


class TestThresholds:
    async def test_effective_defaults(
        self, client: AsyncClient, teacher_token: str, school_class: SchoolClass
    ):
        response = await client.get(
            f"/api/v1/class-thresholds/class/{school_class.id}/effective",
            headers=auth_header(teacher_token),
        )

        data = response.json()
        assert Decimal(data["moyenne_admission"]) == Decimal("10")
        assert Decimal(data["moyenne_redoublement"]) == Decimal("8.5")
        assert data["max_note"] == 20

        response = await client.get(
            f"/api/v1/class-thresholds/class/{school_class.id}",
            headers=auth_header(teacher_token),
        )
        assert response.status_code == 404

    async def test_create_update_delete(
        self, client: AsyncClient, teacher_token: str, school_class: SchoolClass
    ):
        payload = {
            "class_id": str(school_class.id),
            "moyenne_admission": "5",
            "moyenne_redoublement": "4",
            "max_note": 10,
        }
        response = await client.post(
            "/api/v1/class-thresholds", headers=auth_header(teacher_token), json=payload
        )
        assert response.status_code == 201
        assert response.json()["max_note"] == 10

        response = await client.post(
            "/api/v1/class-thresholds", headers=auth_header(teacher_token), json=payload
        )
        assert response.status_code == 409

        response = await client.put(
            f"/api/v1/class-thresholds/class/{school_class.id}",
            headers=auth_header(teacher_token),
            json={"moyenne_admission": "12", "moyenne_redoublement": "9", "max_note": 20},
        )
        assert response.status_code == 200
        assert Decimal(response.json()["moyenne_admission"]) == Decimal("12")

        listing = await client.get("/api/v1/class-thresholds", headers=auth_header(teacher_token))
        assert listing.json()["total"] == 1

        response = await client.delete(
            f"/api/v1/class-thresholds/class/{school_class.id}",
            headers=auth_header(teacher_token),
        )
        assert response.status_code == 204

        response = await client.get(
            f"/api/v1/class-thresholds/class/{school_class.id}/effective",
            headers=auth_header(teacher_token),
        )
        assert Decimal(response.json()["moyenne_admission"]) == Decimal("10")

    async def test_redoublement_above_admission(
        self, client: AsyncClient, teacher_token: str, school_class: SchoolClass
    ):
        response = await client.post(
            "/api/v1/class-thresholds",
            headers=auth_header(teacher_token),
            json={
                "class_id": str(school_class.id),
                "moyenne_admission": "10",
                "moyenne_redoublement": "11",
            },
        )

        assert response.status_code == 422

    async def test_admission_above_max_note(
        self, client: AsyncClient, teacher_token: str, school_class: SchoolClass
    ):
        response = await client.post(
            "/api/v1/class-thresholds",
            headers=auth_header(teacher_token),
            json={
                "class_id": str(school_class.id),
                "moyenne_admission": "12",
                "moyenne_redoublement": "8",
                "max_note": 10,
            },
        )

        assert response.status_code == 422
