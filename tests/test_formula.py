"""Tests for the average formula evaluator."""

from decimal import Decimal

import pytest

from edustats.core.exceptions import FormulaError
from edustats.services import formula


class TestEvaluate:
    def test_spreadsheet_notation(self):
        result = formula.evaluate(
            "=(Maths + Français × 2) ÷ 3",
            {"Maths": Decimal("12"), "Français": Decimal("15")},
        )

        assert result == Decimal("14.00")

    def test_formula_starting_with_subject(self):
        assert formula.evaluate("Maths * 2 - 4", {"Maths": 10}) == Decimal("16.00")

    def test_missing_note_counts_as_zero(self):
        assert formula.evaluate("=(Maths + Lecture) / 2", {"Maths": 15, "Lecture": None}) == (
            Decimal("7.50")
        )

    def test_rounds_half_up(self):
        assert formula.evaluate("=Maths / 8", {"Maths": Decimal("0.1")}) == Decimal("0.01")
        assert formula.evaluate("=(A + B + C) / 3", {"A": 10, "B": 10, "C": 12}) == (
            Decimal("10.67")
        )

    def test_longest_subject_name_first(self):
        notes = {"Calcul": Decimal("10"), "Calcul mental": Decimal("20")}

        assert formula.evaluate("=Calcul mental - Calcul", notes) == Decimal("10.00")

    def test_unary_minus(self):
        assert formula.evaluate("=-Maths + 20", {"Maths": 5}) == Decimal("15.00")

    @pytest.mark.parametrize(
        "expression",
        [
            "=Maths / 0",
            "=Maths / (Lecture - Lecture)",
        ],
    )
    def test_division_by_zero(self, expression: str):
        with pytest.raises(FormulaError):
            formula.evaluate(expression, {"Maths": 12, "Lecture": 10})

    @pytest.mark.parametrize(
        "expression",
        [
            "",
            "=",
            "=Maths +",
            "=Maths ** 2",
            "=__import__('os')",
            "=Histoire + Maths",
            "=Maths % 3",
            "=(Maths",
        ],
    )
    def test_invalid_formulas(self, expression: str):
        with pytest.raises(FormulaError):
            formula.evaluate(expression, {"Maths": 12})


class TestHelpers:
    def test_default_formula(self):
        assert formula.default_formula(["Maths", "Français"]) == "=(Maths + Français) ÷ 2"
        assert formula.default_formula([]) == "=0"

    def test_default_formula_evaluates_to_mean(self):
        text = formula.default_formula(["Maths", "Français", "EPS"])

        assert formula.evaluate(text, {"Maths": 12, "Français": 9, "EPS": 15}) == Decimal("12.00")

    def test_validate_formula(self):
        formula.validate_formula("=(Maths + Français) ÷ 2", ["Maths", "Français"])

        with pytest.raises(FormulaError):
            formula.validate_formula("=Maths + Anglais", ["Maths", "Français"])

    def test_compute_moyenne_falls_back_to_zero(self):
        assert formula.compute_moyenne("=Maths / 0", {"Maths": 12}) == Decimal("0.00")

    def test_compute_moyenne_out_of_range(self):
        notes = {"Maths": 8, "Français": 12}
        assert formula.compute_moyenne("=Maths - Français", notes) == Decimal("0.00")
        assert formula.compute_moyenne("=Français * 100", notes) == Decimal("0.00")
        assert formula.compute_moyenne("=Maths * 100", notes) == Decimal("800.00")
        # evaluate itself does not clamp
        assert formula.evaluate("=Maths - Français", notes) == Decimal("-4.00")

    def test_round_half_up(self):
        assert formula.round_half_up(Decimal("10.625")) == Decimal("10.63")
        assert formula.round_half_up(Decimal("10.624")) == Decimal("10.62")
