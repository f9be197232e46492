"""
Grade-average formula evaluator.

Teachers write averages the way they would in a spreadsheet, for example
``=(Maths + Français × 2) ÷ 3``. Subject names are substituted with their
notes and the remaining arithmetic is evaluated from the parsed syntax tree,
so only numbers, subject references, ``+ - * /``, signs and parentheses are
ever accepted.
"""

import ast
import logging
import re
from collections.abc import Iterable, Mapping
from decimal import ROUND_HALF_UP, Decimal, DivisionByZero, InvalidOperation

from edustats.core.exceptions import FormulaError

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal("0.01")

# Largest value of a Numeric(5, 2) moyenne
MAX_MOYENNE = Decimal("999.99")

_SYMBOLS = {"÷": "/", "×": "*"}

_BINARY_OPERATORS = {
    ast.Add: lambda a, b: a + b,
    ast.Sub: lambda a, b: a - b,
    ast.Mult: lambda a, b: a * b,
    ast.Div: lambda a, b: a / b,
}

_UNARY_OPERATORS = {
    ast.UAdd: lambda a: a,
    ast.USub: lambda a: -a,
}


def round_half_up(value: Decimal) -> Decimal:
    """Round to two decimals, halves away from zero."""
    return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def normalize(formula: str) -> str:
    """Drop the leading '=' and map the typographic operators."""
    text = formula.strip()
    if text.startswith("="):
        text = text[1:]
    for symbol, operator in _SYMBOLS.items():
        text = text.replace(symbol, operator)
    return text.strip()


def default_formula(subject_names: list[str]) -> str:
    """Plain mean of every subject, e.g. ``=(Maths + Français) ÷ 2``."""
    if not subject_names:
        return "=0"
    return f"=({' + '.join(subject_names)}) ÷ {len(subject_names)}"


def _substitute(text: str, subject_names: Iterable[str]) -> tuple[str, dict[str, str]]:
    """Replace subject names by placeholders, longest names first."""
    names = sorted({name for name in subject_names if name}, key=len, reverse=True)
    if not names:
        return text, {}

    placeholders = {name: f"_s{index}" for index, name in enumerate(names)}
    pattern = re.compile("|".join(re.escape(name) for name in names))
    substituted = pattern.sub(lambda match: f" {placeholders[match.group(0)]} ", text)
    return substituted, {placeholder: name for name, placeholder in placeholders.items()}


def _check_node(node: ast.AST, placeholders: Mapping[str, str]) -> None:
    if isinstance(node, ast.Expression):
        _check_node(node.body, placeholders)
    elif isinstance(node, ast.BinOp):
        if type(node.op) not in _BINARY_OPERATORS:
            raise FormulaError("Only + - * / are allowed in a formula")
        _check_node(node.left, placeholders)
        _check_node(node.right, placeholders)
    elif isinstance(node, ast.UnaryOp):
        if type(node.op) not in _UNARY_OPERATORS:
            raise FormulaError("Unsupported operator in formula")
        _check_node(node.operand, placeholders)
    elif isinstance(node, ast.Constant):
        if isinstance(node.value, bool) or not isinstance(node.value, (int, float)):
            raise FormulaError("Formulas may only contain numbers and subject names")
    elif isinstance(node, ast.Name):
        if node.id not in placeholders:
            raise FormulaError(f"Unknown name in formula: {node.id}")
    else:
        raise FormulaError("Formulas may only contain numbers and subject names")


def compile_formula(
    formula: str, subject_names: Iterable[str]
) -> tuple[ast.Expression, dict[str, str]]:
    """
    Parse a formula against the given subject names.

    Returns the syntax tree and the placeholder to subject name mapping.
    Raises FormulaError for anything that is not plain arithmetic over
    numbers and the known subjects.
    """
    text = normalize(formula)
    if not text:
        raise FormulaError("Formula is empty")

    substituted, placeholders = _substitute(text, subject_names)
    try:
        tree = ast.parse(substituted.strip(), mode="eval")
    except SyntaxError:
        raise FormulaError(f"Invalid formula: {formula}")

    _check_node(tree, placeholders)
    return tree, placeholders


def _evaluate_node(node: ast.AST, values: Mapping[str, Decimal]) -> Decimal:
    if isinstance(node, ast.Expression):
        return _evaluate_node(node.body, values)
    if isinstance(node, ast.BinOp):
        left = _evaluate_node(node.left, values)
        right = _evaluate_node(node.right, values)
        return _BINARY_OPERATORS[type(node.op)](left, right)
    if isinstance(node, ast.UnaryOp):
        return _UNARY_OPERATORS[type(node.op)](_evaluate_node(node.operand, values))
    if isinstance(node, ast.Constant):
        return Decimal(str(node.value))
    return values[node.id]


def validate_formula(formula: str, subject_names: Iterable[str]) -> None:
    """Raise FormulaError unless the formula can be evaluated for these subjects."""
    compile_formula(formula, subject_names)


def evaluate(formula: str, notes: Mapping[str, Decimal | float | int | None]) -> Decimal:
    """
    Evaluate a formula with notes keyed by subject name.

    Subjects without a note count as 0. The result is rounded half up to
    two decimals. Raises FormulaError on invalid formulas, division by zero
    or a non-finite result.
    """
    tree, placeholders = compile_formula(formula, notes.keys())
    values = {
        placeholder: Decimal(str(notes.get(name) or 0))
        for placeholder, name in placeholders.items()
    }

    try:
        result = _evaluate_node(tree, values)
    except (DivisionByZero, InvalidOperation, ZeroDivisionError):
        raise FormulaError("Division by zero in formula")

    if not result.is_finite():
        raise FormulaError("Formula result is not a number")

    return round_half_up(result)


def compute_moyenne(formula: str, notes: Mapping[str, Decimal | float | int | None]) -> Decimal:
    """
    Evaluate a formula for grading, falling back to 0 when it cannot be computed.

    Results outside what a moyenne column holds (negative, or above
    MAX_MOYENNE) count as failures too.
    """
    try:
        result = evaluate(formula, notes)
    except FormulaError as exc:
        logger.warning("Could not compute formula %r: %s", formula, exc.message)
        return Decimal("0.00")

    if result < 0 or result > MAX_MOYENNE:
        logger.warning("Formula %r gave %s, outside 0..%s", formula, result, MAX_MOYENNE)
        return Decimal("0.00")
    return result
