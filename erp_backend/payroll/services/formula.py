"""
Restricted arithmetic for bonus formulas.

Allowed:
  - numbers
  - + - * /
  - unary + and -
  - parentheses
  - one named variable (salario_base by default)

Anything else (calls, attributes, other names, comparisons...) is
rejected with FormulaError. Expressions are parsed with `ast` and walked
by hand; nothing is ever executed. Arithmetic runs in Decimal.
"""

from __future__ import annotations

import ast
from decimal import Decimal, DivisionByZero, InvalidOperation

from accounting.services.exceptions import FormulaError
from accounting.services.money import money

DEFAULT_VARIABLE = "salario_base"

MAX_LENGTH = 200

_BINARY_OPS = {
    ast.Add: lambda a, b: a + b,
    ast.Sub: lambda a, b: a - b,
    ast.Mult: lambda a, b: a * b,
    ast.Div: lambda a, b: a / b,
}


def _evaluate(node: ast.AST, *, variable: str, value: Decimal) -> Decimal:
    if isinstance(node, ast.BinOp):
        op = _BINARY_OPS.get(type(node.op))
        if op is None:
            raise FormulaError(f"Disallowed operator: {type(node.op).__name__}")
        left = _evaluate(node.left, variable=variable, value=value)
        right = _evaluate(node.right, variable=variable, value=value)
        if isinstance(node.op, ast.Div) and right == 0:
            raise FormulaError("Division by zero in formula")
        return op(left, right)

    if isinstance(node, ast.UnaryOp):
        operand = _evaluate(node.operand, variable=variable, value=value)
        if isinstance(node.op, ast.USub):
            return -operand
        if isinstance(node.op, ast.UAdd):
            return operand
        raise FormulaError(f"Disallowed unary operator: {type(node.op).__name__}")

    if isinstance(node, ast.Constant):
        # bool is an int subclass
        if isinstance(node.value, bool) or not isinstance(node.value, (int, float)):
            raise FormulaError(f"Disallowed constant: {node.value!r}")
        return Decimal(str(node.value))

    if isinstance(node, ast.Name):
        if node.id != variable:
            raise FormulaError(f"Unknown name '{node.id}', only '{variable}' is allowed")
        return value

    raise FormulaError(f"Disallowed expression: {type(node).__name__}")


def _check(node: ast.AST, *, variable: str) -> None:
    if isinstance(node, ast.BinOp):
        if type(node.op) not in _BINARY_OPS:
            raise FormulaError(f"Disallowed operator: {type(node.op).__name__}")
        _check(node.left, variable=variable)
        _check(node.right, variable=variable)
        return

    if isinstance(node, ast.UnaryOp):
        if not isinstance(node.op, (ast.UAdd, ast.USub)):
            raise FormulaError(f"Disallowed unary operator: {type(node.op).__name__}")
        _check(node.operand, variable=variable)
        return

    if isinstance(node, ast.Constant):
        if isinstance(node.value, bool) or not isinstance(node.value, (int, float)):
            raise FormulaError(f"Disallowed constant: {node.value!r}")
        return

    if isinstance(node, ast.Name):
        if node.id != variable:
            raise FormulaError(f"Unknown name '{node.id}', only '{variable}' is allowed")
        return

    raise FormulaError(f"Disallowed expression: {type(node).__name__}")


def _parse(expression: str) -> ast.Expression:
    expression = (expression or "").strip()
    if not expression:
        raise FormulaError("Formula is empty")
    if len(expression) > MAX_LENGTH:
        raise FormulaError("Formula is too long")

    try:
        return ast.parse(expression, mode="eval")
    except SyntaxError as exc:
        raise FormulaError(f"Syntax error: {exc.msg}") from exc


def validate_formula(expression: str, *, variable: str = DEFAULT_VARIABLE) -> None:
    """Raise FormulaError unless the expression fits the grammar. Nothing is computed."""
    _check(_parse(expression).body, variable=variable)


def evaluate_formula(expression: str, *, variable: str = DEFAULT_VARIABLE, value=Decimal("0")) -> Decimal:
    tree = _parse(expression)

    try:
        result = _evaluate(tree.body, variable=variable, value=Decimal(str(value)))
    except (InvalidOperation, DivisionByZero) as exc:
        raise FormulaError(f"Formula could not be evaluated: {expression}") from exc

    return money(result)
