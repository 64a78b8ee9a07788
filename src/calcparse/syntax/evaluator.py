"""
Expression evaluator for calcparse.

Walks an AST and computes its value with 32-bit signed integer semantics:
every intermediate result must fit in ``numpy.int32``, and division and
modulo truncate toward zero. Overflow and division by zero are reported as
``EvaluationError``, never wrapped or promoted.
"""

from __future__ import annotations

from calcparse.syntax.ast_nodes import (
    I32_MAX,
    I32_MIN,
    BinOp,
    Expr,
    ExprVisitor,
    Integer,
    Negate,
    Op,
)
from calcparse.utils.errors import EvaluationError

_OVERFLOW_VERBS: dict[Op, str] = {
    Op.ADD: "add",
    Op.SUBTRACT: "subtract",
    Op.MULTIPLY: "multiply",
    Op.DIVIDE: "divide",
    Op.MODULO: "calculate the remainder",
}


def _trunc_div(lhs: int, rhs: int) -> int:
    """Integer division rounding toward zero."""
    quotient = abs(lhs) // abs(rhs)
    return quotient if (lhs < 0) == (rhs < 0) else -quotient


class Evaluator(ExprVisitor):
    """
    Computes the integer value of an expression tree.

    Usage:
        value = Evaluator().evaluate(parse("1 + 2 * 3"))
    """

    def evaluate(self, expr: Expr) -> int:
        """
        Evaluate ``expr``.

        Raises:
            EvaluationError: On i32 overflow or division by zero.
        """
        return self.visit(expr)

    def visit_integer(self, node: Integer) -> int:
        return node.value

    def visit_negate(self, node: Negate, operand: int) -> int:
        value = -operand
        if value > I32_MAX:
            raise EvaluationError("attempt to negate with overflow", node.location)
        return value

    def visit_bin_op(self, node: BinOp, lhs: int, rhs: int) -> int:
        if node.op == Op.ADD:
            result = lhs + rhs
        elif node.op == Op.SUBTRACT:
            result = lhs - rhs
        elif node.op == Op.MULTIPLY:
            result = lhs * rhs
        elif node.op in (Op.DIVIDE, Op.MODULO):
            if rhs == 0:
                what = _OVERFLOW_VERBS[node.op]
                raise EvaluationError(
                    f"attempt to {what} with a divisor of zero", node.location
                )
            quotient = _trunc_div(lhs, rhs)
            if quotient > I32_MAX:
                # Only i32::MIN / -1 gets here; the remainder overflows too
                raise EvaluationError(
                    f"attempt to {_OVERFLOW_VERBS[node.op]} with overflow", node.location
                )
            result = quotient if node.op == Op.DIVIDE else lhs - rhs * quotient
        else:
            raise EvaluationError(f"unsupported operator {node.op.name}", node.location)

        if not I32_MIN <= result <= I32_MAX:
            raise EvaluationError(
                f"attempt to {_OVERFLOW_VERBS[node.op]} with overflow", node.location
            )
        return result


def evaluate(expr: Expr) -> int:
    """Convenience function to evaluate an expression tree."""
    return Evaluator().evaluate(expr)
