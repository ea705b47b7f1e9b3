"""Tree-walking execution of TINY programs.

Statements run strictly in order, operands are evaluated left before right, and every variable lives in one integer
slot of the value store (all slots start at 0). Expressions are evaluated in one of two modes: integer or boolean. A
node evaluated in the wrong mode is a RuntimeTypeError; nothing is coerced silently, except that a comparison stored by
an assignment or emitted by a write becomes 0 or 1.
"""

import logging

from tinylang.core.syntax import Assign, BinaryOp, ExprType, Identifier, If, Number, Read, Repeat, Write
from tinylang.grammar.tiny import TokenKind
from tinylang.lang.error import ArithmeticFault, RuntimeTypeError


logger = logging.getLogger(__name__)


def truncating_divide(left, right, line=None):
    """Integer division rounding toward zero (7 / -2 = -3)."""
    if right == 0:
        raise ArithmeticFault("division by zero", line=line)
    quotient = abs(left) // abs(right)
    return quotient if (left < 0) == (right < 0) else -quotient


def fit(value, line=None):
    """Returns value, raising ArithmeticFault if it is outside [Executor.INT_MIN, Executor.INT_MAX]."""
    if not Executor.INT_MIN <= value <= Executor.INT_MAX:
        raise ArithmeticFault(f"{value} does not fit in a {Executor.INT_BITS}-bit integer", line=line)
    return value


def truncating_power(base, exponent, line=None):
    """base ^ exponent truncated toward zero. Results outside [Executor.INT_MIN, Executor.INT_MAX] are faults."""
    if exponent < 0:
        if base == 0:
            raise ArithmeticFault("zero cannot be raised to a negative power", line=line)
        if base == 1:
            return 1
        if base == -1:
            return -1 if exponent % 2 else 1
        return 0

    if abs(base) > 1 and exponent >= Executor.INT_BITS:
        result = None  # too large to represent; skip computing it
    else:
        result = base ** exponent

    if result is None or not Executor.INT_MIN <= result <= Executor.INT_MAX:
        raise ArithmeticFault(f"{base}^{exponent} does not fit in a {Executor.INT_BITS}-bit integer", line=line)
    return result


class Executor:
    """Executes a Program against a resolved SymbolTable. input_source must provide read(name) -> int and
    output_sink must provide write(int).
    """
    INT_BITS = 32
    INT_MIN = -2 ** (INT_BITS - 1)
    INT_MAX = 2 ** (INT_BITS - 1) - 1

    OPERATIONS = {
        TokenKind.PLUS: lambda left, right, line: left + right,
        TokenKind.MINUS: lambda left, right, line: left - right,
        TokenKind.TIMES: lambda left, right, line: left * right,
        TokenKind.DIVIDE: truncating_divide,
        TokenKind.POWER: truncating_power,
    }

    def __init__(self, symbols, input_source, output_sink):
        self.symbols = symbols
        self.input_source = input_source
        self.output_sink = output_sink
        self._values = [0] * len(symbols)

    def value(self, name):
        """Current value of variable name."""
        return self._values[self.symbols.slot(name)]

    def values(self):
        """Dict of name: current value, in slot order."""
        return {entry.name: self._values[entry.slot] for entry in self.symbols}

    def execute(self, program):
        self.execute_seq(program.body)

    def execute_seq(self, statements):
        for statement in statements:
            self.execute_stmt(statement)

    def execute_stmt(self, node):
        logger.debug("line %d: %s", node.line, node.label())

        if isinstance(node, Assign):
            self._store(node.name, self.evaluate(node.value), node.line)
        elif isinstance(node, Read):
            slot = self.symbols.slot(node.name, node.line)
            self._values[slot] = fit(self.input_source.read(node.name), node.line)
        elif isinstance(node, Write):
            self.output_sink.write(self.evaluate(node.value))
        elif isinstance(node, If):
            if self.evaluate_boolean(node.condition):
                self.execute_seq(node.then_body)
            elif node.else_body is not None:
                self.execute_seq(node.else_body)
        elif isinstance(node, Repeat):
            while True:
                self.execute_seq(node.body)
                if self.evaluate_boolean(node.condition):
                    break
        else:
            raise RuntimeTypeError(ExprType.VOID, node)

    def _store(self, name, value, line):
        self._values[self.symbols.slot(name, line)] = value

    def evaluate(self, node):
        """Evaluates node in its own mode; comparisons give 0 or 1."""
        if node.expr_type is ExprType.BOOLEAN:
            return int(self.evaluate_boolean(node))
        return self.evaluate_integer(node)

    def evaluate_integer(self, node):
        if node.expr_type is not ExprType.INTEGER:
            raise RuntimeTypeError(ExprType.INTEGER, node)

        if isinstance(node, Number):
            return fit(node.value, node.line)
        elif isinstance(node, Identifier):
            return self._values[self.symbols.slot(node.name, node.line)]
        elif isinstance(node, BinaryOp) and node.op in Executor.OPERATIONS:
            left = self.evaluate_integer(node.left)
            right = self.evaluate_integer(node.right)
            return fit(Executor.OPERATIONS[node.op](left, right, node.line), node.line)
        raise RuntimeTypeError(ExprType.INTEGER, node)

    def evaluate_boolean(self, node):
        if node.expr_type is not ExprType.BOOLEAN or not isinstance(node, BinaryOp) or not node.is_relational:
            raise RuntimeTypeError(ExprType.BOOLEAN, node)

        left = self.evaluate_integer(node.left)
        right = self.evaluate_integer(node.right)
        if node.op is TokenKind.EQUAL:
            return left == right
        return left < right


def execute(program, symbols, input_source, output_sink):
    """Runs program and returns the Executor, whose value store holds the final variable values."""
    executor = Executor(symbols, input_source, output_sink)
    executor.execute(program)
    return executor
