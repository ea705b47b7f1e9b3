"""Abstract syntax tree for TINY. One class per node kind, each carrying only the fields that kind needs.

Statement sequences are plain lists of statements. Every node owns its children outright: no node is ever shared
between two parents, so a tree is released as a whole when its Program is dropped.
"""

from enum import Enum

from tinylang.grammar.tiny import RELATIONAL_OPS


class ExprType(Enum):
    VOID = "Void"
    INTEGER = "Integer"
    BOOLEAN = "Boolean"

    def __str__(self):
        return self.value


class Node:
    """Superclass of every syntax tree node. KIND is the label used in tree dumps."""
    KIND = "Node"
    INDENT = 3

    def __init__(self, line, expr_type=ExprType.VOID):
        self.line = line
        self.expr_type = expr_type

    @property
    def children(self):
        """Ordered child slots. A slot is a node, a list of statements, or None."""
        return []

    def payload(self):
        """Kind-specific value shown in tree dumps, or None."""
        return None

    def label(self):
        """Format: [<kind>][<payload>][<expr type>], payload and expr type only if applicable."""
        label = f"[{self.KIND}]"
        payload = self.payload()
        if payload is not None:
            label += f"[{payload!s}]"
        if self.expr_type is not ExprType.VOID:
            label += f"[{self.expr_type!s}]"
        return label

    def display(self, indents=0):
        """Recursively displays the tree rooted at self. Children are one level deeper; statements of a sequence are
        at the same level.
        """
        lines = [" " * indents + self.label()]
        for child in self.children:
            for node in _as_list(child):
                lines.append(node.display(indents + Node.INDENT))
        return "\n".join(lines)

    def _fields(self):
        return tuple(self.__dict__.items())

    def __eq__(self, other):
        return type(other) is type(self) and other._fields() == self._fields()

    def __repr__(self):
        fields = ", ".join(f"{key}={value!r}" for key, value in self.__dict__.items() if key != "expr_type")
        return f"{type(self).__name__}({fields})"

    def __str__(self):
        return self.display()


def _as_list(slot):
    if slot is None:
        return []
    if isinstance(slot, list):
        return slot
    return [slot]


class Program(Node):
    """Root of the tree: the top-level statement sequence."""
    KIND = "Program"

    def __init__(self, body):
        super().__init__(body[0].line if body else 0)
        self.body = body

    @property
    def children(self):
        return [self.body]

    def display(self, indents=0):
        """Programs have no label of their own: the dump is the top-level statement sequence."""
        return "\n".join(statement.display(indents) for statement in self.body)


class If(Node):
    KIND = "If"

    def __init__(self, condition, then_body, else_body=None, line=0):
        super().__init__(line)
        self.condition = condition
        self.then_body = then_body
        self.else_body = else_body

    @property
    def children(self):
        return [self.condition, self.then_body, self.else_body]


class Repeat(Node):
    KIND = "Repeat"

    def __init__(self, body, condition, line=0):
        super().__init__(line)
        self.body = body
        self.condition = condition

    @property
    def children(self):
        return [self.body, self.condition]


class Assign(Node):
    KIND = "Assign"

    def __init__(self, name, value, line=0):
        super().__init__(line)
        self.name = name
        self.value = value

    @property
    def children(self):
        return [self.value]

    def payload(self):
        return self.name


class Read(Node):
    KIND = "Read"

    def __init__(self, name, line=0):
        super().__init__(line)
        self.name = name

    def payload(self):
        return self.name


class Write(Node):
    KIND = "Write"

    def __init__(self, value, line=0):
        super().__init__(line)
        self.value = value

    @property
    def children(self):
        return [self.value]


class BinaryOp(Node):
    """Arithmetic (Integer) or relational (Boolean) operation. op is a TokenKind."""
    KIND = "Oper"

    def __init__(self, op, left, right, line=0):
        expr_type = ExprType.BOOLEAN if op in RELATIONAL_OPS else ExprType.INTEGER
        super().__init__(line, expr_type)
        self.op = op
        self.left = left
        self.right = right

    @property
    def is_relational(self):
        return self.op in RELATIONAL_OPS

    @property
    def children(self):
        return [self.left, self.right]

    def payload(self):
        return self.op


class Number(Node):
    KIND = "Num"

    def __init__(self, value, line=0):
        super().__init__(line, ExprType.INTEGER)
        self.value = value

    def payload(self):
        return self.value


class Identifier(Node):
    KIND = "ID"

    def __init__(self, name, line=0):
        super().__init__(line, ExprType.INTEGER)
        self.name = name

    def payload(self):
        return self.name


# nodes whose name is a variable reference
NAMED_NODES = (Identifier, Read, Assign)
