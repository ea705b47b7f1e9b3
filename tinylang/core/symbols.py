"""Static symbol resolution. One depth-first walk over the syntax tree gives every distinct variable name a slot, in
order of first occurrence, and records every line that mentions it.
"""

from tinylang.core.syntax import NAMED_NODES, Node
from tinylang.lang.error import UnresolvedReferenceError


class SymbolEntry:
    """A resolved variable: its name, its slot in the value store and the lines referencing it (in visit order)."""

    def __init__(self, name, slot, lines):
        self.name = name
        self.slot = slot
        self.lines = tuple(lines)

    def display(self):
        """Format: [Var=<name>][Mem=<slot>][Line=<line>]..."""
        return f"[Var={self.name}][Mem={self.slot}]" + "".join(f"[Line={line}]" for line in self.lines)

    def __eq__(self, other):
        return isinstance(other, SymbolEntry) and (self.name, self.slot, self.lines) == \
            (other.name, other.slot, other.lines)

    def __hash__(self):
        return hash((self.name, self.slot, self.lines))

    def __repr__(self):
        return f"SymbolEntry(name={self.name!r}, slot={self.slot}, lines={self.lines})"


class SymbolTable:
    """Read-only name -> SymbolEntry mapping. Iterates in slot order."""

    def __init__(self, entries=()):
        self._entries = {entry.name: entry for entry in sorted(entries, key=lambda entry: entry.slot)}

    def lookup(self, name):
        """Returns the entry for name (exact match), or None."""
        return self._entries.get(name)

    def slot(self, name, line=None):
        """Returns the slot of name. Raises UnresolvedReferenceError if name was never resolved."""
        entry = self._entries.get(name)
        if entry is None:
            raise UnresolvedReferenceError(name, line)
        return entry.slot

    def display(self):
        return "\n".join(entry.display() for entry in self)

    def __contains__(self, name):
        return name in self._entries

    def __iter__(self):
        return iter(self._entries.values())

    def __len__(self):
        return len(self._entries)

    def __eq__(self, other):
        return isinstance(other, SymbolTable) and list(self) == list(other)

    def __repr__(self):
        return f"SymbolTable({list(self)!r})"

    def __str__(self):
        return self.display()


def walk(node):
    """Yields node and every node below it in resolution order: the node itself, then its child slots in order
    (statement lists in list order).
    """
    stack = [node]
    while stack:
        current = stack.pop()
        if isinstance(current, list):
            stack.extend(reversed(current))
        elif isinstance(current, Node):
            yield current
            stack.extend(reversed([child for child in current.children if child is not None]))


def resolve(program):
    """Returns the SymbolTable of program. Pure: program is not modified, and resolving it again gives an equal table.
    """
    slots = {}  # dict of name: (slot, lines), insertion-ordered
    for node in walk(program):
        if isinstance(node, NAMED_NODES):
            if node.name not in slots:
                slots[node.name] = (len(slots), [])
            slots[node.name][1].append(node.line)

    return SymbolTable(SymbolEntry(name, slot, lines) for name, (slot, lines) in slots.items())
