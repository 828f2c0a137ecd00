"""Parsed form of textual type signatures.

``parse`` splits ``Base<Arg1,Arg2<Inner>>`` on the outermost angle brackets,
tracking depth so nested commas stay with their argument. It never raises:
anything it cannot make sense of becomes an atom holding the whole trimmed
string.
"""

from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import TypeVar

ARRAY = "[]"
NULLABLE = "System.Nullable"

R = TypeVar("R")


@dataclass(frozen=True)
class TypeExpression:
    """A base name plus ordered generic arguments.

    Arrays are represented with the base name ``[]`` and a single argument.
    """

    name: str
    arguments: tuple["TypeExpression", ...] = ()

    def __str__(self) -> str:
        if self.name == ARRAY and len(self.arguments) == 1:
            return f"{self.arguments[0]}[]"
        if not self.arguments:
            return self.name
        return f"{self.name}<{','.join(str(a) for a in self.arguments)}>"

    @property
    def is_array(self) -> bool:
        return self.name == ARRAY

    @property
    def is_malformed(self) -> bool:
        return not self.arguments and ("<" in self.name or ">" in self.name)

    def walk(self) -> Iterator["TypeExpression"]:
        """Yield this node and every nested argument, pre-order."""
        yield self
        for argument in self.arguments:
            yield from argument.walk()


def parse(text: str | None) -> TypeExpression:
    """Parse a type signature into a TypeExpression."""
    text = (text or "").strip()

    if text.endswith("[]") and text != ARRAY:
        return _wrap(text, text[:-2], ARRAY)
    if text.endswith("?") and len(text) > 1:
        return _wrap(text, text[:-1], NULLABLE)

    start = text.find("<")
    if start <= 0 or not text.endswith(">"):
        return TypeExpression(text)

    parts = _split_arguments(text[start + 1 : -1])
    if parts is None:
        return TypeExpression(text)
    return TypeExpression(text[:start].strip(), tuple(parse(p) for p in parts))


def fold(expr: TypeExpression, visit: Callable[[TypeExpression, list[R]], R]) -> R:
    """Reduce an expression bottom-up.

    ``visit`` receives each node together with the already-folded results of
    its arguments, in order.
    """
    return visit(expr, [fold(argument, visit) for argument in expr.arguments])


def _wrap(text: str, inner_text: str, name: str) -> TypeExpression:
    inner = parse(inner_text)
    if not inner.name or inner.is_malformed:
        return TypeExpression(text)
    return TypeExpression(name, (inner,))


def _split_arguments(inner: str) -> list[str] | None:
    parts: list[str] = []
    current: list[str] = []
    depth = 0
    for ch in inner:
        if ch == "<":
            depth += 1
        elif ch == ">":
            depth -= 1
            if depth < 0:
                return None
        elif ch == "," and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        current.append(ch)

    if depth != 0:
        return None
    parts.append("".join(current))
    if any(not p.strip() for p in parts):
        return None
    return parts
