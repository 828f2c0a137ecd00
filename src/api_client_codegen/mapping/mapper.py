"""Map source type signatures to TypeScript type expressions.

Rules are tried in order for every node of the parsed expression; the first
that matches wins:

1. already a TypeScript expression -> unchanged
2. Nullable<T> -> ``null | T``
3. sequences (arrays, List<T>, IEnumerable<T>, ...) -> ``T[]``
4. Task -> ``void``
5. Task<T> -> ``T``
6. scalar table (string, number, boolean, dates, ids)
7. types under the domain namespace -> simple name, generics kept
8. anything else -> ``any``
"""

import re
from collections.abc import Mapping

from .expression import TypeExpression, fold, parse

ANY = "any"
VOID = "void"

TS_BUILTINS = {"string", "number", "boolean", "any", "unknown", "void", "null", "undefined", "object", "never"}
TS_GENERICS = {"Array", "Promise", "Record", "Partial", "Readonly"}
TS_MODULE_PREFIX = "types."
PLACEHOLDER_PATTERN = re.compile(r"^T\d+$")

NULLABLE_NAMES = {"Nullable"}
SEQUENCE_NAMES = {
    "List",
    "IList",
    "IEnumerable",
    "ICollection",
    "IReadOnlyList",
    "IReadOnlyCollection",
    "HashSet",
    "ISet",
    "Collection",
    "ImmutableArray",
    "ImmutableList",
}
DICTIONARY_NAMES = {"Dictionary", "IDictionary", "IReadOnlyDictionary", "SortedDictionary"}
ASYNC_NAMES = {"Task", "ValueTask"}
# MVC result wrappers behave like Task: ActionResult<T> carries T, bare results carry nothing typed.
RESULT_WRAPPER_NAMES = {"ActionResult"}

SCALAR_ALIASES = {
    "string": "string",
    "char": "string",
    "bool": "boolean",
    "byte": "number",
    "sbyte": "number",
    "short": "number",
    "ushort": "number",
    "int": "number",
    "uint": "number",
    "long": "number",
    "ulong": "number",
    "float": "number",
    "double": "number",
    "decimal": "number",
    "object": ANY,
    "dynamic": ANY,
    "guid": "string",
}

# Prefix matches, checked in order.
SCALAR_PREFIXES = (
    ("System.String", "string"),
    ("System.Char", "string"),
    ("System.Uri", "string"),
    ("System.Boolean", "boolean"),
    ("System.Int", "number"),
    ("System.UInt", "number"),
    ("System.Byte", "number"),
    ("System.SByte", "number"),
    ("System.Single", "number"),
    ("System.Double", "number"),
    ("System.Decimal", "number"),
    ("System.DateTime", "string"),
    ("System.DateOnly", "string"),
    ("System.TimeOnly", "string"),
    ("System.TimeSpan", "string"),
    ("System.Guid", "string"),
    ("System.Object", ANY),
    ("System.Void", VOID),
    ("Microsoft.AspNetCore.Mvc.IActionResult", ANY),
    ("Microsoft.AspNetCore.Mvc.ActionResult", ANY),
    ("Microsoft.AspNetCore.Mvc.FileResult", ANY),
    ("Microsoft.AspNetCore.Http.IFormFile", ANY),
)


def simple_name(name: str) -> str:
    """Trailing type name, dropping namespace and nesting (``A.B+C`` -> ``C``)."""
    return re.split(r"[.+]", name)[-1]


def _framework_name(name: str) -> str | None:
    # Well-known wrappers are recognized bare or under System/Microsoft namespaces only.
    if "." not in name or name.startswith(("System.", "Microsoft.")):
        return simple_name(name)
    return None


class TypeMapper:
    """Maps TypeExpressions to TypeScript.

    ``namespace_prefix`` selects which source types are domain types (declared
    by the generator); ``qualifier`` is prepended to domain references, e.g.
    ``types.`` inside service modules.
    """

    def __init__(self, namespace_prefix: str = "", qualifier: str = ""):
        self.namespace_prefix = namespace_prefix.rstrip(".")
        self.qualifier = qualifier

    def with_qualifier(self, qualifier: str) -> "TypeMapper":
        return TypeMapper(self.namespace_prefix, qualifier)

    def map(self, expr: TypeExpression | str | None, placeholders: Mapping[str, str] | None = None) -> str:
        """Return the TypeScript expression for ``expr``.

        ``placeholders`` maps source signatures to generic parameter names
        (``{"Shop.Widget": "T0"}``); matching nodes are substituted at any depth.
        """
        if isinstance(expr, str) and "|" in expr:
            return expr.strip()
        expr = _coerce(expr)
        placeholders = placeholders or {}
        return fold(expr, lambda node, args: self._map_node(node, args, placeholders))

    def references(
        self, expr: TypeExpression | str | None, placeholders: Mapping[str, str] | None = None
    ) -> list[str]:
        """Distinct domain type names referenced by ``expr``, first-seen order."""
        if isinstance(expr, str) and "|" in expr:
            return []
        expr = _coerce(expr)
        placeholders = placeholders or {}

        def visit(node: TypeExpression, children: list[list[str]]) -> list[str]:
            if str(node) in placeholders or self._is_target(node):
                return []
            found = [self.domain_name(node)] if self.is_domain(node.name) else []
            for names in children:
                found.extend(names)
            return found

        return list(dict.fromkeys(fold(expr, visit)))

    def is_domain(self, name: str) -> bool:
        prefix = self.namespace_prefix
        return bool(prefix) and (name == prefix or name.startswith(prefix + "."))

    def domain_name(self, node: TypeExpression) -> str:
        return simple_name(node.name)

    def scalar(self, name: str) -> str | None:
        """Look ``name`` up in the scalar table."""
        alias = SCALAR_ALIASES.get(name.lower())
        if alias is not None and "." not in name:
            return alias
        for prefix, ts_type in SCALAR_PREFIXES:
            if name.startswith(prefix):
                return ts_type
        return None

    # -- rules -----------------------------------------------------------------

    def _map_node(self, node: TypeExpression, args: list[str], placeholders: Mapping[str, str]) -> str:
        text = str(node)
        if text in placeholders:
            return placeholders[text]

        if self._is_target(node):
            if node.arguments:
                return f"{node.name}<{', '.join(args)}>"
            return node.name

        framework = None if node.is_array else _framework_name(node.name)

        if framework in NULLABLE_NAMES and len(args) == 1:
            inner = args[0]
            return inner if inner.startswith("null | ") else f"null | {inner}"

        if node.is_array or framework in SEQUENCE_NAMES:
            return _array_of(args[0]) if len(args) == 1 else f"{ANY}[]"

        if framework in ASYNC_NAMES or framework in RESULT_WRAPPER_NAMES:
            if len(args) == 1:
                return args[0]
            if framework in ASYNC_NAMES:
                return VOID

        if framework in DICTIONARY_NAMES and len(args) == 2:
            key = args[0] if args[0] in ("string", "number") else "string"
            return f"Record<{key}, {args[1]}>"

        scalar = self.scalar(node.name)
        if scalar is not None:
            return scalar

        if self.is_domain(node.name):
            reference = f"{self.qualifier}{self.domain_name(node)}"
            if args:
                reference += f"<{', '.join(args)}>"
            return reference

        return ANY

    def _is_target(self, node: TypeExpression) -> bool:
        name = node.name
        if name.startswith(TS_MODULE_PREFIX) or (self.qualifier and name.startswith(self.qualifier)):
            return True
        if node.arguments:
            return name in TS_GENERICS
        return name in TS_BUILTINS or "|" in name or bool(PLACEHOLDER_PATTERN.match(name))


def _array_of(element: str) -> str:
    if "|" in element or "&" in element:
        return f"({element})[]"
    return f"{element}[]"


def _coerce(expr: TypeExpression | str | None) -> TypeExpression:
    if isinstance(expr, TypeExpression):
        return expr
    return parse(expr)

