"""Resolve the TypeScript return type of an endpoint."""

from collections.abc import Iterable, Mapping

from api_client_codegen.description.base import ReturnTypeModel, TypeDescription

from .expression import TypeExpression, parse
from .mapper import ANY, ASYNC_NAMES, TypeMapper, simple_name


class ReturnTypeResolver:
    """Applies the unwrap policy on top of a TypeMapper.

    A return type whose wrapper name is in ``unwrap_generic_types`` and which
    has exactly one generic argument resolves to that argument alone, so
    ``Result<Widget>`` becomes ``types.Widget``.
    """

    def __init__(self, mapper: TypeMapper, unwrap_generic_types: Iterable[str] = ()):
        self.mapper = mapper
        self.unwrap_generic_types = frozenset(unwrap_generic_types)

    def resolve(
        self,
        return_type: ReturnTypeModel | str | None,
        types: Mapping[str, TypeDescription],
    ) -> str:
        ref = return_type.type if isinstance(return_type, ReturnTypeModel) else return_type
        if not ref or not ref.strip():
            return ANY

        expr = _strip_async(parse(ref))
        described = types.get(ref) or types.get(str(expr))
        if described is not None:
            return self._resolve_described(described)

        if simple_name(expr.name) in self.unwrap_generic_types and len(expr.arguments) == 1:
            return self.mapper.map(expr.arguments[0])
        return self.mapper.map(expr)

    def _resolve_described(self, described: TypeDescription) -> str:
        arguments = described.generic_arguments
        if described.name in self.unwrap_generic_types and len(arguments) == 1:
            return self.mapper.map(arguments[0])

        resolved = f"{self.mapper.qualifier}{described.name}"
        if arguments:
            resolved += f"<{', '.join(self.mapper.map(a) for a in arguments)}>"
        return resolved


def _strip_async(expr: TypeExpression) -> TypeExpression:
    # Collectors normally remove Task<T> already; tolerate the ones that don't.
    while simple_name(expr.name) in ASYNC_NAMES and len(expr.arguments) == 1:
        expr = expr.arguments[0]
    return expr
