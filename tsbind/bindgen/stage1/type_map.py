# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Type Mapping Engine: foreign type expressions -> target type representations.

The mapping is total over the parser's type grammar. Every node kind either
maps to a representation, degrades to the dynamic value with a warning, or
raises `UnsupportedConstructError` (which aborts the whole declaration).

Rules are ordered; the first matching rule wins:
  - keywords (`number` -> f64, `boolean` -> bool, `string` -> String, ...)
  - function types -> `&dyn Fn(...)`, with their own type parameters erased
  - qualified references -> scope path (`A.B.C` -> `AMod::BMod::C`)
  - bare references (`Array<T>` -> `Box<[T]>`, string enums -> String)
  - `T[]`, optional/nullable unions, intersections, tuples, parentheses
  - `this` -> `Self`, relative `import("./x").T` -> `super::xMod::T`
  - everything else degrades or fails loudly

Mapping never looks at anything but the node itself, so mapping the same
expression twice yields equal results.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, List, Optional

from tsbind.bindgen.config import DEFAULT_OPTIONS, BindgenOptions
from tsbind.bindgen.core.catalogs import is_string_type
from tsbind.bindgen.core.diagnostics import PHASE_TYPEMAP, DiagnosticSink
from tsbind.bindgen.core.errors import UnsupportedConstructError
from tsbind.bindgen.core.idents import import_path_prefix, is_relative_specifier, sanitize, scope_ident
from tsbind.bindgen.parser import ast

from .binding_nodes import (
	BOOL,
	DYNAMIC,
	F64,
	SELF,
	STRING,
	UNIT,
	BoxedSlice,
	Callable,
	Named,
	Reference,
	TupleOf,
	TypeRepr,
	optional_of,
)
from .generics_erase import erase_type, generics_scope

_DYNAMIC_KEYWORDS = frozenset({"any", "unknown", "null", "undefined", "never", "object"})
_UNSUPPORTED_KEYWORDS = frozenset({"bigint", "symbol", "intrinsic"})
_NULLISH = frozenset({"null", "undefined"})
_ARRAY_NAMES = frozenset({"Array", "ReadonlyArray"})


class TypeMapper:
	"""
	Maps foreign type expressions to `TypeRepr` values.

	Warnings are appended to `sink`; `where` (set through `context`) names the
	declaration/member in those warnings.
	"""

	def __init__(self, sink: Optional[DiagnosticSink] = None, options: Optional[BindgenOptions] = None) -> None:
		self.sink = sink if sink is not None else DiagnosticSink()
		self.options = options or DEFAULT_OPTIONS
		self._where: List[str] = []

	@contextmanager
	def context(self, name: str) -> Iterator[None]:
		self._where.append(name)
		try:
			yield
		finally:
			self._where.pop()

	def map_type(self, t: ast.TypeNode) -> TypeRepr:
		method = getattr(self, f"_map_{type(t).__name__}", None)
		if method is None:
			raise UnsupportedConstructError(f"no type mapping for {type(t).__name__}", loc=t.loc)
		return method(t)

	def map_return_type(self, t: Optional[ast.TypeNode]) -> Optional[TypeRepr]:
		"""Return-position mapping: a missing annotation or `void` means no return value."""
		if t is None:
			return None
		if isinstance(t, ast.KeywordType) and t.kind == "void":
			return None
		return self.map_type(t)

	def map_optional(self, t: Optional[ast.TypeNode]) -> TypeRepr:
		"""Map an annotation that may be absent (absent means the dynamic value)."""
		if t is None:
			return DYNAMIC
		return self.map_type(t)

	def _warn(self, message: str, loc) -> None:
		where = ".".join(self._where)
		self.sink.warn(
			f"{message} in `{where}`; using JsValue" if where else f"{message}; using JsValue",
			phase=PHASE_TYPEMAP,
			code="W-DYNAMIC",
			loc=loc,
		)

	def _fatal(self, what: str, loc) -> None:
		raise UnsupportedConstructError(f"{what} cannot be expressed in bindings", loc=loc)

	# --- keywords and references ---

	def _map_KeywordType(self, t: ast.KeywordType) -> TypeRepr:
		if t.kind == "number":
			return F64
		if t.kind == "boolean":
			return BOOL
		if t.kind == "string":
			return STRING
		if t.kind == "void":
			return UNIT
		if t.kind in _DYNAMIC_KEYWORDS:
			return DYNAMIC
		if t.kind in _UNSUPPORTED_KEYWORDS:
			self._fatal(f"`{t.kind}` type", t.loc)
		raise UnsupportedConstructError(f"unknown keyword type `{t.kind}`", loc=t.loc)

	def _map_TypeRef(self, t: ast.TypeRef) -> TypeRepr:
		if len(t.segments) > 1:
			scopes = tuple(scope_ident(seg, self.options.module_suffix) for seg in t.segments[:-1])
			return Named(scopes + (sanitize(t.segments[-1]),))
		name = t.segments[0]
		if name in _ARRAY_NAMES:
			element = self.map_type(t.type_args[0]) if t.type_args else DYNAMIC
			return BoxedSlice(element)
		if is_string_type(name):
			return STRING
		return Named((sanitize(name),))

	def _map_ThisType(self, t: ast.ThisType) -> TypeRepr:
		return SELF

	def _map_ArrayType(self, t: ast.ArrayType) -> TypeRepr:
		return BoxedSlice(self.map_type(t.element))

	def _map_FunctionType(self, t: ast.FunctionType) -> TypeRepr:
		params = []
		for param in t.params:
			if not isinstance(param.pattern, ast.IdentPattern):
				self._fatal("destructuring parameter in function type", param.loc)
			ty = self.map_optional(param.type_ann)
			params.append(optional_of(ty) if param.optional else ty)
		ret = self.map_return_type(t.return_type)
		callable_ty = Callable(params=tuple(params), ret=ret)
		if t.type_params:
			callable_ty = erase_type(callable_ty, generics_scope(t.type_params))
		return Reference(callable_ty)

	# --- composites ---

	def _map_OptionalType(self, t: ast.OptionalType) -> TypeRepr:
		return optional_of(self.map_type(t.inner))

	def _map_UnionType(self, t: ast.UnionType) -> TypeRepr:
		members = [_strip_parens(m) for m in t.members]
		if len(members) == 2:
			first, second = members
			if _is_nullish(second) and not _is_nullish(first):
				return optional_of(self.map_type(first))
			if _is_nullish(first) and not _is_nullish(second):
				return optional_of(self.map_type(second))
		self._warn("union type is not representable", t.loc)
		return DYNAMIC

	def _map_IntersectionType(self, t: ast.IntersectionType) -> TypeRepr:
		if not t.members:
			self._warn("empty intersection type", t.loc)
			return DYNAMIC
		return self.map_type(t.members[0])

	def _map_TupleType(self, t: ast.TupleType) -> TypeRepr:
		return TupleOf(tuple(self.map_type(e) for e in t.elements))

	def _map_ParenthesizedType(self, t: ast.ParenthesizedType) -> TypeRepr:
		return self.map_type(t.inner)

	def _map_ImportType(self, t: ast.ImportType) -> TypeRepr:
		if not is_relative_specifier(t.argument):
			self._warn(f"import type from non-relative module \"{t.argument}\"", t.loc)
			return DYNAMIC
		if not t.qualifier:
			self._warn(f"import type of a whole module \"{t.argument}\"", t.loc)
			return DYNAMIC
		prefix = import_path_prefix(t.argument, self.options.module_suffix)
		scopes = tuple(scope_ident(seg, self.options.module_suffix) for seg in t.qualifier[:-1])
		return Named(prefix + scopes + (sanitize(t.qualifier[-1]),))

	# --- degraded ---

	def _map_TypeLiteral(self, t: ast.TypeLiteral) -> TypeRepr:
		self._warn("object type literal", t.loc)
		return DYNAMIC

	def _map_LiteralType(self, t: ast.LiteralType) -> TypeRepr:
		self._warn(f"{t.kind} literal type", t.loc)
		return DYNAMIC

	# --- fatal ---

	def _map_ConstructorType(self, t: ast.ConstructorType) -> TypeRepr:
		self._fatal("constructor type", t.loc)

	def _map_IndexedAccessType(self, t: ast.IndexedAccessType) -> TypeRepr:
		self._fatal("indexed access type", t.loc)

	def _map_TypeQuery(self, t: ast.TypeQuery) -> TypeRepr:
		self._fatal(f"`typeof {'.'.join(t.segments)}`", t.loc)

	def _map_MappedType(self, t: ast.MappedType) -> TypeRepr:
		self._fatal("mapped type", t.loc)

	def _map_ConditionalType(self, t: ast.ConditionalType) -> TypeRepr:
		self._fatal("conditional type", t.loc)

	def _map_TypePredicate(self, t: ast.TypePredicate) -> TypeRepr:
		self._fatal("type predicate", t.loc)

	def _map_InferType(self, t: ast.InferType) -> TypeRepr:
		self._fatal("`infer` type", t.loc)

	def _map_RestType(self, t: ast.RestType) -> TypeRepr:
		self._fatal("rest element type", t.loc)

	def _map_TypeOperator(self, t: ast.TypeOperator) -> TypeRepr:
		self._fatal(f"`{t.op}` type operator", t.loc)


def _strip_parens(t: ast.TypeNode) -> ast.TypeNode:
	while isinstance(t, ast.ParenthesizedType):
		t = t.inner
	return t


def _is_nullish(t: ast.TypeNode) -> bool:
	return isinstance(t, ast.KeywordType) and t.kind in _NULLISH


__all__ = ["TypeMapper"]
