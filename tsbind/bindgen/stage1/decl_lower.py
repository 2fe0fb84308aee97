# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Declaration Lowering: one foreign declaration -> binding items.

Pipeline placement:
  parser (AST) -> DeclLowerer (this file) -> stage2 composer

Each declaration kind lowers on its own; nothing here looks at sibling
declarations. Every binding leaves `lower` with the declaring scope's type
parameters already erased, so later stages never see a generic name.

Fatal constructs raise `UnsupportedConstructError` (or
`InvariantViolationError` for malformed input); the error is annotated with
the declaration/member it came from and propagates to the pipeline, which
halts the unit. Constructs that can be dropped without making the output
unsound produce a warning instead.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, List, Optional

from tsbind.bindgen.config import DEFAULT_OPTIONS, BindgenOptions
from tsbind.bindgen.core.diagnostics import PHASE_LOWER, DiagnosticSink
from tsbind.bindgen.core.errors import BindgenError, InvariantViolationError, UnsupportedConstructError
from tsbind.bindgen.core.idents import sanitize, sanitize_ident
from tsbind.bindgen.parser import ast

from .binding_nodes import (
	DYNAMIC,
	BindingItem,
	BindingMeta,
	ExternFunction,
	ExternParam,
	ExternStatic,
	Named,
	OpaqueType,
	Reference,
	TypeRepr,
	optional_of,
)
from .generics_erase import GenericsScope, erase_generics, generics_scope
from .type_map import TypeMapper

_HIDDEN_ACCESSIBILITY = frozenset({"private", "protected"})

RECEIVER_NAME = "this"


class DeclLowerer:
	"""
	Lowers foreign declarations to binding items.

	Public API: `lower(decl)`. Helpers stay private.
	"""

	def __init__(self, sink: Optional[DiagnosticSink] = None, options: Optional[BindgenOptions] = None) -> None:
		self.sink = sink if sink is not None else DiagnosticSink()
		self.options = options or DEFAULT_OPTIONS
		self.types = TypeMapper(self.sink, self.options)

	def lower(self, decl: ast.Decl) -> List[BindingItem]:
		"""
		Lower one declaration.

		Namespaces lower to the flattened bindings of their body, each tagged
		with the namespace path.
		"""
		method = getattr(self, f"_lower_{type(decl).__name__}", None)
		if method is None:
			raise UnsupportedConstructError(f"no lowering for {type(decl).__name__}", loc=decl.loc)
		name = ast.decl_name(decl)
		try:
			with self.types.context(name or type(decl).__name__):
				return method(decl)
		except BindgenError as err:
			raise err.with_context(decl_name=name, loc=decl.loc)

	def _warn(self, message: str, loc) -> None:
		self.sink.warn(message, phase=PHASE_LOWER, code="W-DROPPED", loc=loc)

	@contextmanager
	def _member_context(self, member) -> Iterator[None]:
		"""Name `member` in type-mapping warnings and in errors raised while lowering it."""
		key = getattr(member, "key", None)
		name = key.value if key is not None else None
		if isinstance(member, ast.ClassConstructor):
			name = "constructor"
		try:
			with self.types.context(name or _member_kind(member)):
				yield
		except BindgenError as err:
			raise err.with_context(member_name=name, loc=member.loc)

	def _require_name(self, decl: ast.Decl, what: str) -> str:
		name = ast.decl_name(decl)
		if not name:
			raise InvariantViolationError(f"{what} declaration without a name", loc=decl.loc)
		return name

	# --- parameters and shared member shapes ---

	def _params(self, params: List[ast.Param]) -> List[ExternParam]:
		out: List[ExternParam] = []
		for param in params:
			pattern = param.pattern
			if not isinstance(pattern, ast.IdentPattern):
				raise UnsupportedConstructError("destructuring parameters are not supported", loc=param.loc)
			# A `this` parameter only annotates the receiver.
			if pattern.name == "this":
				continue
			ty = self.types.map_optional(param.type_ann)
			if param.optional:
				ty = optional_of(ty)
			out.append(ExternParam(name=sanitize(pattern.name), ty=ty))
		return out

	def _member_name(self, key: ast.PropertyKey) -> Optional[str]:
		"""Raw member name, or None (with a warning) when it cannot be named."""
		if key.kind == "computed":
			self._warn(f"computed member `{key.value}` cannot be bound; skipped", key.loc)
			return None
		return key.value

	def _receiver(self, owner: str) -> ExternParam:
		return ExternParam(name=RECEIVER_NAME, ty=Reference(Named((owner,))))

	def _accessor(
		self,
		raw: str,
		*,
		owner: str,
		ret: Optional[TypeRepr],
		value: Optional[ExternParam] = None,
		is_static: bool = False,
		prefix: str = "",
		loc=None,
	) -> ExternFunction:
		"""
		Getter (`value` None) or setter accessor for property `raw`.

		`prefix` (`get_`/`set_`) is prepended to the Rust name; the host name
		stays the raw property name.
		"""
		ident = sanitize_ident(prefix + raw) if prefix else sanitize_ident(raw)
		meta = BindingMeta(owner=owner, getter=value is None, setter=value is not None)
		if is_static:
			meta.static_method_of = owner
		else:
			meta.method = True
		if prefix or ident.original is not None:
			meta.js_name = raw
		params = [] if is_static else [self._receiver(owner)]
		if value is not None:
			params.append(value)
		return ExternFunction(name=ident.name, params=params, ret=ret, meta=meta, loc=loc)

	def _method(
		self,
		raw: str,
		params: List[ast.Param],
		return_type: Optional[ast.TypeNode],
		*,
		owner: str,
		is_static: bool = False,
		loc=None,
	) -> ExternFunction:
		ident = sanitize_ident(raw)
		meta = BindingMeta(owner=owner, js_name=ident.original)
		lowered = self._params(params)
		if is_static:
			meta.static_method_of = owner
		else:
			meta.method = True
			lowered.insert(0, self._receiver(owner))
		return ExternFunction(
			name=ident.name,
			params=lowered,
			ret=self.types.map_return_type(return_type),
			meta=meta,
			loc=loc,
		)

	# --- classes ---

	def _lower_ClassDecl(self, decl: ast.ClassDecl) -> List[BindingItem]:
		cls = sanitize_ident(self._require_name(decl, "class"))
		scope = generics_scope(decl.type_params)
		opaque = OpaqueType(name=cls.name, meta=BindingMeta(js_name=cls.original), loc=decl.loc)
		sup = decl.super_class
		if sup is not None and len(sup.segments) == 1:
			opaque.meta.extends.append((sanitize(sup.segments[0]),))
		items: List[BindingItem] = [opaque]
		seen_constructor = False
		for member in decl.members:
			with self._member_context(member):
				lowered = self._lower_class_member(member, cls.name, scope, seen_constructor)
			if isinstance(member, ast.ClassConstructor) and lowered:
				seen_constructor = True
			items.extend(lowered)
		return items

	def _lower_class_member(
		self,
		member: ast.ClassMember,
		owner: str,
		scope: GenericsScope,
		seen_constructor: bool,
	) -> List[BindingItem]:
		if isinstance(member, ast.IndexSignature):
			raise UnsupportedConstructError("index signatures in classes are not supported", loc=member.loc)
		if isinstance(member, ast.StaticBlock):
			raise UnsupportedConstructError("static blocks are not supported", loc=member.loc)
		if isinstance(member, ast.EmptyMember):
			raise UnsupportedConstructError("empty class members are not supported", loc=member.loc)
		if getattr(member, "accessibility", None) in _HIDDEN_ACCESSIBILITY:
			return []
		key = getattr(member, "key", None)
		if key is not None and key.kind == "private":
			return []

		if isinstance(member, ast.ClassConstructor):
			if key.kind not in ("ident", "string") or key.value != "constructor":
				raise UnsupportedConstructError(
					f"constructor declared with key `{key.value}`", loc=member.loc
				)
			if seen_constructor:
				raise UnsupportedConstructError("more than one constructor", loc=member.loc)
			return [
				erase_generics(
					ExternFunction(
						name="new",
						params=self._params(member.params),
						ret=Named((owner,)),
						meta=BindingMeta(constructor=True, owner=owner),
						loc=member.loc,
					),
					scope,
				)
			]

		raw = self._member_name(key)
		if raw is None:
			return []

		if isinstance(member, ast.ClassMethod):
			member_scope = scope | generics_scope(member.type_params)
			if member.kind == "getter":
				fn = self._accessor(
					raw,
					owner=owner,
					ret=self.types.map_optional(member.return_type),
					is_static=member.is_static,
					prefix="get_",
					loc=member.loc,
				)
			elif member.kind == "setter":
				value = self._params(member.params)
				fn = self._accessor(
					raw,
					owner=owner,
					ret=None,
					value=value[0] if value else ExternParam(name="value", ty=DYNAMIC),
					is_static=member.is_static,
					prefix="set_",
					loc=member.loc,
				)
			else:
				fn = self._method(
					raw,
					member.params,
					member.return_type,
					owner=owner,
					is_static=member.is_static,
					loc=member.loc,
				)
			return [erase_generics(fn, member_scope)]

		if isinstance(member, ast.ClassProperty):
			ty = self.types.map_optional(member.type_ann)
			if member.optional:
				ty = optional_of(ty)
			fn = self._accessor(raw, owner=owner, ret=ty, is_static=member.is_static, loc=member.loc)
			return [erase_generics(fn, scope)]

		raise UnsupportedConstructError(f"unsupported class member {type(member).__name__}", loc=member.loc)

	# --- plain declarations ---

	def _lower_FunctionDecl(self, decl: ast.FunctionDecl) -> List[BindingItem]:
		ident = sanitize_ident(self._require_name(decl, "function"))
		scope = generics_scope(decl.type_params)
		fn = ExternFunction(
			name=ident.name,
			params=self._params(decl.params),
			ret=self.types.map_return_type(decl.return_type),
			meta=BindingMeta(js_name=ident.original),
			loc=decl.loc,
		)
		return [erase_generics(fn, scope)]

	def _lower_VariableDecl(self, decl: ast.VariableDecl) -> List[BindingItem]:
		if len(decl.declarators) != 1:
			raise InvariantViolationError(
				f"variable statement declares {len(decl.declarators)} bindings; expected exactly one",
				loc=decl.loc,
			)
		declarator = decl.declarators[0]
		if not isinstance(declarator.pattern, ast.IdentPattern):
			raise UnsupportedConstructError("destructuring variable declarations are not supported", loc=declarator.loc)
		ident = sanitize_ident(declarator.pattern.name)
		return [
			ExternStatic(
				name=ident.name,
				ty=self.types.map_optional(declarator.type_ann),
				meta=BindingMeta(js_name=ident.original),
				loc=decl.loc,
			)
		]

	def _lower_TypeAliasDecl(self, decl: ast.TypeAliasDecl) -> List[BindingItem]:
		alias = sanitize_ident(decl.name)
		scope = generics_scope(decl.type_params)
		items: List[BindingItem] = [OpaqueType(name=alias.name, meta=BindingMeta(js_name=alias.original), loc=decl.loc)]
		rhs = decl.type_ann
		while isinstance(rhs, ast.ParenthesizedType):
			rhs = rhs.inner
		if not isinstance(rhs, ast.TypeLiteral):
			return items
		for member in rhs.members:
			if not isinstance(member, ast.PropertySignature):
				self._warn(
					f"{_member_kind(member)} in type literal `{decl.name}` cannot be bound; skipped", member.loc
				)
				continue
			with self._member_context(member):
				items.extend(self._property_signature(member, alias.name, scope))
		return items

	def _lower_InterfaceDecl(self, decl: ast.InterfaceDecl) -> List[BindingItem]:
		iface = sanitize_ident(decl.name)
		scope = generics_scope(decl.type_params)
		items: List[BindingItem] = [OpaqueType(name=iface.name, meta=BindingMeta(js_name=iface.original), loc=decl.loc)]
		for member in decl.body:
			with self._member_context(member):
				items.extend(self._lower_interface_member(member, iface.name, scope))
		return items

	def _lower_interface_member(self, member: ast.TypeMember, owner: str, scope: GenericsScope) -> List[BindingItem]:
		if isinstance(member, ast.PropertySignature):
			return self._property_signature(member, owner, scope)
		if isinstance(member, ast.MethodSignature):
			raw = self._member_name(member.key)
			if raw is None:
				return []
			member_scope = scope | generics_scope(member.type_params)
			fn = self._method(raw, member.params, member.return_type, owner=owner, loc=member.loc)
			return [erase_generics(fn, member_scope)]
		if isinstance(member, ast.GetterSignature):
			raw = self._member_name(member.key)
			if raw is None:
				return []
			fn = self._accessor(
				raw,
				owner=owner,
				ret=self.types.map_optional(member.return_type),
				prefix="get_",
				loc=member.loc,
			)
			return [erase_generics(fn, scope)]
		if isinstance(member, ast.SetterSignature):
			raw = self._member_name(member.key)
			if raw is None:
				return []
			value = self._params([member.param])
			fn = self._accessor(
				raw,
				owner=owner,
				ret=None,
				value=value[0] if value else ExternParam(name="value", ty=DYNAMIC),
				prefix="set_",
				loc=member.loc,
			)
			return [erase_generics(fn, scope)]
		self._warn(f"{_member_kind(member)} in interface `{owner}` cannot be bound; skipped", member.loc)
		return []

	def _property_signature(self, member: ast.PropertySignature, owner: str, scope: GenericsScope) -> List[BindingItem]:
		raw = self._member_name(member.key)
		if raw is None:
			return []
		ty = self.types.map_optional(member.type_ann)
		if member.optional:
			ty = optional_of(ty)
		fn = self._accessor(raw, owner=owner, ret=ty, loc=member.loc)
		return [erase_generics(fn, scope)]

	def _lower_EnumDecl(self, decl: ast.EnumDecl) -> List[BindingItem]:
		raise UnsupportedConstructError("enums are not supported", loc=decl.loc)

	# --- namespaces ---

	def _lower_NamespaceDecl(self, decl: ast.NamespaceDecl) -> List[BindingItem]:
		if decl.is_string_name:
			self._warn(f"ambient module \"{decl.name}\" is not bound; skipped", decl.loc)
			return []
		if isinstance(decl.body, ast.NamespaceDecl):
			self._warn(f"nested namespace declaration `{_dotted_name(decl)}` is not supported; skipped", decl.loc)
			return []
		body = namespace_body(decl)
		if body is None:
			self._warn(f"namespace `{decl.name}` has no body block; skipped", decl.loc)
			return []
		items: List[BindingItem] = []
		for inner in body:
			items.extend(self.lower(inner))
		if not decl.is_global:
			for item in items:
				item.meta.js_namespace.insert(0, decl.name)
		return items


def namespace_declarations(block: ast.NamespaceBlock) -> List[ast.Decl]:
	"""Declarations of a namespace body; everything is visible inside a namespace."""
	out: List[ast.Decl] = []
	for stmt in block.body:
		if isinstance(stmt, (ast.ExportDecl, ast.ExportDefaultDecl)):
			out.append(stmt.decl)
		elif isinstance(stmt, ast.Decl):
			out.append(stmt)
	return out


def namespace_body(decl: ast.NamespaceDecl) -> Optional[List[ast.Decl]]:
	"""
	Declarations inside a namespace block, or None when there is no block.

	`namespace A.B {}` arrives as `A` whose body is the declaration of `B`
	rather than a block; it has no bindable body either.
	"""
	if isinstance(decl.body, ast.NamespaceBlock):
		return namespace_declarations(decl.body)
	return None


def _dotted_name(decl: ast.NamespaceDecl) -> str:
	parts = [decl.name]
	while isinstance(decl.body, ast.NamespaceDecl):
		decl = decl.body
		parts.append(decl.name)
	return ".".join(parts)


def _member_kind(member) -> str:
	return {
		"MethodSignature": "method signature",
		"CallSignature": "call signature",
		"ConstructSignature": "construct signature",
		"IndexSignature": "index signature",
		"GetterSignature": "getter",
		"SetterSignature": "setter",
	}.get(type(member).__name__, type(member).__name__)


__all__ = ["DeclLowerer", "RECEIVER_NAME", "namespace_declarations", "namespace_body"]
