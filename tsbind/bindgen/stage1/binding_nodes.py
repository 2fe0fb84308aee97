# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Binding items and target type representations.

Pipeline placement:
  parser (AST) -> stage1 (binding items, this file) -> stage2 (target tree)
  -> stage3 (collisions, ABI legalization) -> printer

Binding items are the unit of output: every foreign declaration lowers to zero
or more of them. They are deliberately mutable: later passes rename functions,
rewrite types and attach namespace tags in place.

Type representations, on the other hand, are frozen and hashable so they can
be compared structurally and looked up in the ABI-safe set.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Callable as Fn, List, Optional, Tuple, Union


# Type representations

class TypeRepr:
	"""Base class for target type representations."""
	pass


@dataclass(frozen=True)
class Primitive(TypeRepr):
	"""A fixed-size or built-in target type (`f64`, `bool`, `String`, `()`)."""
	name: str


@dataclass(frozen=True)
class DynamicValue(TypeRepr):
	"""The opaque host value (`JsValue`); the fallback for everything unrepresentable."""
	pass


@dataclass(frozen=True)
class Named(TypeRepr):
	"""
	A path-qualified named type.

	`path` is a tuple of Rust path segments, e.g. `("SvgMod", "Element")`.
	"""
	path: Tuple[str, ...]

	@property
	def leaf(self) -> str:
		return self.path[-1]


@dataclass(frozen=True)
class Reference(TypeRepr):
	"""Borrow of `inner` (`&T`)."""
	inner: TypeRepr


@dataclass(frozen=True)
class OptionOf(TypeRepr):
	"""`Option<inner>`; build through `optional_of`."""
	inner: TypeRepr


@dataclass(frozen=True)
class BoxedSlice(TypeRepr):
	"""`Box<[inner]>`."""
	inner: TypeRepr


@dataclass(frozen=True)
class TupleOf(TypeRepr):
	elements: Tuple[TypeRepr, ...]


@dataclass(frozen=True)
class Callable(TypeRepr):
	"""
	Callable trait object signature (`dyn Fn(params) -> ret`).

	Only ever appears wrapped in `Reference`; `ret` is None for no return value.
	"""
	params: Tuple[TypeRepr, ...]
	ret: Optional[TypeRepr] = None


F64 = Primitive("f64")
BOOL = Primitive("bool")
STRING = Primitive("String")
UNIT = Primitive("()")
DYNAMIC = DynamicValue()
SELF = Named(("Self",))


def optional_of(inner: TypeRepr) -> TypeRepr:
	"""
	Wrap `inner` in an option, keeping the result normalized.

	`Option<Option<T>>` collapses to `Option<T>`, and the dynamic value is
	already nullable, so `Option<JsValue>` collapses to `JsValue`.
	"""
	if isinstance(inner, OptionOf):
		return optional_of(inner.inner)
	if isinstance(inner, DynamicValue):
		return DYNAMIC
	return OptionOf(inner)


def map_type_tree(ty: TypeRepr, fn: Fn[[TypeRepr], Optional[TypeRepr]]) -> TypeRepr:
	"""
	Bottom-up structural rewrite of a type tree.

	`fn` is applied to every node after its children were rewritten; returning
	None keeps the node. Options are re-normalized on the way up.
	"""
	if isinstance(ty, Reference):
		ty = Reference(map_type_tree(ty.inner, fn))
	elif isinstance(ty, OptionOf):
		ty = optional_of(map_type_tree(ty.inner, fn))
	elif isinstance(ty, BoxedSlice):
		ty = BoxedSlice(map_type_tree(ty.inner, fn))
	elif isinstance(ty, TupleOf):
		ty = TupleOf(tuple(map_type_tree(e, fn) for e in ty.elements))
	elif isinstance(ty, Callable):
		ty = Callable(
			params=tuple(map_type_tree(p, fn) for p in ty.params),
			ret=map_type_tree(ty.ret, fn) if ty.ret is not None else None,
		)
	out = fn(ty)
	if out is None:
		return ty
	if isinstance(out, OptionOf):
		return optional_of(out.inner)
	return out


def walk_types(ty: TypeRepr):
	"""Yield `ty` and every nested type representation (pre-order)."""
	yield ty
	if isinstance(ty, (Reference, OptionOf, BoxedSlice)):
		yield from walk_types(ty.inner)
	elif isinstance(ty, TupleOf):
		for e in ty.elements:
			yield from walk_types(e)
	elif isinstance(ty, Callable):
		for p in ty.params:
			yield from walk_types(p)
		if ty.ret is not None:
			yield from walk_types(ty.ret)


# Binding items

@dataclass
class BindingMeta:
	"""
	Host-binding annotations carried by every binding item.

	`owner` is the sanitized name of the type a member belongs to (None for
	free functions and statics); it keys collision resolution and names the
	type `Self` resolves to. `js_namespace` is the namespace path, outermost
	first.
	"""
	js_name: Optional[str] = None
	js_namespace: List[str] = field(default_factory=list)
	constructor: bool = False
	method: bool = False
	getter: bool = False
	setter: bool = False
	static_method_of: Optional[str] = None
	owner: Optional[str] = None
	extends: List[Tuple[str, ...]] = field(default_factory=list)


class BindingItem:
	"""Base class for binding items."""
	pass


@dataclass
class OpaqueType(BindingItem):
	"""An opaque host type (`pub type X;`)."""
	name: str
	meta: BindingMeta = field(default_factory=BindingMeta)
	loc: Any = None


@dataclass
class ExternParam:
	name: str
	ty: TypeRepr


@dataclass
class ExternFunction(BindingItem):
	"""
	An extern function signature.

	`ret` is None when the function returns nothing.
	"""
	name: str
	params: List[ExternParam] = field(default_factory=list)
	ret: Optional[TypeRepr] = None
	meta: BindingMeta = field(default_factory=BindingMeta)
	loc: Any = None


@dataclass
class ExternStatic(BindingItem):
	"""A host global (`pub static X: T;`)."""
	name: str
	ty: TypeRepr
	meta: BindingMeta = field(default_factory=BindingMeta)
	loc: Any = None


Binding = Union[OpaqueType, ExternFunction, ExternStatic]


def rewrite_types(item: BindingItem, fn: Fn[[TypeRepr, bool], TypeRepr]) -> None:
	"""
	Replace every top-level type slot of `item` in place.

	`fn(ty, is_return)` receives each parameter type, the return type and the
	static's type; `is_return` is True only for a function's return slot.
	"""
	if isinstance(item, ExternFunction):
		item.params = [replace(p, ty=fn(p.ty, False)) for p in item.params]
		if item.ret is not None:
			item.ret = fn(item.ret, True)
	elif isinstance(item, ExternStatic):
		item.ty = fn(item.ty, False)


def item_types(item: BindingItem):
	"""Yield every top-level type slot of `item`."""
	if isinstance(item, ExternFunction):
		for p in item.params:
			yield p.ty
		if item.ret is not None:
			yield item.ret
	elif isinstance(item, ExternStatic):
		yield item.ty


__all__ = [
	"TypeRepr",
	"Primitive",
	"DynamicValue",
	"Named",
	"Reference",
	"OptionOf",
	"BoxedSlice",
	"TupleOf",
	"Callable",
	"F64",
	"BOOL",
	"STRING",
	"UNIT",
	"DYNAMIC",
	"SELF",
	"optional_of",
	"map_type_tree",
	"walk_types",
	"BindingMeta",
	"BindingItem",
	"OpaqueType",
	"ExternParam",
	"ExternFunction",
	"ExternStatic",
	"Binding",
	"rewrite_types",
	"item_types",
]
