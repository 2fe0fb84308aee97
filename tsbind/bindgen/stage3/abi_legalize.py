# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
ABI Legalization.

Only a closed set of types can cross the host boundary. Every parameter,
return and static type outside that set is replaced by the dynamic value,
which can carry anything.

The set is built per unit:
  base        = scalar primitives, `bool`/`char`/`()`/`String`,
                known host types, and every type the unit declares or
                re-exports
  + `&B` and `Option<B>` for every base member
  + `Box<[S]>` and `Option<Box<[S]>>` for sliceable S (numeric primitives,
    known host types, the unit's own types)
  + the dynamic value itself

Callable references (`&dyn Fn(..)`) are allowed as parameters and left
untouched; a callable can never be returned, so a return type built around
one degrades to the dynamic value.
"""

from __future__ import annotations

from functools import lru_cache
from typing import FrozenSet, Iterable, Set, Tuple

from tsbind.bindgen.core.catalogs import known_object_types
from tsbind.bindgen.stage1.binding_nodes import (
	DYNAMIC,
	BoxedSlice,
	Callable,
	Named,
	OpaqueType,
	OptionOf,
	Primitive,
	Reference,
	TypeRepr,
	rewrite_types,
)
from tsbind.bindgen.stage2.target_nodes import ScopeModule, TargetUnit, UseItem

SLICEABLE_PRIMITIVES = ("i32", "isize", "i64", "u32", "usize", "u64", "f32", "f64")
NON_SLICEABLE_PRIMITIVES = ("bool", "char", "()", "String")

Path = Tuple[str, ...]


def _closure(base: Iterable[TypeRepr], sliceable: Iterable[TypeRepr]) -> Set[TypeRepr]:
	out: Set[TypeRepr] = set()
	for ty in base:
		out.add(ty)
		out.add(Reference(ty))
		out.add(OptionOf(ty))
	for ty in sliceable:
		out.add(BoxedSlice(ty))
		out.add(OptionOf(BoxedSlice(ty)))
	return out


@lru_cache(maxsize=None)
def _fixed_safe_set() -> FrozenSet[TypeRepr]:
	"""The unit-independent part of the safe set (primitives and catalogs)."""
	sliceable = [Primitive(name) for name in SLICEABLE_PRIMITIVES]
	catalog = [Named((name,)) for name in sorted(known_object_types())]
	base = sliceable + [Primitive(name) for name in NON_SLICEABLE_PRIMITIVES] + catalog
	out = _closure(base, sliceable + catalog)
	out.add(DYNAMIC)
	return frozenset(out)


def abi_safe_set(custom: Iterable[Path] = ()) -> FrozenSet[TypeRepr]:
	"""Closed set of boundary-legal types given the unit's own type paths."""
	custom_types = [Named(tuple(path)) for path in custom]
	return _fixed_safe_set() | frozenset(_closure(custom_types, custom_types))


def collect_custom_names(unit: TargetUnit) -> Set[Path]:
	"""
	Type paths the unit itself provides.

	Each opaque type counts under its bare name and under its path from the
	unit root (`SvgMod::Element`); each public non-glob `use` counts under
	the name it binds.
	"""
	names: Set[Path] = set()
	for path, block in unit.extern_blocks():
		for item in block.items:
			if isinstance(item, OpaqueType):
				names.add((item.name,))
				names.add(path + (item.name,))
	for use in _all_uses(unit.items):
		bound = use.bound_name
		if bound is not None and use.public:
			names.add((bound,))
	return names


def _all_uses(items) -> Iterable[UseItem]:
	for item in items:
		if isinstance(item, UseItem):
			yield item
		elif isinstance(item, ScopeModule):
			yield from _all_uses(item.items)


def _callable_core(ty: TypeRepr) -> bool:
	"""True when `ty` is (an option/slice of) a callable reference."""
	while isinstance(ty, (OptionOf, BoxedSlice)):
		ty = ty.inner
	return isinstance(ty, Reference) and isinstance(ty.inner, Callable)


class AbiLegalizer:
	"""Rewrites every type slot of a unit into the safe set."""

	def __init__(self, safe_set: FrozenSet[TypeRepr]) -> None:
		self.safe_set = safe_set

	def legalize_type(self, ty: TypeRepr, *, is_return: bool = False) -> TypeRepr:
		if is_return and _callable_core(ty):
			return DYNAMIC
		if isinstance(ty, Reference) and isinstance(ty.inner, Callable):
			return ty
		if ty in self.safe_set:
			return ty
		return DYNAMIC

	def legalize_unit(self, unit: TargetUnit) -> TargetUnit:
		for _path, block in unit.extern_blocks():
			for item in block.items:
				rewrite_types(item, lambda ty, is_return: self.legalize_type(ty, is_return=is_return))
		return unit


def legalize_unit(unit: TargetUnit) -> TargetUnit:
	"""Compute the unit's safe set and legalize it in place."""
	return AbiLegalizer(abi_safe_set(collect_custom_names(unit))).legalize_unit(unit)


__all__ = [
	"SLICEABLE_PRIMITIVES",
	"NON_SLICEABLE_PRIMITIVES",
	"abi_safe_set",
	"collect_custom_names",
	"AbiLegalizer",
	"legalize_unit",
]
