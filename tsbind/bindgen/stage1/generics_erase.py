# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Generics Erasure Pass.

Foreign generics have no counterpart at the host boundary, so every
reference to an in-scope type parameter becomes the dynamic value. The scope
is the set of sanitized type-parameter names visible at a point; nested
scopes (a generic method of a generic class) compose by union.

Only single-segment names are candidates: `T` is erased, `NsMod::T` is not.
"""

from __future__ import annotations

from typing import FrozenSet, Iterable, Optional

from tsbind.bindgen.core.idents import sanitize

from .binding_nodes import DYNAMIC, BindingItem, Named, TypeRepr, map_type_tree, rewrite_types

GenericsScope = FrozenSet[str]

EMPTY_SCOPE: GenericsScope = frozenset()


def generics_scope(type_params: Optional[Iterable]) -> GenericsScope:
	"""Scope introduced by a list of parser `TypeParam`s (or raw names)."""
	if not type_params:
		return EMPTY_SCOPE
	return frozenset(sanitize(tp if isinstance(tp, str) else tp.name) for tp in type_params)


def erase_type(ty: TypeRepr, scope: GenericsScope) -> TypeRepr:
	if not scope:
		return ty

	def _erase(node: TypeRepr) -> Optional[TypeRepr]:
		if isinstance(node, Named) and len(node.path) == 1 and node.path[0] in scope:
			return DYNAMIC
		return None

	return map_type_tree(ty, _erase)


def erase_generics(item: BindingItem, scope: GenericsScope) -> BindingItem:
	"""Erase `scope` from every type slot of `item` (in place; returns the item)."""
	if scope:
		rewrite_types(item, lambda ty, _is_return: erase_type(ty, scope))
	return item


__all__ = ["GenericsScope", "EMPTY_SCOPE", "generics_scope", "erase_type", "erase_generics"]
