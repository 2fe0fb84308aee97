#!/usr/bin/env python3
# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Generic type parameters never survive into bindings."""

import random

from tsbind.bindgen.parser import ast as A
from tsbind.bindgen.stage1.binding_nodes import (
	DYNAMIC,
	F64,
	BindingMeta,
	BoxedSlice,
	Callable,
	ExternFunction,
	ExternParam,
	ExternStatic,
	Named,
	OptionOf,
	Reference,
	TupleOf,
	walk_types,
)
from tsbind.bindgen.stage1.generics_erase import EMPTY_SCOPE, erase_generics, erase_type, generics_scope


def test_scope_from_type_params_is_sanitized():
	scope = generics_scope([A.TypeParam(name="T"), A.TypeParam(name="type")])
	assert scope == frozenset({"T", "r#type"})
	assert generics_scope(["K", "V"]) == frozenset({"K", "V"})
	assert generics_scope(None) == EMPTY_SCOPE
	assert generics_scope([]) == EMPTY_SCOPE


def test_erase_type_replaces_in_scope_names_anywhere():
	scope = frozenset({"T"})
	assert erase_type(Named(("T",)), scope) == DYNAMIC
	assert erase_type(BoxedSlice(Named(("T",))), scope) == BoxedSlice(DYNAMIC)
	assert erase_type(OptionOf(Named(("T",))), scope) == DYNAMIC
	assert erase_type(TupleOf((Named(("T",)), F64)), scope) == TupleOf((DYNAMIC, F64))
	fn = Reference(Callable(params=(Named(("T",)),), ret=Named(("T",))))
	assert erase_type(fn, scope) == Reference(Callable(params=(DYNAMIC,), ret=DYNAMIC))


def test_erase_type_keeps_other_names():
	scope = frozenset({"T"})
	assert erase_type(Named(("Thing",)), scope) == Named(("Thing",))
	assert erase_type(Named(("nsMod", "T")), scope) == Named(("nsMod", "T"))
	ty = OptionOf(Named(("T",)))
	assert erase_type(ty, EMPTY_SCOPE) is ty


def test_erase_generics_rewrites_items_in_place():
	fn = ExternFunction(
		name="first",
		params=[ExternParam("items", BoxedSlice(Named(("T",)))), ExternParam("count", F64)],
		ret=Named(("T",)),
		meta=BindingMeta(),
	)
	assert erase_generics(fn, frozenset({"T"})) is fn
	assert [p.ty for p in fn.params] == [BoxedSlice(DYNAMIC), F64]
	assert fn.ret == DYNAMIC
	static = ExternStatic(name="current", ty=Named(("V",)))
	erase_generics(static, frozenset({"V"}))
	assert static.ty == DYNAMIC


def _random_repr(rng: random.Random, depth: int):
	names = ["T", "U", "Element", "Foo"]
	if depth <= 0:
		return rng.choice([F64, DYNAMIC, Named((rng.choice(names),)), Named(("nsMod", rng.choice(names)))])
	pick = rng.randrange(6)
	if pick == 0:
		return BoxedSlice(_random_repr(rng, depth - 1))
	if pick == 1:
		return OptionOf(_random_repr(rng, depth - 1))
	if pick == 2:
		return TupleOf(tuple(_random_repr(rng, depth - 1) for _ in range(rng.randint(0, 3))))
	if pick == 3:
		return Reference(Callable(params=(_random_repr(rng, depth - 1),), ret=_random_repr(rng, depth - 1)))
	return _random_repr(rng, 0)


def test_no_in_scope_name_survives_erasure():
	rng = random.Random(7)
	scope = frozenset({"T", "U"})
	for _ in range(500):
		erased = erase_type(_random_repr(rng, depth=4), scope)
		for sub in walk_types(erased):
			if isinstance(sub, Named) and len(sub.path) == 1:
				assert sub.path[0] not in scope
		assert erase_type(erased, scope) == erased
