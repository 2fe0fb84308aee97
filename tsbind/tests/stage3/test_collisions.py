#!/usr/bin/env python3
# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Duplicate names inside extern blocks."""

from tsbind.bindgen.stage1.binding_nodes import (
	F64,
	SELF,
	BindingMeta,
	ExternFunction,
	ExternParam,
	ExternStatic,
	Named,
	OpaqueType,
	OptionOf,
	Reference,
)
from tsbind.bindgen.stage2.target_nodes import ExternBlock, ScopeModule, TargetUnit
from tsbind.bindgen.stage3.collisions import CollisionResolver, resolve_unit
from tsbind.test_support import compose_text


def _fn(name, *, owner=None, constructor=False, js_name=None, ret=None, params=()):
	meta = BindingMeta(owner=owner, constructor=constructor, js_name=js_name)
	return ExternFunction(name=name, params=list(params), ret=ret, meta=meta)


def test_overloads_get_numbered_suffixes():
	unit = compose_text(
		"""
		declare function f(a: number): void;
		declare function f(a: string): void;
		declare function f(): void;
		"""
	)
	fns = list(unit.bindings())
	assert [fn.name for fn in fns] == ["f", "f_1", "f_2"]
	assert [fn.meta.js_name for fn in fns] == [None, "f", "f"]


def test_suffix_skips_taken_names():
	items = CollisionResolver().resolve([_fn("f"), _fn("f_1"), _fn("f")])
	assert [i.name for i in items] == ["f", "f_1", "f_2"]


def test_renamed_binding_keeps_existing_host_name():
	items = CollisionResolver().resolve([_fn("getUrl", js_name="getURL"), _fn("getUrl", js_name="getURL")])
	assert items[1].name == "getUrl_1"
	assert items[1].meta.js_name == "getURL"


def test_raw_identifiers_lose_raw_prefix_when_suffixed():
	items = CollisionResolver().resolve([_fn("r#type"), _fn("r#type")])
	assert [i.name for i in items] == ["r#type", "type_1"]
	assert items[1].meta.js_name == "type"


def test_members_and_free_functions_do_not_collide():
	items = CollisionResolver().resolve(
		[
			OpaqueType(name="A"),
			_fn("len", owner="A"),
			OpaqueType(name="B"),
			_fn("len", owner="B"),
			_fn("len"),
			_fn("len", owner="A"),
		]
	)
	assert [i.name for i in items] == ["A", "len", "B", "len", "len", "len_1"]


def test_statics_share_the_free_namespace():
	items = CollisionResolver().resolve([ExternStatic(name="x", ty=F64), _fn("x")])
	assert [i.name for i in items] == ["x", "x_1"]


def test_renamed_constructor_keeps_no_host_name():
	items = CollisionResolver().resolve(
		[_fn("new", owner="A", constructor=True), _fn("new", owner="A", constructor=True)]
	)
	assert items[1].name == "new_1"
	assert items[1].meta.js_name is None


def test_self_is_rewritten_to_owner():
	fn = _fn(
		"chain",
		owner="Widget",
		params=[ExternParam("this", Reference(Named(("Widget",)))), ExternParam("other", OptionOf(SELF))],
		ret=SELF,
	)
	CollisionResolver().resolve([fn])
	assert fn.ret == Named(("Widget",))
	assert fn.params[1].ty == OptionOf(Named(("Widget",)))


def test_repeated_types_fold_and_merge_extends():
	first = OpaqueType(name="A", meta=BindingMeta(extends=[("B",)]))
	again = OpaqueType(name="A", meta=BindingMeta(extends=[("C",), ("B",)]))
	items = CollisionResolver().resolve([first, _fn("f", owner="A"), again])
	assert items == [first, items[1]]
	assert first.meta.extends == [("B",), ("C",)]


def test_interface_and_class_merge_in_source():
	unit = compose_text(
		"""
		interface Node { name: string; }
		declare class Node { name: string; }
		"""
	)
	items = list(unit.bindings())
	assert [i.name for i in items] == ["Node", "name", "name_1"]


def test_each_block_is_resolved_independently():
	unit = TargetUnit(
		items=[
			ScopeModule(name="aMod", items=[ExternBlock(items=[_fn("f")])]),
			ExternBlock(items=[_fn("f"), _fn("f")]),
		]
	)
	resolve_unit(unit)
	assert [fn.name for fn in unit.bindings()] == ["f", "f", "f_1"]
