#!/usr/bin/env python3
# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Boundary types: the safe set and the rewrite of everything outside it."""

from tsbind.bindgen.stage1.binding_nodes import (
	BOOL,
	DYNAMIC,
	F64,
	STRING,
	UNIT,
	BoxedSlice,
	Callable,
	Named,
	OpaqueType,
	OptionOf,
	Primitive,
	Reference,
	TupleOf,
)
from tsbind.bindgen.stage2.target_nodes import ExternBlock, ScopeModule, TargetUnit, UseItem
from tsbind.bindgen.stage3.abi_legalize import AbiLegalizer, abi_safe_set, collect_custom_names
from tsbind.test_support import compose_text


def test_safe_set_shape():
	safe = abi_safe_set([("Foo",)])
	for ty in (F64, Reference(F64), OptionOf(F64), BoxedSlice(F64), OptionOf(BoxedSlice(F64))):
		assert ty in safe
	for ty in (BOOL, STRING, UNIT, Primitive("char"), OptionOf(STRING), Reference(STRING)):
		assert ty in safe
	assert BoxedSlice(BOOL) not in safe
	assert BoxedSlice(STRING) not in safe
	assert BoxedSlice(Primitive("i32")) in safe
	assert Named(("Element",)) in safe
	assert BoxedSlice(Named(("Element",))) in safe
	assert OptionOf(BoxedSlice(Named(("Foo",)))) in safe
	assert Named(("Unknown",)) not in safe
	assert TupleOf((F64,)) not in safe
	assert DYNAMIC in safe


def test_legalize_type():
	legal = AbiLegalizer(abi_safe_set([("Foo",)]))
	callback = Reference(Callable(params=(F64,), ret=None))
	assert legal.legalize_type(Named(("Foo",))) == Named(("Foo",))
	assert legal.legalize_type(Named(("Bar",))) == DYNAMIC
	assert legal.legalize_type(TupleOf((F64, STRING))) == DYNAMIC
	assert legal.legalize_type(BoxedSlice(BoxedSlice(F64))) == DYNAMIC
	assert legal.legalize_type(callback) == callback
	assert legal.legalize_type(callback, is_return=True) == DYNAMIC
	assert legal.legalize_type(OptionOf(callback), is_return=True) == DYNAMIC
	assert legal.legalize_type(OptionOf(callback)) == DYNAMIC


def test_custom_names_cover_scopes_and_public_uses():
	unit = TargetUnit(
		items=[
			UseItem(path=("super", "xMod"), name="A"),
			UseItem(path=("super", "xMod"), name="B", alias="C"),
			UseItem(path=("wasm_bindgen", "prelude"), name="wasm_bindgen", public=False),
			UseItem(path=("super", "yMod"), glob=True),
			ScopeModule(name="svgMod", items=[ExternBlock(items=[OpaqueType(name="Rect")])]),
			ExternBlock(items=[OpaqueType(name="Root")]),
		]
	)
	assert collect_custom_names(unit) == {
		("A",),
		("C",),
		("Rect",),
		("svgMod", "Rect"),
		("Root",),
	}


def test_unit_legalization():
	unit = compose_text(
		"""
		declare class Foo {}
		declare namespace svg { class Rect {} function make(): Rect; }
		declare function f(a: Foo, b: Bar, c: [number], d: Foo[], e: svg.Rect, g: boolean[]): Foo;
		declare function onTick(cb: (dt: number) => void): () => void;
		declare var pairs: [string, number];
		"""
	)
	fns = {item.name: item for item in unit.bindings()}
	assert fns["make"].ret == Named(("Rect",))
	f = fns["f"]
	assert [p.ty for p in f.params] == [
		Named(("Foo",)),
		DYNAMIC,
		DYNAMIC,
		BoxedSlice(Named(("Foo",))),
		Named(("svgMod", "Rect")),
		DYNAMIC,
	]
	assert f.ret == Named(("Foo",))
	tick = fns["onTick"]
	assert tick.params[0].ty == Reference(Callable(params=(F64,), ret=None))
	assert tick.ret == DYNAMIC
	assert fns["pairs"].ty == DYNAMIC


def test_imported_names_are_legal_but_import_types_are_not():
	unit = compose_text(
		"""
		import { Thing } from "./things";
		export declare function take(t: Thing, u: import("./other").Other): void;
		"""
	)
	(take,) = unit.bindings()
	assert take.params[0].ty == Named(("Thing",))
	assert take.params[1].ty == DYNAMIC
