#!/usr/bin/env python3
# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""End-to-end: declaration text in, Rust text out."""

import random

from tsbind.bindgen.core.diagnostics import DiagnosticSink
from tsbind.bindgen.parser import ast as A
from tsbind.bindgen.pipeline import compile_module, compile_source
from tsbind.bindgen.stage1.binding_nodes import DYNAMIC, Callable, ExternFunction, ExternStatic, Reference, item_types
from tsbind.bindgen.stage3.abi_legalize import abi_safe_set, collect_custom_names
from tsbind.test_support import compile_ok, compose_text, kw, param, tref

PRELUDE = "use wasm_bindgen::prelude::wasm_bindgen;\n\n"


def test_class_with_constructor_and_method():
	assert compile_ok("class Foo { constructor(x: number); bar(): string; }") == PRELUDE + (
		"#[wasm_bindgen]\n"
		'extern "C" {\n'
		"    pub type Foo;\n"
		"    #[wasm_bindgen(constructor)]\n"
		"    pub fn new(x: ::core::primitive::f64) -> Foo;\n"
		"    #[wasm_bindgen(method)]\n"
		"    pub fn bar(this: &Foo) -> ::std::string::String;\n"
		"}\n"
	)


def test_type_literal_alias_accessor():
	assert compile_ok("type T = { readonly x?: number };") == PRELUDE + (
		"#[wasm_bindgen]\n"
		'extern "C" {\n'
		"    pub type T;\n"
		"    #[wasm_bindgen(method, getter)]\n"
		"    pub fn x(this: &T) -> ::std::option::Option<::core::primitive::f64>;\n"
		"}\n"
	)


def test_function_without_return_value():
	assert compile_ok("function f(): void {}") == PRELUDE + (
		"#[wasm_bindgen]\n"
		'extern "C" {\n'
		"    pub fn f();\n"
		"}\n"
	)


def test_namespace_function():
	assert compile_ok("namespace N { function g(): boolean; }") == PRELUDE + (
		"#[allow(non_snake_case)]\n"
		"pub mod NMod {\n"
		"    use super::*;\n"
		"\n"
		"    #[wasm_bindgen]\n"
		'    extern "C" {\n'
		"        #[wasm_bindgen(js_namespace = N)]\n"
		"        pub fn g() -> ::core::primitive::bool;\n"
		"    }\n"
		"}\n"
	)


def test_same_method_name_on_different_owners():
	unit = compose_text("class A { m(): A; } class A2 { m(): A; }")
	methods = [item for item in unit.bindings() if isinstance(item, ExternFunction)]
	assert [(fn.name, fn.meta.owner) for fn in methods] == [("m", "A"), ("m", "A2")]
	assert all(fn.meta.js_name is None for fn in methods)


def test_three_member_union_static():
	result = compile_source("let x: SomeUnknownUnion | number | string;", file="u.d.ts")
	assert result.ok
	assert "    pub static x: ::wasm_bindgen::JsValue;\n" in result.rust
	(diag,) = result.diagnostics
	assert diag.severity == "warning"
	assert diag.span.file == "u.d.ts"
	assert "`x`" in diag.message


def test_private_overload_is_filtered_before_collisions():
	unit = compose_text("declare class C { private m(): void; m(x: number): void; }")
	names = [item.name for item in unit.bindings()]
	assert names == ["C", "m"]


def test_overloaded_collisions_are_distinct_per_owner():
	unit = compose_text(
		"""
		declare class Canvas {
			draw(x: number): void;
			draw(x: number, y: number): void;
			draw(): void;
		}
		"""
	)
	names = [item.name for item in unit.bindings() if isinstance(item, ExternFunction)]
	assert names == ["draw", "draw_1", "draw_2"]


def test_fatal_error_halts_unit():
	result = compile_source(
		"declare function ok(): void;\ndeclare enum Color { Red }",
		file="bad.d.ts",
	)
	assert not result.ok
	assert result.rust is None
	(diag,) = result.diagnostics
	assert diag.is_error
	assert diag.code == "E-UNSUPPORTED"
	assert "Color" in diag.message
	assert diag.span.line == 2


def test_syntax_error_becomes_diagnostic():
	result = compile_source("declare class {", file="broken.d.ts")
	assert not result.ok
	assert result.diagnostics[0].phase == "parser"


def test_printed_output_is_stable():
	text = "declare class Foo { bar(a: string | null): Foo[]; }"
	assert compile_ok(text) == compile_ok(text)


def test_host_types_imported_and_renamed_members():
	rust = compile_ok("declare function mount(root: HTMLElement, getURL: () => string): Promise<void>;")
	assert rust.startswith("use ::js_sys::Promise;\nuse ::web_sys::HtmlElement;\n")
	assert "pub fn mount(root: HtmlElement, getUrl: &dyn Fn() -> ::std::string::String) -> Promise;" in rust


# --- randomized closure over the boundary-safe set --------------------------


def _random_type(rng: random.Random, depth: int) -> A.TypeNode:
	leaves = [
		lambda: kw(rng.choice(["number", "string", "boolean", "any", "void", "null"])),
		lambda: tref(rng.choice(["Element", "Local", "Unknown", "T", "BinaryType"])),
		lambda: tref("space", "Inner"),
		lambda: A.ThisType(),
	]
	if depth <= 0:
		return rng.choice(leaves)()
	nodes = leaves + [
		lambda: A.ArrayType(element=_random_type(rng, depth - 1)),
		lambda: A.OptionalType(inner=_random_type(rng, depth - 1)),
		lambda: A.UnionType(members=[_random_type(rng, depth - 1), kw("undefined")]),
		lambda: A.UnionType(members=[_random_type(rng, depth - 1), kw("number"), kw("string")]),
		lambda: A.TupleType(elements=[_random_type(rng, depth - 1)]),
		lambda: A.FunctionType(params=[param("p", _random_type(rng, depth - 1))], return_type=_random_type(rng, depth - 1)),
	]
	return rng.choice(nodes)()


def _random_module(rng: random.Random) -> A.Module:
	members = [
		A.ClassMethod(
			key=A.PropertyKey(kind="ident", value=f"m{idx}"),
			kind="method",
			params=[param("a", _random_type(rng, 3))],
			return_type=_random_type(rng, 3),
		)
		for idx in range(3)
	]
	decls = [
		A.ClassDecl(name="Local", members=members, type_params=[A.TypeParam(name="T")]),
		A.FunctionDecl(name="f", params=[param("a", _random_type(rng, 3))], return_type=_random_type(rng, 3)),
		A.VariableDecl(kind="var", declarators=[A.VarDeclarator(pattern=A.IdentPattern(name="v"), type_ann=_random_type(rng, 3))]),
		A.NamespaceDecl(
			name="space",
			body=A.NamespaceBlock(
				body=[A.ClassDecl(name="Inner"), A.FunctionDecl(name="g", return_type=_random_type(rng, 3))]
			),
		),
	]
	return A.Module(body=decls)


def test_emitted_types_are_boundary_safe():
	rng = random.Random(1234)
	for _ in range(100):
		unit = compile_module(_random_module(rng), sink=DiagnosticSink())
		safe = abi_safe_set(collect_custom_names(unit))
		for item in unit.bindings():
			if isinstance(item, ExternFunction):
				for p in item.params:
					assert p.ty in safe or (isinstance(p.ty, Reference) and isinstance(p.ty.inner, Callable))
				assert item.ret is None or item.ret in safe
			elif isinstance(item, ExternStatic):
				assert item.ty in safe or (isinstance(item.ty, Reference) and isinstance(item.ty.inner, Callable))
			for ty in item_types(item):
				assert ty != Reference(DYNAMIC)
