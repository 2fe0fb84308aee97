#!/usr/bin/env python3
# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Composition of a unit into uses, scope modules and an extern block."""

from tsbind.bindgen.core.diagnostics import DiagnosticSink
from tsbind.bindgen.parser import parse_module
from tsbind.bindgen.stage1.binding_nodes import OpaqueType
from tsbind.bindgen.stage2.compose import ModuleComposer, visible_declarations
from tsbind.bindgen.stage2.target_nodes import ExternBlock, ScopeModule, UseItem


def _compose(text: str, sink=None):
	return ModuleComposer(sink if sink is not None else DiagnosticSink()).compose_module(parse_module(text))


def _names(items):
	return [item.name for item in items]


def test_script_file_binds_every_declaration():
	unit = _compose("declare class A {}\ndeclare function f(): void;\ndeclare var v: number;")
	prelude, block = unit.items
	assert prelude == UseItem(path=("wasm_bindgen", "prelude"), name="wasm_bindgen", public=False)
	assert isinstance(block, ExternBlock)
	assert _names(block.items) == ["A", "f", "v"]


def test_module_file_binds_only_exports():
	module = parse_module(
		"""
		import { Base } from "./base";
		declare class Hidden {}
		declare class Shared {}
		declare function helper(): void;
		export { Shared };
		export declare class Public {}
		declare global { interface Window {} }
		"""
	)
	names = [getattr(decl, "name", None) for decl in visible_declarations(module)]
	assert names == ["Shared", "Public", "global"]
	unit = ModuleComposer().compose_module(module)
	assert isinstance(unit.items[0], UseItem)
	assert unit.items[0].name == "Base"
	assert _names(unit.items[-1].items) == ["Shared", "Public", "Window"]


def test_unit_without_bindings_has_no_prelude():
	unit = _compose('import { A } from "./a";\nexport { A as B };')
	assert all(isinstance(item, UseItem) for item in unit.items)
	assert all(item.name != "wasm_bindgen" for item in unit.items)
	assert list(unit.bindings()) == []


def test_namespace_becomes_scope_module():
	unit = _compose(
		"""
		declare namespace svg {
			class Rect {}
			function draw(): void;
			namespace shapes {
				class Circle {}
			}
		}
		"""
	)
	prelude, scope = unit.items
	assert prelude.name == "wasm_bindgen"
	assert isinstance(scope, ScopeModule)
	assert scope.name == "svgMod"
	glob, nested, block = scope.items
	assert glob == UseItem(path=("super",), glob=True, public=False)
	assert nested.name == "shapesMod"
	assert _names(block.items) == ["Rect", "draw"]
	assert all(item.meta.js_namespace == ["svg"] for item in block.items)
	circle = nested.items[-1].items[0]
	assert circle.meta.js_namespace == ["svg", "shapes"]
	paths = [path for path, _block in unit.extern_blocks()]
	assert paths == [("svgMod", "shapesMod"), ("svgMod",)]


def test_dotted_namespace_binds_nothing():
	sink = DiagnosticSink()
	unit = _compose("declare namespace a.b { function f(): void; }", sink)
	assert unit.items == []
	assert "`a.b`" in sink.diagnostics[0].message


def test_reopened_namespace_merges():
	unit = _compose(
		"""
		declare namespace ns { class A {} namespace inner { class X {} } }
		declare namespace ns { class B {} namespace inner { class Y {} } namespace other { class Z {} } }
		"""
	)
	scopes = [item for item in unit.items if isinstance(item, ScopeModule)]
	assert len(scopes) == 1
	ns = scopes[0]
	assert [type(i).__name__ for i in ns.items] == ["UseItem", "ScopeModule", "ScopeModule", "ExternBlock"]
	inner, other, block = ns.items[1:]
	assert _names(block.items) == ["A", "B"]
	assert _names(inner.items[-1].items) == ["X", "Y"]
	assert other.name == "otherMod"


def test_namespace_export_tags_everything():
	unit = _compose(
		"""
		export as namespace Lib;
		export declare function f(): void;
		export declare namespace util { function g(): void; }
		"""
	)
	tags = {item.name: item.meta.js_namespace for item in unit.bindings()}
	assert tags == {"g": ["Lib", "util"], "f": ["Lib"]}


def test_ambient_module_is_skipped_with_warning():
	sink = DiagnosticSink()
	unit = _compose('declare module "pkg" { function f(): void; }', sink)
	assert unit.items == []
	assert "ambient module" in sink.diagnostics[0].message


def test_opaque_types_stay_at_root_for_global_blocks():
	unit = _compose("declare global { class Gadget {} }\nexport declare function use(): void;")
	block = unit.items[-1]
	assert isinstance(block.items[0], OpaqueType)
	assert block.items[0].meta.js_namespace == []
