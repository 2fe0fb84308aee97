# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Shared helpers for tests that need AST inputs or composed units.

Stage tests build foreign declarations directly (no parser) with the short
constructors below; end-to-end tests go through `parse_module` and the
pipeline with `compose_text` / `compile_ok`.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from tsbind.bindgen.config import BindgenOptions
from tsbind.bindgen.core.diagnostics import DiagnosticSink
from tsbind.bindgen.parser import ast, parse_module
from tsbind.bindgen.pipeline import compile_module, compile_source
from tsbind.bindgen.stage1.binding_nodes import BindingItem, ExternFunction
from tsbind.bindgen.stage1.decl_lower import DeclLowerer
from tsbind.bindgen.stage2.target_nodes import TargetUnit


def kw(kind: str) -> ast.KeywordType:
	"""Keyword type (`number`, `string`, `void`, ...)."""
	return ast.KeywordType(kind=kind)


def tref(*segments: str, args: Sequence[ast.TypeNode] = ()) -> ast.TypeRef:
	"""Type reference `A.B<args>`."""
	return ast.TypeRef(segments=list(segments), type_args=list(args))


def param(name: str, type_ann: Optional[ast.TypeNode] = None, *, optional: bool = False, rest: bool = False) -> ast.Param:
	return ast.Param(pattern=ast.IdentPattern(name=name), type_ann=type_ann, optional=optional, rest=rest)


def key(name: str, kind: str = "ident") -> ast.PropertyKey:
	return ast.PropertyKey(kind=kind, value=name)


def method(
	name: str,
	params: Iterable[ast.Param] = (),
	ret: Optional[ast.TypeNode] = None,
	*,
	kind: str = "method",
	is_static: bool = False,
	accessibility: Optional[str] = None,
	type_params: Sequence[str] = (),
) -> ast.ClassMethod:
	return ast.ClassMethod(
		key=key(name),
		kind=kind,
		params=list(params),
		return_type=ret,
		type_params=[ast.TypeParam(name=tp) for tp in type_params],
		is_static=is_static,
		accessibility=accessibility,
	)


def prop(
	name: str,
	type_ann: Optional[ast.TypeNode] = None,
	*,
	is_static: bool = False,
	optional: bool = False,
	accessibility: Optional[str] = None,
) -> ast.ClassProperty:
	return ast.ClassProperty(
		key=key(name),
		type_ann=type_ann,
		is_static=is_static,
		optional=optional,
		accessibility=accessibility,
	)


def class_decl(
	name: str,
	members: Iterable[ast.ClassMember] = (),
	*,
	type_params: Sequence[str] = (),
	extends: Optional[Sequence[str]] = None,
) -> ast.ClassDecl:
	return ast.ClassDecl(
		name=name,
		members=list(members),
		type_params=[ast.TypeParam(name=tp) for tp in type_params],
		super_class=ast.HeritageExpr(segments=list(extends)) if extends else None,
	)


def lower(decl: ast.Decl, sink: Optional[DiagnosticSink] = None) -> List[BindingItem]:
	"""Lower one declaration with default options."""
	return DeclLowerer(sink if sink is not None else DiagnosticSink()).lower(decl)


def functions_by_name(items: Iterable[BindingItem]) -> dict:
	return {item.name: item for item in items if isinstance(item, ExternFunction)}


def compose_text(
	text: str,
	*,
	sink: Optional[DiagnosticSink] = None,
	options: Optional[BindgenOptions] = None,
) -> TargetUnit:
	"""Parse and run every pass short of printing."""
	return compile_module(parse_module(text), sink=sink, options=options)


def compile_ok(text: str, *, options: Optional[BindgenOptions] = None) -> str:
	"""Compile `text` and return the Rust output, failing loudly on errors."""
	result = compile_source(text, file="input.d.ts", options=options)
	assert result.ok, [d.render() for d in result.diagnostics]
	return result.rust
