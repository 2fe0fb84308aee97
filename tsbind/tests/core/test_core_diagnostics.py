#!/usr/bin/env python3
# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Diagnostics, spans, fatal errors and host type catalogs."""

from tsbind.bindgen.core import catalogs
from tsbind.bindgen.core.diagnostics import PHASE_LOWER, PHASE_PARSER, PHASE_TYPEMAP, Diagnostic, DiagnosticSink
from tsbind.bindgen.core.errors import (
	BindgenError,
	DtsSyntaxError,
	InvariantViolationError,
	UnsupportedConstructError,
)
from tsbind.bindgen.core.span import Span
from tsbind.bindgen.parser.ast import Located


def test_span_from_parser_location():
	span = Span.from_loc(Located(line=3, column=7), file="a.d.ts")
	assert span.describe() == "a.d.ts:3:7"
	assert span.is_known()


def test_unknown_span_renders_placeholders():
	assert Span().describe() == "<input>:?:?"
	assert not Span().is_known()


def test_sink_stamps_file_and_keeps_order():
	sink = DiagnosticSink("lib.d.ts")
	sink.warn("first", phase=PHASE_TYPEMAP, code="W-DYNAMIC", loc=Located(line=1, column=1))
	sink.warn("second", phase=PHASE_LOWER)
	assert [d.message for d in sink] == ["first", "second"]
	assert all(d.span.file == "lib.d.ts" for d in sink.diagnostics)
	assert not sink.has_errors()
	sink.error("broken", phase=PHASE_LOWER)
	assert sink.has_errors()
	assert len(sink) == 3


def test_diagnostic_render_and_json():
	diag = Diagnostic(
		message="union type is not representable",
		code="W-DYNAMIC",
		phase=PHASE_TYPEMAP,
		severity="warning",
		span=Span(line=2, column=4),
		notes=["falls back to JsValue"],
	)
	assert diag.render(default_file="x.d.ts") == (
		"x.d.ts:2:4: warning: union type is not representable\n  note: falls back to JsValue"
	)
	payload = diag.to_json(default_file="x.d.ts")
	assert payload["file"] == "x.d.ts"
	assert payload["line"] == 2
	assert payload["code"] == "W-DYNAMIC"
	assert payload["severity"] == "warning"


def test_error_context_is_filled_once():
	err = UnsupportedConstructError("enums are not supported")
	err.with_context(decl_name="Color", loc=Located(line=5, column=1))
	err.with_context(decl_name="Other")
	assert err.decl_name == "Color"
	assert str(err) == "enums are not supported (in `Color`)"
	diag = err.to_diagnostic(file="c.d.ts")
	assert diag.code == "E-UNSUPPORTED"
	assert diag.is_error
	assert diag.span.describe() == "c.d.ts:5:1"


def test_error_context_with_member():
	err = InvariantViolationError("bad", decl_name="Foo", member_name="bar")
	assert str(err) == "bad (in `Foo.bar`)"
	assert err.code == "E-INVARIANT"
	assert isinstance(err, ValueError)


def test_error_phases():
	err = DtsSyntaxError("unexpected token")
	assert isinstance(err, BindgenError)
	assert err.to_diagnostic().phase == PHASE_PARSER == "parser"
	assert UnsupportedConstructError("x").to_diagnostic().phase == PHASE_LOWER == "lower"


def test_catalog_membership():
	assert "BinaryType" in catalogs.string_types()
	assert catalogs.is_string_type("BinaryType")
	assert catalogs.host_crate_for("HtmlElement") == catalogs.WEB_SYS
	assert catalogs.host_crate_for("Promise") == catalogs.JS_SYS
	assert catalogs.host_crate_for("NotAHostType") is None
	assert {"Element", "Uint8Array", "BinaryType"} <= catalogs.known_object_types()


def test_catalogs_are_loaded_once():
	assert catalogs.web_sys_types() is catalogs.web_sys_types()
	assert "" not in catalogs.js_sys_types()
	assert not any(name.startswith("#") for name in catalogs.string_types())
