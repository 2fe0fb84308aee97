#!/usr/bin/env python3
# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Identifier sanitizer and module-specifier paths."""

import re

import pytest

from tsbind.bindgen.core.idents import (
	RUST_KEYWORDS,
	import_path_prefix,
	is_relative_specifier,
	sanitize,
	sanitize_ident,
	scope_ident,
)

_RUST_IDENT = re.compile(r"^(r#)?[A-Za-z_][A-Za-z0-9_]*$")


@pytest.mark.parametrize(
	"raw, name, original",
	[
		("HTMLElement", "HtmlElement", "HTMLElement"),
		("getURL", "getUrl", "getURL"),
		("XMLHttpRequest", "XmlHttpRequest", "XMLHttpRequest"),
		("URL", "URL", None),
		("fooBar", "fooBar", None),
		("type", "r#type", None),
		("self", "self_rs", "self"),
		("super", "super_rs", "super"),
		("foo-bar", "foo_bar", "foo-bar"),
		("$", "__", "$"),
		("_", "__", "_"),
		("1st", "_1st", "1st"),
	],
)
def test_sanitize_ident_cases(raw, name, original):
	ident = sanitize_ident(raw)
	assert ident.name == name
	assert ident.original == original


def test_raw_identifier_has_bare_form():
	ident = sanitize_ident("fn")
	assert str(ident) == "r#fn"
	assert ident.bare == "fn"
	assert sanitize_ident("plain").bare == "plain"


@pytest.mark.parametrize(
	"raw",
	["", "a", "$jquery", "émoji", "with space", "9", "Self", "crate", "a.b", "ALLCAPS_1", "match"],
)
def test_sanitized_output_is_a_rust_identifier(raw):
	name = sanitize(raw)
	assert _RUST_IDENT.match(name), name
	bare = name[2:] if name.startswith("r#") else name
	assert name.startswith("r#") or bare not in RUST_KEYWORDS


def test_sanitize_is_idempotent_on_its_output():
	for raw in ["HTMLElement", "foo-bar", "1st", "getURL", "self"]:
		once = sanitize(raw)
		assert sanitize(once) == once


def test_scope_ident_appends_suffix():
	assert scope_ident("dom") == "domMod"
	assert scope_ident("my-lib") == "my_libMod"
	assert scope_ident("dom", "Ns") == "domNs"


@pytest.mark.parametrize(
	"specifier, expected",
	[
		("./foo", ("super", "fooMod")),
		("./foo.js", ("super", "fooMod")),
		("./foo.d.ts", ("super", "fooMod")),
		(".", ("super",)),
		("../a/b", ("super", "super", "aMod", "bMod")),
		("../../x", ("super", "super", "super", "xMod")),
		("lodash", ("lodashMod",)),
	],
)
def test_import_path_prefix(specifier, expected):
	assert import_path_prefix(specifier) == expected


def test_import_path_prefix_uses_suffix():
	assert import_path_prefix("./events", "Ns") == ("super", "eventsNs")


def test_is_relative_specifier():
	assert is_relative_specifier("./a")
	assert is_relative_specifier("../a")
	assert is_relative_specifier(".")
	assert is_relative_specifier("..")
	assert not is_relative_specifier("react")
	assert not is_relative_specifier(".hidden")
