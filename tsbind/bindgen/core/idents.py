# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Identifier sanitizer: TypeScript names -> Rust identifiers.

Besides making a name a legal Rust identifier, the sanitizer normalizes
acronym casing the same way `web_sys`/`js_sys` spell their items
(`HTMLElement` -> `HtmlElement`), so references to host types line up with
the crates' exports.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

# Strict and reserved keywords (2021 edition) plus `gen` (reserved in 2024).
RUST_KEYWORDS = frozenset(
	{
		"as", "break", "const", "continue", "crate", "else", "enum", "extern", "false", "fn", "for",
		"if", "impl", "in", "let", "loop", "match", "mod", "move", "mut", "pub", "ref", "return",
		"self", "Self", "static", "struct", "super", "trait", "true", "type", "unsafe", "use",
		"where", "while", "async", "await", "dyn", "abstract", "become", "box", "do", "final",
		"macro", "override", "priv", "typeof", "unsized", "virtual", "yield", "try", "gen",
	}
)

# Keywords that cannot be written as raw identifiers.
_NOT_RAW = frozenset({"self", "Self", "super", "crate"})

_INVALID_CHAR = re.compile(r"[^A-Za-z0-9_]")


@dataclass(frozen=True)
class SanitizedIdent:
	"""
	A validated Rust identifier plus the foreign spelling when it differs.

	`name` may be a raw identifier (`r#type`); `original` is None when the
	foreign name round-trips (raw prefix aside).
	"""

	name: str
	original: Optional[str] = None

	@property
	def bare(self) -> str:
		"""The identifier without a raw `r#` prefix."""
		return self.name[2:] if self.name.startswith("r#") else self.name

	def __str__(self) -> str:
		return self.name


def _normalize_case(sym: str) -> str:
	all_upper = all(not c.isascii() or not c.isalpha() or c.isupper() for c in sym)
	if all_upper:
		return sym
	out: list[str] = []
	prev_cap = False
	for idx, c in enumerate(sym):
		nxt = sym[idx + 1] if idx + 1 < len(sym) else None
		if prev_cap and (nxt is None or (nxt.isascii() and nxt.isupper())):
			out.append(c.lower() if c.isascii() else c)
		else:
			out.append(c)
		prev_cap = c.isascii() and (c.isupper() or c.isdigit())
	return "".join(out)


def sanitize_ident(sym: str) -> SanitizedIdent:
	"""Map a raw foreign identifier to a Rust identifier (see module docs)."""
	if sym in _NOT_RAW:
		name = f"{sym}_rs"
	else:
		name = _INVALID_CHAR.sub("_", _normalize_case(sym))
		if not name or name == "_":
			name = "__"
		elif name[0].isdigit():
			name = f"_{name}"
	original = sym if name != sym else None
	if name in RUST_KEYWORDS:
		name = f"r#{name}"
	return SanitizedIdent(name=name, original=original)


def sanitize(sym: str) -> str:
	"""Shorthand for `sanitize_ident(sym).name`."""
	return sanitize_ident(sym).name


def scope_ident(raw: str, suffix: str = "Mod") -> str:
	"""Name of the Rust module that holds bindings for a namespace/file `raw`."""
	return sanitize(f"{raw}{suffix}")


_SPECIFIER_EXTENSIONS = (".d.ts", ".ts", ".js")


def import_path_prefix(specifier: str, suffix: str = "Mod") -> tuple[str, ...]:
	"""
	Rust path segments for a module specifier, relative to the current unit.

	Every unit lives in its own scope module, so `.` already means the parent
	(`super`). The first `..` climbs out of the unit and out of its directory
	(`super, super`); every further `..` adds one more `super`. Other segments
	name sibling scopes (`foo.js` -> `fooMod`).
	"""
	out: list[str] = []
	seen_parent = False
	for seg in specifier.split("/"):
		if not seg:
			continue
		if seg == ".":
			out.append("super")
		elif seg == "..":
			out.extend(("super", "super") if not seen_parent else ("super",))
			seen_parent = True
		else:
			for ext in _SPECIFIER_EXTENSIONS:
				if seg.endswith(ext) and len(seg) > len(ext):
					seg = seg[: -len(ext)]
					break
			out.append(scope_ident(seg, suffix))
	return tuple(out)


def is_relative_specifier(specifier: str) -> bool:
	return specifier == "." or specifier == ".." or specifier.startswith(("./", "../"))


__all__ = [
	"RUST_KEYWORDS",
	"SanitizedIdent",
	"sanitize_ident",
	"sanitize",
	"scope_ident",
	"import_path_prefix",
	"is_relative_specifier",
]
