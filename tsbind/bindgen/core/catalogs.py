# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Known external type catalogs.

Three read-only name sets, loaded once on first use:
  - string types: DOM string-enum aliases (`BinaryType`, ...) that cross the
    boundary as plain strings
  - web_sys types / js_sys types: object types the host binding crates already
    export; a reference to one of them that the unit does not declare gets an
    automatic `use`.

The sets are published through `functools.lru_cache`, so initialization is
idempotent and nothing ever writes to them afterwards.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import FrozenSet, Optional

_CATALOG_DIR = Path(__file__).with_name("catalogs")

JS_SYS = "js_sys"
WEB_SYS = "web_sys"


def _read_catalog(name: str) -> FrozenSet[str]:
	text = (_CATALOG_DIR / f"{name}.txt").read_text(encoding="utf-8")
	return frozenset(
		line.strip() for line in text.splitlines() if line.strip() and not line.lstrip().startswith("#")
	)


@lru_cache(maxsize=None)
def string_types() -> FrozenSet[str]:
	return _read_catalog("string_types")


@lru_cache(maxsize=None)
def web_sys_types() -> FrozenSet[str]:
	return _read_catalog("web_sys_types")


@lru_cache(maxsize=None)
def js_sys_types() -> FrozenSet[str]:
	return _read_catalog("js_sys_types")


@lru_cache(maxsize=None)
def known_object_types() -> FrozenSet[str]:
	"""Every catalog name that is legal at the boundary as-is."""
	return string_types() | web_sys_types() | js_sys_types()


def is_string_type(name: str) -> bool:
	return name in string_types()


def host_crate_for(name: str) -> Optional[str]:
	"""Which host crate exports `name` (web_sys wins over js_sys), if any."""
	if name in web_sys_types():
		return WEB_SYS
	if name in js_sys_types():
		return JS_SYS
	return None


__all__ = [
	"JS_SYS",
	"WEB_SYS",
	"string_types",
	"web_sys_types",
	"js_sys_types",
	"known_object_types",
	"is_string_type",
	"host_crate_for",
]
