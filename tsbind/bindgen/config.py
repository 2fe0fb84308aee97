# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Bindgen configuration.

One frozen options object is built by the CLI (or by callers of the pipeline)
and handed to every stage. Nothing is read from the environment.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class BindgenOptions:
	"""
	Knobs shared by all stages.

	  - module_suffix: appended to namespace/file names to form scope module
	    names (`svg` -> `svgMod`)
	  - bindgen_path: crate path of the binding attribute macro
	  - js_sys_crate / web_sys_crate: crates the known host types come from
	  - emit_catalog_uses: synthesize `use ::web_sys::X;` for referenced
	    host types the unit does not declare
	  - jobs: worker threads used by the directory driver
	"""

	module_suffix: str = "Mod"
	bindgen_path: Tuple[str, ...] = ("wasm_bindgen",)
	js_sys_crate: str = "js_sys"
	web_sys_crate: str = "web_sys"
	emit_catalog_uses: bool = True
	jobs: int = 1

	def __post_init__(self) -> None:
		if not self.module_suffix:
			raise ValueError("module_suffix must not be empty")
		if self.jobs < 1:
			raise ValueError(f"jobs must be >= 1, got {self.jobs}")


DEFAULT_OPTIONS = BindgenOptions()


__all__ = ["BindgenOptions", "DEFAULT_OPTIONS"]
