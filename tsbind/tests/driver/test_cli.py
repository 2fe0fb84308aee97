#!/usr/bin/env python3
# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Command-line entry point."""

import json

from tsbind.bindgen.bindgen import main


def test_success_json(tmp_path, capsys):
	src = tmp_path / "src"
	src.mkdir()
	(src / "a.d.ts").write_text("declare function f(x: string | number): void;")
	dest = tmp_path / "out"

	code = main([str(src), str(dest), "--json"])

	payload = json.loads(capsys.readouterr().out)
	assert code == 0
	assert payload["exit_code"] == 0
	(diag,) = payload["diagnostics"]
	assert diag["severity"] == "warning"
	assert diag["phase"] == "typemap"
	assert diag["file"].endswith("a.d.ts")
	assert (dest / "a.rs").is_file()


def test_failure_renders_to_stderr(tmp_path, capsys):
	src = tmp_path / "bad.d.ts"
	src.write_text("declare enum E { A }")

	code = main([str(src), str(tmp_path / "out")])

	err = capsys.readouterr().err
	assert code == 1
	assert "bad.d.ts:1:" in err
	assert "error: enums are not supported (in `E`)" in err


def test_missing_source(tmp_path, capsys):
	code = main([str(tmp_path / "nope"), str(tmp_path / "out"), "--json"])
	payload = json.loads(capsys.readouterr().out)
	assert code == 1
	assert payload["diagnostics"][0]["phase"] == "driver"
	assert "does not exist" in payload["diagnostics"][0]["message"]


def test_invalid_options(tmp_path, capsys):
	code = main([str(tmp_path), str(tmp_path / "out"), "--jobs", "0", "--json"])
	payload = json.loads(capsys.readouterr().out)
	assert code == 1
	assert "jobs" in payload["diagnostics"][0]["message"]


def test_verbose_lists_units(tmp_path, capsys):
	src = tmp_path / "src"
	src.mkdir()
	(src / "a.d.ts").write_text("declare var a: number;")

	assert main([str(src), str(tmp_path / "out"), "-v"]) == 0
	assert capsys.readouterr().out.strip().endswith("a.d.ts")


def test_no_catalog_uses_flag(tmp_path, capsys):
	src = tmp_path / "src"
	src.mkdir()
	(src / "a.d.ts").write_text("declare function f(e: HTMLElement): void;")
	dest = tmp_path / "out"

	assert main([str(src), str(dest), "--no-catalog-uses"]) == 0
	assert "web_sys" not in (dest / "a.rs").read_text()
