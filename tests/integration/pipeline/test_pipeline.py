"""Integration tests for the parse -> resolve -> emit pipeline.

Canonical document (conftest.SAMPLE_DOC)
----------------------------------------
    ---
    coil:
      options:
        keep_indentation: false
      files:
        main: src/main.py
        readme: README.txt
    ---

    prose, a ```python main``` block indented four spaces, more prose,
    and a ```text readme``` block indented two spaces.

Expected output under the root:
    src/main.py   "def main():\\n    return 0\\n"
    README.txt    "Hello from coil.\\n"
"""

import logging

import pytest

from coil.core.errors import (
    ConfigParseError, ConfigSchemaError, MissingFrontmatter,
)
from coil.core.models import DiagnosticKind, EmitStatus
from coil.core.pipeline import run_check, run_extract


def _tree(root) -> dict[str, bytes]:
    return {str(p.relative_to(root)): p.read_bytes() for p in sorted(root.rglob("*")) if p.is_file()}


def test_sample_document(tmp_path, sample_doc):
    """Both bound blocks are written with their common indentation removed."""
    result = run_extract(sample_doc, tmp_path)
    assert result.ok
    assert result.diagnostics == []
    assert (tmp_path / "src" / "main.py").read_text() == "def main():\n    return 0\n"
    assert (tmp_path / "README.txt").read_text() == "Hello from coil.\n"


def test_scenario_strip_indentation(tmp_path, doc_factory):
    """keep_indentation=false strips a shared two-space prefix."""
    text = doc_factory({"a": "out/a.txt"}, [("text a", "  hello\n  world\n")])
    result = run_extract(text, tmp_path)
    assert [r.key for r in result.emitted] == ["a"]
    assert (tmp_path / "out" / "a.txt").read_text() == "hello\nworld\n"


def test_keep_indentation_true_is_byte_identical(tmp_path, doc_factory):
    """keep_indentation=true writes the block content verbatim."""
    text = doc_factory({"a": "a.txt"}, [("text a", "  hello\n    world\n")], keep_indentation=True)
    run_extract(text, tmp_path)
    assert (tmp_path / "a.txt").read_bytes() == b"  hello\n    world\n"


def test_scenario_unmatched_mapping(tmp_path, doc_factory):
    """Two mapped files but one tagged block: one emission and a diagnostic for b."""
    text = doc_factory({"a": "x.txt", "b": "y.txt"}, [("text a", "x\n")])
    result = run_extract(text, tmp_path)
    assert len(result.emitted) == 1
    assert [(d.kind, d.key) for d in result.diagnostics] == [(DiagnosticKind.unmatched_mapping, "b")]
    assert not (tmp_path / "y.txt").exists()


def test_scenario_duplicate_binding(tmp_path, doc_factory):
    """Two blocks tagged a: the first in document order is written."""
    text = doc_factory({"a": "x.txt"}, [("text a", "first\n"), ("text a", "second\n")])
    result = run_extract(text, tmp_path)
    assert len(result.emitted) == 1
    assert (tmp_path / "x.txt").read_text() == "first\n"
    assert [(d.kind, d.key) for d in result.diagnostics] == [(DiagnosticKind.duplicate_binding, "a")]


@pytest.mark.parametrize("text", [
    "```text a\nx\n```\n",
    "Intro.\n\n---\ncoil:\n  options: {keep_indentation: false}\n  files: {a: a.txt}\n---\n\n```text a\nx\n```\n",
])
def test_missing_frontmatter_writes_nothing(tmp_path, text):
    """Documents without leading frontmatter abort before emitting anything."""
    with pytest.raises(MissingFrontmatter):
        run_extract(text, tmp_path)
    assert list(tmp_path.iterdir()) == []


def test_invalid_yaml_aborts(tmp_path):
    """A YAML syntax error is fatal and reports a document line."""
    text = "---\ncoil:\n  files: [a\n---\n\n```text a\nx\n```\n"
    with pytest.raises(ConfigParseError) as exc:
        run_extract(text, tmp_path)
    assert exc.value.line is not None and exc.value.line >= 2
    assert list(tmp_path.iterdir()) == []


def test_schema_error_aborts(tmp_path):
    """A missing keep_indentation is fatal rather than defaulted."""
    text = "---\ncoil:\n  options: {}\n  files: {a: a.txt}\n---\n\n```text a\nx\n```\n"
    with pytest.raises(ConfigSchemaError) as exc:
        run_extract(text, tmp_path)
    assert exc.value.field == "coil.options.keep_indentation"
    assert list(tmp_path.iterdir()) == []


def test_path_escape_does_not_stop_other_emissions(tmp_path, doc_factory):
    """An escaping entry fails alone; the other entries are still written."""
    root = tmp_path / "root"
    root.mkdir()
    text = doc_factory(
        {"bad": "../evil.txt", "abs": "/tmp/coil-evil.txt", "good": "good.txt"},
        [("text bad", "x\n"), ("text abs", "y\n"), ("text good", "z\n")],
    )
    result = run_extract(text, root)
    assert not result.ok
    assert result.failed == 2
    assert [r.key for r in result.emitted] == ["good"]
    escapes = [d for d in result.diagnostics if d.kind == DiagnosticKind.path_escape]
    assert [(d.key, d.path) for d in escapes] == [("bad", "../evil.txt"), ("abs", "/tmp/coil-evil.txt")]
    assert not (tmp_path / "evil.txt").exists()
    assert (root / "good.txt").read_text() == "z\n"


def test_io_error_does_not_stop_other_emissions(tmp_path, doc_factory):
    """A write failure is reported for its key and the rest continue."""
    (tmp_path / "blocker").write_text("file, not a directory")
    text = doc_factory({"a": "blocker/a.txt", "b": "b.txt"}, [("text a", "x\n"), ("text b", "y\n")])
    result = run_extract(text, tmp_path)
    assert [(d.kind, d.key) for d in result.diagnostics] == [(DiagnosticKind.io_error, "a")]
    assert (tmp_path / "b.txt").read_text() == "y\n"


def test_idempotent_reruns(tmp_path, sample_doc):
    """Running twice produces byte-identical files and reports them unchanged."""
    run_extract(sample_doc, tmp_path)
    first = _tree(tmp_path)
    result = run_extract(sample_doc, tmp_path)
    assert _tree(tmp_path) == first
    assert {r.status for r in result.emitted} == {EmitStatus.unchanged}


def test_dry_run(tmp_path, sample_doc):
    """A dry run resolves and checks paths but writes nothing."""
    result = run_extract(sample_doc, tmp_path, dry_run=True)
    assert len(result.emitted) == 2
    assert list(tmp_path.iterdir()) == []


def test_default_root_is_cwd(tmp_path, monkeypatch, doc_factory):
    """Without an output root, files land under the working directory."""
    monkeypatch.chdir(tmp_path)
    run_extract(doc_factory({"a": "a.txt"}, [("text a", "x\n")]))
    assert (tmp_path / "a.txt").read_text() == "x\n"


def test_default_root_still_blocks_escape(tmp_path, monkeypatch, doc_factory):
    """The working-directory root applies the same traversal check."""
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)
    result = run_extract(doc_factory({"a": "../a.txt"}, [("text a", "x\n")]))
    assert result.diagnostics[0].kind == DiagnosticKind.path_escape
    assert not (tmp_path / "a.txt").exists()


def test_run_check(sample_doc):
    """run_check reports config, blocks, and bindings without writing."""
    report = run_check(sample_doc)
    assert report.config.options.keep_indentation is False
    assert [b.meta for b in report.blocks] == ["main", "readme"]
    assert [(e.key, e.path) for e in report.emissions] == [("main", "src/main.py"), ("readme", "README.txt")]
    assert report.diagnostics == []


def test_unrepresentable_path_does_not_stop_other_emissions(tmp_path, doc_factory):
    """A path the OS rejects (embedded NUL) fails alone; later entries are written."""
    text = doc_factory(
        {"bad": '"x\\0y.txt"', "good": "g.txt"},
        [("text bad", "x\n"), ("text good", "y\n")],
    )
    result = run_extract(text, tmp_path)
    assert result.failed == 1
    assert [(d.kind, d.key, d.path) for d in result.diagnostics] == [
        (DiagnosticKind.io_error, "bad", "x\0y.txt"),
    ]
    assert [r.key for r in result.emitted] == ["good"]
    assert (tmp_path / "g.txt").read_text() == "y\n"


def test_same_target_from_two_keys(tmp_path, doc_factory):
    """Two keys resolving to one file: the first is written, the second reported."""
    text = doc_factory(
        {"a": "x.txt", "b": "./sub/../x.txt"},
        [("text a", "first\n"), ("text b", "second\n")],
    )
    result = run_extract(text, tmp_path)
    assert [r.key for r in result.emitted] == ["a"]
    assert (tmp_path / "x.txt").read_text() == "first\n"
    assert result.failed == 1
    d = result.diagnostics[0]
    assert (d.kind, d.key, d.path) == (DiagnosticKind.duplicate_target, "b", "./sub/../x.txt")
    assert "'a'" in d.message


def test_emission_errors_are_not_logged_as_warnings(tmp_path, caplog, doc_factory):
    """Failed emissions are returned as diagnostics; reporting them is left to the caller."""
    caplog.set_level(logging.DEBUG, logger="coil")
    text = doc_factory({"a": "../a.txt"}, [("text a", "x\n")])
    result = run_extract(text, tmp_path / "root")
    assert result.diagnostics[0].kind == DiagnosticKind.path_escape
    assert not [r for r in caplog.records if r.levelno >= logging.WARNING]
