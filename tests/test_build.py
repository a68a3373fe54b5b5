# tests/test_build.py
import os
from pathlib import Path

import pytest

from shtola.builder import Shtola
from shtola.errors import FrontMatterError, SourceError
from shtola.models import IR, FileStore, ShFile


@pytest.fixture
def simple(tmp_path):
    source = tmp_path / "simple"
    source.mkdir()
    (source / "hello.txt").write_text("hello", encoding="utf-8")
    return source


def make(source, dest, **flags):
    s = Shtola()
    s.source(source)
    s.destination(dest)
    s.clean(flags.get("clean", False))
    s.frontmatter(flags.get("frontmatter", False))
    return s


def snapshot(root: Path) -> dict:
    result = {}
    for dirpath, _, files in os.walk(root):
        for f in files:
            p = Path(dirpath) / f
            result[p.relative_to(root).as_posix()] = p.read_bytes()
    return result

# --- Test 1: Configuration ---

def test_default_config():
    s = Shtola()
    assert s.config.source is None
    assert s.config.destination is None
    assert s.config.clean is False
    assert s.config.frontmatter is False
    assert s.config.ignores == ()


def test_ignores_append_and_dedupe():
    s = Shtola()
    s.ignores(["a", "a"])
    s.ignores([Path("b"), "a"])
    assert s.config.ignores == ("a", "b")


def test_ignores_accepts_a_single_pattern(tmp_path, simple):
    (simple / "drafts").mkdir()
    (simple / "drafts" / "x.md").write_text("x", encoding="utf-8")
    (simple / "d").write_text("d", encoding="utf-8")
    s = make(simple, tmp_path / "dest")
    s.ignores("drafts")
    assert s.config.ignores == ("drafts",)
    ir = s.build()
    assert sorted(ir.files) == ["d", "hello.txt"]


def test_source_must_be_existing_directory(tmp_path, simple):
    s = Shtola()
    with pytest.raises(FileNotFoundError):
        s.source(tmp_path / "missing")
    with pytest.raises(NotADirectoryError):
        s.source(simple / "hello.txt")
    s.source(simple)
    assert s.config.source == simple.resolve()


def test_destination_is_created(tmp_path):
    s = Shtola()
    s.destination(tmp_path / "out" / "nested")
    assert (tmp_path / "out" / "nested").is_dir()
    assert s.config.destination.is_absolute()


def test_build_requires_source_and_destination(tmp_path, simple):
    with pytest.raises(SourceError):
        Shtola().build()
    s = Shtola()
    s.source(simple)
    with pytest.raises(SourceError):
        s.build()

# --- Test 2: Build scenarios ---

def test_read_works(tmp_path, simple):
    s = make(simple, tmp_path / "dest")
    ir = s.build()
    assert isinstance(ir, IR)
    assert list(ir.files) == ["hello.txt"]
    assert (tmp_path / "dest" / "hello.txt").read_text(encoding="utf-8") == "hello"
    assert ir.config.source == simple.resolve()


def test_zero_stages_copies_tree_byte_for_byte(tmp_path):
    source = tmp_path / "src"
    (source / "a" / "b").mkdir(parents=True)
    (source / "empty").mkdir()
    (source / "root.txt").write_bytes(b"line one\r\nline two\r\n")
    (source / "a" / "page.md").write_bytes(b"---\ntitle: T\n---\nbody\n")
    (source / "a" / "b" / "deep.txt").write_bytes("ünïcode".encode("utf-8"))

    make(source, tmp_path / "dest").build()

    assert snapshot(tmp_path / "dest") == snapshot(source)
    assert not (tmp_path / "dest" / "empty").exists()


def test_frontmatter_is_parsed_and_stripped(tmp_path):
    source = tmp_path / "src"
    source.mkdir()
    (source / "a.md").write_text("---\ntitle: A\n---\nbody text", encoding="utf-8")

    ir = make(source, tmp_path / "dest", frontmatter=True).build()

    record = ir.files["a.md"]
    assert record.frontmatter == ({"title": "A"},)
    assert record.content == b"body text"
    assert (tmp_path / "dest" / "a.md").read_bytes() == b"body text"


def test_malformed_frontmatter_aborts_before_write(tmp_path):
    source = tmp_path / "src"
    source.mkdir()
    (source / "bad.md").write_text("---\ntitle: [oops\n---\nbody", encoding="utf-8")
    with pytest.raises(FrontMatterError):
        make(source, tmp_path / "dest", frontmatter=True).build()
    assert not (tmp_path / "dest" / "bad.md").exists()


def test_clean_works(tmp_path, simple):
    dest = tmp_path / "dest_clean"
    dest.mkdir()
    (dest / "blah.foo").write_text("", encoding="utf-8")
    make(simple, dest, clean=True).build()
    assert not (dest / "blah.foo").exists()
    assert (dest / "hello.txt").exists()


def test_without_clean_stale_files_survive(tmp_path, simple):
    dest = tmp_path / "dest"
    dest.mkdir()
    (dest / "stale.txt").write_text("old", encoding="utf-8")
    make(simple, dest).build()
    assert (dest / "stale.txt").read_text(encoding="utf-8") == "old"


def test_clean_refuses_to_delete_source(simple):
    s = make(simple, simple, clean=True)
    with pytest.raises(SourceError):
        s.build()
    assert (simple / "hello.txt").exists()


def test_destination_inside_source_is_not_read_back(simple):
    s = make(simple, simple / "_site")
    s.build()
    ir = s.build()
    assert list(ir.files) == ["hello.txt"]


def test_bracketed_destination_inside_source_is_not_read_back(simple):
    s = make(simple, simple / "out[1]")
    s.build()
    ir = s.build()
    assert list(ir.files) == ["hello.txt"]


def test_clean_failure_aborts_before_read(tmp_path, simple, monkeypatch):
    calls = []

    def refuse(dest):
        raise PermissionError(13, "Permission denied", str(dest))

    def spy(ir):
        calls.append(ir)
        return ir

    monkeypatch.setattr("shtola.builder.clean_dir", refuse)
    s = make(simple, tmp_path / "dest", clean=True)
    s.register(spy)
    with pytest.raises(PermissionError):
        s.build()
    assert calls == []
    assert snapshot(tmp_path / "dest") == {}


def test_ignored_files_are_not_written(tmp_path, simple):
    (simple / "drafts").mkdir()
    (simple / "drafts" / "wip.md").write_text("wip", encoding="utf-8")
    (simple / "scratch.tmp").write_text("tmp", encoding="utf-8")
    s = make(simple, tmp_path / "dest")
    s.ignores(["drafts/", "*.tmp"])
    ir = s.build()
    assert list(ir.files) == ["hello.txt"]
    assert snapshot(tmp_path / "dest") == {"hello.txt": b"hello"}

# --- Test 3: Stages ---

def test_write_works(tmp_path, simple):
    def rewrite(ir):
        return ir.update_files({k: v.with_content("hello") for k, v in ir.files.items()})

    s = make(simple, tmp_path / "dest", clean=True)
    s.register(rewrite)
    s.build()
    assert (tmp_path / "dest" / "hello.txt").read_text(encoding="utf-8") == "hello"


def test_stage_order_is_observable_on_disk(tmp_path, simple):
    def a(ir):
        return ir.update_files({k: v.with_content("X") for k, v in ir.files.items()})

    def b(ir):
        assert all(v.text == "X" for v in ir.files.values())
        return ir.update_files({k: v.with_content(v.text + "Y") for k, v in ir.files.items()})

    s = make(simple, tmp_path / "dest")
    s.register(a)
    s.register(b)
    ir = s.build()
    assert (tmp_path / "dest" / "hello.txt").read_text(encoding="utf-8") == "XY"
    assert ir.files["hello.txt"].content == b"XY"


def test_stage_can_add_and_remove_files(tmp_path, simple):
    def restructure(ir):
        files = ir.files.remove("hello.txt").set("blog/2024/post.html", ir.files["hello.txt"])
        return ir.with_files(files)

    s = make(simple, tmp_path / "dest")
    s.register(restructure)
    ir = s.build()
    assert list(ir.files) == ["blog/2024/post.html"]
    assert snapshot(tmp_path / "dest") == {"blog/2024/post.html": b"hello"}


def test_stage_sees_configuration(tmp_path, simple):
    seen = []

    def spy(ir):
        seen.append(ir.config)
        return ir

    s = make(simple, tmp_path / "dest", frontmatter=True)
    s.register(spy)
    s.build()
    assert seen[0].frontmatter is True
    assert seen[0].destination == (tmp_path / "dest").resolve()


def test_failed_write_keeps_earlier_files(tmp_path, simple):
    def conflict(ir):
        # "a" is written as a file, so "a/b" cannot get its parent directory
        return ir.with_files(FileStore({"a": ShFile(content=b"first"), "a/b": ShFile(content=b"second")}))

    s = make(simple, tmp_path / "dest")
    s.register(conflict)
    with pytest.raises(OSError):
        s.build()
    assert (tmp_path / "dest" / "a").read_bytes() == b"first"


def test_failing_stage_writes_nothing(tmp_path, simple):
    def boom(ir):
        raise RuntimeError("boom")

    s = make(simple, tmp_path / "dest")
    s.register(boom)
    with pytest.raises(RuntimeError):
        s.build()
    assert snapshot(tmp_path / "dest") == {}
