from unix_artifacts.chroot import ChRootFileSystem
from unix_artifacts.merge import ConfigMerger, merge_files
from unix_artifacts.vfs import StdVirtualFS

from .conftest import write_tree

FIRST = """alias ll='ls -la'
export EDITOR=vim
PAGER=less
"""

SECOND = """alias ll="ls -lah"
export EDITOR=nano
PAGER=less # again
"""


def make_vfs(tmp_path):
    root = write_tree(tmp_path / "root", {"a.rc": FIRST, "b.rc": SECOND})
    return ChRootFileSystem(root, StdVirtualFS())


def test_conflicting_values_are_all_kept(tmp_path):
    config = merge_files(make_vfs(tmp_path), ["/a.rc", "/b.rc"])
    assert config.aliases == {"ll": {"ls -la", "ls -lah"}}
    assert config.exports == {"EDITOR": {"vim", "nano"}}
    assert config.variables == {"PAGER": {"less"}}
    assert config.sources == ["/a.rc", "/b.rc"]


def test_merge_is_order_independent(tmp_path):
    vfs = make_vfs(tmp_path)
    forward = merge_files(vfs, ["/a.rc", "/b.rc"])
    backward = merge_files(vfs, ["/b.rc", "/a.rc"])
    assert forward.aliases == backward.aliases
    assert forward.exports == backward.exports
    assert forward.variables == backward.variables


def test_feeding_the_same_file_twice_is_idempotent(tmp_path):
    vfs = make_vfs(tmp_path)
    once = merge_files(vfs, ["/a.rc"])
    twice = merge_files(vfs, ["/a.rc", "/a.rc"])
    assert once.aliases == twice.aliases
    assert once.exports == twice.exports
    assert once.variables == twice.variables


def test_missing_files_are_skipped(tmp_path):
    config = merge_files(make_vfs(tmp_path), ["/nope.rc", "/a.rc", "/etc/also-missing"])
    assert config.sources == ["/a.rc"]
    assert config.aliases == {"ll": {"ls -la"}}


def test_no_files_gives_empty_config(tmp_path):
    config = merge_files(make_vfs(tmp_path), [])
    assert config.aliases == {} and config.exports == {} and config.variables == {}
    assert config.sources == []


def test_mappings_do_not_leak_into_each_other():
    merger = ConfigMerger()
    merger.feed_text("alias X=1\nexport X=2\nX=3\n")
    config = merger.result()
    assert config.aliases == {"X": {"1"}}
    assert config.exports == {"X": {"2"}}
    assert config.variables == {"X": {"3"}}


def test_result_is_a_snapshot():
    merger = ConfigMerger()
    merger.feed_text("A=1\n")
    config = merger.result()
    merger.feed_text("A=2\n")
    assert config.variables == {"A": {"1"}}
    assert merger.result().variables == {"A": {"1", "2"}}


def test_shared_merger_accumulates_across_calls(tmp_path):
    vfs = make_vfs(tmp_path)
    merger = ConfigMerger()
    merge_files(vfs, ["/a.rc"], merger)
    config = merge_files(vfs, ["/b.rc"], merger)
    assert config.sources == ["/a.rc", "/b.rc"]
    assert config.exports["EDITOR"] == {"vim", "nano"}
