"""Unit tests for the FileTraversal class."""

import logging
import os
import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from dirwalk.exceptions import InvalidPatternError
from dirwalk.exclusion_rules.base_rules import BaseExclusionRules
from dirwalk.file_traversal.file_traversal import FileTraversal


@pytest.fixture
def root(tmp_path):
    # r/{a.txt, b.log, sub/c.txt, build/out.o}
    r = tmp_path / "r"
    r.mkdir()
    (r / "a.txt").write_text("a")
    (r / "b.log").write_text("b")
    (r / "sub").mkdir()
    (r / "sub" / "c.txt").write_text("c")
    (r / "build").mkdir()
    (r / "build" / "out.o").write_bytes(b"\x7fELF")
    return r


@pytest.fixture
def nested_root(tmp_path):
    """A tree with 'build' directories at several depths."""
    r = tmp_path / "nested"
    (r / "x" / "y" / "build" / "deep").mkdir(parents=True)
    (r / "x" / "y" / "build" / "deep" / "f.txt").write_text("f")
    (r / "x" / "y" / "build" / "g.txt").write_text("g")
    (r / "x" / "y" / "keep.txt").write_text("k")
    (r / "build").mkdir()
    (r / "build" / "top.txt").write_text("t")
    (r / "rebuild").mkdir()
    (r / "rebuild" / "r.txt").write_text("r")
    return r


def walk(**kwargs):
    """Build a traversal with a recording visitor and return (traversal, visited)."""
    visited = []
    traversal = FileTraversal(visited.append, **kwargs)
    return traversal, visited


def test_defaults_visit_files_only(root):
    traversal, visited = walk()
    assert traversal.visit_files is True
    assert traversal.visit_directories is False

    traversal.traverse(root)

    assert sorted(visited) == sorted([root / "a.txt", root / "b.log", root / "sub" / "c.txt", root / "build" / "out.o"])


def test_extension_filter_and_subtree_exclusion(root):
    traversal, visited = walk()
    traversal.add_extension_filters([".txt"]).add_exclude_patterns(["build/**"])

    traversal.traverse(root)

    assert set(visited) == {root / "a.txt", root / "sub" / "c.txt"}
    assert len(visited) == 2


def test_directories_visited_after_their_contents(root):
    traversal, visited = walk(visit_directories=True)

    traversal.traverse(root)

    assert set(visited) == {
        root / "a.txt",
        root / "b.log",
        root / "sub" / "c.txt",
        root / "build" / "out.o",
        root / "sub",
        root / "build",
    }
    assert visited.index(root / "sub") > visited.index(root / "sub" / "c.txt")
    assert visited.index(root / "build") > visited.index(root / "build" / "out.o")


def test_directories_visited_after_all_descendants(nested_root):
    traversal, visited = walk(visit_directories=True)

    traversal.traverse(nested_root)

    x = nested_root / "x"
    assert visited.index(x) > visited.index(x / "y")
    assert visited.index(x) > visited.index(x / "y" / "keep.txt")
    assert visited.index(x) > visited.index(x / "y" / "build" / "deep" / "f.txt")
    for directory in (p for p in visited if p.is_dir()):
        for descendant in visited:
            if directory in descendant.parents:
                assert visited.index(descendant) < visited.index(directory)


def test_root_is_never_visited(root):
    traversal, visited = walk(visit_directories=True)
    traversal.traverse(root)
    assert root not in visited


def test_directories_only(root):
    traversal, visited = walk(visit_directories=True, visit_files=False)
    traversal.traverse(root)
    assert sorted(visited) == sorted([root / "sub", root / "build"])


def test_directories_are_not_extension_filtered(root):
    traversal, visited = walk(visit_directories=True)
    traversal.add_extension_filter(".txt")

    traversal.traverse(root)

    assert set(visited) == {root / "a.txt", root / "sub" / "c.txt", root / "sub", root / "build"}


def test_extension_filter_is_case_insensitive(root):
    (root / "UPPER.TXT").write_text("u")
    traversal, visited = walk()
    traversal.add_extension_filter(".Txt")

    traversal.traverse(root)

    assert set(visited) == {root / "a.txt", root / "sub" / "c.txt", root / "UPPER.TXT"}


def test_file_matching_two_suffixes_is_visited_twice(root):
    traversal, visited = walk()
    traversal.add_extension_filters([".txt", "c.txt"])

    traversal.traverse(root)

    assert visited.count(root / "sub" / "c.txt") == 2
    assert visited.count(root / "a.txt") == 1
    assert len(visited) == 3


def test_suffix_registered_twice_visits_twice(root):
    traversal, visited = walk()
    traversal.add_extension_filter(".log").add_extension_filter(".LOG")

    traversal.traverse(root)

    assert visited == [root / "b.log", root / "b.log"]


def test_subtree_pattern_applies_at_every_depth(nested_root):
    traversal, visited = walk(visit_directories=True)
    traversal.add_exclude_patterns(["build/**"])

    traversal.traverse(nested_root)

    assert set(visited) == {
        nested_root / "x",
        nested_root / "x" / "y",
        nested_root / "x" / "y" / "keep.txt",
        nested_root / "rebuild",
        nested_root / "rebuild" / "r.txt",
    }
    assert not any("build" in p.parts for p in visited)


def test_excluded_directory_is_not_descended_into(root):
    listed = []

    class RecordingTraversal(FileTraversal):
        @staticmethod
        def _list_children(directory):
            listed.append(directory)
            return FileTraversal._list_children(directory)

    traversal = RecordingTraversal(MagicMock())
    traversal.add_exclude_patterns(["build/**"])

    traversal.traverse(root)

    assert root / "build" not in listed
    assert root / "sub" in listed


def test_plain_directory_name_pattern_excludes_directory(root):
    traversal, visited = walk(visit_directories=True)
    traversal.add_exclude_patterns(["sub"])

    traversal.traverse(root)

    assert root / "sub" not in visited
    assert root / "sub" / "c.txt" not in visited
    assert root / "a.txt" in visited


def test_file_pattern_excludes_files(root):
    traversal, visited = walk()
    traversal.add_exclude_patterns(["*.log", "*.o"])

    traversal.traverse(root)

    assert set(visited) == {root / "a.txt", root / "sub" / "c.txt"}


def test_absolute_subtree_pattern(root):
    traversal, visited = walk(visit_directories=True)
    traversal.add_exclude_patterns([f"{root.absolute().as_posix()}/build/**"])

    traversal.traverse(root)

    assert root / "build" not in visited
    assert root / "build" / "out.o" not in visited
    assert root / "sub" in visited


def test_relative_root_yields_relative_paths(root, monkeypatch):
    monkeypatch.chdir(root.parent)
    traversal, visited = walk()
    traversal.add_exclude_patterns(["build/**"])

    traversal.traverse("r")

    assert set(visited) == {Path("r") / "a.txt", Path("r") / "b.log", Path("r") / "sub" / "c.txt"}


@pytest.mark.parametrize("name", ["does-not-exist", "a.txt", "empty"])
def test_roots_without_children_produce_no_visits(root, name):
    (root / "empty").mkdir()
    visitor = MagicMock()
    traversal = FileTraversal(visitor, visit_directories=True)

    traversal.traverse(root / name)

    visitor.assert_not_called()


def test_configuration_persists_across_traversals(root):
    traversal, visited = walk()
    traversal.add_extension_filter(".txt")

    traversal.traverse(root)
    traversal.traverse(root / "sub")

    assert sorted(visited) == sorted([root / "a.txt", root / "sub" / "c.txt", root / "sub" / "c.txt"])


def test_instances_do_not_share_configuration(root):
    first, first_visited = walk()
    second, second_visited = walk()
    first.add_extension_filter(".txt").add_exclude_patterns(["sub/**"])

    first.traverse(root)
    second.traverse(root)

    assert first_visited == [root / "a.txt"]
    assert len(second_visited) == 4
    assert not second.exclusion_rules.has_rules()


def test_visitor_error_propagates(root):
    visited = []

    def visitor(path):
        visited.append(path)
        if len(visited) == 2:
            raise RuntimeError("visitor failed")

    traversal = FileTraversal(visitor)
    with pytest.raises(RuntimeError, match="visitor failed"):
        traversal.traverse(root)

    assert len(visited) == 2


def test_visitor_object_method(root):
    class Collector:
        def __init__(self):
            self.paths = []

        def visit(self, path):
            self.paths.append(path)

    collector = Collector()
    FileTraversal(collector.visit).add_extension_filter(".log").traverse(root)
    assert collector.paths == [root / "b.log"]


def test_invalid_pattern_fails_at_registration(root):
    traversal, visited = walk()
    traversal.add_exclude_patterns(["*.log"])

    with pytest.raises(InvalidPatternError) as exc_info:
        traversal.add_exclude_patterns(["build/**", "src/[abc"])
    assert exc_info.value.pattern == "src/[abc"

    # Nothing from the rejected batch was registered
    traversal.traverse(root)
    assert set(visited) == {root / "a.txt", root / "sub" / "c.txt", root / "build" / "out.o"}


def test_custom_exclusion_rules(root):
    class NoBuildRules(BaseExclusionRules):
        def exclude(self, path: str) -> bool:
            return path.endswith("/build")

    visited = []
    traversal = FileTraversal(visited.append, exclusion_rules=NoBuildRules())
    traversal.traverse(root)
    assert set(visited) == {root / "a.txt", root / "b.log", root / "sub" / "c.txt"}

    with pytest.raises(NotImplementedError):
        traversal.add_exclude_patterns(["*.log"])


def test_exclusion_rules_receive_absolute_posix_paths(root, monkeypatch):
    monkeypatch.chdir(root.parent)
    rules = MagicMock(spec=BaseExclusionRules)
    rules.has_rules.return_value = True
    rules.exclude.return_value = False

    FileTraversal(MagicMock(), exclusion_rules=rules).traverse("r")

    checked = {call.args[0] for call in rules.exclude.call_args_list}
    assert (root / "a.txt").absolute().as_posix() in checked
    assert (root / "sub").absolute().as_posix() in checked


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions required")
@pytest.mark.skipif(hasattr(os, "geteuid") and os.geteuid() == 0, reason="root ignores directory permissions")
def test_unreadable_directory_is_skipped(root, caplog):
    caplog.set_level(logging.DEBUG, logger="dirwalk")
    locked = root / "sub"
    locked.chmod(0o000)
    try:
        traversal, visited = walk(visit_directories=True)
        traversal.traverse(root)
    finally:
        locked.chmod(0o755)

    assert root / "sub" / "c.txt" not in visited
    assert root / "a.txt" in visited
    assert root / "build" / "out.o" in visited
    assert any("Skipping" in record.getMessage() and "sub" in record.getMessage() for record in caplog.records)


def test_missing_root_is_logged(tmp_path, caplog):
    caplog.set_level(logging.DEBUG, logger="dirwalk")
    FileTraversal(MagicMock()).traverse(tmp_path / "missing")
    assert any("missing" in record.getMessage() for record in caplog.records)


@pytest.fixture
def root_with_loop(root):
    try:
        os.symlink(root, root / "sub" / "loop", target_is_directory=True)
    except (OSError, NotImplementedError):
        pytest.skip("Symlink creation not supported on this platform/environment")
    return root


def test_symlink_loop_detection(root_with_loop):
    root = root_with_loop
    traversal, visited = walk(detect_symlink_loops=True)

    traversal.traverse(root)

    assert sorted(visited) == sorted([root / "a.txt", root / "b.log", root / "sub" / "c.txt", root / "build" / "out.o"])


def test_symlinked_directory_is_followed(root, tmp_path):
    (tmp_path / "elsewhere").mkdir()
    (tmp_path / "elsewhere" / "linked.txt").write_text("l")
    try:
        os.symlink(tmp_path / "elsewhere", root / "link", target_is_directory=True)
    except (OSError, NotImplementedError):
        pytest.skip("Symlink creation not supported on this platform/environment")

    traversal, visited = walk(detect_symlink_loops=True)
    traversal.add_extension_filter("linked.txt")
    traversal.traverse(root)

    assert visited == [root / "link" / "linked.txt"]


DEEP_TREE_DEPTH = 1200


@pytest.fixture
def deep_levels(tmp_path):
    """A single chain of nested directories, deeper than the interpreter recursion limit."""
    levels = [tmp_path / "deep"]
    levels[0].mkdir()
    # Created one level at a time; Path.mkdir(parents=True) recurses per missing parent
    for _ in range(DEEP_TREE_DEPTH):
        levels.append(levels[-1] / "a")
        levels[-1].mkdir()
    leaf = levels[-1] / "leaf.txt"
    leaf.write_text("leaf")
    yield levels
    leaf.unlink()
    for level in reversed(levels):
        level.rmdir()


@pytest.mark.parametrize("detect_symlink_loops", [False, True])
def test_deep_tree_is_walked(deep_levels, detect_symlink_loops):
    traversal, visited = walk(detect_symlink_loops=detect_symlink_loops)

    traversal.traverse(deep_levels[0])

    assert visited == [deep_levels[-1] / "leaf.txt"]


def test_deep_tree_directories_post_order(deep_levels):
    traversal, visited = walk(visit_directories=True)
    traversal.add_exclude_patterns(["*.txt"])

    traversal.traverse(deep_levels[0])

    assert visited == list(reversed(deep_levels[1:]))
