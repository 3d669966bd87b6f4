import pytest

from fdup.ignore import IgnoreFilter, match_pattern, split_path


@pytest.mark.parametrize(
    "name, pattern, expected",
    [
        ("node_modules", "node_modules", True),
        ("debug.log", "*.log", True),
        ("debug.log.1", "*.log", False),
        ("a/b.log", "*.log", False),
        ("build-2024", "build-*", True),
        ("file?.txt", "file?.txt", True),
        ("fileX.txt", "file?.txt", False),
        ("[ab].txt", "[ab]*", True),
        ("a.txt", "[ab]*", False),
    ],
)
def test_match_pattern(name, pattern, expected):
    assert match_pattern(name, pattern) is expected


def test_split_path_drops_dot_and_empty():
    assert split_path("./a/b//c") == ["a", "b", "c"]
    assert split_path(".") == []


def test_rules_are_classified():
    f = IgnoreFilter(["node_modules/", "*.tmp", "", ".git/"])
    assert f.dir_rules == ["node_modules", ".git"]
    assert f.file_rules == ["*.tmp"]


def test_directory_rule_matches_any_component():
    f = IgnoreFilter(["node_modules/"])
    assert f.should_ignore("node_modules", is_dir=True)
    assert f.should_ignore("pkg/node_modules", is_dir=True)
    assert f.should_ignore("pkg/node_modules/lib/PRJ001.js", is_dir=False)
    assert not f.should_ignore("pkg/lib", is_dir=True)


def test_directory_rule_does_not_apply_to_file_name():
    f = IgnoreFilter(["cache/"])
    assert not f.should_ignore("docs/cache", is_dir=False)


def test_directory_rule_wildcard():
    f = IgnoreFilter(["build*/"])
    assert f.should_ignore("src/build-out", is_dir=True)
    assert not f.should_ignore("src/rebuild", is_dir=True)


def test_file_rule_matches_base_name_full_path_and_components():
    f = IgnoreFilter(["*.tmp", ".DS_Store", "docs/draft.txt", ".git"])
    assert f.should_ignore("a/b/c.tmp", is_dir=False)
    assert f.should_ignore("photos/.DS_Store", is_dir=False)
    assert f.should_ignore("docs/draft.txt", is_dir=False)
    assert f.should_ignore("repo/.git", is_dir=True)
    assert not f.should_ignore("other/draft.txt", is_dir=False)
    assert not f.should_ignore("a/b/c.txt", is_dir=False)


def test_root_is_never_ignored():
    assert not IgnoreFilter(["*"]).should_ignore(".", is_dir=True)
