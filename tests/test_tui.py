import io

from fdup import tui
from fdup.actions import FileActions
from fdup.resolve import Mode

from conftest import make_tree, record


def scripted(*keys):
    it = iter(keys)
    return lambda: next(it)


def test_decode_key():
    assert tui.decode_key("\r") == "enter"
    assert tui.decode_key("\n") == "enter"
    assert tui.decode_key("\x1b") == "escape"
    assert tui.decode_key("\x7f") == "backspace"
    assert tui.decode_key("\x03") == "ctrl+c"
    assert tui.decode_key(" ") == "space"
    assert tui.decode_key("\x1b[A") == "unknown"
    assert tui.decode_key("a") == "a"


def test_run_without_groups():
    out = io.StringIO()
    controller = tui.run([], FileActions(None), read=scripted(), out=out)
    assert controller.done
    assert out.getvalue() == "No duplicates found\n"


def test_run_delete_flow(tmp_path, index):
    files = make_tree(tmp_path, {"A/AB123.txt": "a", "B/AB123.txt": "b", "C/CD456.txt": "c", "D/CD456.txt": "d"})
    for rel, path in files.items():
        index.upsert(record(path, rel[2:7]))
    groups = index.find_duplicates()
    out = io.StringIO()

    controller = tui.run(
        groups,
        FileActions(index),
        read=scripted("2", "enter", "d", "s"),
        out=out,
        clear_screen=False,
    )

    assert controller.state.mode is Mode.DONE
    assert not files["B/AB123.txt"].exists()
    assert files["D/CD456.txt"].exists()
    text = out.getvalue()
    assert "AB-123: 2 files  (1/2)" in text
    assert "CD-456: 2 files  (2/2)" in text
    assert "Deleted 1 file" in text
    assert text.rstrip().endswith("Done.")


def test_run_quit_immediately():
    from fdup.index import DuplicateGroup

    group = DuplicateGroup("AB1", [record("/x/AB1", "AB1"), record("/y/AB1", "AB1")])
    out = io.StringIO()
    controller = tui.run([group], FileActions(None), read=scripted("ctrl+c"), out=out)
    assert controller.done
    assert out.getvalue().startswith("\x1b[2J\x1b[H")


def test_end_of_input_quits():
    from fdup.index import DuplicateGroup

    assert tui.decode_key("") == "ctrl+c"
    group = DuplicateGroup("AB1", [record("/x/AB1", "AB1"), record("/y/AB1", "AB1")])
    reads = []

    def eof():
        reads.append(1)
        return ""

    controller = tui.run([group], FileActions(None), read=eof, out=io.StringIO(), clear_screen=False)
    assert controller.done
    assert len(reads) == 1
