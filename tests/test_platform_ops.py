import pytest

from fdup.platform_ops import (
    LinuxOps,
    MacOSOps,
    PlatformOps,
    WindowsOps,
    get_platform_ops,
)


@pytest.mark.parametrize(
    "platform, cls",
    [("darwin", MacOSOps), ("linux", LinuxOps), ("win32", WindowsOps), ("freebsd13", PlatformOps)],
)
def test_get_platform_ops(platform, cls):
    assert type(get_platform_ops(platform)) is cls


@pytest.mark.parametrize("cls", [MacOSOps, LinuxOps, WindowsOps])
def test_os_trash_goes_through_send2trash(cls, tmp_path, monkeypatch):
    trashed = []
    monkeypatch.setattr("fdup.platform_ops.send2trash", trashed.append)
    src = tmp_path / "PRJ 001.zip"
    src.write_text("data")

    ops = cls()
    assert ops.has_trash
    ops.trash(str(src))

    assert trashed == [str(src)]
    # the file is left to send2trash
    assert src.exists()


def test_generic_trash_deletes(tmp_path, monkeypatch):
    monkeypatch.setattr("fdup.platform_ops.send2trash", lambda p: pytest.fail("send2trash called"))
    src = tmp_path / "x.txt"
    src.write_text("1")
    ops = PlatformOps()
    assert not ops.has_trash
    ops.trash(str(src))
    assert not src.exists()
    with pytest.raises(NotImplementedError):
        ops.open(str(src))


def test_open_and_reveal_launch_commands(monkeypatch, tmp_path):
    launched = []
    monkeypatch.setattr("fdup.platform_ops.subprocess.Popen", lambda cmd: launched.append(cmd))
    f = tmp_path / "f.txt"
    f.write_text("")

    LinuxOps().reveal(str(f))
    MacOSOps().reveal(str(f))
    MacOSOps().open(str(f))
    WindowsOps().reveal(str(f))
    assert launched == [
        ["xdg-open", str(tmp_path)],
        ["open", "-R", str(f)],
        ["open", str(f)],
        ["explorer", "/select,", str(f)],
    ]
