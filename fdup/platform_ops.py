"""Platform-specific file operations: trash, open and reveal."""
from __future__ import annotations
import os
import subprocess
import sys
from typing import Optional

from send2trash import send2trash


class PlatformOps:
    """Capability interface injected into the resolution flow.

    The generic implementation has no trash; ``trash`` deletes permanently.
    """

    has_trash = False

    def trash(self, path: str) -> None:
        os.remove(path)

    def open(self, path: str) -> None:
        raise NotImplementedError

    def reveal(self, path: str) -> None:
        raise NotImplementedError


class _TrashOps(PlatformOps):
    """Trash through the desktop's own bin (Trash, freedesktop Trash, Recycle Bin)."""

    has_trash = True

    def trash(self, path: str) -> None:
        send2trash(path)


class MacOSOps(_TrashOps):
    def open(self, path: str) -> None:
        subprocess.Popen(["open", path])

    def reveal(self, path: str) -> None:
        if os.path.isfile(path):
            subprocess.Popen(["open", "-R", path])
        else:
            subprocess.Popen(["open", path])


class LinuxOps(_TrashOps):
    def open(self, path: str) -> None:
        subprocess.Popen(["xdg-open", path])

    def reveal(self, path: str) -> None:
        target = path if os.path.isdir(path) else os.path.dirname(path)
        subprocess.Popen(["xdg-open", target])


class WindowsOps(_TrashOps):
    def open(self, path: str) -> None:
        os.startfile(path)  # type: ignore[attr-defined]

    def reveal(self, path: str) -> None:
        if os.path.isfile(path):
            subprocess.Popen(["explorer", "/select,", path])
        else:
            subprocess.Popen(["explorer", path])


def get_platform_ops(platform: Optional[str] = None) -> PlatformOps:
    platform = platform or sys.platform
    if platform == "darwin":
        return MacOSOps()
    if platform.startswith("win"):
        return WindowsOps()
    if platform.startswith("linux"):
        return LinuxOps()
    return PlatformOps()
