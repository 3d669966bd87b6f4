"""Interactive resolution of duplicate groups.

The controller is a tagged state (``ResolutionState``) plus pure functions:
``transition`` maps a key to the next state and an optional action request,
``apply_outcome`` folds the result of that request back into the state, and
``render`` turns a state into text. ``ResolutionController`` wires them to a
``FileActions`` instance.

Keys are strings: single characters, or ``"enter"``, ``"escape"``,
``"backspace"`` and ``"ctrl+c"``.
"""
from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import FrozenSet, List, Optional, Tuple, Union

from .actions import BatchResult, FileActions
from .code import format_code
from .index import DuplicateGroup, FileRecord
from .util import format_size, plural

MAX_KEYS = 36


class Mode(Enum):
    SELECT_FILES = "select_files"
    SELECT_ACTION = "select_action"
    CUSTOM_PATH = "custom_path"
    DONE = "done"


@dataclass(frozen=True)
class DeleteRequest:
    paths: Tuple[str, ...]


@dataclass(frozen=True)
class MoveRequest:
    paths: Tuple[str, ...]
    dest_dir: str


Request = Union[DeleteRequest, MoveRequest]


@dataclass(frozen=True)
class ResolutionState:
    groups: Tuple[DuplicateGroup, ...]
    current: int = 0
    selected: FrozenSet[int] = field(default_factory=frozenset)
    mode: Mode = Mode.SELECT_FILES
    text: str = ""
    message: str = ""
    error: Optional[str] = None

    @property
    def done(self) -> bool:
        return self.mode is Mode.DONE

    @property
    def group(self) -> Optional[DuplicateGroup]:
        if 0 <= self.current < len(self.groups):
            return self.groups[self.current]
        return None

    def selected_paths(self) -> Tuple[str, ...]:
        group = self.group
        if group is None:
            return ()
        return tuple(group.files[i].path for i in sorted(self.selected) if i < len(group.files))


def key_to_index(key: str) -> Optional[int]:
    """``1``-``9`` -> 0-8, ``0`` -> 9, ``a``-``z`` -> 10-35."""
    if len(key) != 1:
        return None
    if "1" <= key <= "9":
        return ord(key) - ord("1")
    if key == "0":
        return 9
    if "a" <= key <= "z":
        return ord(key) - ord("a") + 10
    return None


def index_to_key(idx: int) -> str:
    if idx < 9:
        return str(idx + 1)
    if idx == 9:
        return "0"
    if idx < MAX_KEYS:
        return chr(ord("a") + idx - 10)
    return str(idx + 1)


def initial_state(groups: List[DuplicateGroup]) -> ResolutionState:
    state = ResolutionState(groups=tuple(groups))
    if not groups:
        return replace(state, mode=Mode.DONE)
    return state


def next_group(state: ResolutionState, **changes) -> ResolutionState:
    changes.setdefault("message", "")
    changes.setdefault("error", None)
    current = state.current + 1
    mode = Mode.DONE if current >= len(state.groups) else Mode.SELECT_FILES
    return replace(state, current=current, selected=frozenset(), mode=mode, text="", **changes)


def _select_files(state: ResolutionState, key: str) -> Tuple[ResolutionState, Optional[Request]]:
    if key in ("q", "ctrl+c"):
        return replace(state, mode=Mode.DONE), None
    if key == "s":
        return next_group(state), None
    if key == "enter":
        if state.selected:
            return replace(state, mode=Mode.SELECT_ACTION), None
        return state, None
    idx = key_to_index(key)
    group = state.group
    if idx is not None and group is not None and idx < len(group.files):
        return replace(state, selected=state.selected ^ {idx}), None
    return state, None


def _select_action(state: ResolutionState, key: str) -> Tuple[ResolutionState, Optional[Request]]:
    if key in ("q", "ctrl+c"):
        return replace(state, mode=Mode.DONE), None
    if key == "escape":
        return replace(state, mode=Mode.SELECT_FILES), None
    if key == "s":
        return next_group(state), None
    if key == "d":
        return state, DeleteRequest(state.selected_paths())
    if key == "c":
        return replace(state, mode=Mode.CUSTOM_PATH, text=""), None
    idx = key_to_index(key)
    group = state.group
    if idx is not None and group is not None and idx < len(group.files) and idx not in state.selected:
        return state, MoveRequest(state.selected_paths(), group.files[idx].directory)
    return state, None


def _custom_path(state: ResolutionState, key: str) -> Tuple[ResolutionState, Optional[Request]]:
    if key == "ctrl+c":
        return replace(state, mode=Mode.DONE), None
    if key == "escape":
        return replace(state, mode=Mode.SELECT_ACTION, text=""), None
    if key == "enter":
        dest = state.text.strip()
        if not dest:
            return replace(state, mode=Mode.SELECT_FILES, text=""), None
        return replace(state, text=""), MoveRequest(state.selected_paths(), dest)
    if key == "backspace":
        return replace(state, text=state.text[:-1]), None
    if key == "space":
        return replace(state, text=state.text + " "), None
    if len(key) == 1 and key.isprintable():
        return replace(state, text=state.text + key), None
    return state, None


def transition(state: ResolutionState, key: str) -> Tuple[ResolutionState, Optional[Request]]:
    """Pure: the next state for ``key`` and the action to perform, if any."""
    if state.mode is Mode.SELECT_FILES:
        return _select_files(state, key)
    if state.mode is Mode.SELECT_ACTION:
        return _select_action(state, key)
    if state.mode is Mode.CUSTOM_PATH:
        return _custom_path(state, key)
    return state, None


def _reflect_completed(group: DuplicateGroup, result: BatchResult) -> DuplicateGroup:
    if result.dry_run:
        return group
    moved = dict(result.completed)
    files: List[FileRecord] = []
    for rec in group.files:
        if rec.path not in moved:
            files.append(rec)
        elif moved[rec.path] is not None:
            files.append(replace(rec, path=moved[rec.path]))
    return replace(group, files=files)


def apply_outcome(state: ResolutionState, result: BatchResult) -> ResolutionState:
    """Advance after a successful action; on failure stay on the group and surface the error."""
    if result.ok:
        return next_group(state, message="\n".join(result.messages), error=None)

    groups = list(state.groups)
    groups[state.current] = _reflect_completed(groups[state.current], result)
    return replace(
        state,
        groups=tuple(groups),
        selected=frozenset(),
        mode=Mode.SELECT_FILES,
        text="",
        message="\n".join(result.messages),
        error=str(result.error),
    )


def render(state: ResolutionState) -> str:
    """Pure view of a state."""
    if state.done:
        lines = []
        if state.message:
            lines.append(state.message)
        if state.error:
            lines.append(f"Error: {state.error}")
        lines.append("Done.")
        return "\n".join(lines) + "\n"

    group = state.group
    assert group is not None
    out = [f"{format_code(group.code)}: {len(group.files)} {plural(len(group.files))}  ({state.current + 1}/{len(state.groups)})"]
    for i, rec in enumerate(group.files):
        prefix = "> " if i in state.selected else "  "
        out.append(f"{prefix}[{index_to_key(i)}] {rec.path} ({format_size(rec.size)})")
    out.append("")

    if state.mode is Mode.SELECT_FILES:
        out.append("Select files to remove (1-9,0,a-z), [enter] confirm, [s] skip, [q] quit")
    elif state.mode is Mode.SELECT_ACTION:
        out.append("Action:")
        for i, rec in enumerate(group.files):
            if i not in state.selected:
                out.append(f"  [{index_to_key(i)}] Move to {rec.directory}")
        out.append("  [c] Custom directory")
        out.append("  [d] Delete")
        out.append("  [s] Skip")
        out.append("  [q] Quit")
    elif state.mode is Mode.CUSTOM_PATH:
        out.append(f"Directory: {state.text}_")
        out.append("[enter] confirm, [esc] cancel")

    if state.message:
        out.extend(["", state.message])
    if state.error:
        out.extend(["", f"Error: {state.error}"])
    return "\n".join(out) + "\n"


class ResolutionController:
    """Runs ``transition`` and executes the requests it emits, one key at a time."""

    def __init__(self, groups: List[DuplicateGroup], actions: FileActions) -> None:
        self.actions = actions
        self.state = initial_state(groups)

    @property
    def done(self) -> bool:
        return self.state.done

    def view(self) -> str:
        return render(self.state)

    def handle_key(self, key: str) -> ResolutionState:
        state, request = transition(self.state, key)
        if request is not None:
            state = apply_outcome(state, self.execute(request))
        self.state = state
        return state

    def execute(self, request: Request) -> BatchResult:
        if isinstance(request, DeleteRequest):
            return self.actions.delete_batch(request.paths)
        return self.actions.move_batch(request.paths, request.dest_dir)


__all__ = [
    "DeleteRequest",
    "Mode",
    "MoveRequest",
    "ResolutionController",
    "ResolutionState",
    "apply_outcome",
    "index_to_key",
    "initial_state",
    "key_to_index",
    "render",
    "transition",
]
