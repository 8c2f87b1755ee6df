from __future__ import annotations

import logging
import shutil
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Sequence

from rich.console import Console

from .command import run_command
from .compiler import InstructionCompiler, finalize_instructions
from .config import DemoConfig
from .echo import CommandEcho
from .editor import EditorState
from .errors import EditorSetupError, WorkingDirectoryError
from .highlight import highlight
from .instruction import Instruction
from .script import (
    Action,
    ChangeDir,
    ChangeDirQuiet,
    RunCommand,
    RunCommandQuiet,
    RunCommandVisibleOutputOnly,
    RunEditor,
    load_script,
)
from .snapshot import HtmlRenderer, ImageExporter
from .surface import run_editor_session
from .terminal import wait_for_key

logger = logging.getLogger(__name__)

CommandRunner = Callable[..., int]
EditorRunner = Callable[..., EditorState]


class WorkingDirectory:
    """The directory actions run in, tracked apart from the process cwd."""

    def __init__(self, path: Path, *, home: Path | None = None) -> None:
        self._path = path
        self._home = home

    @property
    def path(self) -> Path:
        return self._path

    def resolve(self, target: str) -> Path:
        if target == "~" or target.startswith("~/"):
            home = self._home if self._home is not None else Path.home()
            return home / target[2:]
        candidate = Path(target)
        if candidate.is_absolute():
            return candidate
        return self._path / candidate

    def change(self, target: str) -> Path:
        resolved = self.resolve(target)
        if not resolved.is_dir():
            msg = f"Cannot change directory to {resolved}: not a directory"
            raise WorkingDirectoryError(msg)
        self._path = resolved.resolve()
        return self._path


@dataclass(slots=True)
class ExecutionResult:
    actions: list[Action]
    failed: list[Action] = field(default_factory=list)
    editor_states: list[EditorState] = field(default_factory=list)
    cwd: Path | None = None


class ActionOrchestrator:
    """Play a parsed script: shell actions inline, edit actions in the editor."""

    def __init__(
        self,
        config: DemoConfig | None = None,
        *,
        cwd: Path | None = None,
        console: Console | None = None,
        error_console: Console | None = None,
        runner: CommandRunner = run_command,
        editor: EditorRunner = run_editor_session,
        echo: CommandEcho | None = None,
        key_waiter: Callable[[], object] = wait_for_key,
        compiler: InstructionCompiler | None = None,
        sleep: Callable[[float], None] = time.sleep,
        home: Path | None = None,
    ) -> None:
        self._config = config or DemoConfig()
        self._cwd = WorkingDirectory(cwd or Path.cwd(), home=home)
        self._console = console or Console(highlight=False)
        self._error_console = error_console or Console(stderr=True, highlight=False)
        self._runner = runner
        self._editor = editor
        self._echo = echo or CommandEcho(
            self._console,
            delay_range_ms=self._config.typing_delay_ms,
            sleep=sleep,
            home=home,
        )
        self._key_waiter = key_waiter
        self._compiler = compiler or InstructionCompiler(tab_width=self._config.tab_width)
        self._sleep = sleep

    @property
    def cwd(self) -> Path:
        return self._cwd.path

    def execute(self, source: Path) -> ExecutionResult:
        return self.run(load_script(source))

    def run(self, actions: Sequence[Action]) -> ExecutionResult:
        result = ExecutionResult(actions=list(actions))
        self._key_waiter()
        for action in actions:
            logger.info("Running action: %s", action)
            self._run_action(action, result)
            self._sleep(self._config.action_gap_ms / 1000)
        self._echo.pause()
        self._echo.pause()
        result.cwd = self._cwd.path
        return result

    def _run_action(self, action: Action, result: ExecutionResult) -> None:
        if isinstance(action, ChangeDir):
            self._echo.echo(self._cwd.path, ("cd", action.path))
            self._cwd.change(action.path)
            self._key_waiter()
        elif isinstance(action, ChangeDirQuiet):
            self._cwd.change(action.path)
        elif isinstance(action, RunCommand):
            self._echo.echo(self._cwd.path, action.args)
            self._run_command(action, inherit_io=True, result=result)
            self._key_waiter()
        elif isinstance(action, RunCommandVisibleOutputOnly):
            self._run_command(action, inherit_io=True, result=result)
        elif isinstance(action, RunCommandQuiet):
            self._run_command(action, inherit_io=False, result=result)
        elif isinstance(action, RunEditor):
            self._run_editor(action, result)
        else:  # pragma: no cover - defensive guard
            msg = f"Unsupported action type: {type(action)!r}"
            raise TypeError(msg)

    def _run_command(
        self,
        action: RunCommand | RunCommandQuiet | RunCommandVisibleOutputOnly,
        *,
        inherit_io: bool,
        result: ExecutionResult,
    ) -> None:
        try:
            self._runner(action.args, cwd=self._cwd.path, inherit_io=inherit_io)
        except OSError as exc:
            logger.error("Failed to run %s: %s", action, exc)
            self._error_console.print(str(exc), style="red", markup=False)
            result.failed.append(action)

    def _run_editor(self, action: RunEditor, result: ExecutionResult) -> None:
        self._echo.echo(self._cwd.path, ("edit", action.dest))
        root = self._cwd.path
        dest = root / action.dest
        instructions = self.prepare_editor(dest, root / action.src)
        state = self._editor(
            dest,
            instructions,
            root=root,
            config=self._config,
            console=self._console,
        )
        result.editor_states.append(state)
        self._write_snapshot(state, dest, len(result.editor_states))

    def prepare_editor(self, dest: Path, src: Path) -> list[Instruction]:
        """Copy `src` over `dest` and compile the session that types it."""

        try:
            shutil.copyfile(src, dest)
        except OSError as exc:
            msg = f"Failed to copy from {src} to {dest}: {exc}"
            raise EditorSetupError(msg) from exc

        extension = dest.suffix
        if not extension:
            msg = f"File {dest} does not have an extension"
            raise EditorSetupError(msg)
        try:
            extension.encode("utf-8")
        except UnicodeEncodeError as exc:
            msg = f"{dest}: extension is not valid UTF-8"
            raise EditorSetupError(msg) from exc

        try:
            code = dest.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            msg = f"Failed to read {dest}: {exc}"
            raise EditorSetupError(msg) from exc

        lines = highlight(code, extension, style=self._config.highlight_style)
        compiled = self._compiler.compile(lines)
        return finalize_instructions(compiled, intro_pause_ms=self._config.intro_pause_ms)

    def _write_snapshot(self, state: EditorState, dest: Path, index: int) -> None:
        snapshot_dir = self._config.snapshot_dir
        if snapshot_dir is None:
            return
        stem = f"{index:02d}-{dest.name}"
        HtmlRenderer().render(state, snapshot_dir / f"{stem}.html")
        if self._config.snapshot_png:
            ImageExporter().render(state, snapshot_dir / f"{stem}.png")
        logger.info("Wrote editor snapshot %s", stem)
