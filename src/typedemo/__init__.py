"""Replay scripted shell actions and file edits as a human-paced terminal demo."""

from .command import run_command
from .compiler import InstructionCompiler, finalize_instructions
from .config import CONFIG_SCHEMA, DemoConfig, load_config, validate_config
from .echo import CommandEcho, format_prompt
from .editor import (
    CursorPosition,
    EditorState,
    EditorStateMachine,
    Line,
    Span,
    ViewportState,
)
from .errors import EditorSetupError, ScriptError, TypedemoError, WorkingDirectoryError
from .file_tree import Folder, path_breadcrumb, read_file_tree
from .highlight import StyledRun, highlight
from .instruction import (
    Color,
    HideCursor,
    Instruction,
    MoveCursor,
    Newline,
    Pause,
    SetColumn,
    SetForegroundColor,
    TypeChar,
    UpdateFocus,
    WaitForAck,
    WaitForQuit,
)
from .orchestrator import ActionOrchestrator, ExecutionResult, WorkingDirectory
from .playback import AckChannel, PlaybackEngine
from .shutdown import KeyEvent, QuitFlag, QuittableEventSource, StopEvent
from .snapshot import HtmlRenderer, ImageExporter
from .surface import EditorSurface, EditorView, run_editor_session

__all__ = [
    "AckChannel",
    "ActionOrchestrator",
    "CONFIG_SCHEMA",
    "Color",
    "CommandEcho",
    "CursorPosition",
    "DemoConfig",
    "EditorSetupError",
    "EditorState",
    "EditorStateMachine",
    "EditorSurface",
    "EditorView",
    "ExecutionResult",
    "Folder",
    "HideCursor",
    "HtmlRenderer",
    "ImageExporter",
    "Instruction",
    "InstructionCompiler",
    "KeyEvent",
    "Line",
    "MoveCursor",
    "Newline",
    "Pause",
    "PlaybackEngine",
    "QuitFlag",
    "QuittableEventSource",
    "ScriptError",
    "SetColumn",
    "SetForegroundColor",
    "Span",
    "StopEvent",
    "StyledRun",
    "TypeChar",
    "TypedemoError",
    "UpdateFocus",
    "ViewportState",
    "WaitForAck",
    "WaitForQuit",
    "WorkingDirectory",
    "WorkingDirectoryError",
    "finalize_instructions",
    "format_prompt",
    "highlight",
    "load_config",
    "path_breadcrumb",
    "read_file_tree",
    "run_command",
    "run_editor_session",
    "validate_config",
]
