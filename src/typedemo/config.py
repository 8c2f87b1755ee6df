from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import jsonschema

from .file_tree import DEFAULT_BLACKLIST

CONFIG_ENV_VAR = "TYPEDEMO_CONFIG"

CONFIG_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "properties": {
        "typing_delay_ms": {
            "type": "array",
            "items": {"type": "integer", "minimum": 0},
            "minItems": 2,
            "maxItems": 2,
        },
        "intro_pause_ms": {"type": "integer", "minimum": 0},
        "action_gap_ms": {"type": "integer", "minimum": 0},
        "highlight_style": {"type": "string", "minLength": 1},
        "tab_width": {"type": "integer", "minimum": 1},
        "tree_blacklist": {
            "type": "array",
            "items": {"type": "string"},
        },
        "poll_interval": {"type": "number", "exclusiveMinimum": 0},
        "snapshot_dir": {"type": ["string", "null"]},
        "snapshot_png": {"type": "boolean"},
    },
    "additionalProperties": False,
}


@dataclass(slots=True)
class DemoConfig:
    typing_delay_ms: tuple[int, int] = (35, 85)
    intro_pause_ms: int = 1000
    action_gap_ms: int = 50
    highlight_style: str = "monokai"
    tab_width: int = 4
    tree_blacklist: tuple[str, ...] = DEFAULT_BLACKLIST
    poll_interval: float = 0.02
    snapshot_dir: Path | None = None
    snapshot_png: bool = False


def validate_config(payload: Mapping[str, Any]) -> None:
    jsonschema.validate(instance=payload, schema=CONFIG_SCHEMA)


def load_config(source: Path | Mapping[str, Any] | None = None) -> DemoConfig:
    if source is None:
        return DemoConfig()
    if isinstance(source, Path):
        data = json.loads(source.read_text(encoding="utf-8"))
    else:
        data = source
    validate_config(data)

    defaults = DemoConfig()
    low, high = data.get("typing_delay_ms", defaults.typing_delay_ms)
    if low > high:
        msg = f"typing_delay_ms minimum {low} exceeds maximum {high}"
        raise ValueError(msg)
    snapshot_dir = data.get("snapshot_dir")

    return DemoConfig(
        typing_delay_ms=(int(low), int(high)),
        intro_pause_ms=int(data.get("intro_pause_ms", defaults.intro_pause_ms)),
        action_gap_ms=int(data.get("action_gap_ms", defaults.action_gap_ms)),
        highlight_style=data.get("highlight_style", defaults.highlight_style),
        tab_width=int(data.get("tab_width", defaults.tab_width)),
        tree_blacklist=tuple(data.get("tree_blacklist", defaults.tree_blacklist)),
        poll_interval=float(data.get("poll_interval", defaults.poll_interval)),
        snapshot_dir=Path(snapshot_dir) if snapshot_dir is not None else None,
        snapshot_png=bool(data.get("snapshot_png", defaults.snapshot_png)),
    )


def config_from_env(environ: Mapping[str, str] | None = None) -> DemoConfig:
    environ = os.environ if environ is None else environ
    path = environ.get(CONFIG_ENV_VAR)
    if not path:
        return DemoConfig()
    return load_config(Path(path))
