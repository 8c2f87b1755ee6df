from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Sequence

import jsonschema
from rich.console import Console

from .config import config_from_env
from .errors import TypedemoError
from .orchestrator import ActionOrchestrator
from .script import load_script

DEBUG_ENV_VAR = "TYPEDEMO_DEBUG"

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="typedemo",
        description="Replay a script of shell actions and file edits as a typed terminal demo.",
    )
    parser.add_argument("script", type=Path, help="path to the action script")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if os.environ.get(DEBUG_ENV_VAR) else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    errors = Console(stderr=True, highlight=False)

    try:
        config = config_from_env()
        actions = load_script(args.script)
        ActionOrchestrator(config, error_console=errors).run(actions)
    except FileNotFoundError as exc:
        errors.print(f"File not found: {exc.filename}", style="red", markup=False)
        return 1
    except (TypedemoError, jsonschema.ValidationError, ValueError) as exc:
        errors.print(str(exc), style="red", markup=False)
        return 1
    except EOFError:
        errors.print("Input closed while waiting for a key press", style="red", markup=False)
        return 1
    except KeyboardInterrupt:
        return 130
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
