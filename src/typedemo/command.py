from __future__ import annotations

import logging
import os
import subprocess
import sys
from pathlib import Path
from typing import Mapping, MutableMapping, Sequence

logger = logging.getLogger(__name__)


def run_command(
    args: Sequence[str],
    *,
    cwd: Path,
    inherit_io: bool = True,
    env: Mapping[str, str] | None = None,
) -> int:
    """Run `args` in `cwd` to completion and return its exit code.

    Output always goes straight to the terminal. With `inherit_io` off the
    child gets no stdin, so it cannot swallow key presses meant for the
    demo. Spawn failures surface as `OSError`.
    """

    if not args:
        msg = "Command must not be empty"
        raise ValueError(msg)

    sys.stdout.flush()
    sys.stderr.flush()
    logger.debug("Running %r in %s", list(args), cwd)
    process = subprocess.Popen(
        list(args),
        cwd=str(cwd),
        env=_prepare_env(env),
        stdin=None if inherit_io else subprocess.DEVNULL,
    )
    returncode = process.wait()
    logger.debug("%s exited with %d", args[0], returncode)
    return returncode


def _prepare_env(env: Mapping[str, str] | None) -> MutableMapping[str, str]:
    merged: MutableMapping[str, str] = dict(os.environ)
    if env is not None:
        merged.update(env)
    return merged
