# Copyright (c) 2025 ByteDance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""Utility to run external processes asynchronously."""

import asyncio
import logging
import os
import signal
from collections.abc import Sequence
from pathlib import Path

from devbench_mcp.tools.base import LaunchError

logger = logging.getLogger(__name__)


async def run(argv: Sequence[str], cwd: Path | None = None) -> tuple[int, str, str]:
    """
    Run a process to completion and capture its output.

    No timeout is applied: the call returns only when the process exits.
    If the call is cancelled, the process is killed and reaped before the
    cancellation propagates.

    Args:
        argv: The program and its arguments.
        cwd: Working directory for the process.

    Returns:
        A tuple of (return_code, stdout, stderr). Output is decoded as UTF-8,
        undecodable bytes are replaced.

    Raises:
        LaunchError: If the process could not be started.
    """
    try:
        process = await asyncio.create_subprocess_exec(
            *argv,
            cwd=cwd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            start_new_session=True,
        )
    except OSError as e:
        logger.error(f"Failed to launch {argv[0]!r}: {e}")
        raise LaunchError(str(e)) from e

    try:
        stdout, stderr = await process.communicate()
    except asyncio.CancelledError:
        # The whole group dies before the caller releases its lock.
        logger.warning(f"{argv[0]!r} cancelled, killing pid {process.pid}")
        try:
            os.killpg(process.pid, signal.SIGKILL)
        except ProcessLookupError:
            pass
        await process.wait()
        raise

    logger.debug(f"{argv[0]!r} exited with code {process.returncode}")
    return (
        process.returncode or 0,
        stdout.decode(errors="replace"),
        stderr.decode(errors="replace"),
    )
