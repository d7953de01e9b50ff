# Copyright (c) 2025 ByteDance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

import logging
from typing_extensions import override

from devbench_mcp.models.session import ShellSession
from devbench_mcp.tools.base import (
    NavigationError,
    Tool,
    ToolCallArguments,
    ToolError,
    ToolExecResult,
    ToolParameter,
)
from devbench_mcp.tools.run import run
from devbench_mcp.utils.path_utils import resolve_cd_target

logger = logging.getLogger(__name__)

CD_BUILTIN = "cd"


class ShellTool(Tool):
    """
    A tool that runs command lines inside a persistent session.

    `cd` is interpreted by the tool itself and changes the session's CWD.
    Every other line is handed verbatim to a POSIX shell started in that CWD.
    """

    def __init__(self, shell_executable: str = "/bin/sh"):
        self._shell_executable = shell_executable

    @override
    def get_name(self) -> str:
        return "run_command"

    @override
    def get_description(self) -> str:
        return """Run a command line in a persistent shell session.
* `cd [dir]` changes the session's working directory; with no argument it goes to the home directory.
* Any other line runs in a new shell process started in the session's working directory.
* Standard output and standard error are returned together. The exit status is not reported.
* Commands in one session run one at a time; a command that never exits blocks the session.
"""

    @override
    def get_parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter(
                name="command",
                type="string",
                description="The command line to run.",
                required=True,
            ),
        ]

    @override
    async def execute(self, arguments: ToolCallArguments) -> ToolExecResult:
        session = arguments.get("_session")
        if not isinstance(session, ShellSession):
            return ToolExecResult(error="ShellSession not found in arguments.", error_code=-1)

        command = arguments.get("command")
        if not isinstance(command, str):
            return ToolExecResult(error="The 'command' parameter must be a string.", error_code=-1)

        try:
            return ToolExecResult(output=await self.run_command(session, command))
        except ToolError as e:
            return ToolExecResult(error=e.message, error_code=-1)

    async def run_command(self, session: ShellSession, line: str) -> str:
        """
        Runs one command line against the session.

        Args:
            session: The session whose CWD the command runs in.
            line: The raw command line.

        Returns:
            The new CWD for `cd`, otherwise the stripped stdout followed by stderr.

        Raises:
            NavigationError: If the `cd` target is not an existing directory.
            LaunchError: If the shell could not be started.
        """
        tokens = line.split()
        if not tokens:
            return ""

        async with session.lock:
            if tokens[0] == CD_BUILTIN:
                return self._cd_handler(session, tokens[1:])

            _, stdout, stderr = await run([self._shell_executable, "-c", line], cwd=session.cwd)
            return (stdout + stderr).strip()

    def _cd_handler(self, session: ShellSession, args: list[str]) -> str:
        target = args[0] if args else None
        target_dir = resolve_cd_target(session.cwd, target)
        if not target_dir.is_dir():
            raise NavigationError(f"no such directory: {target if target is not None else target_dir}")

        session.cwd = target_dir.resolve()
        logger.debug(f"CWD is now {session.cwd}")
        return str(session.cwd)
