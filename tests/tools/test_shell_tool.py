"""
Unit tests for shell_tool.py
"""

import asyncio
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from devbench_mcp.models.session import ShellSession
from devbench_mcp.tools.base import LaunchError, NavigationError
from devbench_mcp.tools.shell_tool import ShellTool


class TestShellTool:
    """Tests for ShellTool"""

    @pytest.fixture
    def shell_tool(self):
        return ShellTool()

    @pytest.fixture
    def workdir(self, tmp_path):
        """A resolved working directory with one subdirectory and one file."""
        root = tmp_path.resolve()
        (root / "sub").mkdir()
        (root / "notes.txt").write_text("hello\n")
        return root

    @pytest.fixture
    def session(self, workdir):
        return ShellSession(cwd=workdir)

    @pytest.mark.asyncio
    async def test_empty_line_is_noop(self, shell_tool, session, workdir):
        with patch("devbench_mcp.tools.shell_tool.run", new_callable=AsyncMock) as mock_run:
            assert await shell_tool.run_command(session, "") == ""
            assert await shell_tool.run_command(session, "   \t ") == ""
            mock_run.assert_not_called()
        assert session.cwd == workdir

    @pytest.mark.asyncio
    async def test_cd_absolute_then_pwd(self, shell_tool, session, workdir):
        target = workdir / "sub"
        assert await shell_tool.run_command(session, f"cd {target}") == str(target)
        assert await shell_tool.run_command(session, "pwd") == str(target)

    @pytest.mark.asyncio
    async def test_cd_relative(self, shell_tool, session, workdir):
        assert await shell_tool.run_command(session, "cd sub") == str(workdir / "sub")
        assert session.cwd == workdir / "sub"

    @pytest.mark.asyncio
    async def test_cd_normalizes_path(self, shell_tool, session, workdir):
        assert await shell_tool.run_command(session, "cd sub/../sub/.") == str(workdir / "sub")

    @pytest.mark.asyncio
    async def test_cd_nonexistent_keeps_cwd(self, shell_tool, session, workdir):
        with pytest.raises(NavigationError) as exc_info:
            await shell_tool.run_command(session, "cd /nonexistent123")

        assert exc_info.value.message == "no such directory: /nonexistent123"
        assert session.cwd == workdir
        assert await shell_tool.run_command(session, "pwd") == str(workdir)

    @pytest.mark.asyncio
    async def test_cd_to_file_fails(self, shell_tool, session, workdir):
        with pytest.raises(NavigationError, match="no such directory: notes.txt"):
            await shell_tool.run_command(session, "cd notes.txt")
        assert session.cwd == workdir

    @pytest.mark.asyncio
    async def test_cd_without_argument_goes_home(self, shell_tool, session, tmp_path, monkeypatch):
        home = tmp_path / "home"
        home.mkdir()
        monkeypatch.setenv("HOME", str(home))

        assert await shell_tool.run_command(session, "cd") == str(home.resolve())
        assert session.cwd == home.resolve()

    @pytest.mark.asyncio
    async def test_cd_parent(self, shell_tool, workdir):
        session = ShellSession(cwd=workdir / "sub")
        assert await shell_tool.run_command(session, "cd ..") == str(workdir)

    @pytest.mark.asyncio
    async def test_cd_parent_at_root_is_idempotent(self, shell_tool):
        session = ShellSession(cwd=Path("/"))
        assert await shell_tool.run_command(session, "cd ..") == "/"
        assert await shell_tool.run_command(session, "cd ..") == "/"
        assert session.cwd == Path("/")

    @pytest.mark.asyncio
    async def test_cd_ignores_extra_arguments(self, shell_tool, session, workdir):
        assert await shell_tool.run_command(session, "cd sub other") == str(workdir / "sub")

    @pytest.mark.asyncio
    async def test_command_runs_in_session_cwd(self, shell_tool, session):
        assert await shell_tool.run_command(session, "cat notes.txt") == "hello"

    @pytest.mark.asyncio
    async def test_stdout_then_stderr(self, shell_tool, session):
        output = await shell_tool.run_command(session, "echo err 1>&2; echo out")
        assert output == "out\nerr"

    @pytest.mark.asyncio
    async def test_exit_status_not_surfaced(self, shell_tool, session):
        assert await shell_tool.run_command(session, "echo oops; exit 3") == "oops"
        assert await shell_tool.run_command(session, "false") == ""

    @pytest.mark.asyncio
    async def test_line_is_passed_verbatim(self, shell_tool, session):
        assert await shell_tool.run_command(session, "printf 'a\\nb\\n' | wc -l") == "2"

    @pytest.mark.asyncio
    async def test_cd_inside_delegated_line_does_not_move_session(self, shell_tool, session, workdir):
        assert await shell_tool.run_command(session, "true; cd sub") == ""
        assert session.cwd == workdir

    @pytest.mark.asyncio
    async def test_launch_failure(self, session):
        tool = ShellTool(shell_executable="/nonexistent/bin/sh")
        with pytest.raises(LaunchError):
            await tool.run_command(session, "echo hi")

    @pytest.mark.asyncio
    async def test_concurrent_commands_do_not_interleave(self, shell_tool, session):
        first, second = await asyncio.gather(
            shell_tool.run_command(session, "echo a1; sleep 0.2; echo a2"),
            shell_tool.run_command(session, "echo b1; sleep 0.1; echo b2"),
        )
        assert first == "a1\na2"
        assert second == "b1\nb2"

    @pytest.mark.asyncio
    async def test_lock_held_while_command_runs(self, shell_tool, session, workdir):
        running = asyncio.create_task(shell_tool.run_command(session, "sleep 0.3; echo done"))
        await asyncio.sleep(0.1)
        assert session.lock.locked()

        cd_task = asyncio.create_task(shell_tool.run_command(session, "cd sub"))
        await asyncio.sleep(0.05)
        assert not cd_task.done()
        assert session.cwd == workdir

        assert await running == "done"
        assert await cd_task == str(workdir / "sub")
        assert not session.lock.locked()

    @pytest.mark.asyncio
    async def test_cancelled_command_is_killed_before_lock_release(self, shell_tool, session, workdir):
        running = asyncio.create_task(shell_tool.run_command(session, "sleep 0.5; echo first > marker"))
        await asyncio.sleep(0.1)
        running.cancel()
        with pytest.raises(asyncio.CancelledError):
            await running

        assert not session.lock.locked()
        output = await shell_tool.run_command(
            session, "sleep 0.7; test -e marker && echo written || echo absent"
        )
        assert output == "absent"
        assert not (workdir / "marker").exists()

    @pytest.mark.asyncio
    async def test_execute_success(self, shell_tool, session):
        result = await shell_tool.execute({"command": "echo hi", "_session": session})
        assert result.output == "hi"
        assert result.error is None
        assert result.error_code == 0

    @pytest.mark.asyncio
    async def test_execute_navigation_error(self, shell_tool, session):
        result = await shell_tool.execute({"command": "cd /nonexistent123", "_session": session})
        assert result.error == "no such directory: /nonexistent123"
        assert result.error_code == -1

    def test_parameters(self, shell_tool):
        assert shell_tool.name == "run_command"
        assert [(p.name, p.required) for p in shell_tool.parameters] == [("command", True)]

    @pytest.mark.asyncio
    async def test_execute_without_session(self, shell_tool):
        result = await shell_tool.execute({"command": "pwd"})
        assert result.error == "ShellSession not found in arguments."
        assert result.error_code == -1
