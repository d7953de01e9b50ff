import logging
import shutil
from pathlib import Path
from typing_extensions import override

from devbench_mcp.models.file_node import ProjectResult
from devbench_mcp.tools.base import (
    LaunchError,
    Tool,
    ToolCallArguments,
    ToolExecResult,
    ToolParameter,
)
from devbench_mcp.tools.run import run

logger = logging.getLogger(__name__)

WorkspaceToolSubCommands = ["create_folder", "create_file", "write_file", "delete_path"]


class WorkspaceTool(Tool):
    """
    Tool for the explorer's single-item operations and for project scaffolding.
    Each file operation is one filesystem call whose failure is reported as text.
    """

    def __init__(
        self,
        projects_root: Path,
        scaffold_executable: str = "idf.py",
    ) -> None:
        self._projects_root = projects_root
        self._scaffold_executable = scaffold_executable

    @override
    def get_name(self) -> str:
        return "workspace"

    @override
    def get_description(self) -> str:
        return """Create, write and delete files and folders in the workspace.
* `create_folder` creates a single directory and fails if it exists.
* `create_file` creates a new file with optional content and fails if it exists.
* `write_file` replaces the content of a file, creating it if needed.
* `delete_path` removes a file, or a directory with everything in it.
"""

    @override
    def get_parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter(
                name="subcommand",
                type="string",
                description=f"The command to run. Allowed options are: {', '.join(WorkspaceToolSubCommands)}.",
                required=True,
                enum=WorkspaceToolSubCommands,
            ),
            ToolParameter(
                name="path",
                type="string",
                description="Absolute path of the file or folder.",
                required=True,
            ),
            ToolParameter(
                name="content",
                type="string",
                description="Text for `create_file` and `write_file`.",
                required=False,
            ),
        ]

    @override
    async def execute(self, arguments: ToolCallArguments) -> ToolExecResult:
        subcommand = arguments.get("subcommand")
        if not isinstance(subcommand, str):
            return ToolExecResult(error="Subcommand must be a string.", error_code=-1)

        path_str = arguments.get("path")
        if not isinstance(path_str, str) or not path_str:
            return ToolExecResult(error="The 'path' parameter is required.", error_code=-1)
        path = Path(path_str).expanduser()

        content = arguments.get("content", "")
        if not isinstance(content, str):
            return ToolExecResult(error="The 'content' parameter must be a string.", error_code=-1)

        try:
            match subcommand:
                case "create_folder":
                    path.mkdir()
                    return ToolExecResult(output=f"Folder created: {path}")
                case "create_file":
                    with open(path, "x", encoding="utf-8") as f:
                        f.write(content)
                    return ToolExecResult(output=f"File created: {path}")
                case "write_file":
                    path.write_text(content, encoding="utf-8")
                    return ToolExecResult(output=f"File written: {path}")
                case "delete_path":
                    if path.is_dir() and not path.is_symlink():
                        shutil.rmtree(path)
                    else:
                        path.unlink()
                    return ToolExecResult(output=f"Deleted: {path}")
                case _:
                    return ToolExecResult(error=f"Unknown subcommand: {subcommand}", error_code=-1)
        except OSError as e:
            logger.warning(f"{subcommand} failed for {path}: {e}")
            return ToolExecResult(error=str(e), error_code=-1)

    async def create_project(self, name: str) -> ProjectResult:
        """
        Scaffolds a new project named `name` under the projects root.

        The scaffolder runs as `<scaffold_executable> create-project <name>` with
        the projects root as its working directory.
        """
        if not name or Path(name).name != name or name in (".", ".."):
            return ProjectResult(success=False, path="", message=f"Invalid project name: {name!r}")

        project_path = self._projects_root / name
        if project_path.exists():
            logger.warning(f"Project already exists at {project_path}")
            return ProjectResult(success=False, path=str(project_path), message="Project already exists")

        logger.info(f"Creating new project: {name}")
        try:
            return_code, stdout, stderr = await run(
                [self._scaffold_executable, "create-project", name], cwd=self._projects_root
            )
        except LaunchError as e:
            return ProjectResult(success=False, path="", message=e.message)

        if return_code != 0:
            logger.error(f"Failed to create project {name}: {(stdout + stderr).strip()}")
            return ProjectResult(success=False, path="", message="Failed to create project")

        logger.info(f"Project created at {project_path}")
        return ProjectResult(success=True, path=str(project_path), message="Project created")
