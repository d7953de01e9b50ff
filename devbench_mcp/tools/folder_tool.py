import json
import logging
import os
from pathlib import Path
from typing_extensions import override

from devbench_mcp.models.file_node import FileNode
from devbench_mcp.tools.base import (
    FilesystemTraversalError,
    Tool,
    ToolCallArguments,
    ToolError,
    ToolExecResult,
    ToolParameter,
)
from devbench_mcp.utils.path_utils import snapshot_root

logger = logging.getLogger(__name__)


class FolderTool(Tool):
    """
    Builds a point-in-time tree of a directory for the project explorer.

    Every entry is included, in the order the OS reports it. Files carry their
    full text and folders carry their children. A root that does not exist or is
    not a directory yields an empty tree, but a directory that cannot be listed
    anywhere in the walk aborts the whole snapshot.

    Symbolic links to directories are listed as empty files and never descended
    into, so link cycles cannot recurse.
    """

    @override
    def get_name(self) -> str:
        return "read_folder"

    @override
    def get_description(self) -> str:
        return """Read a directory recursively into a tree of file and folder nodes.
* Each file node has the full text of the file (empty if it cannot be decoded).
* Each folder node has its children in filesystem order.
* A path that does not exist or is not a directory returns an empty list.
"""

    @override
    def get_parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter(
                name="path",
                type="string",
                description="Path of the directory to read.",
                required=True,
            ),
        ]

    @override
    async def execute(self, arguments: ToolCallArguments) -> ToolExecResult:
        path_str = arguments.get("path")
        if not isinstance(path_str, str):
            return ToolExecResult(error="The 'path' parameter must be a string.", error_code=-1)

        try:
            nodes = self.read_folder(path_str)
        except ToolError as e:
            return ToolExecResult(error=e.message, error_code=-1)

        logger.debug(f"Read {len(nodes)} entries from {path_str}")
        return ToolExecResult(
            output=json.dumps([node.model_dump(by_alias=True, exclude_none=True) for node in nodes])
        )

    def read_folder(self, path_str: str) -> list[FileNode]:
        """
        Takes a snapshot of the directory at `path_str`.

        Raises:
            FilesystemTraversalError: If a directory in the tree cannot be listed.
        """
        root, root_label = snapshot_root(path_str)
        if not root.is_dir():
            logger.debug(f"Snapshot root {root} is not a directory, returning no entries")
            return []

        logger.info(f"Reading folder {root} (label {root_label!r})")
        return self._read_dir_recursive(root, root_label)

    def _read_dir_recursive(self, dir_path: Path, root_label: str) -> list[FileNode]:
        try:
            with os.scandir(dir_path) as it:
                entries = list(it)
        except OSError as e:
            logger.error(f"Cannot list {dir_path}: {e}")
            raise FilesystemTraversalError(f"Cannot read directory {dir_path}: {e}") from e

        nodes = []
        for entry in entries:
            if entry.is_dir(follow_symlinks=False):
                nodes.append(
                    FileNode(
                        id=entry.path,
                        name=entry.name,
                        kind="folder",
                        children=self._read_dir_recursive(Path(entry.path), root_label),
                        root_label=root_label,
                    )
                )
            else:
                content, read_failed = self._read_file_text(entry)
                nodes.append(
                    FileNode(
                        id=entry.path,
                        name=entry.name,
                        kind="file",
                        content=content,
                        root_label=root_label,
                        read_failed=read_failed,
                    )
                )
        return nodes

    def _read_file_text(self, entry: os.DirEntry) -> tuple[str, bool]:
        """Returns the text of a regular file, or ("", True) if it cannot be read."""
        # Symlinks to regular files are read through; anything else is never opened.
        if not entry.is_file():
            return "", True
        try:
            with open(entry.path, encoding="utf-8", newline="") as f:
                return f.read(), False
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(f"Could not read {entry.path}: {e}")
            return "", True
