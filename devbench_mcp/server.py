"""
MCP server definition for the devbench backend.
"""

import asyncio
import logging
from typing import Any

from fastapi.middleware.cors import CORSMiddleware
from starlette.applications import Starlette
from starlette.middleware import Middleware

from mcp.server.fastmcp import Context, FastMCP

from devbench_mcp.tools.base import ToolCallArguments, ToolError
from devbench_mcp.utils.config import ServiceConfig
from devbench_mcp.utils.dependencies import (
    get_base_config,
    get_folder_tool_provider,
    get_session_manager,
    get_shell_tool_provider,
    get_workspace_tool_provider,
)


# Get a module-level logger
logger = logging.getLogger(__name__)


class CustomFastMCP(FastMCP):
    """Custom FastMCP server with CORS middleware."""

    def _add_cors_middleware(self, app: Starlette) -> Starlette:
        """A helper to add CORS middleware to a Starlette app."""
        app.user_middleware.insert(
            0,
            Middleware(
                CORSMiddleware,
                allow_origin_regex=".*",  # Allow any origin
                allow_credentials=True,
                allow_methods=["*"],
                allow_headers=["*"],
            ),
        )
        app.middleware_stack = app.build_middleware_stack()
        return app

    def sse_app(self, mount_path: str | None = None) -> Starlette:
        """Overrides the default sse_app to inject CORS middleware."""
        app = super().sse_app(mount_path)
        return self._add_cors_middleware(app)

    def streamable_http_app(self) -> Starlette:
        """Overrides the default streamable_http_app to inject CORS middleware."""
        app = super().streamable_http_app()
        return self._add_cors_middleware(app)


def build_server(config: ServiceConfig) -> CustomFastMCP:
    """Build and configure the FastMCP server instance.

    Args:
        config: The server's service configuration.

    Returns:
        A configured CustomFastMCP instance.
    """
    logger.info(
        "Initializing FastMCP server",
        extra={"host": config.MCP_HOST, "port": config.MCP_PORT},
    )
    return CustomFastMCP(
        "devbench-mcp",
        host=config.MCP_HOST,
        port=config.MCP_PORT,
    )


def _error(e: Exception) -> dict[str, Any]:
    message = e.message if isinstance(e, ToolError) else str(e)
    return {"status": "error", "error": message, "error_type": type(e).__name__}


# Get the base configuration for server initialization.
# This is also imported by main.py to run the server.
server_config = get_base_config()
mcp_app = build_server(server_config)


# --- Session Tools ---

@mcp_app.tool(
    name=get_shell_tool_provider().name,
    description=get_shell_tool_provider().description,
)
async def run_command(
    context: Context,
    command: str,
    session_id: str = "default",
) -> dict[str, Any]:
    """
    Runs a command line in a persistent shell session.

    `cd` changes the session's working directory. Any other line runs in a shell
    started in that directory, and its standard output and standard error are
    returned together.

    Args:
        command: The command line to run.
        session_id: The session to run it in.

    Returns:
        A dictionary containing the captured output, or the error.
    """
    logger.info(f"Executing command in session '{session_id}': {command}")
    try:
        session = get_session_manager().get_session(session_id)
        output = await get_shell_tool_provider().run_command(session, command)
        return {"status": "success", "result": output}
    except Exception as e:
        logger.error(f"Error executing command: {e}", exc_info=True)
        return _error(e)


@mcp_app.tool(
    name=get_folder_tool_provider().name,
    description=get_folder_tool_provider().description,
)
async def read_folder(
    context: Context,
    path: str,
) -> list[dict[str, Any]] | dict[str, Any]:
    """
    Reads a directory recursively for the project explorer.

    Args:
        path: The absolute path of the directory.

    Returns:
        A list of file and folder nodes, empty if the path is not a directory,
        or an error dictionary if a directory in the tree cannot be read.
    """
    logger.info(f"Reading folder '{path}'")
    try:
        # The walk is blocking; it runs in a worker thread.
        nodes = await asyncio.to_thread(get_folder_tool_provider().read_folder, path)
        return [node.model_dump(by_alias=True, exclude_none=True) for node in nodes]
    except Exception as e:
        logger.error(f"Error reading folder: {e}", exc_info=True)
        return _error(e)


# --- Workspace Tools ---

@mcp_app.tool()
async def create_project(
    context: Context,
    name: str,
) -> dict[str, Any]:
    """
    Scaffolds a new project in the projects directory.

    Args:
        name: The name of the project directory to create.

    Returns:
        A dictionary with `success`, the project `path` and a `message`.
    """
    logger.info(f"Creating project '{name}'")
    try:
        result = await get_workspace_tool_provider().create_project(name)
        return result.model_dump()
    except Exception as e:
        logger.error(f"Error creating project: {e}", exc_info=True)
        return {"success": False, "path": "", "message": str(e)}


async def _workspace(subcommand: str, path: str, content: str | None = None) -> dict[str, Any]:
    logger.info(f"Executing workspace command '{subcommand}' on path '{path}'")
    try:
        args: ToolCallArguments = {"subcommand": subcommand, "path": path}
        if content is not None:
            args["content"] = content
        result = await get_workspace_tool_provider().execute(args)
        if result.error:
            return {"status": "error", "error": result.error, "exit_code": result.error_code}
        return {"status": "success", "result": result.output, "exit_code": result.error_code}
    except Exception as e:
        logger.error(f"Error executing workspace command: {e}", exc_info=True)
        return {"status": "error", "error": str(e), "exit_code": 1}


@mcp_app.tool()
async def create_folder(context: Context, path: str) -> dict[str, Any]:
    """Creates a single folder. Fails if it already exists."""
    return await _workspace("create_folder", path)


@mcp_app.tool()
async def create_file(context: Context, path: str, content: str = "") -> dict[str, Any]:
    """Creates a new file with optional content. Fails if it already exists."""
    return await _workspace("create_file", path, content)


@mcp_app.tool()
async def write_file(context: Context, path: str, content: str) -> dict[str, Any]:
    """Replaces the content of a file, creating it if needed."""
    return await _workspace("write_file", path, content)


@mcp_app.tool()
async def delete_path(context: Context, path: str) -> dict[str, Any]:
    """Deletes a file, or a folder with everything in it."""
    return await _workspace("delete_path", path)
