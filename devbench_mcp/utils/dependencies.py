"""
Configuration and dependency management for the devbench MCP server.
"""

import logging
from functools import lru_cache

from devbench_mcp.tools.folder_tool import FolderTool
from devbench_mcp.tools.shell_tool import ShellTool
from devbench_mcp.tools.workspace_tool import WorkspaceTool
from devbench_mcp.utils.config import ServiceConfig
from devbench_mcp.utils.session_manager import SessionManager

logger = logging.getLogger(__name__)


@lru_cache
def get_base_config() -> ServiceConfig:
    """
    Retrieves the base server configuration from environment variables.

    This function is cached to avoid repeatedly reading and parsing environment
    variables and .env files.

    Returns:
        A cached instance of the ServiceConfig.
    """
    return ServiceConfig()


@lru_cache
def get_session_manager() -> SessionManager:
    """Returns the process-wide SessionManager."""
    logger.info("Initializing SessionManager singleton.")
    return SessionManager()


# --- Tool Providers ---


@lru_cache
def get_shell_tool_provider() -> ShellTool:
    """Returns a cached instance of the ShellTool."""
    config = get_base_config()
    logger.info("Initializing ShellTool singleton with shell %s.", config.SHELL_EXECUTABLE)
    return ShellTool(shell_executable=config.SHELL_EXECUTABLE)


@lru_cache
def get_folder_tool_provider() -> FolderTool:
    """Returns a cached instance of the FolderTool."""
    logger.info("Initializing FolderTool singleton.")
    return FolderTool()


@lru_cache
def get_workspace_tool_provider() -> WorkspaceTool:
    """Returns a cached instance of the WorkspaceTool."""
    config = get_base_config()
    logger.info("Initializing WorkspaceTool singleton.")
    return WorkspaceTool(
        projects_root=config.PROJECTS_ROOT.expanduser(),
        scaffold_executable=config.SCAFFOLD_EXECUTABLE,
    )
