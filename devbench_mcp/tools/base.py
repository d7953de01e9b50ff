# Copyright (c) 2025 ByteDance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""Base classes shared by all devbench tools."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

ToolCallArguments = dict[str, Any]


class ToolError(Exception):
    """Base class for tool errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message: str = message


class NavigationError(ToolError):
    """Raised when a `cd` target is missing or is not a directory."""


class LaunchError(ToolError):
    """Raised when a subprocess could not be started."""


class FilesystemTraversalError(ToolError):
    """Raised when a directory cannot be enumerated during a snapshot."""


@dataclass
class ToolExecResult:
    """Intermediate result of a tool execution."""

    output: str | None = None
    error: str | None = None
    error_code: int = 0


@dataclass
class ToolParameter:
    """Tool parameter definition."""

    name: str
    type: str | list[str]
    description: str
    enum: list[str] | None = None
    required: bool = True


class Tool(ABC):
    """Base class for all tools."""

    @property
    def name(self) -> str:
        return self.get_name()

    @property
    def description(self) -> str:
        return self.get_description()

    @property
    def parameters(self) -> list[ToolParameter]:
        return self.get_parameters()

    @abstractmethod
    def get_name(self) -> str:
        pass

    @abstractmethod
    def get_description(self) -> str:
        pass

    @abstractmethod
    def get_parameters(self) -> list[ToolParameter]:
        pass

    @abstractmethod
    async def execute(self, arguments: ToolCallArguments) -> ToolExecResult:
        pass

