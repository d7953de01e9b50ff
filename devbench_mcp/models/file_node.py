from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class FileNode(BaseModel):
    """A single entry of a folder snapshot."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str
    kind: Literal["file", "folder"] = Field(serialization_alias="type")
    content: str | None = None
    children: list["FileNode"] | None = None
    # Base name of the snapshot root, identical on every node of the tree.
    root_label: str = Field(serialization_alias="folder_name")
    # Set when `content` is empty because the file could not be read or decoded.
    read_failed: bool = Field(default=False, exclude=True)

    @model_validator(mode="after")
    def _check_payload(self) -> "FileNode":
        if self.kind == "file" and (self.content is None or self.children is not None):
            raise ValueError("A file node must have content and no children.")
        if self.kind == "folder" and (self.children is None or self.content is not None):
            raise ValueError("A folder node must have children and no content.")
        return self


class ProjectResult(BaseModel):
    """Outcome of a project scaffolding request."""

    success: bool
    path: str
    message: str
