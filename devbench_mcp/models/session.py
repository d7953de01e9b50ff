import asyncio
from pathlib import Path

from pydantic import BaseModel, Field, PrivateAttr


class ShellSession(BaseModel):
    """Stores the shell state for a single session."""

    cwd: Path = Field(default_factory=Path.home)
    _lock: asyncio.Lock = PrivateAttr(default_factory=asyncio.Lock)

    @property
    def lock(self) -> asyncio.Lock:
        """Guards `cwd`. Held for the whole duration of a command."""
        return self._lock
