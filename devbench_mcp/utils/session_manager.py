from devbench_mcp.models.session import ShellSession


class SessionManager:
    """Manages shell sessions for all clients."""

    def __init__(self) -> None:
        # In-process only; sessions do not survive a restart.
        self._storage: dict[str, ShellSession] = {}

    def get_session(self, session_id: str = "default") -> ShellSession:
        """Returns or creates the session for a given id."""
        if session_id not in self._storage:
            self._storage[session_id] = ShellSession()
        return self._storage[session_id]
