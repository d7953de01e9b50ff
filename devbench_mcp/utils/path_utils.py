from pathlib import Path


def join_path(base: Path, path_str: str) -> Path:
    """
    Joins a user-provided path onto a base directory.

    A leading `~` is expanded, and an absolute path overrides the base.
    The result is not resolved and may not exist.
    """
    path = Path(path_str).expanduser()
    return path if path.is_absolute() else base / path


def resolve_cd_target(cwd: Path, target: str | None) -> Path:
    """
    Resolves the argument of a `cd` command against the current directory.

    Args:
        cwd: The session's current working directory.
        target: The first argument of `cd`, or None when it was given none.

    Returns:
        The candidate directory. The caller validates it exists.
    """
    if target is None:
        return Path.home()
    if target == "..":
        # Path("/").parent is Path("/"), so this is a no-op at the root.
        return cwd.parent
    return join_path(cwd, target)


def snapshot_root(path_str: str) -> tuple[Path, str]:
    """
    Returns the absolute snapshot root for `path_str` and its label.

    The label is the base name of `path_str` as written. It is empty for the
    filesystem root, for `.`, and for paths ending in `..`. Trailing `.`
    components are dropped first, so `blink/.` is labelled `blink`.
    """
    path = Path(path_str).expanduser()
    label = "" if path.name == ".." else path.name
    return path.absolute(), label
