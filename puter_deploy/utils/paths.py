"""Remote path helpers."""
import re

_SLASH_RUN = re.compile(r"/{2,}")


def to_posix(path: str) -> str:
    return str(path).replace("\\", "/")


def join_remote_path(base: str, relative: str = "") -> str:
    """
    Join a remote directory and a relative path with forward slashes.

    Trailing slashes on ``base`` and leading slashes on ``relative`` are
    trimmed and duplicate separators collapsed:
    ``join_remote_path("a/b/", "c.txt") == "a/b/c.txt"``.
    """
    base = _SLASH_RUN.sub("/", to_posix(base))
    relative = _SLASH_RUN.sub("/", to_posix(relative)).lstrip("/")
    if base != "/":
        base = base.rstrip("/")

    if not relative:
        return base
    if not base:
        return relative
    if base == "/":
        return f"/{relative}"
    return f"{base}/{relative}"
