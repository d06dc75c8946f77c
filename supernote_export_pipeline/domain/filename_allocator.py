"""
Non-colliding filename allocation.

The allocator tries ``stem.ext``, ``stem-1.ext``, ``stem-2.ext``, … and returns
the first path the supplied existence predicate reports as free. It has no
storage dependency of its own, which keeps it trivially testable with an
in-memory set.

The existence check and the later write are two separate calls, so another
writer can still create the chosen path in between. Storage implementations
that can create files exclusively should do so and report the collision as an
error.
"""

from collections.abc import Callable
import itertools


def build_file_path(directory: str, stem: str, extension: str) -> str:
    """Join a vault-relative directory, stem and extension.

    An empty directory (or ``"/"``) means the vault root.
    """
    directory = (directory or "").strip("/")
    if not directory:
        return f"{stem}.{extension}"
    return f"{directory}/{stem}.{extension}"


def allocate(
    directory: str,
    stem: str,
    extension: str,
    exists: Callable[[str], bool],
) -> str:
    """Return the first free path in the ``stem``, ``stem-1``, … sequence.

    Args:
        directory: Vault-relative folder, empty for the vault root.
        stem: Desired filename without extension.
        extension: Extension without the leading dot.
        exists: Predicate reporting whether a path is already taken.

    Returns:
        A path for which ``exists`` returned False.
    """
    candidate = build_file_path(directory, stem, extension)
    if not exists(candidate):
        return candidate

    for counter in itertools.count(1):
        candidate = build_file_path(directory, f"{stem}-{counter}", extension)
        if not exists(candidate):
            return candidate

    raise AssertionError("unreachable")
