"""String sanitisation — identifier and value normalization for stored pairs."""

from __future__ import annotations


def is_private(name: str) -> bool:
    """Return ``True`` if *name* is surrounded by two leading and trailing underscores.

    The prefix and suffix may overlap, so ``"__"`` and ``"___"`` qualify.
    """
    return name.startswith("__") and name.endswith("__")


def pair_key(user: str, name: str) -> bytes:
    """Return the lowercase storage key for a *user* and *name*."""
    return f"{user.lower()}:{name.lower()}".encode()


def pair_value(text: str) -> bytes:
    """Return the whitespace-trimmed, newline-terminated storage value."""
    return (text.strip() + "\n").encode()
