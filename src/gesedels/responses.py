"""Plaintext HTTP responses — the only way gesedels produces response bodies.

Templates use printf-style formatting (``form % elems``).  With no
arguments the template is sent verbatim, so a literal ``%`` is safe there.
"""

from __future__ import annotations

from typing import Any

from fastapi.responses import PlainTextResponse


def write_http(code: int, form: str, *elems: Any) -> PlainTextResponse:
    """Return a plaintext response with *code* and a newline-terminated body."""
    body = form % elems if elems else form
    return PlainTextResponse(body + "\n", status_code=code)


def write_error(code: int, form: str, *elems: Any) -> PlainTextResponse:
    """Return a plaintext server error response."""
    return write_http(code, f"server error {code}: {form}", *elems)


def write_failure(code: int, form: str, *elems: Any) -> PlainTextResponse:
    """Return a plaintext client error response."""
    return write_http(code, f"client error {code}: {form}", *elems)
