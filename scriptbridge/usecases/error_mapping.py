"""Translate adapter errors into user-facing UseCaseError instances."""

from __future__ import annotations

from typing import Optional

from scriptbridge.domain.ports import UseCaseError


def map_error(
    exc: Exception,
    *,
    default_code: str,
    default_message: Optional[str] = None,
) -> UseCaseError:
    """Map adapter exceptions to stable UseCaseError codes.

    Args:
        exc: Exception raised by a port implementation.
        default_code: Code used when the exception carries no better mapping.
        default_message: Prefix for the user-facing message.

    Returns:
        UseCaseError: ``exc`` itself when it already is one.
    """
    if isinstance(exc, UseCaseError):
        return exc
    if isinstance(exc, TimeoutError):
        return UseCaseError("TIMEOUT", _compose_error_message(default_message or "Request timed out", None))
    if isinstance(exc, OSError):
        hint = exc.strerror or str(exc)
        if exc.filename:
            hint = f"{hint} ({exc.filename})"
        return UseCaseError(default_code, _compose_error_message(default_message or "I/O error", hint))

    hint = str(exc).strip() or exc.__class__.__name__
    return UseCaseError(default_code, _compose_error_message(default_message or "Unexpected error", hint))


def _compose_error_message(base: str, hint: Optional[str]) -> str:
    """Compose a user-facing error message with optional hint text."""
    hint_text = (hint or "").strip()
    if hint_text:
        return f"{base}: {hint_text}"
    if base.endswith("."):
        return base
    return f"{base}."


__all__ = ["map_error"]
