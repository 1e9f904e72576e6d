from __future__ import annotations

from typing import Any, Optional


class ResourceError(Exception):
    """A failed read or write: transport failure (status=None) or non-2xx reply."""

    def __init__(self, message: str, status: Optional[int] = None, path: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.path = path

    def __repr__(self) -> str:  # pragma: no cover
        return f"ResourceError(status={self.status!r}, path={self.path!r}, message={self.message!r})"


def message_from_payload(payload: Any, text: str, status: int) -> str:
    """
    Pull the human-readable message out of an error body, verbatim.
    Accepts {"message": ...}, {"error": {"message": ...}} or raw text.
    """
    if isinstance(payload, dict):
        msg = payload.get("message")
        if isinstance(msg, str) and msg.strip():
            return msg
        err = payload.get("error")
        if isinstance(err, dict):
            inner = err.get("message")
            if isinstance(inner, str) and inner.strip():
                return inner
        if isinstance(err, str) and err.strip():
            return err
    if text and text.strip():
        return text.strip()
    return f"Request failed with status {status}"
