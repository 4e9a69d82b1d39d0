# promptshelf/core/exceptions.py
"""
Custom exceptions for the application.

Each error carries the HTTP status it maps to at the API boundary.
"""
from typing import Any, Dict, List, Optional, Sequence


class PromptShelfError(Exception):
    """Base exception for all PromptShelf errors."""
    status_code: int = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class UnauthenticatedError(PromptShelfError):
    """No user identity could be resolved for the request."""
    status_code = 401

    def __init__(self):
        super().__init__("Unauthorized")


class PromptNotFoundError(PromptShelfError):
    """
    Prompt is absent or belongs to another owner.

    Both cases share one message so existence never leaks across owners.
    """
    status_code = 404

    def __init__(self, prompt_id: str):
        super().__init__("Prompt not found", {"prompt_id": prompt_id})
        self.prompt_id = prompt_id


class ValidationFailedError(PromptShelfError):
    """Required-field or enum violation on a write."""
    status_code = 400

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message or "Invalid prompt data", details)

    @classmethod
    def from_errors(cls, errors: Sequence[Dict[str, Any]]) -> "ValidationFailedError":
        """
        Build a readable message from Pydantic error dicts.

        ("body", "title") + missing  ->  "Title is required"
        value errors keep their own text ("Tags cannot be empty").
        """
        messages: List[str] = []
        for error in errors:
            fields = [str(part) for part in error.get("loc", ()) if isinstance(part, str) and part != "body"]
            label = fields[0][:1].upper() + fields[0][1:] if fields else None
            msg = str(error.get("msg", "")).strip()
            if msg.startswith("Value error, "):
                msg = msg[len("Value error, "):]
            elif error.get("type") == "missing" and label:
                msg = f"{label} is required"
            elif label:
                msg = f"{label}: {msg}"
            if msg and msg not in messages:
                messages.append(msg)
        return cls("; ".join(messages) or None, {"errors": len(errors)})


class InvalidQueryError(PromptShelfError):
    """Malformed list query parameter (page, limit)."""
    status_code = 400

    def __init__(self, param: str, value: Any, reason: str):
        super().__init__(
            f"Invalid '{param}' parameter: {reason}",
            {"param": param, "value": value}
        )
        self.param = param


class StoreFailureError(PromptShelfError):
    """
    Unexpected persistence failure.

    `message` is the public text; the underlying error stays in `details`
    for logging only.
    """
    status_code = 500

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message, {"cause": repr(cause)} if cause else None)
        self.cause = cause
