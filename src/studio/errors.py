"""
Error taxonomy for the studio core.

Structural no-ops (unknown ids) never raise. Everything raised from here is
recoverable: the caller may fix the input or simply retry.
"""

from __future__ import annotations

from typing import Any, Optional


class StudioError(Exception):
    """Base class for all studio errors."""


class FieldValidationError(StudioError, ValueError):
    """A field value was rejected at data-entry time. The target is left untouched."""

    def __init__(self, message: str, errors: Optional[list[dict[str, Any]]] = None):
        super().__init__(message)
        self.errors = errors or []

    @classmethod
    def from_pydantic(cls, context: str, exc: Exception) -> "FieldValidationError":
        errors = exc.errors() if hasattr(exc, "errors") else []  # pydantic.ValidationError
        fields = ", ".join(".".join(str(p) for p in e.get("loc", ())) for e in errors) or "?"
        return cls(f"Invalid {context}: {fields}", errors=[_plain_error(e) for e in errors])


class PersistenceError(StudioError):
    """A content store or asset store call failed. Local draft state is unchanged."""


class SaveInProgressError(StudioError):
    """A save was requested while another save for the same session is still in flight."""


class TrainingNotFoundError(StudioError, LookupError):
    """The content store has no training with the requested id."""


class UploadError(StudioError):
    """An upload was rejected by its bucket policy or failed in the asset store."""


class WizardStateError(StudioError):
    """A wizard transition is not allowed from the current step."""


def _plain_error(err: dict[str, Any]) -> dict[str, Any]:
    # pydantic error dicts can carry exception objects under "ctx"; keep them JSON-safe.
    return {
        "loc": [str(p) for p in err.get("loc", ())],
        "msg": str(err.get("msg", "")),
        "type": str(err.get("type", "")),
    }
