"""
Shared pieces for step configuration payloads.

A module's `step_config` is stored as a plain dict. Each step type owns a pydantic
payload model describing the keys it understands; keys it does not understand are
inert and carried along untouched, so switching a module's step type back and forth
never loses data.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Type, get_args

from pydantic import BaseModel, ConfigDict, ValidationError

from studio.errors import FieldValidationError

logger = logging.getLogger(__name__)

MergeFn = Callable[[Dict[str, Any], Dict[str, Any]], Dict[str, Any]]


class StepPayload(BaseModel):
    """Base payload: unknown keys are allowed and preserved."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)


def shallow_merge(existing: Optional[Dict[str, Any]], updates: Dict[str, Any]) -> Dict[str, Any]:
    """Return a new dict with `updates` laid over `existing`. Nothing is removed."""
    merged = dict(existing or {})
    merged.update(updates)
    return merged


def _nested_model(annotation: Any) -> Optional[Type[BaseModel]]:
    """The pydantic model inside an annotation such as `List[QuizQuestion]`, if any."""
    if isinstance(annotation, type) and issubclass(annotation, BaseModel):
        return annotation
    for arg in get_args(annotation):
        model = _nested_model(arg)
        if model is not None:
            return model
    return None


def stored_key(model: Type[BaseModel], key: str) -> Optional[str]:
    """Stored key (alias when the field has one) for an incoming key, or None if unknown."""
    for name, field in model.model_fields.items():
        alias = field.alias or name
        if key in (name, alias):
            return alias
    return None


def _field_model(model: Optional[Type[BaseModel]], key: str) -> Optional[Type[BaseModel]]:
    if model is None:
        return None
    for name, field in model.model_fields.items():
        if key in (name, field.alias):
            return _nested_model(field.annotation)
    return None


def _overlay(raw: Any, dumped: Any, model: Optional[Type[BaseModel]] = None) -> Any:
    """
    Lay validated values over the caller's raw values.

    Nested dicts keep any raw keys the model does not know about; a raw field name
    whose value is dumped under its alias is dropped. Lists are overlaid
    element-wise when both sides have the same length.
    """
    if isinstance(raw, dict) and isinstance(dumped, dict):
        out = dict(raw)
        if model is not None:
            for key in raw:
                stored = stored_key(model, key)
                if stored is not None and stored != key:
                    out.pop(key)
        for key, value in dumped.items():
            out[key] = _overlay(raw.get(key), value, _field_model(model, key))
        return out
    if isinstance(raw, list) and isinstance(dumped, list) and len(raw) == len(dumped):
        return [_overlay(r, d, model) for r, d in zip(raw, dumped)]
    return dumped


@dataclass(frozen=True)
class StepConfigSpec:
    """Everything the editor needs to know about one step type."""

    tag: str
    label: str
    description: str
    payload_model: Type[StepPayload]
    merge_fn: Optional[MergeFn] = None

    def normalize(self, updates: Dict[str, Any]) -> Dict[str, Any]:
        """
        Validate the keys present in `updates` and return them in stored form.

        Raises FieldValidationError if a known key carries an invalid value.
        Unknown keys pass through unchanged.
        """
        if not updates:
            return {}
        try:
            parsed = self.payload_model.model_validate(updates)
        except ValidationError as exc:
            raise FieldValidationError.from_pydantic(f"{self.tag} config", exc) from exc

        dumped = parsed.model_dump(by_alias=True, exclude_unset=True)
        out: Dict[str, Any] = {}
        for key, value in updates.items():
            stored = stored_key(self.payload_model, key)
            if stored is None:
                out[key] = value
            else:
                out[stored] = _overlay(value, dumped.get(stored, value), _field_model(self.payload_model, key))
        return out

    def merge(self, existing: Optional[Dict[str, Any]], updates: Dict[str, Any]) -> Dict[str, Any]:
        normalized = self.normalize(updates)
        if self.merge_fn is not None:
            return self.merge_fn(dict(existing or {}), normalized)
        return shallow_merge(existing, normalized)

    def defaults(self) -> Dict[str, Any]:
        return self.payload_model().model_dump(by_alias=True)

    def view(self, config: Optional[Dict[str, Any]]) -> StepPayload:
        """
        Typed view of a stored config with defaults applied.

        Keys written by another step type may not validate under this one (e.g. an
        arena `game_type` seen by the validation editor); those fall back to this
        type's defaults in the view only. The stored dict is never modified.
        """
        data = dict(config or {})
        while True:
            try:
                return self.payload_model.model_validate(data)
            except ValidationError as exc:
                bad = {e["loc"][0] for e in exc.errors() if e.get("loc")} & set(data)
                if not bad:
                    raise FieldValidationError.from_pydantic(f"{self.tag} config", exc) from exc
                logger.debug("step_config view tag=%s ignoring inert keys=%s", self.tag, sorted(bad))
                for key in bad:
                    data.pop(key, None)
