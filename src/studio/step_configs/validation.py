"""
Validation step: checks what the learner took from the preceding steps.

One of four modes selected by `validation_type`; each mode keeps its own nested
list so switching modes loses nothing. List helpers address entries by position
(the editor shows them as Q1, Q2, ... tabs) and return the `updates` dict for the
registry merge. Out-of-range positions return `{}`.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, List, Literal, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator

from studio.step_configs.base import StepConfigSpec, StepPayload

ValidationType = Literal["quiz", "scenario", "self_assessment", "game"]


class ValidationQuestion(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str = ""
    question: str = ""
    options: List[str] = Field(default_factory=lambda: ["", "", "", ""])
    correct_index: int = Field(default=0, ge=0)
    explanation: Optional[str] = None

    @model_validator(mode="after")
    def _correct_index_in_range(self) -> "ValidationQuestion":
        if self.options and self.correct_index >= len(self.options):
            raise ValueError("correct_index must point at one of the options")
        return self


class ScenarioOption(BaseModel):
    model_config = ConfigDict(extra="allow")

    text: str = ""
    is_optimal: bool = False
    feedback: str = ""
    score: int = Field(default=50, ge=0, le=100)


class ValidationPayload(StepPayload):
    validation_type: ValidationType = "quiz"
    quiz_questions: List[ValidationQuestion] = Field(default_factory=list)
    scenario_title: str = ""
    scenario_context: str = ""
    scenario_options: List[ScenarioOption] = Field(default_factory=list)
    self_assessment_criteria: List[str] = Field(default_factory=list)
    game_type: Literal["memory", "quiz", "decision"] = "memory"
    min_passing_score: int = Field(default=70, ge=40, le=100)
    allow_retry: bool = True
    max_attempts: int = Field(default=3, ge=1, le=10)


def _items(config: Optional[Dict[str, Any]], key: str) -> List[Any]:
    return copy.deepcopy(list((config or {}).get(key) or []))


def _replace_at(config: Optional[Dict[str, Any]], key: str, index: int, updates: Dict[str, Any]) -> Dict[str, Any]:
    items = _items(config, key)
    if not 0 <= index < len(items):
        return {}
    items[index] = {**items[index], **updates}
    return {key: items}


def _remove_at(config: Optional[Dict[str, Any]], key: str, index: int) -> Dict[str, Any]:
    items = _items(config, key)
    if not 0 <= index < len(items):
        return {}
    del items[index]
    return {key: items}


# -----quiz questions-----

def add_quiz_question(config: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    questions = _items(config, "quiz_questions")
    questions.append({"id": str(uuid4()), "question": "", "options": ["", "", "", ""], "correct_index": 0})
    return {"quiz_questions": questions}


def update_quiz_question(config: Optional[Dict[str, Any]], index: int, updates: Dict[str, Any]) -> Dict[str, Any]:
    return _replace_at(config, "quiz_questions", index, updates)


def update_quiz_option(config: Optional[Dict[str, Any]], index: int, option_index: int, text: str) -> Dict[str, Any]:
    questions = _items(config, "quiz_questions")
    if not 0 <= index < len(questions):
        return {}
    options = list(questions[index].get("options") or [])
    if not 0 <= option_index < len(options):
        return {}
    options[option_index] = text
    questions[index]["options"] = options
    return {"quiz_questions": questions}


def remove_quiz_question(config: Optional[Dict[str, Any]], index: int) -> Dict[str, Any]:
    return _remove_at(config, "quiz_questions", index)


# -----scenario options-----

def add_scenario_option(config: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    options = _items(config, "scenario_options")
    options.append({"text": "", "is_optimal": False, "feedback": "", "score": 50})
    return {"scenario_options": options}


def update_scenario_option(config: Optional[Dict[str, Any]], index: int, updates: Dict[str, Any]) -> Dict[str, Any]:
    return _replace_at(config, "scenario_options", index, updates)


def remove_scenario_option(config: Optional[Dict[str, Any]], index: int) -> Dict[str, Any]:
    return _remove_at(config, "scenario_options", index)


# -----self-assessment criteria-----

def add_criterion(config: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    criteria = _items(config, "self_assessment_criteria")
    criteria.append("")
    return {"self_assessment_criteria": criteria}


def update_criterion(config: Optional[Dict[str, Any]], index: int, text: str) -> Dict[str, Any]:
    criteria = _items(config, "self_assessment_criteria")
    if not 0 <= index < len(criteria):
        return {}
    criteria[index] = text
    return {"self_assessment_criteria": criteria}


def remove_criterion(config: Optional[Dict[str, Any]], index: int) -> Dict[str, Any]:
    return _remove_at(config, "self_assessment_criteria", index)


SPEC = StepConfigSpec(
    tag="validation",
    label="Validation",
    description="Learning validation",
    payload_model=ValidationPayload,
)
