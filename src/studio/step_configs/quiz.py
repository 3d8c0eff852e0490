"""
Quiz step.

Question keys keep the camelCase names the player reads (`correctIndex`,
`shuffleQuestions`, `showFeedback`); snake_case names are accepted on input.
The helpers below return the `updates` dict to hand to the registry merge.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, List, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator

from studio.step_configs.base import StepConfigSpec, StepPayload, stored_key


class QuizQuestion(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str = ""
    question: str = ""
    options: List[str] = Field(default_factory=lambda: ["", "", "", ""])
    correct_index: int = Field(default=0, ge=0, alias="correctIndex")
    points: int = Field(default=10, ge=1)

    @model_validator(mode="after")
    def _correct_index_in_range(self) -> "QuizQuestion":
        if self.options and self.correct_index >= len(self.options):
            raise ValueError("correctIndex must point at one of the options")
        return self


class QuizPayload(StepPayload):
    questions: List[QuizQuestion] = Field(default_factory=list)
    shuffle_questions: bool = Field(default=False, alias="shuffleQuestions")
    show_feedback: bool = Field(default=True, alias="showFeedback")


def new_question() -> Dict[str, Any]:
    return {
        "id": f"q-{uuid4().hex[:12]}",
        "question": "",
        "options": ["", "", "", ""],
        "correctIndex": 0,
        "points": 10,
    }


def _questions(config: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return copy.deepcopy(list((config or {}).get("questions") or []))


def add_question(config: Optional[Dict[str, Any]], question: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    questions = _questions(config)
    questions.append(question or new_question())
    return {"questions": questions}


def update_question(config: Optional[Dict[str, Any]], question_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
    questions = _questions(config)
    if not any(q.get("id") == question_id for q in questions):
        return {}
    # Write under the stored key so a snake_case edit replaces the camelCase value.
    stored = {stored_key(QuizQuestion, k) or k: v for k, v in updates.items()}
    return {"questions": [{**q, **stored} if q.get("id") == question_id else q for q in questions]}


def update_option(config: Optional[Dict[str, Any]], question_id: str, option_index: int, text: str) -> Dict[str, Any]:
    questions = _questions(config)
    for q in questions:
        if q.get("id") != question_id:
            continue
        options = list(q.get("options") or [])
        if not 0 <= option_index < len(options):
            return {}
        options[option_index] = text
        q["options"] = options
        return {"questions": questions}
    return {}


def remove_question(config: Optional[Dict[str, Any]], question_id: str) -> Dict[str, Any]:
    questions = _questions(config)
    remaining = [q for q in questions if q.get("id") != question_id]
    if len(remaining) == len(questions):
        return {}
    return {"questions": remaining}


SPEC = StepConfigSpec(
    tag="quiz",
    label="Quiz",
    description="Questions and answers",
    payload_model=QuizPayload,
)
