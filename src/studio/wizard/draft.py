"""
WizardDraft: the ephemeral form state of the training creation wizard.

Nothing here is persisted until the controller submits; `materialize()` turns the
draft into the records written in one go.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Literal, Optional, Type

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from studio.errors import FieldValidationError
from studio.store import (
    DistributionConfig,
    InsigniaRelation,
    MaterializedTraining,
    RewardItem,
    SkillImpact,
    TrainingRecord,
)

MAX_SKILL_IMPACTS = 3
DEFAULT_DEADLINE_DAYS = 30

Category = Literal["general", "sales", "leadership", "technical", "compliance", "onboarding", "soft_skills"]
Difficulty = Literal["beginner", "intermediate", "advanced", "expert"]


class _Section(BaseModel):
    model_config = ConfigDict(extra="forbid")


class BasicInfo(_Section):
    name: str = ""
    description: str = ""
    icon: str = "📚"
    color: str = "#6366f1"
    category: Category = "general"
    difficulty: Difficulty = "beginner"
    estimated_hours: float = Field(default=2, ge=0)
    xp_reward: int = Field(default=100, ge=0)
    coins_reward: int = Field(default=50, ge=0)
    thumbnail_url: Optional[str] = None
    training_key: str = ""
    training_type: Literal["traditional", "book_guided"] = "traditional"


class Distribution(_Section):
    is_active: bool = True
    is_onboarding: bool = False
    requirement_type: Literal["optional", "recommended", "mandatory"] = "optional"
    team_ids: List[str] = Field(default_factory=list)
    deadline_days: Optional[int] = Field(default=None, ge=7, le=180)


class Rewards(_Section):
    skill_impacts: List[SkillImpact] = Field(default_factory=list, max_length=MAX_SKILL_IMPACTS)
    insignia_relations: List[InsigniaRelation] = Field(default_factory=list)
    reward_items: List[RewardItem] = Field(default_factory=list)
    evolution_template_id: Optional[str] = None
    xp_multiplier: float = Field(default=1.0, ge=0)
    coins_multiplier: float = Field(default=1.0, ge=0)

    @field_validator("skill_impacts")
    @classmethod
    def _distinct_skills(cls, value: List[SkillImpact]) -> List[SkillImpact]:
        ids = [s.skill_id for s in value]
        if len(ids) != len(set(ids)):
            raise ValueError("each skill can only be linked once")
        return value

    @field_validator("insignia_relations")
    @classmethod
    def _distinct_insignias(cls, value: List[InsigniaRelation]) -> List[InsigniaRelation]:
        ids = [r.insignia_id for r in value]
        if len(ids) != len(set(ids)):
            raise ValueError("each insignia can only be linked once")
        return value


class Certificate(_Section):
    certificate_enabled: bool = False
    certificate_min_score: int = Field(default=70, ge=50, le=100)
    require_full_completion: bool = True
    insignia_reward_id: Optional[str] = None


SECTIONS: Dict[str, Type[_Section]] = {
    "basic": BasicInfo,
    "distribution": Distribution,
    "rewards": Rewards,
    "certificate": Certificate,
}


def training_key_for(name: str) -> str:
    """Fallback key: lower-cased name with whitespace runs replaced by `_`."""
    return re.sub(r"\s+", "_", name.lower())


class WizardDraft(BaseModel):
    basic: BasicInfo = Field(default_factory=BasicInfo)
    distribution: Distribution = Field(default_factory=Distribution)
    rewards: Rewards = Field(default_factory=Rewards)
    certificate: Certificate = Field(default_factory=Certificate)

    def update(self, section: str, fields: Dict[str, Any]) -> _Section:
        """Validate `fields` against one section and apply them together, or not at all."""
        model = SECTIONS.get(section)
        if model is None:
            raise FieldValidationError(f"Unknown wizard section: {section}")
        current: _Section = getattr(self, section)
        try:
            updated = model.model_validate({**current.model_dump(), **fields})
        except ValidationError as exc:
            raise FieldValidationError.from_pydantic(f"{section} section", exc) from exc
        setattr(self, section, updated)
        return updated

    #-----Distribution-----

    def set_deadline_enabled(self, enabled: bool) -> None:
        if not enabled:
            self.distribution.deadline_days = None
        elif self.distribution.deadline_days is None:
            self.distribution.deadline_days = DEFAULT_DEADLINE_DAYS

    #-----Rewards-----

    def add_skill_impact(self, skill_id: str, weight: int = 50) -> bool:
        impacts = self.rewards.skill_impacts
        if len(impacts) >= MAX_SKILL_IMPACTS or any(s.skill_id == skill_id for s in impacts):
            return False
        self.update("rewards", {"skill_impacts": [*[s.model_dump() for s in impacts], {"skill_id": skill_id, "weight": weight}]})
        return True

    def update_skill_weight(self, skill_id: str, weight: int) -> None:
        impacts = [
            {**s.model_dump(), "weight": weight} if s.skill_id == skill_id else s.model_dump()
            for s in self.rewards.skill_impacts
        ]
        self.update("rewards", {"skill_impacts": impacts})

    def remove_skill_impact(self, skill_id: str) -> None:
        self.rewards.skill_impacts = [s for s in self.rewards.skill_impacts if s.skill_id != skill_id]

    def add_insignia_relation(self, insignia_id: str, relation_type: str = "unlocks") -> bool:
        relations = self.rewards.insignia_relations
        if any(r.insignia_id == insignia_id for r in relations):
            return False
        self.update(
            "rewards",
            {"insignia_relations": [*[r.model_dump() for r in relations], {"insignia_id": insignia_id, "relation_type": relation_type}]},
        )
        return True

    def remove_insignia_relation(self, insignia_id: str) -> None:
        self.rewards.insignia_relations = [r for r in self.rewards.insignia_relations if r.insignia_id != insignia_id]

    def add_reward_item(self, item_id: str, category: str = "", unlock_mode: str = "auto_unlock") -> bool:
        items = self.rewards.reward_items
        if any(i.item_id == item_id for i in items):
            return False
        self.update(
            "rewards",
            {"reward_items": [*[i.model_dump() for i in items], {"item_id": item_id, "category": category, "unlock_mode": unlock_mode}]},
        )
        return True

    def remove_reward_item(self, item_id: str) -> None:
        self.rewards.reward_items = [i for i in self.rewards.reward_items if i.item_id != item_id]

    def estimated_xp(self) -> int:
        return round(self.basic.xp_reward * self.rewards.xp_multiplier)

    def estimated_coins(self) -> int:
        return round(self.basic.coins_reward * self.rewards.coins_multiplier)

    #-----Submission-----

    def resolved_training_key(self) -> str:
        return self.basic.training_key or training_key_for(self.basic.name)

    def materialize(self) -> MaterializedTraining:
        basic = self.basic.model_dump(exclude={"training_key"})
        training = TrainingRecord(
            **basic,
            training_key=self.resolved_training_key(),
            is_active=self.distribution.is_active,
            is_onboarding=self.distribution.is_onboarding,
            certificate_enabled=self.certificate.certificate_enabled,
            certificate_min_score=self.certificate.certificate_min_score,
            require_full_completion=self.certificate.require_full_completion,
            insignia_reward_id=self.certificate.insignia_reward_id,
            evolution_template_id=self.rewards.evolution_template_id,
        )
        distribution = DistributionConfig(
            requirement_type=self.distribution.requirement_type,
            team_ids=list(self.distribution.team_ids),
            deadline_days=self.distribution.deadline_days,
            xp_multiplier=self.rewards.xp_multiplier,
            coins_multiplier=self.rewards.coins_multiplier,
        )
        return MaterializedTraining(
            training=training,
            distribution=distribution,
            skill_impacts=[s.model_copy() for s in self.rewards.skill_impacts],
            insignia_relations=[r.model_copy() for r in self.rewards.insignia_relations],
            reward_items=[i.model_copy() for i in self.rewards.reward_items],
        )
