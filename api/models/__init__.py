"""
API data models. Single import surface for DB entities.

DB entities (api.models.models):
- Training, TrainingModule, TrainingConfig
- TrainingSkillImpact, TrainingInsigniaRelation, TrainingRewardItem
- Skill, Insignia, GameConfiguration (reference catalogs)
"""

from api.models.models import (
    Training,
    TrainingModule,
    TrainingConfig,
    TrainingSkillImpact,
    TrainingInsigniaRelation,
    TrainingRewardItem,
    Skill,
    Insignia,
    GameConfiguration,
)

__all__ = [
    "Training",
    "TrainingModule",
    "TrainingConfig",
    "TrainingSkillImpact",
    "TrainingInsigniaRelation",
    "TrainingRewardItem",
    "Skill",
    "Insignia",
    "GameConfiguration",
]
