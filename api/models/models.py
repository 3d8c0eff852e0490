from api.config import Base
from sqlalchemy import Column, Integer, String, JSON, DateTime, ForeignKey, Text, Boolean, Float
from sqlalchemy.orm import relationship
from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Training(Base):
    __tablename__ = "trainings"
    id = Column(String, primary_key=True, index=True)  # uuid
    training_key = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    icon = Column(String, nullable=False, default="📚")
    color = Column(String, nullable=True)
    category = Column(String, nullable=False, default="general")
    difficulty = Column(String, nullable=False, default="beginner")
    estimated_hours = Column(Float, nullable=False, default=2)
    xp_reward = Column(Integer, nullable=False, default=100)
    coins_reward = Column(Integer, nullable=False, default=50)
    thumbnail_url = Column(String, nullable=True)
    training_type = Column(String, nullable=False, default="traditional")  # traditional|book_guided
    is_active = Column(Boolean, default=True, nullable=False)
    is_onboarding = Column(Boolean, default=False, nullable=False)
    certificate_enabled = Column(Boolean, default=False, nullable=False)
    certificate_min_score = Column(Integer, default=70, nullable=False)
    require_full_completion = Column(Boolean, default=True, nullable=False)
    insignia_reward_id = Column(String, ForeignKey("insignias.id"), nullable=True)
    evolution_template_id = Column(String, nullable=True)
    created_at = Column(DateTime, default=utc_now, nullable=False)

    modules = relationship("TrainingModule", backref="training", cascade="all, delete-orphan")
    config = relationship("TrainingConfig", backref="training", uselist=False, cascade="all, delete-orphan")
    skill_impacts = relationship("TrainingSkillImpact", backref="training", cascade="all, delete-orphan")
    insignia_relations = relationship("TrainingInsigniaRelation", backref="training", cascade="all, delete-orphan")
    reward_items = relationship("TrainingRewardItem", backref="training", cascade="all, delete-orphan")


class TrainingModule(Base):
    __tablename__ = "training_modules"
    id = Column(String, primary_key=True, index=True)  # uuid
    training_id = Column(String, ForeignKey("trainings.id"), index=True, nullable=False)
    parent_id = Column(String, nullable=True, index=True)  # null = top-level module
    order_index = Column(Integer, nullable=False, default=0)
    level = Column(Integer, nullable=False, default=0)
    numbering = Column(String, nullable=True)
    name = Column(String, nullable=False, default="")
    description = Column(Text, nullable=True)
    step_type = Column(String, nullable=False, default="content")
    step_config = Column(JSON, nullable=False, default=dict)
    time_minutes = Column(Integer, nullable=False, default=5)
    xp_reward = Column(Integer, nullable=False, default=10)
    coins_reward = Column(Integer, nullable=False, default=5)
    is_required = Column(Boolean, default=True, nullable=False)
    is_optional = Column(Boolean, default=False, nullable=False)
    is_checkpoint = Column(Boolean, default=False, nullable=False)
    min_score = Column(Integer, nullable=True)
    unlock_condition = Column(JSON, nullable=False, default=dict)
    is_preview_available = Column(Boolean, default=False, nullable=False)
    skill_ids = Column(JSON, nullable=False, default=list)
    updated_at = Column(DateTime, default=utc_now, nullable=False)


class TrainingConfig(Base):
    __tablename__ = "training_configs"
    id = Column(String, primary_key=True, index=True)  # uuid
    training_id = Column(String, ForeignKey("trainings.id"), unique=True, nullable=False)
    requirement_type = Column(String, nullable=False, default="optional")  # optional|suggested|required
    team_ids = Column(JSON, nullable=False, default=list)
    deadline_days = Column(Integer, nullable=True)
    xp_multiplier = Column(Float, nullable=False, default=1.0)
    coins_multiplier = Column(Float, nullable=False, default=1.0)


class TrainingSkillImpact(Base):
    __tablename__ = "training_skill_impacts"
    id = Column(String, primary_key=True, index=True)  # uuid
    training_id = Column(String, ForeignKey("trainings.id"), index=True, nullable=False)
    skill_id = Column(String, ForeignKey("skills.id"), nullable=False)
    weight = Column(Integer, nullable=False, default=50)


class TrainingInsigniaRelation(Base):
    __tablename__ = "training_insignia_relations"
    id = Column(String, primary_key=True, index=True)  # uuid
    training_id = Column(String, ForeignKey("trainings.id"), index=True, nullable=False)
    insignia_id = Column(String, ForeignKey("insignias.id"), nullable=False)
    relation_type = Column(String, nullable=False, default="unlocks")  # unlocks|required|recommended


class TrainingRewardItem(Base):
    __tablename__ = "training_reward_items"
    id = Column(String, primary_key=True, index=True)  # uuid
    training_id = Column(String, ForeignKey("trainings.id"), index=True, nullable=False)
    item_id = Column(String, nullable=False)
    category = Column(String, nullable=True)
    unlock_mode = Column(String, nullable=False, default="auto_unlock")  # auto_unlock|enable_purchase


class Skill(Base):
    __tablename__ = "skills"
    id = Column(String, primary_key=True, index=True)  # uuid
    name = Column(String, nullable=False)
    icon = Column(String, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)


class Insignia(Base):
    __tablename__ = "insignias"
    id = Column(String, primary_key=True, index=True)  # uuid
    name = Column(String, nullable=False)
    icon = Column(String, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)


class GameConfiguration(Base):
    __tablename__ = "game_configurations"
    id = Column(String, primary_key=True, index=True)  # uuid
    game_type = Column(String, unique=True, nullable=False)
    display_name = Column(String, nullable=False)
    icon = Column(String, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
