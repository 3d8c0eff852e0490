"""
Collaborator contracts for the studio core.

These interfaces live in the library because the edit session and wizard depend
on them. Infrastructure (SQLAlchemy, local filesystem, static catalogs) lives in
`infra/` and implements them.
"""

from __future__ import annotations

import os
import time
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, FrozenSet, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from studio.core.module import TrainingModule
from studio.errors import UploadError

#-----Module deltas-----


class ModuleDelta(BaseModel):
    """Full state of one node to be written. Stores never receive partial-field diffs."""

    kind: Literal["created", "updated"]
    module: TrainingModule


class ModuleDeltaSet(BaseModel):
    upserts: List[ModuleDelta] = Field(default_factory=list)
    deleted_ids: List[str] = Field(default_factory=list)

    @property
    def created(self) -> List[TrainingModule]:
        return [d.module for d in self.upserts if d.kind == "created"]

    @property
    def updated(self) -> List[TrainingModule]:
        return [d.module for d in self.upserts if d.kind == "updated"]

    def is_empty(self) -> bool:
        return not self.upserts and not self.deleted_ids


#-----Training materialization-----


class SkillImpact(BaseModel):
    skill_id: str
    weight: int = Field(default=50, ge=0, le=100)


class InsigniaRelation(BaseModel):
    insignia_id: str
    relation_type: Literal["unlocks", "required", "recommended"] = "unlocks"


class RewardItem(BaseModel):
    item_id: str
    category: str = ""
    unlock_mode: Literal["auto_unlock", "enable_purchase"] = "auto_unlock"


class TrainingRecord(BaseModel):
    """Training aggregate root as stored."""

    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    training_key: str
    name: str
    description: Optional[str] = None
    icon: str = "📚"
    color: str = "#6366f1"
    category: str = "general"
    difficulty: str = "beginner"
    estimated_hours: float = 2
    xp_reward: int = 100
    coins_reward: int = 50
    thumbnail_url: Optional[str] = None
    training_type: str = "traditional"
    is_active: bool = True
    is_onboarding: bool = False
    certificate_enabled: bool = False
    certificate_min_score: int = 70
    require_full_completion: bool = True
    insignia_reward_id: Optional[str] = None
    evolution_template_id: Optional[str] = None
    created_at: Optional[datetime] = None


class DistributionConfig(BaseModel):
    """Per-training distribution settings, stored apart from the training row."""

    requirement_type: Literal["optional", "recommended", "mandatory"] = "optional"
    team_ids: List[str] = Field(default_factory=list)
    deadline_days: Optional[int] = None
    xp_multiplier: float = 1.0
    coins_multiplier: float = 1.0


class MaterializedTraining(BaseModel):
    """Everything the wizard writes in one go on submit."""

    training: TrainingRecord
    distribution: DistributionConfig = Field(default_factory=DistributionConfig)
    skill_impacts: List[SkillImpact] = Field(default_factory=list)
    insignia_relations: List[InsigniaRelation] = Field(default_factory=list)
    reward_items: List[RewardItem] = Field(default_factory=list)
    modules: List[TrainingModule] = Field(default_factory=list)


class ContentStore(ABC):
    """Persistence contract for trainings and their module trees."""

    @abstractmethod
    async def fetch(self, training_id: str) -> List[TrainingModule]:
        """Flat module snapshot. Raises TrainingNotFoundError for unknown trainings."""
        raise NotImplementedError

    @abstractmethod
    async def upsert_modules(self, training_id: str, deltas: List[ModuleDelta]) -> None:
        raise NotImplementedError

    @abstractmethod
    async def delete_modules(self, ids: List[str]) -> None:
        raise NotImplementedError

    @abstractmethod
    async def create_training(self, materialized: MaterializedTraining) -> str:
        """Write the training and all its links; return the new training id."""
        raise NotImplementedError

    @abstractmethod
    async def get_training(self, training_id: str) -> TrainingRecord:
        raise NotImplementedError

    @abstractmethod
    async def list_trainings(self) -> List[TrainingRecord]:
        raise NotImplementedError

    async def get_distribution(self, training_id: str) -> Optional[DistributionConfig]:
        """Distribution settings written at creation, if the store keeps them."""
        return None


#-----Assets-----


@dataclass(frozen=True)
class UploadPolicy:
    """What a bucket accepts. Checked before any bytes reach the asset store."""

    bucket: str
    max_bytes: int
    content_types: FrozenSet[str]
    path_prefix: str = "uploads"

    def check(self, filename: str, size: int, content_type: Optional[str]) -> None:
        if size <= 0:
            raise UploadError(f"Empty upload for {filename!r}")
        if size > self.max_bytes:
            limit_mb = self.max_bytes // (1024 * 1024)
            raise UploadError(f"File too large for {self.bucket}. Max: {limit_mb}MB")
        if content_type not in self.content_types:
            raise UploadError(f"Content type {content_type!r} not accepted by {self.bucket}")

    def object_path(self, filename: str) -> str:
        """`<prefix>/<millis>_<random>.<ext>`; the original file name is not trusted."""
        ext = os.path.splitext(filename)[1].lower()
        return f"{self.path_prefix}/{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}{ext}"


MB = 1024 * 1024

IMAGE_BUCKET = "training-media"
VIDEO_BUCKET = "training-videos"
PDF_BUCKET = "training-pdfs"

UPLOAD_POLICIES: Dict[str, UploadPolicy] = {
    IMAGE_BUCKET: UploadPolicy(
        bucket=IMAGE_BUCKET,
        max_bytes=5 * MB,
        content_types=frozenset({"image/png", "image/jpeg", "image/gif", "image/webp", "image/svg+xml"}),
        path_prefix="training-thumbnails",
    ),
    VIDEO_BUCKET: UploadPolicy(
        bucket=VIDEO_BUCKET,
        max_bytes=100 * MB,
        content_types=frozenset({"video/mp4", "video/webm", "video/ogg", "video/quicktime"}),
    ),
    PDF_BUCKET: UploadPolicy(
        bucket=PDF_BUCKET,
        max_bytes=50 * MB,
        content_types=frozenset({"application/pdf"}),
    ),
}


def policy_for(bucket: str) -> UploadPolicy:
    policy = UPLOAD_POLICIES.get(bucket)
    if policy is None:
        raise UploadError(f"Unknown bucket: {bucket}")
    return policy


class AssetStore(ABC):
    """Blob storage for thumbnails, videos and PDFs."""

    @abstractmethod
    async def upload(self, bucket: str, filename: str, data: bytes, content_type: Optional[str]) -> str:
        """Store the file and return its public URL. Raises UploadError."""
        raise NotImplementedError

    @abstractmethod
    async def remove(self, bucket: str, path: str) -> None:
        raise NotImplementedError


#-----Reference catalogs-----


class CatalogEntry(BaseModel):
    id: str
    name: str
    icon: Optional[str] = None


class ReferenceCatalog(ABC):
    """Read-only lists used to populate selectable references."""

    @abstractmethod
    def list_games(self) -> List[CatalogEntry]:
        raise NotImplementedError

    @abstractmethod
    def list_skills(self) -> List[CatalogEntry]:
        raise NotImplementedError

    @abstractmethod
    def list_badges(self) -> List[CatalogEntry]:
        raise NotImplementedError

    def names(self, kind: str) -> Dict[str, str]:
        """id -> name for one catalog kind (`games`, `skills`, `badges`)."""
        listing = {"games": self.list_games, "skills": self.list_skills, "badges": self.list_badges}.get(kind)
        if listing is None:
            raise ValueError(f"Unknown catalog: {kind}")
        return {entry.id: entry.name for entry in listing()}
