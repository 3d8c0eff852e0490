"""
Linear, gated creation wizard.

Only `Next` is gated, by the current step's `can_proceed`. `Back` on the first
step cancels the wizard. Nothing reaches the content store before `submit`,
which writes the whole draft at once and resets the wizard.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence
from uuid import uuid4

from studio.errors import PersistenceError, StudioError, UploadError, WizardStateError
from studio.store import IMAGE_BUCKET, AssetStore, ContentStore, ReferenceCatalog
from studio.wizard.draft import WizardDraft
from studio.wizard.steps import DEFAULT_FLOW, WizardStep

logger = logging.getLogger(__name__)


class WizardController:
    def __init__(
        self,
        store: ContentStore,
        steps: Optional[Sequence[WizardStep]] = None,
        assets: Optional[AssetStore] = None,
        catalog: Optional[ReferenceCatalog] = None,
    ):
        self.steps = tuple(steps or DEFAULT_FLOW)
        ids = [s.id for s in self.steps]
        if len(ids) != len(set(ids)):
            raise ValueError(f"Duplicate wizard step ids: {ids}")

        self.id = str(uuid4())
        self.store = store
        self.assets = assets
        self.catalog = catalog

        self.draft = WizardDraft()
        self._index = 0
        self._furthest = 0
        self._generation = 0
        self._submitting = False

    #-----Position-----

    @property
    def step(self) -> WizardStep:
        return self.steps[self._index]

    @property
    def step_number(self) -> int:
        """1-based position of the current step."""
        return self._index + 1

    @property
    def is_first(self) -> bool:
        return self._index == 0

    @property
    def is_last(self) -> bool:
        return self._index == len(self.steps) - 1

    def can_proceed(self) -> bool:
        return self.step.can_proceed(self.draft)

    def completed_steps(self) -> list[str]:
        return [s.id for s in self.steps[: self._furthest]]

    #-----Transitions-----

    def update(self, section: str, **fields: Any):
        """
        Field-validated section update. The distribution section also accepts
        `deadline_enabled`, which switches the deadline on (30 days) or off.
        """
        deadline_enabled = fields.pop("deadline_enabled", None) if section == "distribution" else None
        updated = self.draft.update(section, fields)
        if deadline_enabled is not None:
            self.draft.set_deadline_enabled(bool(deadline_enabled))
            updated = self.draft.distribution
        return updated

    def next(self) -> WizardStep:
        if self.is_last:
            raise WizardStateError("Already at the last step; submit instead")
        if not self.can_proceed():
            raise WizardStateError(f"Step {self.step.id!r} is incomplete")
        self._index += 1
        self._furthest = max(self._furthest, self._index)
        return self.step

    def back(self) -> bool:
        """Go one step back. On the first step this cancels and returns False."""
        if self.is_first:
            self.cancel()
            return False
        self._index -= 1
        return True

    def go_to(self, step_id: str) -> WizardStep:
        """Jump to the current step or one already completed."""
        for index, step in enumerate(self.steps):
            if step.id == step_id:
                break
        else:
            raise WizardStateError(f"Unknown wizard step: {step_id}")
        if index > self._furthest or (index == self._furthest and index != self._index):
            raise WizardStateError(f"Step {step_id!r} has not been reached yet")
        self._index = index
        return self.step

    def cancel(self) -> None:
        logger.info("wizard cancelled id=%s at step=%s", self.id, self.step.id)
        self.reset()

    def reset(self) -> None:
        self.draft = WizardDraft()
        self._index = 0
        self._furthest = 0
        self._generation += 1

    #-----Async side effects-----

    async def upload_thumbnail(self, filename: str, data: bytes, content_type: Optional[str]) -> Optional[str]:
        """
        Upload a thumbnail and store its URL on the draft when it resolves.

        Concurrent uploads are allowed; the last one to resolve wins. A result that
        arrives after the draft was reset is dropped and None is returned.
        """
        if self.assets is None:
            raise WizardStateError("No asset store configured for thumbnails")

        generation = self._generation
        try:
            url = await self.assets.upload(IMAGE_BUCKET, filename, data, content_type)
        except StudioError:
            raise
        except Exception as exc:
            logger.warning("thumbnail upload failed wizard=%s: %s", self.id, exc)
            raise UploadError(f"Could not upload {filename!r}") from exc

        if generation != self._generation:
            logger.info("thumbnail upload resolved after reset; dropped wizard=%s", self.id)
            return None
        self.draft.basic.thumbnail_url = url
        return url

    async def submit(self) -> str:
        """Write the draft through the content store and reset. The draft survives a failure."""
        if not self.is_last:
            raise WizardStateError("Submit is only available on the last step")
        if self._submitting:
            raise WizardStateError("Submit already in progress")
        blocked = [s.id for s in self.steps if not s.can_proceed(self.draft)]
        if blocked:
            raise WizardStateError(f"Incomplete steps: {', '.join(blocked)}")

        self._submitting = True
        try:
            materialized = self.draft.materialize()
            try:
                training_id = await self.store.create_training(materialized)
            except StudioError:
                raise
            except Exception as exc:
                logger.warning("wizard submit failed id=%s: %s", self.id, exc)
                raise PersistenceError("Could not create training") from exc
        finally:
            self._submitting = False

        logger.info("wizard submitted id=%s training=%s key=%s", self.id, training_id, materialized.training.training_key)
        self.reset()
        return training_id

    #-----Review-----

    def summary(self, catalog: Optional[ReferenceCatalog] = None) -> Dict[str, Any]:
        """Review data; catalog ids resolve to names when a catalog is available."""
        catalog = catalog or self.catalog
        skills = catalog.names("skills") if catalog else {}
        badges = catalog.names("badges") if catalog else {}
        draft = self.draft
        return {
            "basic": draft.basic.model_dump(),
            "training_key": draft.resolved_training_key(),
            "distribution": draft.distribution.model_dump(),
            "certificate": draft.certificate.model_dump(),
            "skill_impacts": [
                {**s.model_dump(), "name": skills.get(s.skill_id, s.skill_id)} for s in draft.rewards.skill_impacts
            ],
            "insignia_relations": [
                {**r.model_dump(), "name": badges.get(r.insignia_id, r.insignia_id)}
                for r in draft.rewards.insignia_relations
            ],
            "reward_items": [i.model_dump() for i in draft.rewards.reward_items],
            "evolution_template_id": draft.rewards.evolution_template_id,
            "estimated_xp": draft.estimated_xp(),
            "estimated_coins": draft.estimated_coins(),
        }

    def state(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "steps": [{"id": s.id, "title": s.title} for s in self.steps],
            "current_step": self.step.id,
            "step_number": self.step_number,
            "completed_steps": self.completed_steps(),
            "can_proceed": self.can_proceed(),
            "is_last": self.is_last,
            "draft": self.draft.model_dump(mode="json"),
        }
