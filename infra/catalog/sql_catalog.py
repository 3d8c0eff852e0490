from __future__ import annotations

from typing import List

from sqlalchemy.orm import Session

from api.models.models import GameConfiguration, Insignia, Skill
from studio.store import CatalogEntry, ReferenceCatalog


class SqlReferenceCatalog(ReferenceCatalog):
    """Active rows of the skills, insignias and game_configurations tables."""

    def __init__(self, db: Session):
        self.db = db

    def list_games(self) -> List[CatalogEntry]:
        rows = (
            self.db.query(GameConfiguration)
            .filter(GameConfiguration.is_active.is_(True))
            .order_by(GameConfiguration.display_name.asc())
            .all()
        )
        return [CatalogEntry(id=r.game_type, name=r.display_name, icon=r.icon) for r in rows]

    def list_skills(self) -> List[CatalogEntry]:
        rows = self.db.query(Skill).filter(Skill.is_active.is_(True)).order_by(Skill.name.asc()).all()
        return [CatalogEntry(id=r.id, name=r.name, icon=r.icon) for r in rows]

    def list_badges(self) -> List[CatalogEntry]:
        rows = self.db.query(Insignia).filter(Insignia.is_active.is_(True)).order_by(Insignia.name.asc()).all()
        return [CatalogEntry(id=r.id, name=r.name, icon=r.icon) for r in rows]
