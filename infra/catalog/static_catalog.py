from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from studio.store import CatalogEntry, ReferenceCatalog

DEFAULT_GAMES = [
    CatalogEntry(id="sales_challenge", name="Sales Challenge", icon="🎯"),
    CatalogEntry(id="quiz_battle", name="Quiz Battle", icon="❓"),
    CatalogEntry(id="team_challenge", name="Team Challenge", icon="👥"),
    CatalogEntry(id="speed_quiz", name="Speed Quiz", icon="⚡"),
    CatalogEntry(id="skill_duel", name="Skill Duel", icon="📈"),
]


@dataclass
class StaticReferenceCatalog(ReferenceCatalog):
    """Fixed lists, for tests and for deployments without catalog tables."""

    games: List[CatalogEntry] = field(default_factory=lambda: list(DEFAULT_GAMES))
    skills: List[CatalogEntry] = field(default_factory=list)
    badges: List[CatalogEntry] = field(default_factory=list)

    def list_games(self) -> List[CatalogEntry]:
        return list(self.games)

    def list_skills(self) -> List[CatalogEntry]:
        return list(self.skills)

    def list_badges(self) -> List[CatalogEntry]:
        return list(self.badges)
