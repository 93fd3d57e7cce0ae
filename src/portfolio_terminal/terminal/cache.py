import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional, Protocol, Tuple

from portfolio_terminal.api.models import (
    Education,
    Experience,
    Project,
    Skill,
    UserProfile,
)

logger = logging.getLogger(__name__)

SLOTS: Tuple[str, ...] = ("skills", "projects", "experiences", "profile", "education")


class DataSource(Protocol):
    """Blocking source of portfolio records, e.g. PortfolioApiClient."""

    def get_skills(self) -> List[Skill]: ...

    def get_projects(self) -> List[Project]: ...

    def get_experiences(self) -> List[Experience]: ...

    def get_profile(self) -> UserProfile: ...

    def get_education(self) -> List[Education]: ...


class DomainCache:
    """Memoizes portfolio records across commands until invalidated.

    Each slot stays None until a fetch for it succeeds. Concurrent calls to
    ensure_loaded() may fetch the same slot twice; the last result wins.
    """

    def __init__(self, source: DataSource) -> None:
        self.source = source
        self.skills: Optional[List[Skill]] = None
        self.projects: Optional[List[Project]] = None
        self.experiences: Optional[List[Experience]] = None
        self.profile: Optional[UserProfile] = None
        self.education: Optional[List[Education]] = None

    def _fetchers(self) -> Dict[str, Callable[[], Any]]:
        return {
            "skills": self.source.get_skills,
            "projects": self.source.get_projects,
            "experiences": self.source.get_experiences,
            "profile": self.source.get_profile,
            "education": self.source.get_education,
        }

    async def ensure_loaded(self) -> None:
        """Fetch every empty slot; a failed fetch is logged and leaves its slot empty."""
        fetchers = self._fetchers()
        for slot in SLOTS:
            if getattr(self, slot) is not None:
                continue
            try:
                value = await asyncio.to_thread(fetchers[slot])
            except Exception as e:
                logger.warning(f"Failed to load {slot}: {e}")
                continue
            setattr(self, slot, value)
            logger.debug(f"Loaded {slot}")

    def invalidate_all(self) -> None:
        for slot in SLOTS:
            setattr(self, slot, None)
        logger.info("Portfolio cache invalidated")

    @property
    def loaded_slots(self) -> List[str]:
        return [slot for slot in SLOTS if getattr(self, slot) is not None]
