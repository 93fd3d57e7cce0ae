import heapq
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

import numpy as np
import pytest

from portfolio_terminal.api.models import Education, Experience, Project, Skill, UserProfile
from portfolio_terminal.runtime_config import RuntimeConfig


@pytest.fixture(autouse=True)
def isolate_dirs(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    # Keep host storage and logs out of the real home directory
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))


class FakeHandle:
    def __init__(self) -> None:
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeClock:
    """Manually advanced clock; callbacks run in due-time order."""

    def __init__(self) -> None:
        self.now = 0.0
        self._seq = 0
        self._queue: List[Tuple[float, int, Callable[[], None], FakeHandle]] = []

    def call_later(self, delay: float, callback: Callable[[], None]) -> FakeHandle:
        handle = FakeHandle()
        heapq.heappush(self._queue, (self.now + max(delay, 0.0), self._seq, callback, handle))
        self._seq += 1
        return handle

    @property
    def pending(self) -> int:
        return sum(1 for entry in self._queue if not entry[3].cancelled)

    def _pop_due(self, target: float) -> bool:
        while self._queue and self._queue[0][0] <= target:
            when, _, callback, handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self.now = when
            callback()
            return True
        return False

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while self._pop_due(target):
            pass
        self.now = target

    def run_until_idle(self, limit: int = 100_000) -> None:
        for _ in range(limit):
            if not self._pop_due(float("inf")):
                return
        raise AssertionError("clock did not settle")


class FakeSound:
    def __init__(self) -> None:
        self.stopped = False

    def stop(self) -> None:
        self.stopped = True


class FakeBackend:
    def __init__(self) -> None:
        self.sounds: List[FakeSound] = []
        self.stop_all_calls = 0
        self.closed = False

    def play(self, samples: np.ndarray) -> FakeSound:
        sound = FakeSound()
        self.sounds.append(sound)
        return sound

    def stop_all(self) -> None:
        self.stop_all_calls += 1

    def close(self) -> None:
        self.closed = True

    @property
    def playing(self) -> List[FakeSound]:
        return [s for s in self.sounds if not s.stopped]


class FakeDisplay:
    def __init__(self) -> None:
        self.lines: List[str] = []
        self.clear_calls = 0
        self.scrolls: List[bool] = []

    def append_line(self, line: str) -> None:
        self.lines.append(line)

    def clear(self) -> None:
        self.lines = []
        self.clear_calls += 1

    def scroll_to_bottom(self, force: bool = False) -> None:
        self.scrolls.append(force)


class FakeSource:
    """Data source with canned records; slots listed in `failing` raise."""

    def __init__(self, failing: Tuple[str, ...] = ()) -> None:
        self.failing = failing
        self.calls: Dict[str, int] = {}

    def _call(self, slot: str, value: Any) -> Any:
        self.calls[slot] = self.calls.get(slot, 0) + 1
        if slot in self.failing:
            raise RuntimeError(f"{slot} unavailable")
        return value

    def get_skills(self) -> List[Skill]:
        return self._call(
            "skills",
            [
                Skill("Python", "Backend", 5),
                Skill("React", "Frontend", 4),
                Skill("FastAPI", "Backend", 3),
            ],
        )

    def get_projects(self) -> List[Project]:
        return self._call(
            "projects",
            [
                Project(
                    "Portfolio",
                    "Personal site",
                    ["React", "TypeScript"],
                    live_url="https://example.dev",
                )
            ],
        )

    def get_experiences(self) -> List[Experience]:
        return self._call(
            "experiences",
            [
                Experience(
                    "Acme",
                    "Developer",
                    "2021-03-01",
                    None,
                    "Built APIs\nMentored juniors",
                )
            ],
        )

    def get_profile(self) -> UserProfile:
        return self._call(
            "profile",
            UserProfile(
                name="Ada Lovelace",
                role_title="Full Stack Developer",
                email="ada@example.dev",
                location="London",
            ),
        )

    def get_education(self) -> List[Education]:
        return self._call(
            "education",
            [Education("Computer Science", "University", "2015-09-01", "2019-06-30")],
        )


class InMemoryStore:
    def __init__(self, items: Optional[Dict[str, str]] = None) -> None:
        self.items: Dict[str, str] = dict(items or {})

    def get_item(self, key: str) -> Optional[str]:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> bool:
        self.items[key] = value
        return True

    def remove_item(self, key: str) -> bool:
        self.items.pop(key, None)
        return True


class MockSession:
    """Mock session for testing."""

    def __init__(self, config: RuntimeConfig):
        self.config = config


class MockConsole:
    """Mock console for testing."""

    def __init__(self, session: MockSession):
        self.session = session
        self.run_called = False

    async def run(self) -> None:
        self.run_called = True
