import pytest
from conftest import FakeSource

from portfolio_terminal.terminal.cache import SLOTS, DomainCache


@pytest.mark.asyncio
async def test_ensure_loaded_fills_every_slot_once() -> None:
    source = FakeSource()
    cache = DomainCache(source)

    await cache.ensure_loaded()
    await cache.ensure_loaded()

    assert cache.loaded_slots == list(SLOTS)
    assert all(count == 1 for count in source.calls.values())
    assert cache.profile is not None
    assert cache.profile.name == "Ada Lovelace"


@pytest.mark.asyncio
async def test_failed_fetch_leaves_slot_empty() -> None:
    source = FakeSource(failing=("projects", "profile"))
    cache = DomainCache(source)

    await cache.ensure_loaded()

    assert cache.projects is None
    assert cache.profile is None
    assert cache.skills is not None
    assert cache.loaded_slots == ["skills", "experiences", "education"]


@pytest.mark.asyncio
async def test_failed_slot_is_retried_on_next_load() -> None:
    source = FakeSource(failing=("skills",))
    cache = DomainCache(source)
    await cache.ensure_loaded()

    source.failing = ()
    await cache.ensure_loaded()

    assert cache.skills is not None
    assert source.calls["skills"] == 2
    assert source.calls["projects"] == 1


@pytest.mark.asyncio
async def test_invalidate_all_clears_slots() -> None:
    cache = DomainCache(FakeSource())
    await cache.ensure_loaded()

    cache.invalidate_all()

    assert cache.loaded_slots == []
    assert all(getattr(cache, slot) is None for slot in SLOTS)
