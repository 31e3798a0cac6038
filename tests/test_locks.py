"""Tests for per-key flush locks."""

import asyncio

from fndds_ingest.services.locks import KeyedLock


def test_same_key_is_serialized() -> None:
    locks = KeyedLock()
    events: list[str] = []

    async def critical(name: str) -> None:
        async with locks.hold("1001"):
            events.append(f"{name}:enter")
            await asyncio.sleep(0.01)
            events.append(f"{name}:exit")

    async def scenario() -> None:
        await asyncio.gather(critical("a"), critical("b"))

    asyncio.run(scenario())

    assert events == ["a:enter", "a:exit", "b:enter", "b:exit"]
    assert len(locks) == 0


def test_different_keys_do_not_block_each_other() -> None:
    locks = KeyedLock()
    events: list[str] = []

    async def critical(key: str) -> None:
        async with locks.hold(key):
            events.append(f"{key}:enter")
            await asyncio.sleep(0.01)
            events.append(f"{key}:exit")

    async def scenario() -> None:
        await asyncio.gather(critical("1001"), critical("1002"))

    asyncio.run(scenario())

    assert events[:2] == ["1001:enter", "1002:enter"]
    assert len(locks) == 0
