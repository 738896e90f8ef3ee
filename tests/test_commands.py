# tests/test_commands.py

from __future__ import annotations

import pytest

from daybook.cli.commands import CommandRegistry, registry


@pytest.mark.asyncio
async def test_command_registry_routes_and_aliases(state) -> None:
    reg = CommandRegistry()
    called = {"a": 0}

    async def handler(state, args):
        called["a"] += 1
        return "a:" + ",".join(args)

    reg.register("alpha", handler, "alpha", aliases=["al"])

    assert await reg.handle(state, "/alpha x y") == "a:x,y"
    assert await reg.handle(state, "/AL") == "a:"
    assert called["a"] == 2


@pytest.mark.asyncio
async def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert await reg.handle(state, "hello") is None
    assert "Unknown command" in (await reg.handle(state, "/nope") or "")
    assert "Empty command" in (await reg.handle(state, "/") or "")


@pytest.mark.asyncio
async def test_task_commands_and_stats(state) -> None:
    assert await registry.handle(state, "/task high Pay rent") == "Task created: task_1"
    assert await registry.handle(state, "/task Buy milk") == "Task created: task_2"
    assert "completed" in await registry.handle(state, "/done task_1")

    stats = await registry.handle(state, "/stats")
    assert "Total: 2" in stats
    assert "High: 1" in stats
    assert "Completion rate: 50%" in stats


@pytest.mark.asyncio
async def test_habit_commands(state) -> None:
    assert await registry.handle(state, "/habit Read 20 pages") == "Habit created: habit_1"
    assert await registry.handle(state, "/check habit_1 2024-06-10") == "2024-06-10: done."
    assert await registry.handle(state, "/month habit_1 2024-06") == "2024-06: 1/30 days (3%)"
    assert await registry.handle(state, "/check habit_1 2024-06-10") == "2024-06-10: not done."


@pytest.mark.asyncio
async def test_errors_become_messages(state) -> None:
    assert (await registry.handle(state, "/task")).startswith("Invalid input")
    assert (await registry.handle(state, "/check habit_1 10-06-2024")).startswith("Invalid input")
    assert (await registry.handle(state, "/done task_404")).startswith("Not found")
    assert (await registry.handle(state, "/delete habit habit_404")).startswith("Not found")
    assert (await registry.handle(state, "/workout fast Run")).startswith("Invalid input")


@pytest.mark.asyncio
async def test_workout_commands(state) -> None:
    assert await registry.handle(state, "/workout 30 Morning run") == "Workout created: workout_1"
    logged = await registry.handle(state, "/log workout_1 28")
    assert logged.startswith("Session logged. 1 in the last 30 days")
    listing = await registry.handle(state, "/workouts")
    assert "Morning run" in listing
    assert "[1x]" in listing
