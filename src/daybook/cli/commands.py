# src/daybook/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from datetime import date, datetime

from ..core.dates import today
from ..core.state import AppState
from ..errors import NotFoundError, StoreFailure, ValidationError
from ..store.models import Priority

CommandHandler = Callable[[AppState, list[str]], Awaitable[str]]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Slash-command registry used by the console connector (/help, /tasks, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    async def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            return await handler(state, args)
        except ValidationError as e:
            return f"Invalid input: {e}"
        except NotFoundError as e:
            return f"Not found: {e}"
        except StoreFailure:
            logger.exception("Storage failure while handling /%s", name)
            return "Storage error, nothing was changed. See the log for details."

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _need(args: list[str], n: int, usage: str) -> None:
    if len(args) < n:
        raise ValidationError(f"usage: {usage}")


def _parse_day(raw: str | None) -> date:
    if not raw:
        return today()
    try:
        return datetime.strptime(raw, "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"expected YYYY-MM-DD, got {raw!r}") from None


def _parse_month(raw: str | None) -> tuple[int, int]:
    if not raw:
        d = today()
        return d.year, d.month
    try:
        d = datetime.strptime(raw, "%Y-%m")
    except ValueError:
        raise ValidationError(f"expected YYYY-MM, got {raw!r}") from None
    return d.year, d.month


def _parse_int(raw: str, name: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be a number, got {raw!r}") from None


# ---- general ----


async def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


async def cmd_status(state: AppState, args: list[str]) -> str:
    stats = await state.tasks.get_statistics()
    notes = await state.notes.get_count()
    habits = await state.habits.get_all()
    workouts = await state.workouts.get_all()
    db_path = getattr(state.store, "db_path", "?")
    return (
        "Status:\n"
        f"  Database: {db_path}\n"
        f"  Tasks: {stats.total}  Notes: {notes}  Habits: {len(habits)}  Workouts: {len(workouts)}"
    )


# ---- tasks ----


async def cmd_tasks(state: AppState, args: list[str]) -> str:
    """
    /tasks          -> all tasks
    /tasks <query>  -> search title/description/category
    """
    items = await state.tasks.search(" ".join(args)) if args else await state.tasks.get_all()
    if not items:
        return "No tasks."
    lines = []
    for t in items:
        mark = "x" if t.completed else " "
        lines.append(f"[{mark}] {t.id} ({t.priority.value}) {t.title}")
    return "\n".join(lines)


async def cmd_task(state: AppState, args: list[str]) -> str:
    """/task [low|medium|high] <title...>"""
    _need(args, 1, "/task [low|medium|high] <title>")
    priority = Priority.MEDIUM
    if args[0].lower() in {p.value for p in Priority}:
        priority = Priority(args[0].lower())
        args = args[1:]
    task = await state.tasks.create(title=" ".join(args), priority=priority)
    return f"Task created: {task.id}"


async def cmd_done(state: AppState, args: list[str]) -> str:
    _need(args, 1, "/done <task_id>")
    task = await state.tasks.toggle_complete(args[0])
    return f"Task {task.id} is now {'completed' if task.completed else 'pending'}."


async def cmd_stats(state: AppState, args: list[str]) -> str:
    s = await state.tasks.get_statistics()
    return (
        "Task statistics:\n"
        f"  Total: {s.total}  Completed: {s.completed}  Pending: {s.pending}\n"
        f"  High: {s.high_priority}  Medium: {s.medium_priority}  Low: {s.low_priority}\n"
        f"  Completion rate: {s.completion_rate:.0f}%"
    )


# ---- notes ----


async def cmd_notes(state: AppState, args: list[str]) -> str:
    items = await state.notes.search(" ".join(args)) if args else await state.notes.get_all()
    if not items:
        return "No notes."
    return "\n".join(f"{'*' if n.pinned else ' '} {n.id} {n.title}" for n in items)


async def cmd_note(state: AppState, args: list[str]) -> str:
    """/note <title> [| content]"""
    _need(args, 1, "/note <title> [| content]")
    title, _, content = " ".join(args).partition("|")
    note = await state.notes.create(title=title, content=content.strip() or None)
    return f"Note created: {note.id}"


async def cmd_pin(state: AppState, args: list[str]) -> str:
    _need(args, 1, "/pin <note_id>")
    note = await state.notes.toggle_pin(args[0])
    return f"Note {note.id} {'pinned' if note.pinned else 'unpinned'}."


# ---- habits ----


async def cmd_habits(state: AppState, args: list[str]) -> str:
    habits = await state.habits.get_all()
    if not habits:
        return "No habits."
    day = today()
    lines = []
    for h in habits:
        done = await state.habits.is_completed_on_date(h.id, day)
        streak = await state.habits.get_current_streak(h.id)
        lines.append(f"[{'x' if done else ' '}] {h.id} {h.name}  streak={streak}")
    return "\n".join(lines)


async def cmd_habit(state: AppState, args: list[str]) -> str:
    _need(args, 1, "/habit <name>")
    habit = await state.habits.create(name=" ".join(args))
    return f"Habit created: {habit.id}"


async def cmd_check(state: AppState, args: list[str]) -> str:
    """/check <habit_id> [YYYY-MM-DD] -> toggle the day (default today)"""
    _need(args, 1, "/check <habit_id> [YYYY-MM-DD]")
    day = _parse_day(args[1] if len(args) > 1 else None)
    done = await state.habits.toggle_completion(args[0], day)
    return f"{day.isoformat()}: {'done' if done else 'not done'}."


async def cmd_streak(state: AppState, args: list[str]) -> str:
    _need(args, 1, "/streak <habit_id>")
    streak = await state.habits.get_current_streak(args[0])
    return f"Current streak: {streak} day{'s' if streak != 1 else ''}."


async def cmd_month(state: AppState, args: list[str]) -> str:
    """/month <habit_id> [YYYY-MM]"""
    _need(args, 1, "/month <habit_id> [YYYY-MM]")
    year, month = _parse_month(args[1] if len(args) > 1 else None)
    p = await state.habits.get_monthly_progress(args[0], year, month)
    return f"{year:04d}-{month:02d}: {p.completed_days}/{p.total_days} days ({p.percentage:.0f}%)"


# ---- workouts ----


async def cmd_workouts(state: AppState, args: list[str]) -> str:
    workouts = await state.workouts.get_all()
    if not workouts:
        return "No workouts."
    lines = []
    for w in workouts:
        details = await state.workouts.get_workout_with_details(w.id)
        if details is None:
            continue
        badge = f" [{details.badge}]" if details.badge else ""
        lines.append(
            f"{w.id} {w.name} {w.duration}min{badge}  "
            f"exercises={len(details.exercises)} sessions={details.total_completions}"
        )
    return "\n".join(lines)


async def cmd_workout(state: AppState, args: list[str]) -> str:
    """/workout <duration_minutes> <name...>"""
    _need(args, 2, "/workout <duration_minutes> <name>")
    workout = await state.workouts.create(
        name=" ".join(args[1:]), duration=_parse_int(args[0], "duration")
    )
    return f"Workout created: {workout.id}"


async def cmd_log(state: AppState, args: list[str]) -> str:
    """/log <workout_id> [actual_minutes]"""
    _need(args, 1, "/log <workout_id> [actual_minutes]")
    actual = _parse_int(args[1], "actual_minutes") if len(args) > 1 else None
    await state.workouts.add_completion(args[0], actual_duration=actual)
    freq = await state.workouts.get_frequency(args[0])
    return f"Session logged. {freq} in the last {state.workouts.window_days} days."


# ---- delete ----

_DELETE_TARGETS = {"task": "tasks", "note": "notes", "habit": "habits", "workout": "workouts"}


async def cmd_delete(state: AppState, args: list[str]) -> str:
    """/delete <task|note|habit|workout> <id>"""
    _need(args, 2, "/delete <task|note|habit|workout> <id>")
    target = _DELETE_TARGETS.get(args[0].lower())
    if target is None:
        raise ValidationError(f"cannot delete {args[0]!r}")
    repo = getattr(state, target)
    await repo.delete(args[1], missing_ok=False)
    return f"Deleted {args[0].lower()} {args[1]}."


registry.register("help", cmd_help, "Show this help", aliases=["h", "?"])
registry.register("status", cmd_status, "Database path and record counts")
registry.register("tasks", cmd_tasks, "List tasks (/tasks <query> searches)")
registry.register("task", cmd_task, "Create a task: /task [low|medium|high] <title>")
registry.register("done", cmd_done, "Toggle a task's completed flag: /done <id>")
registry.register("stats", cmd_stats, "Task statistics")
registry.register("notes", cmd_notes, "List notes (/notes <query> searches)")
registry.register("note", cmd_note, "Create a note: /note <title> [| content]")
registry.register("pin", cmd_pin, "Toggle a note's pin: /pin <id>")
registry.register("habits", cmd_habits, "List habits with today's state and streak")
registry.register("habit", cmd_habit, "Create a habit: /habit <name>")
registry.register("check", cmd_check, "Toggle a habit day: /check <id> [YYYY-MM-DD]")
registry.register("streak", cmd_streak, "Current streak: /streak <habit_id>")
registry.register("month", cmd_month, "Monthly progress: /month <habit_id> [YYYY-MM]")
registry.register("workouts", cmd_workouts, "List workouts with frequency badges")
registry.register("workout", cmd_workout, "Create a workout: /workout <minutes> <name>")
registry.register("log", cmd_log, "Log a workout session: /log <id> [minutes]")
registry.register("delete", cmd_delete, "Delete: /delete <task|note|habit|workout> <id>", aliases=["rm"])
