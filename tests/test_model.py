from __future__ import annotations

import pytest

from ttmctl.engine.model import CountStat, Task, TaskFlag, TaskFlags


def test_task_flags_union() -> None:
    merged = TaskFlags.of(TaskFlag.CURRENT) | TaskFlags.of(TaskFlag.LATE)
    assert merged == TaskFlags.of(TaskFlag.CURRENT, TaskFlag.LATE)
    assert len(merged) == 2
    assert TaskFlags() | TaskFlags() == TaskFlags()


def test_task_flags_with_flag_returns_new_set() -> None:
    flags = TaskFlags.of(TaskFlag.DONE)
    extended = flags.with_flag(TaskFlag.BLOCKED)
    assert TaskFlag.BLOCKED in extended
    assert TaskFlag.BLOCKED not in flags
    assert extended.with_flag(TaskFlag.BLOCKED) == extended


def test_task_copies_other_stats() -> None:
    source = {"Km": (CountStat(3, 5), None, None)}
    task = Task(name="Run", other_stats=source)
    source["Km"] = (None, None, None)
    assert task.other_stats == {"Km": (CountStat(3, 5), None, None)}
    with pytest.raises(TypeError):
        task.other_stats["Km"] = (None, None, None)  # type: ignore[index]


def test_task_hash_ignores_other_stats() -> None:
    plain = Task(name="Run")
    with_goal = Task(name="Run", other_stats={"Km": (CountStat(1), None, None)})
    assert plain != with_goal
    assert hash(plain) == hash(with_goal)
