"""Wiring of the staging task into host build task graphs.

The staging task is declared as a prerequisite of the parent's asset
packaging tasks and as a finalizer of the sub-project's own assembly. Which
of those tasks exist varies across build configurations, so every
registration is optional: it returns False when the task is absent instead
of failing.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, Literal

from apkstage.projects.schema import StageConfig

logger = logging.getLogger(__name__)

Relation = Literal["depends_on", "finalized_by"]


def qualified(project: str, task: str) -> str:
    """Return a task path such as ':app_skin:packageDebug' or ':assembleRelease'."""
    return f"{project.rstrip(':')}:{task}"


@dataclass
class Task:
    """A named task and its declared edges."""

    name: str
    depends_on: list[str] = field(default_factory=list)
    finalized_by: list[str] = field(default_factory=list)


class TaskRegistry:
    """Minimal in-memory view of one project's tasks."""

    def __init__(self, project: str, names: Iterable[str] = ()) -> None:
        self.project = project
        self._tasks: dict[str, Task] = {}
        for name in names:
            self.add(name)

    def __contains__(self, name: str) -> bool:
        return name in self._tasks

    def add(self, name: str) -> Task:
        """Register a task, returning the existing one if already present."""
        return self._tasks.setdefault(name, Task(name))

    def get(self, name: str) -> Task | None:
        return self._tasks.get(name)

    def try_depends_on(self, name: str, dependency: str) -> bool:
        """Make ``name`` depend on ``dependency`` if ``name`` exists."""
        task = self._tasks.get(name)
        if task is None:
            logger.debug("Task %s not found in %s, not hooked", name, self.project)
            return False
        if dependency not in task.depends_on:
            task.depends_on.append(dependency)
        return True

    def try_finalized_by(self, name: str, finalizer: str) -> bool:
        """Run ``finalizer`` after ``name`` if ``name`` exists."""
        task = self._tasks.get(name)
        if task is None:
            logger.debug("Task %s not found in %s, not hooked", name, self.project)
            return False
        if finalizer not in task.finalized_by:
            task.finalized_by.append(finalizer)
        return True


@dataclass(frozen=True)
class Hook:
    """One registered edge to the staging task."""

    project: str
    task: str
    relation: Relation


@dataclass
class HookPlan:
    """Where the staging task ended up wired."""

    stage_task: str
    depends_on: str
    hooks: list[Hook] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "stage_task": self.stage_task,
            "depends_on": self.depends_on,
            "hooks": [
                {"project": h.project, "task": h.task, "relation": h.relation}
                for h in self.hooks
            ],
            "missing": list(self.missing),
        }


def asset_task_names(config: StageConfig) -> list[str]:
    """Parent asset tasks in order of preference; only the first found is hooked."""
    host = config.cap_host_variant
    return [f"merge{host}Assets", f"generate{host}Assets"]


def plan_hooks(
    config: StageConfig,
    host: TaskRegistry,
    sub: TaskRegistry,
) -> HookPlan:
    """Register the staging task in the parent and sub-project registries.

    Args:
        config: Staging configuration.
        host: Tasks of the parent project; receives the staging task.
        sub: Tasks of the producing sub-project.

    Returns:
        HookPlan listing registered edges and absent tasks.
    """
    stage = config.stage_task_name
    host.add(stage)
    host.try_depends_on(stage, config.upstream_task_path)
    plan = HookPlan(stage_task=stage, depends_on=config.upstream_task_path)

    def _record(ok: bool, project: str, task: str, relation: Relation) -> None:
        if ok:
            plan.hooks.append(Hook(project, task, relation))
            logger.info("Hooked %s into %s", stage, qualified(project, task))
        else:
            plan.missing.append(qualified(project, task))

    for name in asset_task_names(config):
        ok = host.try_depends_on(name, stage)
        _record(ok, host.project, name, "depends_on")
        if ok:
            break

    host_variant = config.cap_host_variant
    for name in (f"pre{host_variant}Build", f"assemble{host_variant}"):
        _record(host.try_depends_on(name, stage), host.project, name, "depends_on")

    variant = config.cap_variant
    for name in (f"package{variant}", f"assemble{variant}"):
        _record(sub.try_finalized_by(name, stage), sub.project, name, "finalized_by")

    return plan


__all__ = [
    "Hook",
    "HookPlan",
    "Task",
    "TaskRegistry",
    "asset_task_names",
    "plan_hooks",
    "qualified",
]
