"""Ordered async stage pipeline with short-circuit on failure.

Each stage receives the value produced by the previous stage. A stage that
raises ``BillingAPIError`` ends the run: the returned ``StageResult`` names the
failed stage and no later stage is started.
Callers decide how loudly a failure is reported.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

from creditflow.core.exceptions import BillingAPIError

logger = logging.getLogger(__name__)

StageFn = Callable[[Any], Awaitable[Any]]


@dataclass
class StageResult:
    """Tagged outcome of a pipeline run."""

    ok: bool
    value: Any = None
    error: BillingAPIError | None = None
    stage: str | None = None
    completed_stages: list[str] = field(default_factory=list)

    @classmethod
    def success(cls, value: Any, completed_stages: list[str]) -> "StageResult":
        return cls(ok=True, value=value, completed_stages=completed_stages)

    @classmethod
    def failure(
        cls, stage: str, error: BillingAPIError, completed_stages: list[str]
    ) -> "StageResult":
        return cls(ok=False, error=error, stage=stage, completed_stages=completed_stages)


class Pipeline:
    """A named, ordered sequence of async stages."""

    def __init__(self, name: str):
        self.name = name
        self.stages: list[tuple[str, StageFn]] = []

    def add_stage(self, name: str, fn: StageFn) -> "Pipeline":
        self.stages.append((name, fn))
        return self

    async def run(self, value: Any = None) -> StageResult:
        """Run stages in order, stopping at the first failure."""
        completed: list[str] = []
        for stage_name, fn in self.stages:
            try:
                value = await fn(value)
            except BillingAPIError as exc:
                logger.debug("Pipeline %s failed at stage %s: %s", self.name, stage_name, exc)
                return StageResult.failure(stage_name, exc, completed)
            completed.append(stage_name)
        return StageResult.success(value, completed)
