"""Define the interface for planning stages that generate states from scratch."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable

from grasp_generation.io import console, log_info
from grasp_generation.outcome import Outcome
from grasp_generation.stages.interface_state import Solution

if TYPE_CHECKING:
    from grasp_generation.planning_scene import PlanningScene
    from grasp_generation.stages.interface_state import InterfaceState, SubTrajectory

SolutionConsumer = Callable[[Solution], None]
"""Downstream callback receiving each solution spawned by a stage."""


class Generator(ABC):
    """A stage that spawns new interface states without requiring an input state.

    A pipeline drives a generator by pulling from it: after `init` succeeds, it calls
        `compute` for as long as `can_compute` reports that more solutions remain.
        Each spawned solution is forwarded to every registered consumer.
    """

    def __init__(self, name: str) -> None:
        """Initialize the generator with a human-readable name and no consumers."""
        self.name = name
        self._consumers: list[SolutionConsumer] = []

    def add_consumer(self, consumer: SolutionConsumer) -> None:
        """Register a callback that receives every solution spawned by this stage."""
        self._consumers.append(consumer)

    def remove_consumer(self, consumer: SolutionConsumer) -> None:
        """Unregister a previously added solution callback."""
        self._consumers.remove(consumer)

    def init(self, scene: PlanningScene) -> Outcome:
        """Prepare the stage to compute solutions in the given scene.

        :param scene: Planning scene in which the stage operates (never modified by the stage)
        :return: Outcome indicating whether the stage is ready to compute
        """
        message = f"Initialized stage '{self.name}' in frame '{scene.planning_frame}'."
        return Outcome(success=True, message=message)

    @abstractmethod
    def can_compute(self) -> bool:
        """Evaluate whether the stage can still produce a solution (no side effects)."""
        ...

    @abstractmethod
    def compute(self) -> Any:
        """Attempt to produce the next solution, spawning it to downstream consumers.

        :return: Stage-specific result, or None if no solution was produced
        """
        ...

    def spawn(self, state: InterfaceState, trajectory: SubTrajectory) -> Solution:
        """Forward a newly generated state and its trajectory to all consumers."""
        solution = Solution(state, trajectory)
        for consumer in self._consumers:
            consumer(solution)
        return solution

    def run(
        self,
        scene: PlanningScene,
        max_solutions: int | None = None,
    ) -> Outcome[list[Solution]]:
        """Initialize the stage and pull solutions from it until it is exhausted.

        :param scene: Planning scene in which the stage operates
        :param max_solutions: Optional limit after which the pipeline stops pulling solutions
        :return: Outcome containing all spawned solutions, or the initialization failure
        """
        init_outcome = self.init(scene)
        if not init_outcome.success:
            console.print(f"[red]Stage '{self.name}' failed: {init_outcome.message}[/]")
            return Outcome(success=False, message=init_outcome.message)

        solutions: list[Solution] = []
        collect = solutions.append
        self.add_consumer(collect)
        try:
            while self.can_compute():
                if max_solutions is not None and len(solutions) >= max_solutions:
                    break
                self.compute()
        finally:
            self.remove_consumer(collect)

        message = f"Stage '{self.name}' spawned {len(solutions)} solutions."
        log_info(message)
        return Outcome(success=True, message=message, output=solutions)
