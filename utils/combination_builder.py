"""
Combination Builder
Enumerates every clash-free choice of one index per module with a
depth-first backtracking search over an explicit stack.
"""

import logging
from typing import List, Callable, Optional
from dataclasses import dataclass, field

from utils.clash import clashes_with_any
from utils.generation_types import ModuleOptions, GroupOption, ClassSession, Combination


logger = logging.getLogger(__name__)

MAX_COMBINATIONS = 1000
MAX_RECURSIVE_CALLS = 500000

STOP_EXHAUSTED = 'exhausted'
STOP_RESULT_CAP = 'result_cap'
STOP_WORK_CAP = 'work_cap'


@dataclass
class SearchOutcome:
    """What the search produced and why it stopped."""
    combinations: List[Combination] = field(default_factory=list)
    has_more: bool = False
    stop_reason: str = STOP_EXHAUSTED
    calls: int = 0


class CombinationBuilder:
    """
    Bounded exhaustive search.

    Modules are visited in the order given and their indexes in the order
    registered, so the same input always yields the same output order.
    Two budgets bound the search: the number of accepted combinations
    (``max_combinations``) and the number of search steps
    (``max_recursive_calls``). All counters live on the instance, one
    instance per request.
    """

    def __init__(
        self,
        modules: List[ModuleOptions],
        max_combinations: int = MAX_COMBINATIONS,
        max_recursive_calls: int = MAX_RECURSIVE_CALLS,
        accept: Optional[Callable[[Combination], bool]] = None
    ):
        """
        Args:
            modules: Modules with their resolved index options
            max_combinations: Result cap
            max_recursive_calls: Work cap
            accept: Optional predicate applied to every complete combination;
                rejected combinations do not count towards the result cap
        """
        self.modules = modules
        self.max_combinations = max_combinations
        self.max_recursive_calls = max_recursive_calls
        self.accept = accept

        self.calls = 0
        self._chosen: List[GroupOption] = []
        self._sessions: List[ClassSession] = []
        self._marks: List[int] = []

    def build(self) -> SearchOutcome:
        outcome = SearchOutcome()
        if not self.modules:
            return outcome

        num_modules = len(self.modules)
        # stack[d] = position of the next index to try for module d
        stack: List[int] = [0]
        self.calls = 1

        while stack:
            depth = len(stack) - 1
            groups = self.modules[depth].groups
            position = stack[-1]

            if position >= len(groups):
                stack.pop()
                if self._chosen:
                    self._undo()
                continue

            stack[-1] = position + 1
            group = groups[position]

            if clashes_with_any(group.sessions, self._sessions):
                continue

            if self.calls >= self.max_recursive_calls:
                outcome.stop_reason = STOP_WORK_CAP
                logger.warning(
                    "Search stopped after %d steps with %d combinations found",
                    self.calls, len(outcome.combinations)
                )
                break
            self.calls += 1
            self._choose(group)

            if depth + 1 < num_modules:
                stack.append(0)
                continue

            # Leaf: every module has an index
            combination = self._snapshot()
            self._undo()

            if self.accept is not None and not self.accept(combination):
                continue

            if len(outcome.combinations) >= self.max_combinations:
                # One more exists beyond the cap
                outcome.has_more = True
                outcome.stop_reason = STOP_RESULT_CAP
                break

            outcome.combinations.append(combination)

        outcome.calls = self.calls
        return outcome

    def _choose(self, group: GroupOption):
        self._marks.append(len(self._sessions))
        self._chosen.append(group)
        self._sessions.extend(group.sessions)

    def _undo(self):
        mark = self._marks.pop()
        self._chosen.pop()
        del self._sessions[mark:]

    def _snapshot(self) -> Combination:
        assignments = {}
        for module, group in zip(self.modules, self._chosen):
            assignments[module.code] = group.index_number
        return Combination(
            modules=list(self.modules),
            module_assignments=assignments,
            sessions=list(self._sessions),
        )


def generate_combinations(
    modules: List[ModuleOptions],
    max_combinations: int = MAX_COMBINATIONS,
    max_recursive_calls: int = MAX_RECURSIVE_CALLS,
    accept: Optional[Callable[[Combination], bool]] = None
) -> SearchOutcome:
    """Run a fresh bounded search over the given modules."""
    builder = CombinationBuilder(modules, max_combinations, max_recursive_calls, accept)
    return builder.build()
