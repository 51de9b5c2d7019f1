"""
Timetable Generator Module
Generates clash-free timetable combinations for a set of modules, filters
them against the user's preferences and ranks the survivors.
"""

import logging
from datetime import datetime, timezone
from typing import List, Dict, Any, Callable, Optional

from utils.audit import AuditSink
from utils.combination_builder import (
    MAX_COMBINATIONS, MAX_RECURSIVE_CALLS, STOP_EXHAUSTED, generate_combinations
)
from utils.constraint_filter import filter_module_indexes, passes_day_rules
from utils.generation_types import GenerationFilters, GenerationResult, ModuleOptions
from utils.request_validator import validate_generation_request
from utils.result_validator import validate_generated_results
from utils.scoring import rank_combinations


logger = logging.getLogger(__name__)

# (module requests, semester) -> resolved modules
CatalogueLookup = Callable[[List[Dict[str, Any]], str], List[ModuleOptions]]


class GenerationValidationError(Exception):
    """The generation request failed validation."""

    def __init__(self, errors: List[str]):
        super().__init__('Validation failed')
        self.errors = errors

    def to_dict(self):
        return {'valid': False, 'errors': self.errors}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def empty_result() -> GenerationResult:
    return GenerationResult(combinations=[], generated_at=_now())


class TimetableGenerator:
    """
    Runs the search for one request.

    Pipeline:
    - drop indexes that break a per-session preference (venue, days, window)
    - enumerate clash-free combinations, keeping those whose daily layout
      passes (duration, consecutive classes, gaps)
    - score and rank
    """

    def __init__(
        self,
        modules: List[ModuleOptions],
        filters: Optional[GenerationFilters] = None,
        max_combinations: int = MAX_COMBINATIONS,
        max_recursive_calls: int = MAX_RECURSIVE_CALLS
    ):
        self.modules = modules
        self.filters = filters or GenerationFilters()
        self.max_combinations = max_combinations
        self.max_recursive_calls = max_recursive_calls
        self.warnings: List[str] = []

    def _accept(self, combination) -> bool:
        return passes_day_rules(combination.sessions, self.filters)

    def generate(self) -> GenerationResult:
        """Enumerate and rank. Result-validation is left to the caller."""
        if not self.modules:
            logger.warning("No modules to generate timetables for")
            return empty_result()

        filtered = filter_module_indexes(self.modules, self.filters)
        for module in filtered:
            if not module.groups:
                msg = f"Module {module.code} has no valid indexes after filtering"
                logger.warning(msg)
                self.warnings.append(msg)

        outcome = generate_combinations(
            filtered,
            max_combinations=self.max_combinations,
            max_recursive_calls=self.max_recursive_calls,
            accept=self._accept,
        )
        logger.info(
            "Enumerated %d combinations in %d steps (%s)",
            len(outcome.combinations), outcome.calls, outcome.stop_reason
        )

        return GenerationResult(
            combinations=outcome.combinations,
            generated_at=_now(),
            total_combinations=len(outcome.combinations),
            has_more=outcome.has_more,
            stop_reason=outcome.stop_reason,
        )


def generate_timetable_combinations(
    payload: Dict[str, Any],
    catalogue: CatalogueLookup,
    max_combinations: int = MAX_COMBINATIONS,
    max_recursive_calls: int = MAX_RECURSIVE_CALLS,
    max_results: Optional[int] = None,
    request_sink: Optional[AuditSink] = None,
    result_sink: Optional[AuditSink] = None
) -> GenerationResult:
    """
    Validate a generation request, resolve its modules and build the response.

    Args:
        payload: Request body ({modules, filters, semester})
        catalogue: Resolves module requests into ModuleOptions
        max_combinations: Result cap
        max_recursive_calls: Work cap
        max_results: How many ranked combinations to return (defaults to the cap)
        request_sink: Audit sink for rejected requests
        result_sink: Audit sink for anomalies found in the generated results

    Raises:
        GenerationValidationError: if the request is invalid
    """
    validation = validate_generation_request(payload, request_sink)
    if not validation.valid:
        raise GenerationValidationError(validation.errors)

    filters = GenerationFilters.from_dict(payload['filters'])
    modules = catalogue(payload['modules'], payload['semester'])
    if not modules:
        logger.warning("None of the requested modules were found for semester %s", payload['semester'])
        return empty_result()

    generator = TimetableGenerator(modules, filters, max_combinations, max_recursive_calls)
    result = generator.generate()
    result.warnings = list(generator.warnings)
    if not result.combinations:
        # Infeasible, not an error
        return result

    audit = validate_generated_results(result.combinations, filters, payload['modules'], result_sink)
    result.warnings.extend(audit.warnings)

    ranked = rank_combinations(result.combinations, filters)
    limit = max_combinations if max_results is None else min(max_results, max_combinations)
    result.combinations = ranked[:limit]

    if result.stop_reason != STOP_EXHAUSTED:
        logger.info("Search stopped early (%s); result may be incomplete", result.stop_reason)
    return result
