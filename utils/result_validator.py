"""
Result validation: re-checks generated combinations before they are returned.
Problems are recorded for investigation and never block the response.
"""

import logging
from dataclasses import asdict, dataclass, field
from typing import List, Dict, Any, Optional

from utils.audit import AuditSink
from utils.clash import find_clashing_pairs
from utils.constraint_filter import describe_violations
from utils.generation_types import ClassSession, Combination, GenerationFilters


logger = logging.getLogger(__name__)


@dataclass
class ResultValidationResult:
    valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


def _describe(session: ClassSession) -> str:
    return (f"{session.module_code} ({session.type} on {session.day} "
            f"{session.start_time}-{session.end_time})")


def validate_combination(
    combination: Combination,
    filters: GenerationFilters,
    position: int,
    eligible: Optional[Dict[str, List[str]]] = None
) -> List[str]:
    prefix = f"Combination[{position}]"
    errors = []

    for first, second in find_clashing_pairs(combination.sessions):
        errors.append(f"{prefix}: Time clash detected between {_describe(first)} and {_describe(second)}")

    assigned = {code.upper(): index_number for code, index_number in combination.module_assignments.items()}
    for session in combination.sessions:
        expected = assigned.get(session.module_code.upper())
        if expected != session.index_number:
            errors.append(
                f"{prefix}: {_describe(session)} belongs to index {session.index_number}, "
                f"but the module is assigned {expected or 'no index'}"
            )

    for message in describe_violations(combination, filters):
        errors.append(f"{prefix}: {message}")

    if eligible:
        for code, index_number in combination.module_assignments.items():
            allowed = eligible.get(code.upper())
            if allowed is not None and index_number not in allowed:
                errors.append(f"{prefix}: Index {index_number} was not requested for module {code}")

    return errors


def validate_generated_results(
    combinations: List[Combination],
    filters: GenerationFilters,
    requested_modules: List[Dict[str, Any]],
    sink: Optional[AuditSink] = None
) -> ResultValidationResult:
    """
    Args:
        combinations: Generated combinations
        filters: Filters the combinations were generated with
        requested_modules: Module entries of the request ({code, indexNumbers})
        sink: Where errors are recorded

    Returns:
        ResultValidationResult; ``valid`` is False when any error was found
    """
    errors: List[str] = []
    warnings: List[str] = []

    if not combinations:
        warnings.append('No combinations generated - all indexes may have been filtered out')
        logger.warning(warnings[0])
        return ResultValidationResult(valid=True, errors=errors, warnings=warnings)

    eligible = {
        m['code'].upper(): list(m.get('indexNumbers', []))
        for m in requested_modules
    }

    for position, combination in enumerate(combinations):
        errors.extend(validate_combination(combination, filters, position, eligible))

    assigned_codes = set()
    for combination in combinations:
        assigned_codes.update(code.upper() for code in combination.module_assignments)

    for module in requested_modules:
        if module['code'].upper() not in assigned_codes:
            warnings.append(f"Module {module['code']} does not appear in any generated combination")

    for warning in warnings:
        logger.warning(warning)

    if errors and sink is not None:
        sink.append(
            'RESULT VALIDATION ERROR',
            f"Found {len(errors)} validation error(s) in generated results",
            {
                'errors': errors,
                'warnings': warnings,
                'combinationCount': len(combinations),
                'filters': asdict(filters),
                'requestedModules': requested_modules,
            }
        )

    return ResultValidationResult(valid=not errors, errors=errors, warnings=warnings)
