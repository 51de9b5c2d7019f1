"""
Request validation for timetable generation.
All problems are collected and reported together; generation runs only
when the list is empty.
"""

import re
from typing import List, Dict, Any, Optional
from dataclasses import dataclass, field

from utils.audit import AuditSink
from utils.generation_types import DAY_KEYS, CLASS_TYPE_KEYS, DAILY_LOAD_PREFERENCES


MODULE_CODE_PATTERN = re.compile(r'^[A-Z]{2,3}\d{4}[A-Z]?$', re.IGNORECASE)
INDEX_NUMBER_PATTERN = re.compile(r'^\d{5}$')
TIME_PATTERN = re.compile(r'^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$')

RANGE_FILTERS = ['dayDuration', 'consecutiveClasses', 'gapsBetweenClasses']


@dataclass
class RequestValidationResult:
    valid: bool
    errors: List[str] = field(default_factory=list)

    def to_dict(self):
        return {'valid': self.valid, 'errors': self.errors}


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_module(module: Any, position: int) -> List[str]:
    errors = []
    prefix = f"Module[{position}]"

    if not isinstance(module, dict):
        errors.append(f"{prefix}: Module must be an object")
        return errors

    code = module.get('code')
    if not isinstance(code, str) or not code:
        errors.append(f"{prefix}: Module code must be a non-empty string")
    elif not code.strip():
        errors.append(f"{prefix}: Module code cannot be empty or whitespace")
    elif not MODULE_CODE_PATTERN.match(code):
        errors.append(
            f"{prefix}: Module code '{code}' has invalid format (expected format: AB1234 or ABC1234)"
        )

    index_numbers = module.get('indexNumbers')
    if not isinstance(index_numbers, list):
        errors.append(f"{prefix}: indexNumbers must be a non-empty array")
    elif not index_numbers:
        errors.append(f"{prefix}: At least one index number must be provided")
    else:
        for i, index_number in enumerate(index_numbers):
            if not isinstance(index_number, str):
                errors.append(f"{prefix}.indexNumbers[{i}]: Index number must be a string")
            elif not index_number.strip():
                errors.append(f"{prefix}.indexNumbers[{i}]: Index number cannot be empty")
            elif not INDEX_NUMBER_PATTERN.match(index_number):
                errors.append(
                    f"{prefix}.indexNumbers[{i}]: Index number '{index_number}' has invalid format (expected 5 digits)"
                )

        hashable = [n for n in index_numbers if isinstance(n, str)]
        if len(set(hashable)) != len(hashable):
            errors.append(f"{prefix}: Duplicate index numbers found")

    return errors


def _validate_range(name: str, value: Any) -> List[str]:
    if not isinstance(value, dict):
        return [f"{name} must be an object"]

    errors = []
    low, high = value.get('min'), value.get('max')
    if not _is_number(low) or low < 0:
        errors.append(f"{name}.min must be a non-negative number")
    if not _is_number(high) or high < 0:
        errors.append(f"{name}.max must be a non-negative number")
    if _is_number(low) and _is_number(high) and low > high:
        errors.append(f"{name}.min cannot be greater than {name}.max")
    if 'enabled' in value and not isinstance(value['enabled'], bool):
        errors.append(f"{name}.enabled must be a boolean")
    return errors


def _validate_flags(name: str, value: Any, keys: List[str]) -> List[str]:
    if not isinstance(value, dict):
        return [f"{name} must be an object"]
    return [f"{name}.{key} must be a boolean" for key in keys if not isinstance(value.get(key), bool)]


def validate_filters(filters: Any) -> List[str]:
    errors = []

    if not isinstance(filters, dict):
        errors.append('Filters must be an object')
        return errors

    for name in RANGE_FILTERS:
        if name in filters:
            errors.extend(_validate_range(name, filters[name]))

    window = filters.get('dayStartEnd')
    if window is not None:
        if not isinstance(window, dict):
            errors.append('dayStartEnd must be an object')
        else:
            for key in ('startAfter', 'endBefore'):
                value = window.get(key)
                if value is None:
                    continue
                if not isinstance(value, str) or not TIME_PATTERN.match(value):
                    errors.append(f"dayStartEnd.{key} '{value}' has invalid time format (expected HH:MM)")

    if 'daysOfWeek' in filters:
        errors.extend(_validate_flags('daysOfWeek', filters['daysOfWeek'], DAY_KEYS))

    classes = filters.get('classesToConsider')
    if 'classesToConsider' in filters:
        errors.extend(_validate_flags('classesToConsider', classes, CLASS_TYPE_KEYS))
        if isinstance(classes, dict) and not any(classes.get(t) is True for t in CLASS_TYPE_KEYS):
            errors.append('At least one class type must be selected in classesToConsider')

    venue = filters.get('venuePreference')
    if 'venuePreference' in filters:
        errors.extend(_validate_flags('venuePreference', venue, ['includeOnline', 'includeInPerson']))
        if isinstance(venue, dict) and not venue.get('includeOnline') and not venue.get('includeInPerson'):
            errors.append('At least one venue type must be selected in venuePreference')

    daily_load = filters.get('dailyLoad')
    if 'dailyLoad' in filters:
        if not isinstance(daily_load, dict):
            errors.append('dailyLoad must be an object')
        elif daily_load.get('preference') not in DAILY_LOAD_PREFERENCES:
            errors.append(
                f"dailyLoad.preference must be either 'skewed' or 'balanced', got '{daily_load.get('preference')}'"
            )

    if 'generationGoals' in filters:
        errors.extend(_validate_flags(
            'generationGoals', filters['generationGoals'],
            ['balanceWorkload', 'minimizeDays', 'consecutiveDays']
        ))

    return errors


def validate_generation_request(
    payload: Dict[str, Any],
    sink: Optional[AuditSink] = None
) -> RequestValidationResult:
    """Validate a generation request body. Failures are recorded on ``sink``."""
    errors = []
    payload = payload if isinstance(payload, dict) else {}

    modules = payload.get('modules')
    if not isinstance(modules, list):
        errors.append('Modules must be a non-empty array')
    elif not modules:
        errors.append('At least one module must be provided')
    else:
        seen = set()
        for position, module in enumerate(modules):
            errors.extend(validate_module(module, position))
            code = module.get('code') if isinstance(module, dict) else None
            if isinstance(code, str) and code.strip():
                if code.upper() in seen:
                    errors.append(f"Module[{position}]: Duplicate module code '{code.upper()}'")
                seen.add(code.upper())

    semester = payload.get('semester')
    if not isinstance(semester, str) or not semester:
        errors.append('Semester must be a non-empty string')
    elif not semester.strip():
        errors.append('Semester cannot be empty or whitespace')

    if payload.get('filters') is None:
        errors.append('Filters object is required')
    else:
        errors.extend(validate_filters(payload['filters']))

    if errors and sink is not None:
        sink.append('VALIDATION ERROR', '; '.join(errors), payload)

    return RequestValidationResult(valid=not errors, errors=errors)
