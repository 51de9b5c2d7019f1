import time
from flask import Blueprint, jsonify, request, current_app
from utils.audit import FileAuditSink
from utils.catalogue import fetch_modules_with_indexes
from utils.clash import has_time_clash
from utils.generation_types import ClassSession
from utils.time_utils import normalize_day, normalize_time, parse_weeks
from utils.timetable_generator import GenerationValidationError, generate_timetable_combinations

timetable_bp = Blueprint('timetable', __name__)


@timetable_bp.route('/generate', methods=['POST'])
def generate_timetable():
    """Generate ranked clash-free timetables for the requested modules."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({'error': 'Request body must be JSON'}), 400

    started = time.monotonic()
    config = current_app.config
    try:
        result = generate_timetable_combinations(
            data,
            catalogue=fetch_modules_with_indexes,
            max_combinations=config['GENERATION_MAX_COMBINATIONS'],
            max_recursive_calls=config['GENERATION_MAX_RECURSIVE_CALLS'],
            max_results=config['GENERATION_MAX_RESULTS'],
            request_sink=FileAuditSink(config['VALIDATION_LOG_PATH']),
            result_sink=FileAuditSink(config['RESULT_VALIDATION_LOG_PATH']),
        )
    except GenerationValidationError as e:
        current_app.logger.warning(f"Rejected generation request: {'; '.join(e.errors)}")
        return jsonify(e.to_dict()), 400
    except Exception:
        elapsed = int((time.monotonic() - started) * 1000)
        current_app.logger.exception(f"Timetable generation failed after {elapsed}ms")
        return jsonify({'error': 'Failed to generate timetable combinations'}), 500

    elapsed = int((time.monotonic() - started) * 1000)
    current_app.logger.info(f"Generated {result.total_combinations} combinations in {elapsed}ms")
    return jsonify(result.to_dict())


@timetable_bp.route('/check-clash', methods=['POST'])
def check_clash():
    """Check a chosen set of indexes and custom events for clashes."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({'error': 'Request body must be JSON'}), 400

    semester = data.get('semester')
    if not isinstance(semester, str) or not semester.strip():
        return jsonify({'error': 'semester is required'}), 400

    selections = data.get('selections') or []
    custom_events = data.get('customEvents') or []
    if not isinstance(selections, list) or not isinstance(custom_events, list):
        return jsonify({'error': 'selections and customEvents must be arrays'}), 400

    module_requests = [
        {'code': str(s['code']), 'indexNumbers': [str(s['indexNumber'])]}
        for s in selections
        if isinstance(s, dict) and s.get('code') and s.get('indexNumber')
    ]
    if len(module_requests) < len(selections):
        current_app.logger.warning("Some selections are missing a module code or index number; skipped")

    slots = []
    for module in fetch_modules_with_indexes(module_requests, semester):
        for group in module.groups:
            for session in group.sessions:
                slots.append((session, f"{session.module_code} {session.index_number}", 'module'))

    for event in custom_events:
        session = _custom_event_session(event)
        if session:
            slots.append((session, session.module_name, 'custom'))

    return jsonify(check_slot_clashes(slots))


def _custom_event_session(event):
    """Turn a custom event into a session, or None if it has no day or times."""
    if not isinstance(event, dict):
        return None
    day, start, end = event.get('day'), event.get('startTime'), event.get('endTime')
    if not day or not start or not end:
        return None
    return ClassSession(
        module_code='',
        module_name=event.get('title') or 'Custom event',
        index_number='',
        type='CUSTOM',
        day=normalize_day(day),
        start_time=normalize_time(start),
        end_time=normalize_time(end),
        weeks=parse_weeks(event.get('weeks')),
    )


def check_slot_clashes(slots):
    """
    Compare every pair of (session, label, source) entries.

    Returns:
        dict with has_conflict and the list of clashing pairs
    """
    conflicts = []
    for i, (first, first_label, first_source) in enumerate(slots):
        for second, second_label, second_source in slots[i + 1:]:
            if has_time_clash(first, second):
                conflicts.append({
                    'slot1': dict(first.to_dict(), source=first_source, label=first_label),
                    'slot2': dict(second.to_dict(), source=second_source, label=second_label),
                    'reason': f"Time overlap on {first.day} between {first_label} and {second_label}"
                })

    return {
        'hasConflict': len(conflicts) > 0,
        'conflicts': conflicts
    }
