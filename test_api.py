import logging
import os
import tempfile

os.environ['DATABASE_URL'] = 'sqlite:///:memory:'
os.environ.setdefault('LOG_DIR', tempfile.mkdtemp())

import pytest

from app import app
from data.seed_data import seed_database, SEMESTER
from utils.clash import find_clashing_pairs
from utils.generation_types import ClassSession
from utils.time_utils import parse_weeks


DEFAULT_FILTERS = {
    'dayDuration': {'min': 4, 'max': 8, 'enabled': False},
    'consecutiveClasses': {'min': 1, 'max': 3, 'enabled': False},
    'gapsBetweenClasses': {'min': 1, 'max': 2, 'enabled': False},
    'dayStartEnd': {'startAfter': '08:00', 'endBefore': '23:00', 'startEnabled': False, 'endEnabled': False},
    'daysOfWeek': {'monday': True, 'tuesday': True, 'wednesday': True, 'thursday': True,
                   'friday': True, 'saturday': True, 'sunday': True},
    'dailyLoad': {'preference': 'skewed', 'enabled': False},
    'classesToConsider': {'tutorial': True, 'lab': True, 'seminar': True,
                          'lecture': True, 'project': True, 'design': True},
    'venuePreference': {'includeOnline': True, 'includeInPerson': True},
    'generationGoals': {'balanceWorkload': False, 'minimizeDays': False, 'consecutiveDays': False},
}


@pytest.fixture
def client():
    with app.app_context():
        seed_database()
    return app.test_client()


def generate(client, modules, filters=None):
    return client.post('/api/timetable/generate', json={
        'modules': modules,
        'filters': filters or DEFAULT_FILTERS,
        'semester': SEMESTER,
    })


def to_sessions(classes):
    return [ClassSession(
        module_code=c['moduleCode'], index_number=c['indexNumber'], type=c['type'],
        day=c['day'], start_time=c['startTime'], end_time=c['endTime'],
        venue=c['venue'], weeks=parse_weeks(c['weeks'])
    ) for c in classes]


def test_health(client):
    response = client.get('/health')
    assert response.status_code == 200
    assert response.get_json()['status'] == 'ok'


def test_search_modules(client):
    response = client.get('/api/modules/search?q=sc10')
    codes = {m['code'] for m in response.get_json()['modules']}
    assert codes == {'SC1003', 'SC1005', 'SC1007'}
    assert client.get('/api/modules/search').get_json() == {'modules': []}


def test_get_module(client):
    response = client.get('/api/modules/sc1007')
    assert response.status_code == 200
    assert response.get_json()['name'] == 'Data Structures and Algorithms'
    assert client.get('/api/modules/XX9999').status_code == 404


def test_semesters(client):
    assert client.get('/api/modules/semesters').get_json() == {'semesters': [SEMESTER]}


def test_module_indexes(client):
    data = client.get('/api/modules/SC1003/indexes').get_json()
    assert data['semester'] == SEMESTER
    assert [i['indexNumber'] for i in data['indexes']] == ['10101', '10102', '10103']
    assert all(len(i['classes']) == 2 for i in data['indexes'])
    assert client.get('/api/modules/SC1003/indexes?semester=1999_1').status_code == 404


def test_generate(client):
    response = generate(client, [
        {'code': 'SC1003', 'indexNumbers': ['10101', '10102', '10103']},
        {'code': 'sc1005', 'indexNumbers': ['10201', '10202']},
    ])
    assert response.status_code == 200
    data = response.get_json()

    assert data['totalCombinations'] == 4
    assert data['returnedCount'] == 4
    assert data['hasMore'] is False
    assert data['searchComplete'] is True
    assert data['stopReason'] == 'exhausted'
    assert 'generatedAt' in data

    pairs = {(c['moduleAssignments']['SC1003'], c['moduleAssignments']['SC1005']) for c in data['combinations']}
    assert pairs == {('10101', '10202'), ('10102', '10202'), ('10103', '10201'), ('10103', '10202')}

    for combination in data['combinations']:
        assert find_clashing_pairs(to_sessions(combination['classes'])) == []
        assert set(combination['stats']) == {
            'distinctDays', 'weeklyHours', 'avgGapMinutes', 'earliestStart', 'latestEnd'
        }


def test_generate_with_online_excluded(client):
    filters = dict(DEFAULT_FILTERS, venuePreference={'includeOnline': False, 'includeInPerson': True})
    data = generate(client, [
        {'code': 'SC1007', 'indexNumbers': ['10301', '10302']},
        {'code': 'CC0001', 'indexNumbers': ['10501', '10502']},
    ], filters).get_json()
    assignments = [c['moduleAssignments'] for c in data['combinations']]
    assert assignments == [{'SC1007': '10301', 'CC0001': '10502'}]


def test_generate_rejects_invalid_request(client):
    response = generate(client, [{'code': 'C1', 'indexNumbers': ['10101']}])
    assert response.status_code == 400
    data = response.get_json()
    assert data['valid'] is False
    assert any('invalid format' in e for e in data['errors'])


def test_generate_requires_json(client):
    response = client.post('/api/timetable/generate', data='not json', content_type='text/plain')
    assert response.status_code == 400


def test_generate_unknown_module(client):
    response = generate(client, [
        {'code': 'SC1003', 'indexNumbers': ['10101']},
        {'code': 'XX9999', 'indexNumbers': ['10101']},
    ])
    assert response.status_code == 200
    data = response.get_json()
    assert data['returnedCount'] == 0
    assert data['combinations'] == []
    assert 'Module XX9999 has no valid indexes after filtering' in data['warnings']


def test_check_clash(client):
    response = client.post('/api/timetable/check-clash', json={
        'semester': SEMESTER,
        'selections': [{'code': 'SC1003', 'indexNumber': '10101'}, {'code': 'SC1005', 'indexNumber': '10201'}],
    })
    data = response.get_json()
    assert data['hasConflict'] is True
    assert data['conflicts'][0]['reason'] == 'Time overlap on TUE between SC1003 10101 and SC1005 10201'


def test_check_clash_without_conflict(client):
    data = client.post('/api/timetable/check-clash', json={
        'semester': SEMESTER,
        'selections': [{'code': 'SC1003', 'indexNumber': '10103'}, {'code': 'SC1005', 'indexNumber': '10201'}],
    }).get_json()
    assert data == {'hasConflict': False, 'conflicts': []}


def test_check_clash_with_custom_event(client):
    data = client.post('/api/timetable/check-clash', json={
        'semester': SEMESTER,
        'selections': [{'code': 'SC1003', 'indexNumber': '10103'}],
        'customEvents': [{'title': 'Gym', 'day': 'Monday', 'startTime': '10:00', 'endTime': '11:00'}],
    }).get_json()
    assert data['hasConflict'] is True
    assert data['conflicts'][0]['reason'] == 'Time overlap on MON between SC1003 10103 and Gym'


def test_check_clash_requires_semester(client):
    response = client.post('/api/timetable/check-clash', json={'selections': []})
    assert response.status_code == 400


def test_generate_rejects_repeated_module(client):
    response = generate(client, [
        {'code': 'CC0001', 'indexNumbers': ['10501']},
        {'code': 'cc0001', 'indexNumbers': ['10502']},
    ])
    assert response.status_code == 400
    assert "Module[1]: Duplicate module code 'CC0001'" in response.get_json()['errors']


def test_generate_failure_logs_traceback(client, monkeypatch, caplog):
    def broken(*args, **kwargs):
        raise RuntimeError('catalogue unavailable')

    monkeypatch.setattr('routes.timetable.generate_timetable_combinations', broken)
    with caplog.at_level(logging.ERROR):
        response = generate(client, [{'code': 'SC1003', 'indexNumbers': ['10101']}])

    assert response.status_code == 500
    assert response.get_json() == {'error': 'Failed to generate timetable combinations'}
    failures = [r for r in caplog.records if 'Timetable generation failed' in r.getMessage()]
    assert failures and failures[0].exc_info is not None
    assert failures[0].exc_info[0] is RuntimeError
