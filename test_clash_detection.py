from utils.clash import has_time_clash, find_clashing_pairs
from utils.generation_types import ClassSession


def make_session(day='MON', start='0830', end='0930', weeks=(), code='SC1003', index='10101'):
    return ClassSession(
        module_code=code, index_number=index, type='LEC',
        day=day, start_time=start, end_time=end, venue='LT1', weeks=frozenset(weeks)
    )


def test_touching_sessions_do_not_clash():
    first = make_session(start='0830', end='0930')
    second = make_session(start='0930', end='1030')
    assert not has_time_clash(first, second)
    assert not has_time_clash(second, first)


def test_one_minute_overlap_clashes():
    first = make_session(start='0830', end='0931')
    second = make_session(start='0930', end='1030')
    assert has_time_clash(first, second)


def test_different_days_never_clash():
    assert not has_time_clash(make_session(day='MON'), make_session(day='TUE'))


def test_day_names_are_normalized():
    assert has_time_clash(make_session(day='Monday'), make_session(day='mon'))


def test_colon_and_compact_times_compare_equal():
    first = make_session(start='8:30', end='09:30')
    second = make_session(start='0900', end='1000')
    assert has_time_clash(first, second)


def test_disjoint_weeks_do_not_clash():
    first = make_session(weeks=[1, 3, 5])
    second = make_session(weeks=[2, 4, 6])
    assert not has_time_clash(first, second)


def test_shared_week_clashes():
    first = make_session(weeks=[1, 3, 5])
    second = make_session(weeks=[5, 6])
    assert has_time_clash(first, second)


def test_empty_weeks_means_every_week():
    every_week = make_session(weeks=())
    odd_weeks = make_session(weeks=[1, 3, 5])
    assert has_time_clash(every_week, odd_weeks)
    assert has_time_clash(odd_weeks, every_week)


def test_find_clashing_pairs_lists_each_pair_once():
    a = make_session(start='0800', end='1000', code='A')
    b = make_session(start='0900', end='1100', code='B')
    c = make_session(start='1100', end='1200', code='C')
    pairs = find_clashing_pairs([a, b, c])
    assert pairs == [(a, b)]
