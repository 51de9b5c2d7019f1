from utils.combination_builder import (
    CombinationBuilder, generate_combinations, STOP_EXHAUSTED, STOP_RESULT_CAP, STOP_WORK_CAP
)
from utils.generation_types import ClassSession, GroupOption, ModuleOptions


def make_group(code, index, day, start, end, weeks=()):
    session = ClassSession(
        module_code=code, index_number=index, type='LEC',
        day=day, start_time=start, end_time=end, venue='LT1', weeks=frozenset(weeks)
    )
    return GroupOption(index_number=index, sessions=[session])


def spread_module(code, day, count, first_index=10001):
    """A module with `count` indexes at different hours of the same day."""
    groups = []
    for i in range(count):
        start = f'{8 + i:02d}00'
        end = f'{9 + i:02d}00'
        groups.append(make_group(code, str(first_index + i), day, start, end))
    return ModuleOptions(code=code, groups=groups)


def assignments(outcome):
    return [c.module_assignments for c in outcome.combinations]


def test_two_modules_on_different_days_give_one_combination():
    modules = [
        ModuleOptions(code='SC1003', groups=[make_group('SC1003', '10101', 'MON', '0830', '1020')]),
        ModuleOptions(code='SC1005', groups=[make_group('SC1005', '10201', 'TUE', '0830', '1020')]),
    ]
    outcome = generate_combinations(modules)
    assert assignments(outcome) == [{'SC1003': '10101', 'SC1005': '10201'}]
    assert len(outcome.combinations[0].sessions) == 2
    assert not outcome.has_more
    assert outcome.stop_reason == STOP_EXHAUSTED


def test_clashing_only_options_give_nothing():
    modules = [
        ModuleOptions(code='SC1003', groups=[make_group('SC1003', '10101', 'MON', '0830', '1020', [1, 2])]),
        ModuleOptions(code='SC1005', groups=[make_group('SC1005', '10201', 'MON', '0930', '1130', [2, 3])]),
    ]
    outcome = generate_combinations(modules)
    assert outcome.combinations == []
    assert outcome.stop_reason == STOP_EXHAUSTED


def test_clashing_option_is_pruned_but_others_survive():
    modules = [
        ModuleOptions(code='SC1003', groups=[make_group('SC1003', '10101', 'MON', '0830', '1020')]),
        ModuleOptions(code='SC1005', groups=[
            make_group('SC1005', '10201', 'MON', '0900', '1000'),
            make_group('SC1005', '10202', 'MON', '1020', '1120'),
        ]),
    ]
    outcome = generate_combinations(modules)
    assert assignments(outcome) == [{'SC1003': '10101', 'SC1005': '10202'}]


def test_emission_order_follows_input_order():
    modules = [spread_module('AA1000', 'MON', 2), spread_module('BB2000', 'TUE', 2, 20001)]
    outcome = generate_combinations(modules)
    assert assignments(outcome) == [
        {'AA1000': '10001', 'BB2000': '20001'},
        {'AA1000': '10001', 'BB2000': '20002'},
        {'AA1000': '10002', 'BB2000': '20001'},
        {'AA1000': '10002', 'BB2000': '20002'},
    ]


def test_identical_input_gives_identical_output():
    modules = [spread_module('AA1000', 'MON', 3), spread_module('BB2000', 'TUE', 3, 20001)]
    assert assignments(generate_combinations(modules)) == assignments(generate_combinations(modules))


def test_result_cap_truncates_and_reports_more():
    modules = [spread_module('AA1000', 'MON', 3), spread_module('BB2000', 'TUE', 3, 20001)]
    outcome = generate_combinations(modules, max_combinations=5)
    assert len(outcome.combinations) == 5
    assert outcome.has_more
    assert outcome.stop_reason == STOP_RESULT_CAP


def test_result_cap_equal_to_total_is_not_more():
    modules = [spread_module('AA1000', 'MON', 3), spread_module('BB2000', 'TUE', 3, 20001)]
    outcome = generate_combinations(modules, max_combinations=9)
    assert len(outcome.combinations) == 9
    assert not outcome.has_more
    assert outcome.stop_reason == STOP_EXHAUSTED


def test_work_cap_stops_search_quietly():
    modules = [spread_module('AA1000', 'MON', 3), spread_module('BB2000', 'TUE', 3, 20001)]
    outcome = generate_combinations(modules, max_recursive_calls=3)
    assert len(outcome.combinations) == 1
    assert not outcome.has_more
    assert outcome.stop_reason == STOP_WORK_CAP
    assert outcome.calls == 3


def test_module_without_options_makes_search_vacuous():
    modules = [spread_module('AA1000', 'MON', 3), ModuleOptions(code='BB2000', groups=[])]
    outcome = generate_combinations(modules)
    assert outcome.combinations == []
    assert outcome.stop_reason == STOP_EXHAUSTED


def test_no_modules_gives_nothing():
    outcome = generate_combinations([])
    assert outcome.combinations == []
    assert outcome.calls == 0


def test_rejected_combinations_do_not_count_towards_cap():
    modules = [spread_module('AA1000', 'MON', 3), spread_module('BB2000', 'TUE', 3, 20001)]
    outcome = generate_combinations(
        modules,
        max_combinations=3,
        accept=lambda c: c.module_assignments['BB2000'] == '20003'
    )
    assert [a['BB2000'] for a in assignments(outcome)] == ['20003', '20003', '20003']
    assert not outcome.has_more


def test_counters_are_per_builder():
    modules = [spread_module('AA1000', 'MON', 2), spread_module('BB2000', 'TUE', 2, 20001)]
    first = CombinationBuilder(modules)
    second = CombinationBuilder(modules)
    first.build()
    assert second.calls == 0
    assert len(second.build().combinations) == 4
