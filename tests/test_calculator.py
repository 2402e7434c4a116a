import random

import pytest

from java_grader.analyzer import PROBE_GROUPS, probe_names
from java_grader.calculator import (
    CATEGORY_MAX,
    LENIENT,
    STRICT,
    calculate_grade,
    get_scheme,
)
from java_grader.models import AnalysisReport


def _report(value=False, overrides=None):
    groups = {group: {name: value for name in probe_names(group)} for group in PROBE_GROUPS}
    for (group, name), v in (overrides or {}).items():
        groups[group][name] = v
    return AnalysisReport.from_dict(groups)


def _random_report(rng):
    return AnalysisReport.from_dict(
        {group: {name: rng.random() < 0.5 for name in probe_names(group)} for group in PROBE_GROUPS}
    )


def test_everything_present_scores_full_marks():
    grade = calculate_grade(_report(True), True, True)

    assert grade.categories() == [25, 25, 25, 25]
    assert grade.total == 100


def test_strict_nothing_present_scores_zero():
    grade = calculate_grade(_report(False), True, True, scheme=STRICT)

    assert grade.categories() == [0, 0, 0, 0]
    assert grade.total == 0


def test_lenient_scheme_partial_credit():
    assert calculate_grade(_report(False), True, True, scheme=LENIENT).total == 65
    top = calculate_grade(_report(True), True, True, scheme=LENIENT)
    # accessors get a flat allowance, so TransactionHistory tops out below 25
    assert top.categories() == [23, 25, 25, 25]
    assert top.total == 98


@pytest.mark.parametrize("scheme, compiled, ran, expected", [
    (STRICT, False, False, 80),
    (STRICT, False, True, 80),
    (STRICT, True, False, 96),
    (LENIENT, False, False, 90),
    (LENIENT, True, False, 98),
])
def test_failure_retention(scheme, compiled, ran, expected):
    assert calculate_grade(_report(True), compiled, ran, scheme=scheme).total == expected


def test_menu_error_handling_penalty_never_goes_negative():
    grade = calculate_grade(_report(False, {("standards", "hasTryCatch"): True}), True, True)

    # 1.6 for try/catch, -0.2 for the missing menu error handling
    assert grade.standards == 1


def test_categories_bounded_and_sum_to_total():
    rng = random.Random(7)
    for _ in range(200):
        report = _random_report(rng)
        for scheme in (STRICT, LENIENT):
            for compiled, ran in [(True, True), (True, False), (False, False)]:
                grade = calculate_grade(report, compiled, ran, scheme=scheme)
                assert all(0 <= c <= CATEGORY_MAX for c in grade.categories())
                assert 0 <= grade.total <= 100
                assert sum(grade.categories()) == grade.total


def test_turning_a_probe_on_never_lowers_a_score():
    rng = random.Random(11)
    bases = [_report(False)] + [_random_report(rng) for _ in range(5)]
    for scheme in (STRICT, LENIENT):
        for base in bases:
            before = calculate_grade(base, True, True, scheme=scheme)
            for group in PROBE_GROUPS:
                for name in probe_names(group):
                    flipped = AnalysisReport.from_dict(base.to_dict())
                    flipped.groups()[group][name] = True
                    after = calculate_grade(flipped, True, True, scheme=scheme)
                    assert all(a >= b for a, b in zip(after.categories(), before.categories())), (group, name)
                    assert after.total >= before.total


def test_compile_failure_never_beats_success():
    rng = random.Random(3)
    for _ in range(50):
        report = _random_report(rng)
        for scheme in (STRICT, LENIENT):
            ok = calculate_grade(report, True, True, scheme=scheme)
            broken = calculate_grade(report, False, False, scheme=scheme)
            assert broken.total <= ok.total


def test_same_input_same_grade():
    report = _random_report(random.Random(5))

    assert calculate_grade(report, True, False) == calculate_grade(report, True, False)


def test_test_results_do_not_change_the_grade():
    from java_grader.output_analyzer import analyze_output

    report = _random_report(random.Random(9))
    assert calculate_grade(report, True, True, analyze_output("")) == calculate_grade(report, True, True)


def test_missing_probe_keys_count_as_absent():
    grade = calculate_grade(AnalysisReport(), True, True)

    assert grade.total == 0


def test_get_scheme():
    assert get_scheme(None) is STRICT
    assert get_scheme("Lenient") is LENIENT
    with pytest.raises(ValueError):
        get_scheme("generous")
