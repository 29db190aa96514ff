"""
Question visibility tests — dependency conditions, AND lists, any/all groups, fail-open rules.
"""

import logging

import pytest

from estimate_intake.question_trees.dependencies import (
    check_condition,
    dependency_question_ids,
    evaluate_dependency,
    is_visible,
)


def _question(*deps):
    return {"id": "q", "type": "select", "required": False, "dependencies": list(deps)}


def _dep(question_id, condition, value):
    return {"questionId": question_id, "condition": condition, "value": value}


# ============================================================
# Basics
# ============================================================

def test_no_dependencies_is_visible():
    assert is_visible({"id": "q", "type": "select"}, {})
    assert is_visible(_question(), {})


def test_scalar_equals():
    q = _question(_dep("roofType", "equals", "flat"))
    assert is_visible(q, {"roofType": "flat"})
    assert not is_visible(q, {"roofType": "pitched"})


def test_scalar_not_equals():
    q = _question(_dep("roofType", "notEquals", "flat"))
    assert is_visible(q, {"roofType": "pitched"})
    assert not is_visible(q, {"roofType": "flat"})


def test_scalar_in_and_not_in():
    q_in = _question(_dep("location", "in", ["rear", "side"]))
    q_not_in = _question(_dep("location", "notIn", ["rear", "side"]))
    assert is_visible(q_in, {"location": "side"})
    assert not is_visible(q_in, {"location": "front"})
    assert is_visible(q_not_in, {"location": "front"})
    assert not is_visible(q_not_in, {"location": "rear"})


def test_in_with_scalar_value_is_one_element_set():
    q = _question(_dep("location", "in", "rear"))
    assert is_visible(q, {"location": "rear"})
    assert not is_visible(q, {"location": "side"})


def test_boolean_answers_compare_strictly():
    """True must not match 1, and the string 'existing' must not match True."""
    q = _question(_dep("knockThrough", "equals", True))
    assert is_visible(q, {"knockThrough": True})
    assert not is_visible(q, {"knockThrough": 1})
    assert not is_visible(q, {"knockThrough": "existing"})
    assert not is_visible(q, {"knockThrough": False})


def test_numbers_compare_across_int_and_float():
    q = _question(_dep("rooflightsCount", "in", [1, 2]))
    assert is_visible(q, {"rooflightsCount": 2.0})
    assert not is_visible(q, {"rooflightsCount": "2"})


# ============================================================
# Multi-select (list) answers
# ============================================================

def test_list_answer_in_intersects():
    q = _question(_dep("alterations", "in", ["b", "c"]))
    assert is_visible(q, {"alterations": ["a", "b"]})
    assert not is_visible(q, {"alterations": ["a", "d"]})


def test_list_answer_not_in():
    q = _question(_dep("alterations", "notIn", ["x", "y"]))
    assert is_visible(q, {"alterations": ["a", "b"]})
    assert not is_visible(q, {"alterations": ["a", "y"]})


def test_list_answer_equals_means_contains():
    q = _question(_dep("alterations", "equals", "b"))
    assert is_visible(q, {"alterations": ["a", "b"]})
    assert not is_visible(q, {"alterations": ["a"]})


def test_list_answer_not_equals_means_does_not_contain():
    q = _question(_dep("alterations", "notEquals", "b"))
    assert is_visible(q, {"alterations": ["a"]})
    assert not is_visible(q, {"alterations": ["a", "b"]})


def test_empty_list_answer():
    assert not is_visible(_question(_dep("alterations", "in", ["a"])), {"alterations": []})
    assert is_visible(_question(_dep("alterations", "notIn", ["a"])), {"alterations": []})


# ============================================================
# AND semantics
# ============================================================

@pytest.mark.parametrize("first,second", [(True, True), (True, False), (False, True), (False, False)])
def test_two_dependencies_and_together(first, second):
    q = _question(
        _dep("knockThrough", "equals", "existing"),
        _dep("existingOpeningAction", "equals", "enlarge"),
    )
    answers = {
        "knockThrough": "existing" if first else True,
        "existingOpeningAction": "enlarge" if second else "remove-and-make-good",
    }
    assert evaluate_dependency(q["dependencies"][0], answers) is first
    assert evaluate_dependency(q["dependencies"][1], answers) is second
    assert is_visible(q, answers) is (first and second)


# ============================================================
# any / all groups
# ============================================================

SUPPORT_GROUP = {
    "any": [
        _dep("knockThroughSupport", "in", ["steel", "lintel"]),
        _dep("knockThroughSupportExisting", "in", ["steel", "lintel"]),
    ]
}


def test_any_group_visible_from_either_branch():
    q = _question(SUPPORT_GROUP)
    assert is_visible(q, {"knockThroughSupport": "steel"})
    assert is_visible(q, {"knockThroughSupportExisting": "lintel"})
    assert is_visible(q, {"knockThroughSupport": "lintel", "knockThroughSupportExisting": "steel"})
    assert not is_visible(q, {})
    assert not is_visible(q, {"knockThroughSupport": ""})


def test_nested_all_inside_any():
    q = _question({
        "any": [
            {"all": [_dep("roofType", "equals", "pitched"), _dep("roofSubType", "equals", "gable")]},
            _dep("location", "equals", "wrap-around"),
        ]
    })
    assert is_visible(q, {"roofType": "pitched", "roofSubType": "gable"})
    assert not is_visible(q, {"roofType": "pitched", "roofSubType": "hipped"})
    assert is_visible(q, {"location": "wrap-around"})


def test_group_and_plain_dependency_are_anded():
    q = _question(SUPPORT_GROUP, _dep("knockThrough", "notEquals", False))
    assert is_visible(q, {"knockThroughSupport": "steel", "knockThrough": True})
    assert not is_visible(q, {"knockThroughSupport": "steel", "knockThrough": False})


def test_empty_groups():
    assert not evaluate_dependency({"any": []}, {})
    assert evaluate_dependency({"all": []}, {})


def test_dependency_question_ids_walks_groups():
    q = _question(SUPPORT_GROUP, _dep("knockThrough", "equals", True),
                  _dep("knockThroughSupport", "notEquals", "none"))
    assert dependency_question_ids(q) == [
        "knockThroughSupport", "knockThroughSupportExisting", "knockThrough",
    ]


# ============================================================
# Fail-open behaviour
# ============================================================

def test_unknown_condition_is_satisfied(caplog):
    q = _question(_dep("roofType", "startsWith", "fl"))
    with caplog.at_level(logging.WARNING):
        assert is_visible(q, {"roofType": "pitched"})
    assert "startsWith" in caplog.text


def test_missing_referenced_answer_does_not_match():
    assert not is_visible(_question(_dep("nope", "equals", "x")), {})
    assert not is_visible(_question(_dep("nope", "in", ["x"])), {})
    assert is_visible(_question(_dep("nope", "notEquals", "x")), {})
    assert is_visible(_question(_dep("nope", "notIn", ["x"])), {})


def test_check_condition_direct():
    assert check_condition("in", "b", ["a", "b"])
    assert check_condition("notIn", ["a"], "b")
    assert check_condition("bogus", None, None)


def test_idempotent(template):
    answers = {"knockThrough": True, "knockThroughSupport": "steel", "roofType": "flat"}
    for step in template["steps"]:
        for q in step["questions"]:
            assert is_visible(q, answers) == is_visible(q, answers)
