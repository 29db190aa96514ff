"""
Question visibility — evaluates a question's dependency list against the answer map.

A dependency is {"questionId", "condition", "value"}. A question's list is
AND-ed. Where a question must appear under alternative conditions, the list
holds a group instead: {"any": [...]} (OR) or {"all": [...]} (AND), nestable.

Evaluation never raises. A broken rule should not block the user, so an
unknown condition counts as satisfied and a missing answer simply fails to match.
"""

import logging

logger = logging.getLogger(__name__)

CONDITIONS = ("equals", "notEquals", "in", "notIn")


def is_visible(question: dict, answers: dict) -> bool:
    """True if every dependency of the question holds for the current answers."""
    dependencies = question.get("dependencies") or []
    return all(evaluate_dependency(dep, answers) for dep in dependencies)


def evaluate_dependency(dep: dict, answers: dict) -> bool:
    """Evaluate a single dependency or an any/all group."""
    if "any" in dep:
        return any(evaluate_dependency(d, answers) for d in dep["any"] or [])
    if "all" in dep:
        return all(evaluate_dependency(d, answers) for d in dep["all"] or [])

    answer = answers.get(dep.get("questionId"))
    return check_condition(dep.get("condition"), answer, dep.get("value"))


def check_condition(condition: str, answer, expected) -> bool:
    """
    Compare one answer against a dependency value.

    List answers (multi-select) are matched by containment/intersection,
    scalar answers by equality/membership. `in`/`notIn` accept a scalar
    value as a one-element set.
    """
    if condition not in CONDITIONS:
        logger.warning("Unknown dependency condition %r, treating as satisfied", condition)
        return True

    if isinstance(answer, (list, tuple)):
        if condition == "equals":
            return _contains(answer, expected)
        if condition == "notEquals":
            return not _contains(answer, expected)
        values = _as_list(expected)
        hit = any(_contains(values, a) for a in answer)
        return hit if condition == "in" else not hit

    if condition == "equals":
        return _same(answer, expected)
    if condition == "notEquals":
        return not _same(answer, expected)
    hit = _contains(_as_list(expected), answer)
    return hit if condition == "in" else not hit


def _as_list(value) -> list:
    if isinstance(value, (list, tuple, set)):
        return list(value)
    return [value]


def _same(a, b) -> bool:
    # Strict like the form layer: True is not 1, "1" is not 1, but 1 == 1.0
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a == b
    if isinstance(a, (int, float)) and isinstance(b, (int, float)):
        return a == b
    return type(a) is type(b) and a == b


def _contains(values, item) -> bool:
    return any(_same(v, item) for v in values)


def dependency_question_ids(question: dict) -> list[str]:
    """All question ids a question's visibility depends on, in first-seen order."""
    found = []

    def walk(deps):
        for dep in deps or []:
            if "any" in dep:
                walk(dep["any"])
            elif "all" in dep:
                walk(dep["all"])
            elif dep.get("questionId") and dep["questionId"] not in found:
                found.append(dep["questionId"])

    walk(question.get("dependencies"))
    return found
