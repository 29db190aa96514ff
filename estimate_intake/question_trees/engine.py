"""
Question Tree Engine — loads estimate templates and walks their steps.

This is the brain of the intake wizard. It decides which questions are shown,
whether each step is complete, whether the estimate can be generated, and
which step to open next after an answer changes.

Templates are plain JSON under data/ (one file per template id). Everything
else here is a pure function of (template, answers).
"""

import json
import logging
from pathlib import Path
from typing import Optional

from ..config import settings
from ..schemas import QuestionOption, read_slot
from .dependencies import dependency_question_ids, is_visible

logger = logging.getLogger(__name__)

# Directory where template JSON files live
DATA_DIR = Path(__file__).parent / "data"

# Steps whose answers live under one composite key instead of one key per question
SLOT_STEP_IDS = {
    "step-dimensions": "dimensions",
    "step-measurements": "measurements",
}


class QuestionTreeEngine:
    """Template loading plus the completion rules, addressed by template id."""

    def __init__(self, data_dir: Optional[Path] = None):
        if data_dir is None:
            data_dir = Path(settings.TEMPLATES_DIR) if settings.TEMPLATES_DIR else DATA_DIR
        self.data_dir = data_dir
        self._cache: dict[str, dict] = {}

    def load_template(self, template_id: str) -> dict:
        """Load template JSON by id. Cached after first load."""
        if template_id in self._cache:
            return self._cache[template_id]

        filepath = self.data_dir / f"{template_id}.json"
        if not filepath.exists():
            raise FileNotFoundError(f"No question template found for id: {template_id}")

        with open(filepath, encoding="utf-8") as f:
            template = json.load(f)

        validate_template(template)
        logger.info("Loaded template %s (%d steps)", template_id, len(template.get("steps", [])))
        self._cache[template_id] = template
        return template

    def list_available_templates(self) -> list[str]:
        """Return template ids that have JSON files."""
        return sorted(p.stem for p in self.data_dir.glob("*.json"))

    def list_templates(self) -> list[dict]:
        """Summary of every available template."""
        summaries = []
        for template_id in self.list_available_templates():
            template = self.load_template(template_id)
            summaries.append({
                "id": template["id"],
                "name": template["name"],
                "description": template.get("description"),
                "category": template.get("category", "other"),
                "icon": template.get("icon"),
                "step_count": len(template.get("steps", [])),
            })
        return summaries

    def get_templates_by_category(self, category: str) -> list[dict]:
        return [t for t in self.list_templates() if t["category"] == category]

    def get_all_questions(self, template_id: str) -> list[dict]:
        """All questions of a template, in step order."""
        template = self.load_template(template_id)
        return all_questions(template)

    def is_complete(self, template_id: str, answers: dict) -> bool:
        return can_generate(self.load_template(template_id), answers)

    def get_completion_status(self, template_id: str, answers: dict) -> dict:
        return get_completion_status(self.load_template(template_id), answers)

    def evaluate(self, template_id: str, answers: dict) -> dict:
        """Everything the rendering layer needs to draw the wizard for one snapshot."""
        template = self.load_template(template_id)
        status = get_completion_status(template, answers)
        return {
            "template_id": template["id"],
            "visibility": {
                q["id"]: is_visible(q, answers) for q in all_questions(template)
            },
            "steps": [
                {
                    "id": step["id"],
                    "title": step.get("title", step["id"]),
                    "is_complete": status["steps"][step["id"]],
                    "visible_questions": [q["id"] for q in get_visible_questions(step, answers)],
                }
                for step in template.get("steps", [])
            ],
            "can_generate": status["is_complete"],
            "completion_pct": status["completion_pct"],
            "missing_required": status["required_missing"],
        }


def all_questions(template: dict) -> list[dict]:
    return [q for step in template.get("steps", []) for q in step.get("questions", [])]


def validate_template(template: dict) -> None:
    """
    Check a freshly loaded template.

    Malformed options raise pydantic.ValidationError. Dependencies that point
    at a question id the template does not define log a warning; they are
    evaluated against a missing answer.
    """
    questions = all_questions(template)
    known = {q["id"] for q in questions}
    for q in questions:
        for option in q.get("options", []):
            QuestionOption.model_validate(option)
        for ref in dependency_question_ids(q):
            if ref not in known:
                logger.warning("Template %s: question %s depends on unknown question %s",
                               template.get("id"), q["id"], ref)


def is_effectively_required(question: dict) -> bool:
    """
    Required if flagged, or if shown conditionally.
    A question that only appears behind a dependency must be answered once it appears.
    """
    return bool(question.get("required")) or bool(question.get("dependencies"))


def is_answered(question: dict, answers: dict) -> bool:
    answer = answers.get(question["id"])
    if question.get("type") == "multiSelect":
        return isinstance(answer, list) and len(answer) > 0
    return answer is not None and answer != ""


def step_slot(step: dict) -> Optional[str]:
    """Composite answer slot a step is checked against, if any."""
    return step.get("slot") or SLOT_STEP_IDS.get(step["id"])


def get_visible_questions(step: dict, answers: dict) -> list[dict]:
    return [q for q in step.get("questions", []) if is_visible(q, answers)]


def is_step_complete(step: dict, answers: dict) -> bool:
    """
    Slot steps: the composite block has positive dimensions.
    Question steps: every visible, effectively-required question is answered.
    """
    slot = step_slot(step)
    if slot:
        return read_slot(answers, slot).is_complete()

    for q in step.get("questions", []):
        if not is_visible(q, answers):
            continue
        if not is_effectively_required(q):
            continue
        if not is_answered(q, answers):
            return False
    return True


def can_generate(template: dict, answers: dict) -> bool:
    return all(is_step_complete(step, answers) for step in template.get("steps", []))


def _required_visible(template: dict, answers: dict) -> list[dict]:
    return [
        q for q in all_questions(template)
        if is_effectively_required(q) and is_visible(q, answers)
    ]


def completion_percentage(template: dict, answers: dict) -> int:
    """Answered share of visible, effectively-required questions. 100 when there are none."""
    required = _required_visible(template, answers)
    if not required:
        return 100
    answered = [q for q in required if is_answered(q, answers)]
    return int(round(len(answered) / len(required) * 100))


def get_completion_status(template: dict, answers: dict) -> dict:
    """Return detailed completion status."""
    required = _required_visible(template, answers)
    missing = [q["id"] for q in required if not is_answered(q, answers)]
    steps = {step["id"]: is_step_complete(step, answers) for step in template.get("steps", [])}

    return {
        "is_complete": all(steps.values()),
        "required_total": len(required),
        "required_answered": len(required) - len(missing),
        "required_missing": missing,
        "steps": steps,
        "completion_pct": completion_percentage(template, answers),
    }


def find_step_index(template: dict, key: str) -> int:
    """Index of the step that owns an answer key (question id or slot name), or -1."""
    for i, step in enumerate(template.get("steps", [])):
        if step_slot(step) == key:
            return i
        if any(q["id"] == key for q in step.get("questions", [])):
            return i
    return -1


def next_step_to_expand(template: dict, changed_key: str, answers: dict) -> Optional[str]:
    """
    After an answer change, the id of the step to open next, or None.

    Only advances once the step owning the key is complete. Slot steps
    (and steps next to them) always open; otherwise the next step must
    have at least one visible question.
    """
    steps = template.get("steps", [])
    index = find_step_index(template, changed_key)
    if index < 0 or index >= len(steps) - 1:
        return None

    current = steps[index]
    if not is_step_complete(current, answers):
        return None

    following = steps[index + 1]
    if step_slot(current) or step_slot(following):
        return following["id"]
    if get_visible_questions(following, answers):
        return following["id"]
    return None
