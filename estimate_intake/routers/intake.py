"""
Intake API — stateless JSON wrapper around the question engine.

GET  /api/intake/templates                 — Available templates
GET  /api/intake/templates/{id}            — Full template definition
POST /api/intake/templates/{id}/evaluate   — Visibility + completion for an answer snapshot
POST /api/intake/templates/{id}/answer     — Apply one answer change, return the next snapshot
POST /api/intake/measurements              — Run the measurement calculator

Nothing is stored here. The caller owns the answer map and sends it with every request.
"""

import logging
from typing import Any, List

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from ..calculators.measurements import compute_measurements, measurement_inputs_from_answers
from ..question_trees.derived_fields import apply_derived_updates, TRIGGER_KEYS
from ..question_trees.engine import QuestionTreeEngine, next_step_to_expand
from ..schemas import Evaluation, TemplateSummary

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/intake", tags=["intake"])

# Singleton engine, cached templates, no state
engine = QuestionTreeEngine()

# Answer keys that feed the measurement calculator
DIMENSIONAL_KEYS = {
    "dimensions",
    "measurements",
    "roofType",
    "knockThroughHeight",
    "knockThroughHeightExisting",
} | {key for key in TRIGGER_KEYS if key.startswith("knockThroughWidth")}


# --- Request schemas ---

class EvaluateRequest(BaseModel):
    answers: dict = {}


class AnswerRequest(BaseModel):
    key: str
    value: Any = None
    answers: dict = {}


# --- Endpoints ---

@router.get("/templates", response_model=List[TemplateSummary])
def list_templates():
    return engine.list_templates()


@router.get("/templates/{template_id}")
def get_template(template_id: str):
    return _load(template_id)


@router.post("/templates/{template_id}/evaluate", response_model=Evaluation)
def evaluate_answers(template_id: str, request: EvaluateRequest):
    """Which questions are visible, which steps are done, and whether generate is enabled."""
    _load(template_id)
    return engine.evaluate(template_id, request.answers)


@router.post("/templates/{template_id}/answer")
def submit_answer(template_id: str, request: AnswerRequest):
    """
    Apply a single answer change.

    1. Derived companion fields are computed (e.g. steel length from opening width)
    2. The enlarged snapshot is evaluated for visibility and completion
    3. Measurements are recomputed when a dimensional answer changed
    """
    template = _load(template_id)

    answers = apply_derived_updates(request.key, request.value, request.answers)
    evaluation = engine.evaluate(template_id, answers)

    response = {
        "template_id": template_id,
        "answers": answers,
        "evaluation": evaluation,
        "next_step": next_step_to_expand(template, request.key, answers),
    }

    if request.key in DIMENSIONAL_KEYS:
        response["measurements"] = compute_measurements(measurement_inputs_from_answers(answers))

    return response


@router.post("/measurements")
def calculate_measurements(inputs: dict):
    return compute_measurements(inputs)


def _load(template_id: str) -> dict:
    try:
        return engine.load_template(template_id)
    except FileNotFoundError:
        logger.info("Template not found: %s", template_id)
        raise HTTPException(status_code=404, detail=f"No template: {template_id}")
