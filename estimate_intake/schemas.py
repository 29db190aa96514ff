from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List

from .calculators.base import to_number


def _lenient_number(value) -> Optional[float]:
    """Coerce form input to float. Blank, boolean, unparseable or non-finite input becomes None."""
    return to_number(value)


class AnswerSlot(BaseModel):
    """Base for composite answer blocks stored under a single answer-map key."""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_numbers(cls, value):
        return _lenient_number(value)


class DimensionsAnswer(AnswerSlot):
    length: Optional[float] = None
    width: Optional[float] = None
    ceiling_height: Optional[float] = Field(None, alias="ceilingHeight")
    soffit: Optional[float] = None                       # mm
    gable: Optional[float] = None                        # mm
    foundation_length: Optional[float] = Field(None, alias="foundationLength")
    foundation_width: Optional[float] = Field(None, alias="foundationWidth")   # mm
    foundation_depth: Optional[float] = Field(None, alias="foundationDepth")   # mm

    def is_complete(self) -> bool:
        return (self.length or 0) > 0 and (self.width or 0) > 0


class MeasurementsAnswer(AnswerSlot):
    external_length_m: Optional[float] = Field(None, alias="externalLengthM")
    external_width_m: Optional[float] = Field(None, alias="externalWidthM")
    eaves_height_m: Optional[float] = Field(None, alias="eavesHeightM")
    ceiling_height_m: Optional[float] = Field(None, alias="ceilingHeightM")
    floor_area_m2: Optional[float] = Field(None, alias="floorAreaM2")
    roof_factor: Optional[float] = Field(None, alias="roofFactor")
    foundation_width_mm: Optional[float] = Field(None, alias="foundationWidthMM")
    foundation_depth_mm: Optional[float] = Field(None, alias="foundationDepthMM")
    excavation_depth_mm: Optional[float] = Field(None, alias="excavationDepthMM")
    concrete_depth_mm: Optional[float] = Field(None, alias="concreteDepthMM")
    openings_area_m2: Optional[float] = Field(None, alias="openingsAreaM2")

    def is_complete(self) -> bool:
        return (
            (self.external_length_m or 0) > 0
            and (self.external_width_m or 0) > 0
            and (self.floor_area_m2 or 0) > 0
        )


SLOT_MODELS: dict[str, type] = {
    "dimensions": DimensionsAnswer,
    "measurements": MeasurementsAnswer,
}


def read_slot(answers: dict, name: str) -> AnswerSlot:
    """
    Read a composite answer block as its typed model.
    Missing or non-dict blocks come back empty rather than raising.
    """
    model = SLOT_MODELS[name]
    raw = answers.get(name)
    if not isinstance(raw, dict):
        return model()
    return model.model_validate(raw)


# --- Template shapes (API responses) ---

class QuestionOption(BaseModel):
    id: str
    label: str
    value: str | int | float | bool
    icon: Optional[str] = None
    description: Optional[str] = None


class TemplateSummary(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    category: str
    icon: Optional[str] = None
    step_count: int


class StepStatus(BaseModel):
    id: str
    title: str
    is_complete: bool
    visible_questions: List[str] = []


class Evaluation(BaseModel):
    template_id: str
    visibility: dict[str, bool]
    steps: List[StepStatus]
    can_generate: bool
    completion_pct: int
    missing_required: List[str] = []
