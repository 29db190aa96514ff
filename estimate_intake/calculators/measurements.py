"""
Extension measurement calculator.

Turns a handful of building dimensions into the areas, perimeters, volumes and
trim lengths used by the rest of the estimate. Everything is a pure function of
the inputs: the result is rebuilt from scratch on every call, never patched.

Wall build-up default is 300mm: 100 outer skin + 100 cavity + 100 inner skin.
Roof overhangs (soffit/gable) are entered in mm and applied on both sides.
"""

import logging

from .base import BaseCalculator, round_money
from ..schemas import read_slot

logger = logging.getLogger(__name__)

DEFAULT_EAVES_HEIGHT_M = 2.4
FLAT_ROOF_FACTOR = 1.05
PITCHED_ROOF_FACTOR = 1.15

DEFAULT_SOFFIT_MM = 200
DEFAULT_GABLE_MM = 200
DEFAULT_WALL_THICKNESS_MM = 300
DEFAULT_CAVITY_WIDTH_MM = 100
DEFAULT_FOUNDATION_WIDTH_MM = 600
DEFAULT_FOUNDATION_DEPTH_MM = 1000
DEFAULT_EXCAVATION_DEPTH_MM = 1000
DEFAULT_CONCRETE_DEPTH_MM = 750
DEFAULT_DPC_LEVEL_MM = 150

# Blockwork below DPC runs one course deeper than the facing brick
BLOCK_BELOW_DPC_EXTRA_MM = 250

# Concrete fill as a share of trench depth when only foundation depth is known
CONCRETE_DEPTH_RATIO = 0.75


class MeasurementCalculator(BaseCalculator):

    def calculate(self, fields: dict) -> dict:
        length = self.parse_number(fields.get("externalLengthM"))
        width = self.parse_number(fields.get("externalWidthM"))
        eaves_height = self.parse_number(fields.get("eavesHeightM"), default=DEFAULT_EAVES_HEIGHT_M)
        ceiling_height = self.parse_optional(fields.get("ceilingHeightM"))
        roof_type = fields.get("roofType")
        roof_pitch = self.parse_number(fields.get("roofPitchDegrees"))

        soffit_mm = self.parse_number(fields.get("soffitMM"), default=DEFAULT_SOFFIT_MM)
        gable_mm = self.parse_number(fields.get("gableMM"), default=DEFAULT_GABLE_MM)
        wall_mm = self.parse_number(fields.get("wallThicknessMM"), default=DEFAULT_WALL_THICKNESS_MM)
        cavity_mm = self.parse_number(fields.get("cavityWidthMM"), default=DEFAULT_CAVITY_WIDTH_MM)
        foundation_width_mm = self.parse_number(fields.get("foundationWidthMM"),
                                                default=DEFAULT_FOUNDATION_WIDTH_MM)
        foundation_depth_mm = self.parse_number(fields.get("foundationDepthMM"),
                                                default=DEFAULT_FOUNDATION_DEPTH_MM)
        excavation_depth_mm = self.parse_number(fields.get("excavationDepthMM"),
                                                default=DEFAULT_EXCAVATION_DEPTH_MM)
        concrete_depth_mm = self.parse_number(fields.get("concreteDepthMM"),
                                              default=DEFAULT_CONCRETE_DEPTH_MM)
        dpc_mm = self.parse_number(fields.get("dpcLevelMM"), default=DEFAULT_DPC_LEVEL_MM)
        openings_area = self.parse_number(fields.get("openingsAreaM2"))

        # --- Footprint ---
        floor_area = length * width
        perimeter = self.perimeter(length, width)

        wall_m = self.mm_to_m(wall_mm)
        internal_length = max(0.0, length - 2 * wall_m)
        internal_width = max(0.0, width - 2 * wall_m)
        internal_floor_area = internal_length * internal_width
        internal_perimeter = self.perimeter(internal_length, internal_width)

        # --- Walls ---
        external_wall_area = perimeter * eaves_height
        internal_wall_area = internal_perimeter * (ceiling_height if ceiling_height is not None else eaves_height)
        net_wall_area = max(0.0, external_wall_area - openings_area)

        # --- Roof ---
        roof_factor, roof_area = self._roof(fields, roof_type, length, width, soffit_mm, gable_mm)
        is_pitched = roof_type == "pitched"
        rake_length = 2 * length if is_pitched else 0.0

        # --- Foundation ---
        concrete_volume = perimeter * self.mm_to_m(foundation_width_mm) * self.mm_to_m(concrete_depth_mm)

        # --- Below DPC ---
        dpc_m = self.mm_to_m(dpc_mm)

        result = {
            "externalLengthM": round_money(length),
            "externalWidthM": round_money(width),
            "eavesHeightM": round_money(eaves_height),
            "internalLengthM": round_money(internal_length),
            "internalWidthM": round_money(internal_width),

            "floorAreaM2": round_money(floor_area),
            "internalFloorAreaM2": round_money(internal_floor_area),
            "perimeterM": round_money(perimeter),
            "externalWallAreaM2": round_money(external_wall_area),
            "internalWallAreaM2": round_money(internal_wall_area),
            "openingsAreaM2": round_money(openings_area),
            "netWallAreaM2": round_money(net_wall_area),

            "roofAreaM2": round_money(roof_area),
            "roofFactor": roof_factor,
            "roofPitchDegrees": roof_pitch,
            "fasciaLengthM": round_money(perimeter),
            "soffitLengthM": round_money(perimeter),
            "eavesLengthM": round_money(perimeter),
            "bargeboardLengthM": round_money(rake_length),
            "rakeSoffitLengthM": round_money(rake_length),
            "ceilingInsulationAreaM2": round_money(internal_floor_area),

            "foundationLengthM": round_money(perimeter),
            "foundationWidthMM": foundation_width_mm,
            "foundationDepthMM": foundation_depth_mm,
            "excavationDepthMM": excavation_depth_mm,
            "concreteDepthMM": concrete_depth_mm,
            "concreteVolumeM3": round_money(concrete_volume),

            "dpcLevelMM": dpc_mm,
            "outerSkinLengthM": round_money(perimeter),
            "innerSkinLengthM": round_money(internal_perimeter),
            "outerSkinAreaM2": round_money(perimeter * dpc_m),
            "innerSkinAreaM2": round_money(internal_perimeter * dpc_m),
            "brickHeightMM": dpc_mm,
            "blockHeightMM": dpc_mm + BLOCK_BELOW_DPC_EXTRA_MM,
            "cavityWidthMM": cavity_mm,
        }

        if ceiling_height is not None:
            result["ceilingHeightM"] = round_money(ceiling_height)
        for key in ("knockThroughWidthM", "knockThroughHeightM"):
            value = self.parse_optional(fields.get(key))
            if value is not None:
                result[key] = round_money(value)

        return result

    def _roof(self, fields: dict, roof_type, length: float, width: float,
              soffit_mm: float, gable_mm: float) -> tuple[float, float]:
        """
        Roof plan area including overhangs.

        Flat (and unset): soffit overhang on all four sides, factor reported only.
        Pitched: soffit on the eaves sides, gable overhang on the verges,
        multiplied by the pitch factor.
        """
        soffit_m = self.mm_to_m(soffit_mm)
        if roof_type == "pitched":
            factor = self.parse_positive(fields.get("pitchedRoofFactor"), PITCHED_ROOF_FACTOR)
            gable_m = self.mm_to_m(gable_mm)
            area = (length + 2 * soffit_m) * (width + 2 * gable_m) * factor
            return factor, area

        if roof_type not in (None, "", "flat"):
            logger.debug("Unknown roof type %r, treating as flat", roof_type)
        factor = self.parse_positive(fields.get("flatRoofFactor"), FLAT_ROOF_FACTOR)
        area = (length + 2 * soffit_m) * (width + 2 * soffit_m)
        return factor, area


_calculator = MeasurementCalculator()


def compute_measurements(inputs: dict) -> dict:
    """Derived EstimateMeasurements for a set of dimensional inputs. Never raises."""
    return _calculator.calculate(inputs)


def measurement_inputs_from_answers(answers: dict) -> dict:
    """
    Build calculator inputs from the wizard's answer map.

    Dimensions block wins for length/width; the measurements block supplies
    eaves height, roof factor and anything the user adjusted on review.
    Excavation follows foundation depth, with concrete filling 75% of it.
    """
    dims = read_slot(answers, "dimensions")
    meas = read_slot(answers, "measurements")

    inputs = {
        "externalLengthM": dims.length or meas.external_length_m or 0,
        "externalWidthM": dims.width or meas.external_width_m or 0,
        "eavesHeightM": meas.eaves_height_m or DEFAULT_EAVES_HEIGHT_M,
        "ceilingHeightM": dims.ceiling_height or meas.ceiling_height_m,
        "roofType": answers.get("roofType") or "flat",
        "openingsAreaM2": meas.openings_area_m2 or 0,
    }

    if meas.roof_factor:
        factor_key = "pitchedRoofFactor" if inputs["roofType"] == "pitched" else "flatRoofFactor"
        inputs[factor_key] = meas.roof_factor
    if dims.soffit is not None:
        inputs["soffitMM"] = dims.soffit
    if dims.gable is not None:
        inputs["gableMM"] = dims.gable

    foundation_width = dims.foundation_width or meas.foundation_width_mm
    if foundation_width:
        inputs["foundationWidthMM"] = foundation_width

    foundation_depth = dims.foundation_depth or meas.foundation_depth_mm
    if foundation_depth:
        inputs["foundationDepthMM"] = foundation_depth
        inputs["excavationDepthMM"] = foundation_depth
        inputs["concreteDepthMM"] = foundation_depth * CONCRETE_DEPTH_RATIO
    else:
        if meas.excavation_depth_mm:
            inputs["excavationDepthMM"] = meas.excavation_depth_mm
        if meas.concrete_depth_mm:
            inputs["concreteDepthMM"] = meas.concrete_depth_mm

    width = answers.get("knockThroughWidth") or answers.get("knockThroughWidthExisting")
    height = answers.get("knockThroughHeight") or answers.get("knockThroughHeightExisting")
    if width is not None:
        inputs["knockThroughWidthM"] = width
    if height is not None:
        inputs["knockThroughHeightM"] = height

    return inputs
