"""
BMI Entry - Satellite Tool

Computes body-mass index from height and weight and inserts a short block
at the focused caret (the user chooses the section by focusing it).
"""

import re
from dataclasses import dataclass
from typing import Optional

from structured_note.satellites.base import SatelliteTool

_NON_NUMERIC = re.compile(r"[^\d.]")

CM_PER_INCH = 2.54


def bmi_category(bmi: float) -> str:
    if bmi < 18.5:
        return "Underweight"
    if bmi < 25.0:
        return "Healthy weight"
    if bmi < 30.0:
        return "Overweight"
    return "Obesity"


def waist_in_cm(raw: str) -> Optional[float]:
    """
    Parse a waist measurement. Values containing "i" ("32 in", "32i") are
    inches; anything else is taken as centimetres. Blank → None.
    """
    raw = raw.strip().lower()
    if not raw:
        return None
    value = float(_NON_NUMERIC.sub("", raw))
    return value * CM_PER_INCH if "i" in raw else value


@dataclass(frozen=True)
class BodyMeasurement:
    height_cm: float
    weight_kg: float
    waist_cm: Optional[float] = None

    @property
    def bmi(self) -> float:
        return self.weight_kg / (self.height_cm / 100.0) ** 2

    @property
    def category(self) -> str:
        return bmi_category(self.bmi)


class BmiEntry(SatelliteTool):
    """Inserts a BMI block into whichever section has focus."""

    def __init__(self, handle):
        super().__init__(handle, name="BmiEntry")

    @staticmethod
    def format(measurement: BodyMeasurement) -> str:
        waist = ""
        if measurement.waist_cm is not None:
            waist = f"   Waist: {measurement.waist_cm:.1f} cm"
        return (
            "\n< BMI >\n"
            f"{measurement.category} : BMI: [ {measurement.bmi:.2f} ] kg/m^2\n"
            f"Height : {measurement.height_cm:.1f} cm   Weight : {measurement.weight_kg:.1f} kg{waist}"
        )

    def record(self, height_cm: float, weight_kg: float, waist: str = "") -> bool:
        """
        Insert the BMI block.

        Raises:
            ValueError: If height or weight is not positive, or the waist
                value has no digits
        """
        if height_cm <= 0 or weight_kg <= 0:
            raise ValueError("Height and weight must be positive numbers")
        measurement = BodyMeasurement(height_cm, weight_kg, waist_in_cm(waist))
        return self.write_block(self.format(measurement))
