"""
Satellites Layer - Tools That Write into the Note Through the Bridge

Submodules:
    base.py   → SatelliteTool (readiness-checked write helpers)
    vitals.py → VitalSignsEntry (appends to O>)
    bmi.py    → BmiEntry (inserts at the focused caret)

Dependency Rule:
    This layer depends on: core, bridge (BridgeHandle only)
    This layer is used by: host applications
"""

from structured_note.satellites.base import SatelliteTool
from structured_note.satellites.bmi import BmiEntry, BodyMeasurement, bmi_category
from structured_note.satellites.vitals import VitalSignsEntry

__all__ = [
    "SatelliteTool",
    "VitalSignsEntry",
    "BmiEntry",
    "BodyMeasurement",
    "bmi_category",
]
