"""
Vital Signs Entry - Satellite Tool

Collects one set of vital signs from short keyboard tokens and writes it to
the Objective section.

Input tokens (fed one at a time):
    numbers → staged in order: SBP → DBP → pulse → temperature → respiration
    t36.5   → body temperature directly
    h / o / c → measurement context: at home / other clinic / this clinic
    l / r   → left / right arm (edits the context text)
    i       → irregular pulse (edits the context text)

Output written to O> (context line, then tab-indented measurements):
    at home by self
    \tBP [120 / 80] mmHg   PR [72]/minute
    \tBody Temperature [36.5]℃
    \tRespiration Rate [18]/minute
"""

import math
from dataclasses import replace
from typing import Dict, List, Optional

from loguru import logger

from structured_note.bridge.handle import BridgeHandle
from structured_note.core.enums import Section
from structured_note.core.models import VitalSigns
from structured_note.satellites.base import SatelliteTool


CLINIC_CONTEXT = "at clinic : Regular pulse, Right Seated Position"

CONTEXT_CODES: Dict[str, str] = {
    "h": "at home by self",
    "o": "at other clinic",
    "c": CLINIC_CONTEXT,
}

# Order in which bare numbers are staged.
_NUMERIC_SEQUENCE = ("systolic", "diastolic", "pulse_rate", "body_temperature", "respiration_rate")


class VitalSignsEntry(SatelliteTool):
    """
    Vitals entry tool writing into the Objective section.

    Args:
        handle: Session bridge handle
        move_focus: Focus O> before writing. By default the text is appended
            to O> and the user's focus is left where it is.
    """

    target = Section.O

    def __init__(self, handle: BridgeHandle, move_focus: bool = False):
        super().__init__(handle, name="VitalSignsEntry")
        self._move_focus = move_focus
        self._staged = VitalSigns(context=CLINIC_CONTEXT)

    # =========================================================================
    # STAGE 1: TOKEN INPUT
    # =========================================================================

    @property
    def staged(self) -> VitalSigns:
        return self._staged

    def reset(self) -> None:
        self._staged = VitalSigns(context=CLINIC_CONTEXT)

    def feed(self, token: str) -> bool:
        """
        Apply one input token.

        Returns:
            True if the token was understood, False otherwise (the staged
            values are unchanged)
        """
        token = token.strip().lower()
        if not token:
            return False

        if token in CONTEXT_CODES:
            self._staged = replace(self._staged, context=CONTEXT_CODES[token])
            return True
        if token == "l":
            return self._edit_context("Right", "Left")
        if token == "r":
            return self._edit_context("Left", "Right")
        if token == "i":
            return self._edit_context("Regular", "Irregular")

        if token.startswith("t"):
            value = self._parse_number(token[1:])
            if value is None:
                return False
            self._staged = replace(self._staged, body_temperature=value)
            return True

        value = self._parse_number(token)
        if value is None:
            return False
        return self._stage_numeric(value)

    def _edit_context(self, old: str, new: str) -> bool:
        self._staged = replace(self._staged, context=self._staged.context.replace(old, new))
        return True

    def _parse_number(self, raw: str) -> Optional[float]:
        try:
            value = float(raw)
        except ValueError:
            logger.warning(f"VitalSignsEntry: invalid input '{raw}'")
            return None
        # inf and nan parse as floats but are not measurements
        if not math.isfinite(value):
            logger.warning(f"VitalSignsEntry: non-finite input '{raw}'")
            return None
        return value

    def _stage_numeric(self, value: float) -> bool:
        for field_name in _NUMERIC_SEQUENCE:
            if getattr(self._staged, field_name) is None:
                staged = value if field_name == "body_temperature" else int(value)
                self._staged = replace(self._staged, **{field_name: staged})
                return True
        logger.debug("VitalSignsEntry: all measurements already staged")
        return False

    # =========================================================================
    # STAGE 2: OUTPUT
    # =========================================================================

    @staticmethod
    def format(vitals: VitalSigns) -> str:
        """Context line plus tab-indented measurement lines ("" if empty)."""
        if vitals.is_empty:
            return ""
        lines: List[str] = []
        if vitals.context.strip():
            lines.append(vitals.context.strip())
        lines.extend(f"\t{line}" for line in vitals.to_lines())
        return "\n".join(lines) + "\n"

    def record(self, vitals: VitalSigns) -> bool:
        """Write ``vitals`` to O>. Returns whether the write was dispatched."""
        return self.write_to_section(self.target, self.format(vitals), move_focus=self._move_focus)

    def save(self) -> bool:
        """Write the staged measurements and start a new set on success."""
        written = self.record(self._staged)
        if written:
            self.reset()
        return written
