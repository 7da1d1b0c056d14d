"""
Built-in Template Library

Full templates fill a larger part of a note; snippets are small blocks for
the quick-insert bar. Bodies are plain text written with ":key" shorthands
(":cd" for today's date) so they go through the template-driven expansion
path when inserted.

Templates containing section labels ("CC>", "P>", ...) are meant for
``NoteEditorSession.apply_template`` and are spread across sections; all
others are inserted at the focused caret.
"""

from enum import Enum
from typing import List

from structured_note.core.constants import SECTION_LABELS


class TemplateLibrary(Enum):
    """Built-in templates as (display name, body, is_snippet)."""

    # -------------------------------------------------------------------------
    # Full templates
    # -------------------------------------------------------------------------
    HPI = (
        "HPI",
        "# HPI\n"
        "- Onset: \n"
        "- Location: \n"
        "- Character: \n"
        "- Aggravating/Relieving: \n"
        "- Associated Sx: \n"
        "- Context: \n"
        "- Notes: \n",
        False,
    )
    A_P = (
        "Assessment & Plan",
        "# Assessment & Plan\n"
        "- Dx: \n"
        "- Severity: \n"
        "- Plan: meds / labs / imaging / follow-up\n",
        False,
    )
    LETTER = (
        "Letter Template",
        "# Letter\n"
        "Patient: \n"
        "DOB: \n"
        "Date: :cd\n\n"
        "Findings:\n- \n\n"
        "Plan:\n- \n\n"
        "Signature:\n"
        "Attending Physician, MD\n",
        False,
    )
    LAB_SUMMARY = (
        "Lab Summary",
        "# Labs\n"
        "- FBS:  mg/dL\n"
        "- LDL:  mg/dL\n"
        "- HbA1c:  %\n"
        "- TSH:  uIU/mL\n",
        False,
    )
    PROBLEM_LIST = ("Problem List Header", "# Problem List\n- \n- \n- \n", False)
    VACCINATION_LIST = ("Vaccination", "# Tdap ...List\n- \n- \n- \n", False)
    TFT_LIST = ("TFT", "# T3 ...List\n- \n- \n- \n", False)
    FOLLOW_UP_VISIT = (
        "Follow-up Visit",
        "CC> Follow-up visit\n"
        "PI> Seen :cd for routine follow-up\n"
        "PMH> :c\n"
        "A> Stable\n"
        "P> Continue current medications\n"
        "Return in  weeks\n",
        False,
    )

    # -------------------------------------------------------------------------
    # Quick snippets
    # -------------------------------------------------------------------------
    SNIPPET_VITALS = (
        "Vitals",
        "# Vitals\n- BP: / mmHg\n- HR: / min\n- Temp:  °C\n- RR: / min\n- SpO2:  %\n",
        True,
    )
    SNIPPET_MEDS = ("Meds", "# Medications\n- \n", True)
    SNIPPET_ALLERGY = ("Allergy", "# Allergy\n- NKDA\n", True)
    SNIPPET_ASSESS = ("Assessment", "# Assessment\n- \n", True)
    SNIPPET_PLAN = ("Plan", "# Plan\n- \n", True)
    SNIPPET_FOLLOWUP = ("Follow-up", "# Follow-up\n- Return in  weeks\n", True)
    SNIPPET_SIGNATURE = ("Signature", "# Signature\nAttending Physician, MD\nEndocrinology\n", True)

    def __init__(self, display_name: str, body: str, is_snippet: bool):
        self.display_name = display_name
        self.body = body
        self.is_snippet = is_snippet

    @property
    def is_structured(self) -> bool:
        """True when the body carries section labels and should be distributed."""
        return any(label in self.body for label in SECTION_LABELS)

    @classmethod
    def templates(cls) -> List["TemplateLibrary"]:
        return [t for t in cls if not t.is_snippet]

    @classmethod
    def snippets(cls) -> List["TemplateLibrary"]:
        return [t for t in cls if t.is_snippet]

    @classmethod
    def by_display_name(cls, name: str) -> "TemplateLibrary":
        """Look up a template by its display name (case-insensitive)."""
        for template in cls:
            if template.display_name.lower() == name.strip().lower():
                return template
        raise KeyError(f"Unknown template: '{name}'")
