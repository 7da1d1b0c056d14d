"""
Section Activation - Per-Section Capabilities

When the user activates a section (double-click on its text area, a
shortcut, ...) the editor looks up that section's activator and calls it.
The mapping is closed: every Section always has exactly one activator, and
sections nobody registered for get the no-op default.

Architecture:
    SectionActivator (Protocol)
    ├── NoOpActivator       → default; logs and does nothing
    └── TemplateActivator   → inserts a template body into the activated section

    ActivationRegistry      → Section → SectionActivator

Usage:
    registry = ActivationRegistry()
    registry.register(Section.O, TemplateActivator(TemplateLibrary.LAB_SUMMARY.body))
    registry.activate(Section.O, document)
"""

from typing import Dict, Protocol, runtime_checkable

from loguru import logger

from structured_note.core.enums import Section, is_valid_index
from structured_note.document.note_document import NoteDocument


# =============================================================================
# STAGE 1: ACTIVATOR PROTOCOL AND VARIANTS
# =============================================================================


@runtime_checkable
class SectionActivator(Protocol):
    """
    Capability invoked when a section is activated.

    Activators run on the document's owning context and may mutate it.
    """

    def on_activate(self, section: Section, document: NoteDocument) -> None:
        ...


class NoOpActivator:
    """Default activator for sections without a registered capability."""

    def on_activate(self, section: Section, document: NoteDocument) -> None:
        logger.debug(
            f"No activator for {section.label} | "
            f"text length={len(document.text_of(section))}"
        )


class TemplateActivator:
    """Inserts a fixed template body at the activated section's caret."""

    def __init__(self, body: str):
        self._body = body

    def on_activate(self, section: Section, document: NoteDocument) -> None:
        document.insert_template(self._body)


_DEFAULT_ACTIVATOR = NoOpActivator()


# =============================================================================
# STAGE 2: REGISTRY
# =============================================================================


class ActivationRegistry:
    """
    Closed mapping from every Section to one activator.

    What it does:
        Resolves the activator for a section and runs it after focusing
        that section. A failing activator is logged and the default no-op
        runs in its place, so activation never raises.
    """

    def __init__(self):
        self._activators: Dict[Section, SectionActivator] = {
            section: _DEFAULT_ACTIVATOR for section in Section
        }

    def register(self, section: Section, activator: SectionActivator) -> None:
        self._activators[Section(section)] = activator
        logger.debug(f"Activator registered for {Section(section).label}: {type(activator).__name__}")

    def unregister(self, section: Section) -> None:
        """Restore the no-op default for ``section``."""
        self._activators[Section(section)] = _DEFAULT_ACTIVATOR

    def get(self, section: Section) -> SectionActivator:
        return self._activators[Section(section)]

    def is_registered(self, section: Section) -> bool:
        return self._activators[Section(section)] is not _DEFAULT_ACTIVATOR

    def activate(self, section: int, document: NoteDocument) -> None:
        """
        Focus ``section`` and run its activator.

        Out-of-range sections and unready documents are ignored.
        """
        if not is_valid_index(section) or not document.is_ready:
            return

        target = Section(section)
        document.focus(target)
        activator = self._activators[target]
        try:
            activator.on_activate(target, document)
        except Exception as e:
            logger.error(
                f"Activator {type(activator).__name__} failed for {target.label}: {e}"
            )
            _DEFAULT_ACTIVATOR.on_activate(target, document)
