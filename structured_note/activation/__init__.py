"""
Activation Layer - Section → Capability Mapping

Submodules:
    registry.py → SectionActivator protocol, NoOpActivator, TemplateActivator,
                  ActivationRegistry

Dependency Rule:
    This layer depends on: core, document
    This layer is used by: editor
"""

from structured_note.activation.registry import (
    ActivationRegistry,
    NoOpActivator,
    SectionActivator,
    TemplateActivator,
)

__all__ = [
    "SectionActivator",
    "NoOpActivator",
    "TemplateActivator",
    "ActivationRegistry",
]
