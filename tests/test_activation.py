"""Tests for ActivationRegistry and the template library."""

import pytest

from structured_note.activation.registry import (
    ActivationRegistry,
    NoOpActivator,
    SectionActivator,
    TemplateActivator,
)
from structured_note.core.enums import Section
from structured_note.templates.library import TemplateLibrary


class RecordingActivator:
    def __init__(self):
        self.calls = []

    def on_activate(self, section, document):
        self.calls.append((section, document.focused_index))


class FailingActivator:
    def on_activate(self, section, document):
        raise RuntimeError("activator broke")


class TestActivationRegistry:
    def test_every_section_has_default(self):
        registry = ActivationRegistry()
        for section in Section:
            assert isinstance(registry.get(section), NoOpActivator)
            assert not registry.is_registered(section)

    def test_activate_focuses_then_runs_activator(self, document):
        registry = ActivationRegistry()
        activator = RecordingActivator()
        registry.register(Section.O, activator)

        registry.activate(Section.O, document)

        assert activator.calls == [(Section.O, Section.O)]
        assert document.focused_index == Section.O
        assert registry.is_registered(Section.O)

    def test_default_activation_only_focuses(self, document):
        ActivationRegistry().activate(Section.P, document)
        assert document.focused_index == Section.P
        assert document.is_empty()

    def test_unregister_restores_default(self):
        registry = ActivationRegistry()
        registry.register(Section.A, RecordingActivator())
        registry.unregister(Section.A)
        assert not registry.is_registered(Section.A)

    @pytest.mark.parametrize("bad", [-1, 10])
    def test_out_of_range_ignored(self, document, bad):
        ActivationRegistry().activate(bad, document)
        assert document.focused_index == 0

    def test_unready_document_ignored(self, document):
        activator = RecordingActivator()
        registry = ActivationRegistry()
        registry.register(Section.O, activator)
        document.dispose()
        registry.activate(Section.O, document)
        assert activator.calls == []

    def test_failing_activator_does_not_raise(self, document):
        registry = ActivationRegistry()
        registry.register(Section.PE, FailingActivator())
        registry.activate(Section.PE, document)
        assert document.focused_index == Section.PE

    def test_template_activator_expands_into_section(self, document):
        registry = ActivationRegistry()
        registry.register(Section.PMH, TemplateActivator("- :c\n"))
        registry.activate(Section.PMH, document)
        assert document.text_of(Section.PMH) == "- hypercholesterolemia\n"

    def test_activators_satisfy_protocol(self):
        assert isinstance(NoOpActivator(), SectionActivator)
        assert isinstance(TemplateActivator("x"), SectionActivator)


class TestTemplateLibrary:
    def test_templates_and_snippets_partition_library(self):
        templates = TemplateLibrary.templates()
        snippets = TemplateLibrary.snippets()
        assert set(templates) | set(snippets) == set(TemplateLibrary)
        assert not set(templates) & set(snippets)
        assert TemplateLibrary.SNIPPET_ALLERGY in snippets
        assert TemplateLibrary.LETTER in templates

    def test_lookup_by_display_name(self):
        assert TemplateLibrary.by_display_name(" lab summary ") is TemplateLibrary.LAB_SUMMARY
        with pytest.raises(KeyError):
            TemplateLibrary.by_display_name("nope")

    def test_structured_templates_carry_labels(self):
        assert TemplateLibrary.FOLLOW_UP_VISIT.is_structured
        assert not TemplateLibrary.HPI.is_structured

    def test_letter_template_date_expands(self, document):
        document.insert_template(TemplateLibrary.LETTER.body)
        assert "Date: 2025-06-01\n" in document.text_of(Section.CC)

    def test_follow_up_visit_distributes(self, document):
        result = document.apply_template(TemplateLibrary.FOLLOW_UP_VISIT.body)
        assert result.routed == [Section.CC, Section.PI, Section.PMH, Section.A, Section.P]
        assert document.text_of(Section.PI) == "Seen 2025-06-01 for routine follow-up"
        assert document.text_of(Section.PMH) == "hypercholesterolemia"
        assert document.text_of(Section.P) == "Continue current medications\nReturn in  weeks"
