"""
Note Editor Session - Main Entry Point

This is the PUBLIC API of the structured note engine. A session wires the
layers together for one editing session and is what the editing surface
talks to.

Architecture Diagram:
    ┌────────────────────────────────────────────────────────────────────┐
    │                         NoteEditorSession                          │
    ├────────────────────────────────────────────────────────────────────┤
    │  AbbreviationSource → AbbreviationResolver                         │
    │                              │                                     │
    │                              ▼                                     │
    │  editing surface ───────→ NoteDocument ←── Dispatcher ←── Bridge   │
    │                              ▲                              ▲      │
    │  ActivationRegistry ─────────┘                 BridgeHandle ┘      │
    │                                                      ▲             │
    │                                              satellite tools       │
    └────────────────────────────────────────────────────────────────────┘

Ownership:
    The editing surface calls the session; satellite tools call the
    BridgeHandle. Session calls made outside the document's owning context
    are forwarded to the owner and wait for the result, bridge calls are
    forwarded without waiting.

Usage:
    from structured_note import NoteEditorSession, TemplateLibrary

    with NoteEditorSession.from_environment() as session:
        session.apply_template("CC> cough\\nP> rest")
        session.insert_template(TemplateLibrary.SNIPPET_ALLERGY)
        report = session.export_report()
"""

from concurrent.futures import Future
from typing import Callable, Iterable, Optional, TypeVar, Union

from loguru import logger

from structured_note.abbreviations.resolver import AbbreviationResolver
from structured_note.abbreviations.sources import (
    AbbreviationSource,
    InMemoryAbbreviationSource,
    JsonFileAbbreviationSource,
)
from structured_note.activation.registry import ActivationRegistry
from structured_note.bridge.dispatcher import (
    DocumentDispatcher,
    SerialDispatcher,
    ThreadedDispatcher,
)
from structured_note.bridge.handle import BridgeHandle
from structured_note.bridge.insertion_bridge import InsertionBridge
from structured_note.core.config import EditorConfiguration
from structured_note.core.enums import DispatcherMode
from structured_note.core.exceptions import BridgeError, SessionClosedError
from structured_note.core.logging_setup import configure_logging
from structured_note.core.models import DistributionResult, TriggerExpansion
from structured_note.document.note_document import NoteDocument
from structured_note.parsing.section_parser import distribute_template
from structured_note.templates.library import TemplateLibrary

T = TypeVar("T")


class NoteEditorSession:
    """
    One editing session: document, abbreviations, bridge and activators.

    What it does:
        Builds the abbreviation snapshot, the NoteDocument, the dispatcher
        and the InsertionBridge from configuration, binds the bridge to a
        BridgeHandle for satellite tools, and exposes the editing commands
        (templates, formatting, live expansion, export).

    Why it exists:
        Hosts should not have to know the construction order of the layers
        or which calls must run on the document's owning context.

    How it works:
        STAGE 1: Resolve configuration, optionally configure logging
        STAGE 2: Load the abbreviation snapshot
        STAGE 3: Create document, dispatcher, bridge; bind the handle
        STAGE 4: Editing commands run on the owning context

    Args:
        config: Editor configuration (defaults when omitted)
        abbreviation_source: Overrides the source derived from config
        dispatcher: Overrides the dispatcher derived from config. A supplied
            dispatcher is not stopped by close().
        handle: Existing handle to bind (e.g. shared with tools created
            before the session)
        configure_logs: Install loguru sinks from the configuration
    """

    def __init__(
        self,
        config: Optional[EditorConfiguration] = None,
        abbreviation_source: Optional[AbbreviationSource] = None,
        dispatcher: Optional[DocumentDispatcher] = None,
        handle: Optional[BridgeHandle] = None,
        configure_logs: bool = False,
    ):
        # =====================================================================
        # STAGE 1: CONFIGURATION
        # =====================================================================
        self._config = config or EditorConfiguration()
        if configure_logs:
            configure_logging(self._config.log_level, self._config.log_file)

        # =====================================================================
        # STAGE 2: ABBREVIATION SNAPSHOT
        # =====================================================================
        self._source = abbreviation_source or self._create_source(self._config)
        self._resolver = AbbreviationResolver(self._source.load())

        # =====================================================================
        # STAGE 3: DOCUMENT, DISPATCHER, BRIDGE
        # =====================================================================
        self._owns_dispatcher = dispatcher is None
        self._dispatcher = dispatcher or self._create_dispatcher(self._config)

        self._document = self._new_document()
        self._bridge = InsertionBridge(self._document, self._dispatcher)
        self._handle = handle or BridgeHandle()
        self._handle.bind(self._bridge)

        self._activations = ActivationRegistry()
        self._closed = False

        logger.info(
            f"NoteEditorSession initialized | "
            f"Dispatcher: {type(self._dispatcher).__name__} | "
            f"Abbreviations: {len(self._resolver)}"
        )

    # =========================================================================
    # STAGE 1: FACTORIES
    # =========================================================================

    @classmethod
    def from_environment(cls, env_file: Optional[str] = None, **kwargs) -> "NoteEditorSession":
        """
        Create a session from NOTE_EDITOR_* environment variables.

        Logging sinks are configured from the same settings.

        Raises:
            ConfigurationError: If settings are invalid
        """
        config = EditorConfiguration.from_environment(env_file=env_file, validate_on_load=True)
        kwargs.setdefault("configure_logs", True)
        return cls(config, **kwargs)

    @staticmethod
    def _create_source(config: EditorConfiguration) -> AbbreviationSource:
        if config.abbreviations_path:
            return JsonFileAbbreviationSource(config.abbreviations_path)
        return InMemoryAbbreviationSource()

    @staticmethod
    def _create_dispatcher(config: EditorConfiguration) -> DocumentDispatcher:
        if config.dispatcher_mode == DispatcherMode.THREADED:
            return ThreadedDispatcher(name=config.dispatcher_thread_name).start()
        return SerialDispatcher(name=config.dispatcher_thread_name)

    def _new_document(self) -> NoteDocument:
        return NoteDocument(
            resolver=self._resolver,
            strip_control_characters=self._config.strip_control_characters,
        )

    # =========================================================================
    # STAGE 2: ACCESSORS
    # =========================================================================

    @property
    def config(self) -> EditorConfiguration:
        return self._config

    @property
    def document(self) -> NoteDocument:
        return self._document

    @property
    def resolver(self) -> AbbreviationResolver:
        return self._resolver

    @property
    def dispatcher(self) -> DocumentDispatcher:
        return self._dispatcher

    @property
    def bridge(self) -> InsertionBridge:
        return self._bridge

    @property
    def handle(self) -> BridgeHandle:
        return self._handle

    @property
    def activations(self) -> ActivationRegistry:
        return self._activations

    @property
    def is_closed(self) -> bool:
        return self._closed

    # =========================================================================
    # STAGE 3: OWNER-CONTEXT EXECUTION
    # =========================================================================

    def _on_owner(self, fn: Callable[[], T]) -> T:
        """
        Run ``fn`` on the document's owning context and return its result.

        Raises:
            SessionClosedError: After close(), for every dispatcher kind
        """
        if self._closed:
            raise SessionClosedError(self._dispatcher.name)
        return self._run_on_owner(fn)

    def _run_on_owner(self, fn: Callable[[], T]) -> T:
        if self._dispatcher.is_owner_context():
            return fn()
        if isinstance(self._dispatcher, SerialDispatcher):
            raise BridgeError(
                "Session called outside the thread that owns the document",
                context={"dispatcher": self._dispatcher.name},
            )
        if isinstance(self._dispatcher, ThreadedDispatcher) and not self._dispatcher.is_running:
            raise BridgeError(
                "Dispatcher thread is not running",
                context={"dispatcher": self._dispatcher.name},
            )

        future: Future = Future()

        def run() -> None:
            if not future.set_running_or_notify_cancel():
                return
            try:
                future.set_result(fn())
            except Exception as e:
                future.set_exception(e)

        self._dispatcher.submit(run)
        return future.result()

    def pump(self) -> int:
        """
        Apply satellite writes queued on a SerialDispatcher.

        Returns the number of writes applied (always 0 for other dispatchers,
        which apply writes on their own).
        """
        if isinstance(self._dispatcher, SerialDispatcher) and not self._dispatcher.is_closed:
            return self._dispatcher.drain()
        return 0

    # =========================================================================
    # STAGE 4: EDITING COMMANDS
    # =========================================================================

    def focus(self, section: int) -> None:
        self._on_owner(lambda: self._document.focus(section))

    def apply_template(self, template: Union[str, TemplateLibrary]) -> DistributionResult:
        """
        Distribute a labelled template across the sections.

        Unlabelled text ends up at the focused caret (nothing is dropped).
        """
        blob = template.body if isinstance(template, TemplateLibrary) else template
        self.pump()
        resolver = self._resolver if self._config.expand_templates else None
        result = self._on_owner(lambda: distribute_template(blob, self._document, resolver))
        logger.info(
            f"Template applied | sections={result.sections_loaded} | fallback={result.used_fallback}"
        )
        return result

    def insert_template(self, template: Union[str, TemplateLibrary]) -> Optional[DistributionResult]:
        """
        Insert a template at the focused caret.

        Built-in templates carrying section labels are distributed instead
        (see apply_template) and the DistributionResult is returned.
        """
        if isinstance(template, TemplateLibrary) and template.is_structured:
            return self.apply_template(template)

        body = template.body if isinstance(template, TemplateLibrary) else template
        expand = self._config.expand_templates
        self.pump()
        self._on_owner(lambda: self._document.insert_block(body, expand=expand))
        return None

    def on_word_break(self) -> Optional[TriggerExpansion]:
        """
        Live abbreviation rule for a word break typed at the focused caret.

        Returns the applied expansion, or None when the caller should insert
        the word break itself.
        """
        return self._on_owner(self._document.expand_trigger)

    def format_focused(self) -> None:
        self._on_owner(self._document.format_focused)

    def activate(self, section: int) -> None:
        """Run the activator registered for ``section`` (no-op by default)."""
        self._on_owner(lambda: self._activations.activate(section, self._document))

    def clear(self) -> None:
        self._on_owner(self._document.clear_all)

    # =========================================================================
    # STAGE 5: EXPORT
    # =========================================================================

    def export_report(self) -> str:
        """Canonical-order report finalized for EMR paste."""
        self.pump()
        return self._on_owner(self._document.export_report)

    def export_markdown(self, problems: Iterable[str] = ()) -> str:
        """Markdown export with an optional problem list block first."""
        problems = list(problems)
        self.pump()
        return self._on_owner(lambda: self._document.export_markdown(problems))

    # =========================================================================
    # STAGE 6: LIFECYCLE
    # =========================================================================

    def refresh_abbreviations(self, source: Optional[AbbreviationSource] = None) -> int:
        """
        Load a new abbreviation snapshot and use it for later insertions.

        Args:
            source: New source; the session's current source when omitted

        Returns:
            Number of entries in the new snapshot

        Raises:
            AbbreviationSourceError: If the source fails; the old snapshot
                stays in use
        """
        if source is not None:
            self._source = source
        resolver = AbbreviationResolver(self._source.load())
        self._on_owner(lambda: self._document.set_resolver(resolver))
        self._resolver = resolver
        logger.info(f"Abbreviations refreshed | entries={len(resolver)}")
        return len(resolver)

    def restart(self) -> NoteDocument:
        """
        Start a new, empty document and rebind the handle to it.

        Writes still queued for the old document are discarded when they
        run, because the old document is disposed first.
        """
        old_document = self._document
        self._on_owner(old_document.dispose)

        self._document = self._new_document()
        self._bridge = InsertionBridge(self._document, self._dispatcher)
        self._handle.rebind(self._bridge)
        logger.info("Session restarted with a new document")
        return self._document

    def close(self) -> None:
        """
        Unbind the handle, dispose the document and stop an owned dispatcher.

        Calling close() again is a no-op. Every other command raises
        SessionClosedError afterwards.
        """
        if self._closed:
            return

        if self._handle.current() is self._bridge:
            self._handle.unbind()
        self.pump()
        self._run_on_owner(self._document.dispose)
        self._closed = True

        if self._owns_dispatcher:
            if isinstance(self._dispatcher, ThreadedDispatcher):
                self._dispatcher.stop(wait=True)
            elif isinstance(self._dispatcher, SerialDispatcher):
                self._dispatcher.close()
        logger.info("NoteEditorSession closed")

    def __enter__(self) -> "NoteEditorSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"NoteEditorSession(document={self._document!r}, closed={self._closed})"

