"""
Bridge Handle - Injectable Reference to the Active InsertionBridge

Satellite tools receive a BridgeHandle at construction instead of looking up
a process-wide manager. The handle may be unbound (no document yet, or the
session was torn down); while unbound it behaves like a bridge to a document
that is not ready: ``is_ready()`` is False and every write is a no-op.

Lifecycle:
    handle = BridgeHandle()          # unbound
    handle.bind(bridge)              # session started
    handle.rebind(new_bridge)        # session restarted, returns the old bridge
    handle.unbind()                  # session ended

Thread Safety:
    The reference is guarded by a lock, so tools may call through the handle
    from any thread while the session rebinds it.
"""

import threading
from typing import Optional

from loguru import logger

from structured_note.bridge.insertion_bridge import InsertionBridge


class BridgeHandle:
    """
    Optional, rebindable holder for an InsertionBridge.

    Delegate methods mirror the bridge surface and silently do nothing
    while the handle is unbound.
    """

    def __init__(self, bridge: Optional[InsertionBridge] = None):
        self._lock = threading.Lock()
        self._bridge = bridge

    # =========================================================================
    # STAGE 1: BINDING
    # =========================================================================

    def bind(self, bridge: InsertionBridge) -> None:
        """Bind a bridge. An existing binding is replaced (with a warning)."""
        with self._lock:
            if self._bridge is not None and self._bridge is not bridge:
                logger.warning("BridgeHandle already bound, replacing the existing bridge")
            self._bridge = bridge
        logger.debug("BridgeHandle bound")

    def rebind(self, bridge: Optional[InsertionBridge]) -> Optional[InsertionBridge]:
        """Swap in a new bridge (or None) and return the previous one."""
        with self._lock:
            previous, self._bridge = self._bridge, bridge
        logger.debug(f"BridgeHandle rebound | bound={bridge is not None}")
        return previous

    def unbind(self) -> Optional[InsertionBridge]:
        """Clear the binding and return the bridge that was bound."""
        return self.rebind(None)

    def current(self) -> Optional[InsertionBridge]:
        with self._lock:
            return self._bridge

    @property
    def is_bound(self) -> bool:
        return self.current() is not None

    # =========================================================================
    # STAGE 2: DELEGATES
    # =========================================================================

    def is_ready(self) -> bool:
        bridge = self.current()
        return bridge is not None and bridge.is_ready()

    def focus(self, index: int) -> None:
        bridge = self.current()
        if bridge is not None:
            bridge.focus(index)

    def insert_line(self, text: str) -> None:
        bridge = self.current()
        if bridge is not None:
            bridge.insert_line(text)

    def insert_block(self, text: str) -> None:
        bridge = self.current()
        if bridge is not None:
            bridge.insert_block(text)

    def append_to_section(self, index: int, text: str) -> None:
        bridge = self.current()
        if bridge is not None:
            bridge.append_to_section(index, text)

    def insert_line_into(self, index: int, text: str, move_focus: bool = False) -> None:
        bridge = self.current()
        if bridge is not None:
            bridge.insert_line_into(index, text, move_focus)

    def insert_block_into(self, index: int, text: str, move_focus: bool = False) -> None:
        bridge = self.current()
        if bridge is not None:
            bridge.insert_block_into(index, text, move_focus)

    def __repr__(self) -> str:
        return f"BridgeHandle(bound={self.is_bound})"
