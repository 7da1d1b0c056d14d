"""
Bridge Layer - Cross-Context Writes into the Note Document

Submodules:
    dispatcher.py       → DocumentDispatcher protocol, SerialDispatcher, ThreadedDispatcher
    insertion_bridge.py → InsertionBridge (satellite tool write surface)
    handle.py           → BridgeHandle (injectable, rebindable reference)

Dependency Rule:
    This layer depends on: core, document
    This layer is used by: satellites, editor
"""

from structured_note.bridge.dispatcher import (
    DispatcherStats,
    DocumentDispatcher,
    SerialDispatcher,
    ThreadedDispatcher,
)
from structured_note.bridge.handle import BridgeHandle
from structured_note.bridge.insertion_bridge import InsertionBridge

__all__ = [
    "DocumentDispatcher",
    "DispatcherStats",
    "SerialDispatcher",
    "ThreadedDispatcher",
    "InsertionBridge",
    "BridgeHandle",
]
