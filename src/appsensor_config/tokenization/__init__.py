"""Token stream layer for server configuration reading.

Key Components:
    TokenCursor: Forward-only cursor contract used by the sub-parsers
    LxmlTokenCursor: Cursor streaming a document through lxml.etree.iterparse
    EventSequenceCursor: Cursor replaying pre-recorded events
    NamespaceResolver: Immutable URI to prefix table producing dispatch keys
"""

from .cursor import (
    EventKind,
    EventSequenceCursor,
    LxmlTokenCursor,
    TokenCursor,
    XMLEvent,
)
from .namespaces import NamespaceResolver, split_clark_name

__all__ = [
    "EventKind",
    "EventSequenceCursor",
    "LxmlTokenCursor",
    "NamespaceResolver",
    "TokenCursor",
    "XMLEvent",
    "split_clark_name",
]
