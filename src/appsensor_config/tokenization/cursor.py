"""Forward-only token cursors over XML parse events.

A cursor exposes the current event kind, its element name parts, attribute
lookup and a consuming "read element text" operation. Two implementations
are provided: one streaming a document through ``lxml.etree.iterparse`` and
one replaying a pre-recorded sequence of events.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum, auto
from types import MappingProxyType
from typing import IO, Any, Iterable, Iterator, List, Mapping, Optional, Union

from lxml import etree

from appsensor_config.shared import StreamFailure, get_logger

from .namespaces import split_clark_name

# Events requested from lxml; start-ns surfaces as OTHER
_LXML_EVENTS = ("start", "end", "start-ns")


class EventKind(Enum):
    """Kinds of events a cursor can be positioned on."""

    DOCUMENT_START = auto()   # Before the first advance
    ELEMENT_START = auto()
    ELEMENT_END = auto()
    OTHER = auto()            # Character data, namespace declarations


@dataclass(frozen=True)
class XMLEvent:
    """Single parse event as seen by the sub-parsers."""

    kind: EventKind
    namespace: Optional[str] = None
    local_name: Optional[str] = None
    prefix: Optional[str] = None
    attributes: Mapping[str, str] = field(default_factory=dict)
    text: Optional[str] = None
    line: Optional[int] = None

    @classmethod
    def start(
        cls,
        local_name: str,
        namespace: Optional[str] = None,
        attributes: Optional[Mapping[str, str]] = None,
        prefix: Optional[str] = None,
        line: Optional[int] = None,
    ) -> "XMLEvent":
        """Create an element-start event."""
        return cls(
            EventKind.ELEMENT_START,
            namespace=namespace,
            local_name=local_name,
            prefix=prefix,
            attributes=MappingProxyType(dict(attributes or {})),
            line=line,
        )

    @classmethod
    def end(
        cls,
        local_name: str,
        namespace: Optional[str] = None,
        text: Optional[str] = None,
        prefix: Optional[str] = None,
        line: Optional[int] = None,
    ) -> "XMLEvent":
        """Create an element-end event, optionally carrying the element's text."""
        return cls(
            EventKind.ELEMENT_END,
            namespace=namespace,
            local_name=local_name,
            prefix=prefix,
            text=text,
            line=line,
        )

    @classmethod
    def characters(cls, text: str, line: Optional[int] = None) -> "XMLEvent":
        """Create a character-data event."""
        return cls(EventKind.OTHER, text=text, line=line)


_DOCUMENT_START = XMLEvent(EventKind.DOCUMENT_START)


class TokenCursor(ABC):
    """Pull-based cursor shared by all sub-parsers of a single read.

    Not safe for concurrent use; a fresh cursor is required per read.
    """

    def __init__(self) -> None:
        self._event: XMLEvent = _DOCUMENT_START
        self._exhausted = False
        self.events_processed = 0

    @abstractmethod
    def _pull(self) -> Optional[XMLEvent]:
        """Return the next event, or None once the stream is exhausted."""

    def advance(self) -> bool:
        """Move to the next event.

        Returns:
            False once the stream is exhausted, True otherwise

        Raises:
            StreamFailure: If the underlying stream cannot produce an event
        """
        if self._exhausted:
            return False
        event = self._pull()
        if event is None:
            self._exhausted = True
            return False
        self._event = event
        self.events_processed += 1
        return True

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    @property
    def event(self) -> XMLEvent:
        return self._event

    @property
    def kind(self) -> EventKind:
        return self._event.kind

    @property
    def namespace(self) -> Optional[str]:
        return self._event.namespace

    @property
    def local_name(self) -> Optional[str]:
        return self._event.local_name

    @property
    def prefix(self) -> Optional[str]:
        return self._event.prefix

    @property
    def line(self) -> Optional[int]:
        return self._event.line

    def attribute(self, name: str) -> Optional[str]:
        """Look up an attribute of the current element by local name.

        Unqualified attributes win; otherwise the first namespaced attribute
        with a matching local name is returned.
        """
        attributes = self._event.attributes
        if name in attributes:
            return attributes[name]
        suffix = "}" + name
        for key, value in attributes.items():
            if key.endswith(suffix):
                return value
        return None

    def read_element_text(self) -> str:
        """Consume the current element and return its character content.

        Valid only when positioned on an element start. Leaves the cursor on
        the element's end event.

        Raises:
            StreamFailure: If not on an element start, if the element holds a
                child element, or if the stream ends inside the element
        """
        if self.kind is not EventKind.ELEMENT_START:
            raise StreamFailure(
                "Element text can only be read at an element start",
                position=self.line,
            )
        element_name = self.local_name
        start_line = self.line
        fragments: List[str] = []
        while self.advance():
            if self.kind is EventKind.ELEMENT_START:
                raise StreamFailure(
                    "Element text contains a child element",
                    field_name=element_name,
                    position=self.line,
                    details={"child": self.local_name},
                )
            if self.kind is EventKind.ELEMENT_END:
                if self._event.text is not None:
                    return self._event.text
                return "".join(fragments)
            if self._event.text:
                fragments.append(self._event.text)
        raise StreamFailure(
            "Document ended while reading element text",
            field_name=element_name,
            position=start_line,
        )

    def close(self) -> None:
        """Release resources held by the cursor."""

    def __enter__(self) -> "TokenCursor":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


class EventSequenceCursor(TokenCursor):
    """Cursor replaying a pre-recorded sequence of events."""

    def __init__(self, events: Iterable[XMLEvent]) -> None:
        super().__init__()
        self._events: Iterator[XMLEvent] = iter(events)

    def _pull(self) -> Optional[XMLEvent]:
        return next(self._events, None)


class LxmlTokenCursor(TokenCursor):
    """Cursor streaming a document through ``lxml.etree.iterparse``.

    External entities, DTD loading and network access are disabled.
    Comments and processing instructions are dropped by the parser.
    """

    def __init__(
        self,
        source: Union[str, IO[bytes]],
        huge_tree: bool = False,
        encoding: Optional[str] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        super().__init__()
        self.logger = get_logger(__name__, correlation_id, "lxml_cursor")
        self._previous: Optional[Any] = None
        try:
            self._iterator = etree.iterparse(
                source,
                events=_LXML_EVENTS,
                resolve_entities=False,
                no_network=True,
                load_dtd=False,
                remove_comments=True,
                remove_pis=True,
                huge_tree=huge_tree,
                encoding=encoding,
            )
        except (OSError, etree.LxmlError) as e:
            raise StreamFailure(f"Cannot open XML stream: {e}") from e

    def _pull(self) -> Optional[XMLEvent]:
        # Ended elements are no longer needed once the cursor moves on
        previous = self._previous
        if previous is not None:
            previous.clear()
            # Earlier siblings have already ended; keep only the latest one
            parent = previous.getparent()
            if parent is not None:
                while previous.getprevious() is not None:
                    del parent[0]
            self._previous = None

        try:
            action, payload = next(self._iterator)
        except StopIteration:
            return None
        except etree.XMLSyntaxError as e:
            line = e.position[0] if e.position else None
            self.logger.error(
                "Malformed XML stream", extra={"error": str(e), "line": line}
            )
            raise StreamFailure(f"Malformed XML: {e.msg}", position=line) from e
        except OSError as e:
            raise StreamFailure(f"Cannot read XML stream: {e}") from e

        if action == "start-ns":
            prefix, uri = payload
            return XMLEvent(
                EventKind.OTHER,
                namespace=uri,
                prefix=prefix or None,
            )

        namespace, local_name = split_clark_name(payload.tag)
        if action == "start":
            return XMLEvent(
                EventKind.ELEMENT_START,
                namespace=namespace,
                local_name=local_name,
                prefix=payload.prefix,
                attributes=MappingProxyType(dict(payload.attrib)),
                line=payload.sourceline,
            )

        self._previous = payload
        return XMLEvent(
            EventKind.ELEMENT_END,
            namespace=namespace,
            local_name=local_name,
            prefix=payload.prefix,
            text=payload.text if len(payload) == 0 else None,
            line=payload.sourceline,
        )

    def close(self) -> None:
        self._previous = None
        self._iterator = iter(())
        self._exhausted = True
