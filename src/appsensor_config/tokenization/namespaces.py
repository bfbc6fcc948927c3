"""Namespace resolution for element dispatch.

Maps the (namespace URI, local name) pair reported by the token stream to a
stable ``prefix:local-name`` key used by the sub-parsers as a dispatch key.
Names in namespaces outside the table keep their Clark form ``{uri}local``,
which never equals a mapped key whatever prefix the document binds.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from appsensor_config.shared.config import CONFIG_NAMESPACE, CONFIG_PREFIX


def split_clark_name(tag: str) -> Tuple[Optional[str], str]:
    """Split an lxml ``{uri}local`` tag into its namespace and local name."""
    if tag.startswith("{"):
        uri, _, local_name = tag[1:].partition("}")
        return (uri or None), local_name
    return None, tag


@dataclass(frozen=True)
class NamespaceResolver:
    """Immutable URI to prefix table.

    Built once per reader and passed into every sub-parser call.
    """

    table: Mapping[str, str] = field(
        default_factory=lambda: {CONFIG_NAMESPACE: CONFIG_PREFIX}
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "table", MappingProxyType(dict(self.table)))

    def qualified_name(
        self,
        namespace: Optional[str],
        local_name: Optional[str],
    ) -> Optional[str]:
        """Return the dispatch key for an element name.

        Args:
            namespace: Namespace URI reported by the stream, if any
            local_name: Local element name; None for non-element events

        Returns:
            ``mapped:local`` for known namespaces, ``{uri}local`` for other
            namespaces, the bare local name otherwise
        """
        if local_name is None:
            return None
        if namespace:
            mapped = self.prefix_for(namespace)
            if mapped is None:
                return f"{{{namespace}}}{local_name}"
            return f"{mapped}:{local_name}"
        return local_name

    def prefix_for(self, namespace: str) -> Optional[str]:
        return self.table.get(namespace)
