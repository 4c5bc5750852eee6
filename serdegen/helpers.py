"""Helper deduplication.

Composite shapes (options, sequences, maps, tuples and fixed-size arrays)
recur across many fields and containers. Rather than inlining their wire
algorithm at every occurrence, the generator emits one helper pair per
distinct shape and routes every occurrence to it.

:class:`HelperTable` is built in a single pass over the whole registry,
before any container is emitted, and is read-only afterwards.
"""

from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Tuple

from serdegen.common import mangle_type, needs_helper
from serdegen.exceptions import GenerationError, SchemaError
from serdegen.formats import Format, Registry
from serdegen.logging import get_logger

_logger = get_logger("helpers")


class HelperTable:
    """Signature-keyed table of the composite shapes used by a registry.

    Iteration yields ``(signature, format)`` pairs in signature-sorted
    order, so that the emitted helper unit is reproducible.
    """

    def __init__(self, entries: Mapping[str, Format]):
        self._entries: Mapping[str, Format] = MappingProxyType(
            dict(sorted(entries.items()))
        )

    @classmethod
    def from_registry(cls, registry: Registry) -> "HelperTable":
        """Scan every format reachable from every container of a registry.

        Raises:
            UnresolvedFormatError: If a placeholder format is reached.
            SchemaError: If two different shapes share one signature.
        """
        entries: Dict[str, Format] = {}

        for name, container in registry.items():
            def record(format: Format) -> None:
                if not needs_helper(format):
                    return
                signature = mangle_type(format)
                existing = entries.setdefault(signature, format)
                if existing != format:
                    raise SchemaError(
                        f"{name}: formats {existing!r} and {format!r} share the "
                        f"helper signature {signature}",
                        container_name=name,
                    )

            container.visit(record)

        _logger.debug("Collected %d helper shapes from %d containers", len(entries), len(registry))
        return cls(entries)

    def signature(self, format: Format) -> str:
        """Get the signature of a registered composite format.

        Raises:
            GenerationError: If the format was not collected by the scan.
        """
        signature = mangle_type(format)
        if self._entries.get(signature) != format:
            raise GenerationError(f"No helper registered for {format!r}")
        return signature

    def items(self) -> List[Tuple[str, Format]]:
        return list(self._entries.items())

    def __contains__(self, signature: object) -> bool:
        return signature in self._entries

    def __getitem__(self, signature: str) -> Format:
        return self._entries[signature]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"HelperTable({list(self._entries)})"
