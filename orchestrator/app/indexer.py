"""In-process object cache with named field indexes."""

import logging
from collections import defaultdict
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

IndexFunc = Callable[[Any], Optional[list[str]]]


class IndexConflictError(ValueError):
    """An index with the same kind and field name is already registered."""


class IndexNotFoundError(KeyError):
    """No index is registered for the requested kind and field."""


def _object_key(obj: Any) -> tuple[str, str]:
    return (obj.metadata.namespace or "", obj.metadata.name)


class FieldIndexer:
    """
    Holds objects per kind and keeps an inverted index for each registered field.

    Index functions are called with every object added for their kind and may
    return None when the object does not apply to them.
    """

    def __init__(self) -> None:
        self._funcs: dict[str, dict[str, IndexFunc]] = defaultdict(dict)
        self._objects: dict[str, dict[tuple[str, str], Any]] = defaultdict(dict)
        # kind -> field -> value -> object keys
        self._indexes: dict[str, dict[str, dict[str, set]]] = defaultdict(dict)

    def index_field(self, kind: str, field: str, extract: IndexFunc) -> None:
        if field in self._funcs[kind]:
            raise IndexConflictError(f"index {field!r} already registered for {kind}")
        self._funcs[kind][field] = extract
        index = self._indexes[kind][field] = defaultdict(set)
        for key, obj in self._objects[kind].items():
            for value in extract(obj) or []:
                index[value].add(key)
        logger.debug(f"Registered index {field} for {kind}")

    def add(self, obj: Any) -> None:
        kind = obj.kind
        key = _object_key(obj)
        if key in self._objects[kind]:
            self.delete(self._objects[kind][key])
        self._objects[kind][key] = obj
        for field, extract in self._funcs[kind].items():
            for value in extract(obj) or []:
                self._indexes[kind][field][value].add(key)

    def delete(self, obj: Any) -> None:
        kind = obj.kind
        key = _object_key(obj)
        stored = self._objects[kind].pop(key, None)
        if stored is None:
            return
        for field, extract in self._funcs[kind].items():
            index = self._indexes[kind][field]
            for value in extract(stored) or []:
                index[value].discard(key)
                if not index[value]:
                    del index[value]

    def list(self, kind: str, field: str, value: str) -> list:
        """Return objects of ``kind`` whose ``field`` index contains ``value``."""
        if field not in self._funcs.get(kind, {}):
            raise IndexNotFoundError(f"no index {field!r} registered for {kind}")
        keys = self._indexes[kind][field].get(value, ())
        return [self._objects[kind][key] for key in sorted(keys)]
