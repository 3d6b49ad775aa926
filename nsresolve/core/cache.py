"""
Namespace Cache — Read-only snapshot of runtime namespace metadata

The running runtime reports, per namespace:
- aliases: short alias -> full namespace name
- interns: symbols defined in the namespace, with their metadata
- refers:  symbols imported unqualified, as "ns/name" references

The resolver only ever reads a snapshot. Snapshots are replaced wholesale
(SnapshotStore) and never mutated in place.

Usage:
    from nsresolve.core.cache import NamespaceCache, SnapshotStore

    cache = NamespaceCache.from_dict(raw)        # raw = decoded ns-cache
    record = cache.get("my.app")                 # None if unknown

    store = SnapshotStore(Path(".nsresolve/ns-cache.json"))
    store.refresh()                              # reload only if changed
    cache = store.current()                      # None when no snapshot
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional

import orjson
import xxhash


logger = logging.getLogger(__name__)


# Metadata keys reported by the runtime middleware
MACRO_KEY = "macro"
ARGLISTS_KEY = "arglists"
DOC_KEY = "doc"
DEPRECATED_KEY = "deprecated"
INSTRUMENTED_KEYS = ("cider/instrumented", "instrumented")
TRACED_KEYS = ("cider.nrepl.middleware.util.instrument/traced", "traced")

# Instrumentation value marking an "enlightened" var
LIGHT_FORM = "light-form"

_KNOWN_KEYS = frozenset(
    (MACRO_KEY, ARGLISTS_KEY, DOC_KEY, DEPRECATED_KEY) + INSTRUMENTED_KEYS + TRACED_KEYS
)

_FALSY_STRINGS = ("", "false", "nil")


class SnapshotError(ValueError):
    """A snapshot file exists but cannot be decoded."""


def is_truthy(value: Any) -> bool:
    """Interpret a boolean-ish metadata value."""
    if value is None or value is False:
        return False
    if isinstance(value, str):
        return value.strip().lower() not in _FALSY_STRINGS
    if isinstance(value, (int, float)):
        return value != 0
    return True


def _strip_quotes(value: Any) -> Optional[str]:
    # Printed keywords and strings come back as e.g. "\"light-form\""
    if value is None:
        return None
    text = str(value).strip()
    if len(text) >= 2 and text[0] == text[-1] == '"':
        text = text[1:-1]
    return text.lstrip(":")


def _first_present(data: Mapping[str, Any], keys) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return None


def _freeze(obj: Any, name: str):
    # Snapshot tables are shared by every reader; expose them read-only
    value = getattr(obj, name)
    if not isinstance(value, MappingProxyType):
        object.__setattr__(obj, name, MappingProxyType(dict(value)))


@dataclass(frozen=True)
class DefinitionMeta:
    """
    Metadata of one definition, as far as classification cares.

    Immutable and hashable; `extra` is a read-only view and takes no
    part in hashing.
    """
    is_macro: bool = False
    arglists: Optional[str] = None
    instrumented: Optional[str] = None   # instrumentation kind, if any
    is_deprecated: bool = False
    is_traced: bool = False
    doc: Optional[str] = None
    extra: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        _freeze(self, "extra")

    @property
    def has_arglist(self) -> bool:
        return self.arglists is not None

    @property
    def is_instrumented(self) -> bool:
        return self.instrumented is not None

    @property
    def is_enlightened(self) -> bool:
        return self.instrumented == LIGHT_FORM

    def to_dict(self) -> Dict[str, Any]:
        """Flatten back to the wire shape (for display and JSON output)."""
        data: Dict[str, Any] = dict(self.extra)
        if self.is_macro:
            data[MACRO_KEY] = "true"
        if self.arglists is not None:
            data[ARGLISTS_KEY] = self.arglists
        if self.doc is not None:
            data[DOC_KEY] = self.doc
        if self.is_deprecated:
            data[DEPRECATED_KEY] = "true"
        if self.instrumented is not None:
            data[INSTRUMENTED_KEYS[0]] = self.instrumented
        if self.is_traced:
            data[TRACED_KEYS[0]] = "true"
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'DefinitionMeta':
        """
        Build from a raw metadata mapping.

        Absent or falsy flags are simply off; unknown keys are kept
        in `extra` untouched.
        """
        arglists = data.get(ARGLISTS_KEY)
        instrumented = _first_present(data, INSTRUMENTED_KEYS)
        doc = data.get(DOC_KEY)
        return cls(
            is_macro=is_truthy(data.get(MACRO_KEY)),
            arglists=str(arglists) if arglists is not None else None,
            instrumented=_strip_quotes(instrumented) if is_truthy(instrumented) else None,
            is_deprecated=is_truthy(data.get(DEPRECATED_KEY)),
            is_traced=is_truthy(_first_present(data, TRACED_KEYS)),
            doc=str(doc) if doc is not None else None,
            extra={k: v for k, v in data.items() if k not in _KNOWN_KEYS},
        )


@dataclass(frozen=True)
class NamespaceRecord:
    """Everything the runtime reported about one namespace (tables are read-only)."""
    name: str
    aliases: Mapping[str, str] = field(default_factory=dict, hash=False)
    interns: Mapping[str, DefinitionMeta] = field(default_factory=dict, hash=False)
    refers: Mapping[str, str] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        for table in ("aliases", "interns", "refers"):
            _freeze(self, table)

    @classmethod
    def from_dict(cls, name: str, data: Mapping[str, Any]) -> 'NamespaceRecord':
        """
        Build a record, dropping entries that do not have the expected shape.

        Malformed entries are logged at debug level and skipped so that a
        partially broken cache still resolves everything else.
        """
        aliases = {
            alias: target
            for alias, target in _as_mapping(data.get("aliases"), name, "aliases").items()
            if _is_name(alias) and _is_name(target)
        }
        refers = {
            local: target
            for local, target in _as_mapping(data.get("refers"), name, "refers").items()
            if _is_name(local) and _is_name(target)
        }

        interns: Dict[str, DefinitionMeta] = {}
        for sym, meta in _as_mapping(data.get("interns"), name, "interns").items():
            if not _is_name(sym):
                continue
            if meta is None:
                meta = {}
            if not isinstance(meta, Mapping):
                logger.debug("Skipping intern %s/%s: metadata is %s", name, sym, type(meta).__name__)
                continue
            interns[sym] = DefinitionMeta.from_dict(meta)

        return cls(name=name, aliases=aliases, interns=interns, refers=refers)


def _is_name(value: Any) -> bool:
    return isinstance(value, str) and bool(value)


def _as_mapping(value: Any, ns: str, table: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        logger.debug("Ignoring %s table of %s: not a mapping", table, ns)
        return {}
    return value


class NamespaceCache:
    """
    Immutable snapshot: namespace name -> NamespaceRecord.

    The only accessor the resolver relies on is get(); an unknown
    namespace is reported as None, never raised.
    """

    def __init__(self, records: Optional[Mapping[str, NamespaceRecord]] = None):
        self._records: Dict[str, NamespaceRecord] = dict(records or {})

    @classmethod
    def from_dict(cls, raw: Any) -> 'NamespaceCache':
        """Build a snapshot from the decoded cache payload."""
        if not isinstance(raw, Mapping):
            logger.warning("Namespace cache payload is %s, expected a mapping", type(raw).__name__)
            return cls()

        records = {}
        for ns, data in raw.items():
            if not _is_name(ns) or not isinstance(data, Mapping):
                logger.debug("Skipping malformed namespace entry %r", ns)
                continue
            records[ns] = NamespaceRecord.from_dict(ns, data)
        return cls(records)

    def get(self, name: str) -> Optional[NamespaceRecord]:
        return self._records.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._records

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def namespaces(self) -> list:
        return sorted(self._records)


def decode_snapshot(data: bytes, source: Any = "<bytes>") -> NamespaceCache:
    """
    Decode snapshot file content.

    Raises:
        SnapshotError: the content is not valid JSON
    """
    try:
        raw = orjson.loads(data)
    except orjson.JSONDecodeError as e:
        raise SnapshotError(f"Cannot decode namespace cache {source}: {e}") from e
    return NamespaceCache.from_dict(raw)


def snapshot_digest(data: bytes) -> str:
    """Fast content fingerprint used to detect changed snapshot files."""
    return xxhash.xxh64(data).hexdigest()


class SnapshotStore:
    """
    File-backed holder of the active snapshot.

    refresh() swaps the snapshot wholesale, and only when the file
    content changed. Readers call current() once per classification
    pass and keep that handle for the whole pass.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._snapshot: Optional[NamespaceCache] = None
        self._digest: Optional[str] = None

    @property
    def digest(self) -> Optional[str]:
        """Fingerprint of the active snapshot (None when absent)."""
        return self._digest

    def current(self) -> Optional[NamespaceCache]:
        return self._snapshot

    def refresh(self) -> bool:
        """
        Reload the snapshot if the file changed.

        A missing file clears the snapshot. An unreadable or undecodable
        file keeps the previous snapshot.

        Returns:
            True if the active snapshot was replaced or cleared
        """
        if not self.path.exists():
            if self._snapshot is None:
                return False
            logger.debug("Snapshot %s removed, clearing", self.path)
            self._snapshot, self._digest = None, None
            return True

        try:
            data = self.path.read_bytes()
        except OSError as e:
            logger.warning("Cannot read namespace cache %s: %s", self.path, e)
            return False

        digest = snapshot_digest(data)
        if digest == self._digest:
            return False

        try:
            snapshot = decode_snapshot(data, self.path)
        except SnapshotError as e:
            logger.warning("%s (keeping previous snapshot)", e)
            return False

        self._snapshot, self._digest = snapshot, digest
        logger.debug("Loaded snapshot %s (%d namespaces, digest %s)", self.path, len(snapshot), digest)
        return True
