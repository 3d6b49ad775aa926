"""
Core — Resolution layer for nsresolve

Contains the pure, synchronous pieces:
- Cache: Read-only namespace cache snapshots (and the file-backed store)
- Resolver: Alias, var and namespace-of resolution
- Position: Macro-position validation
- Classify: Verbosity policy and classification builder
- Suggest: Near names for unresolved references
"""

from .cache import (
    DefinitionMeta, NamespaceRecord, NamespaceCache,
    SnapshotStore, SnapshotError, decode_snapshot, snapshot_digest, is_truthy
)
from .resolver import (
    SymbolResolver, split_reference, core_namespace,
    CLOJURE_CORE, CLJS_CORE, DEFAULT_MAX_REFERRAL_DEPTH
)
from .position import is_valid_macro_position
from .classify import (
    Feature, VerbosityPolicy, Face, Classification, ClassificationSpec,
    Classifier, overlay_faces, MAXIMAL
)
from .suggest import Suggestion, suggest

__all__ = [
    # Cache
    "DefinitionMeta", "NamespaceRecord", "NamespaceCache",
    "SnapshotStore", "SnapshotError", "decode_snapshot", "snapshot_digest", "is_truthy",
    # Resolver
    "SymbolResolver", "split_reference", "core_namespace",
    "CLOJURE_CORE", "CLJS_CORE", "DEFAULT_MAX_REFERRAL_DEPTH",
    # Position
    "is_valid_macro_position",
    # Classify
    "Feature", "VerbosityPolicy", "Face", "Classification", "ClassificationSpec",
    "Classifier", "overlay_faces", "MAXIMAL",
    # Suggest
    "Suggestion", "suggest",
]
