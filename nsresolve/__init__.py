"""
nsresolve — Namespace-qualified symbol resolution for Clojure source

Given a symbol as written (`map`, `str/join`) and the namespace it
occurs in, finds the definition it denotes in a namespace cache
snapshot and classifies it for highlighting.

Usage:
    nsresolve resolve str/join --ns my.app
    nsresolve classify when --ns my.app
    nsresolve symbols --ns my.app
    nsresolve config
"""

__version__ = "0.1.0"

# Core layer (resolution)
from .core.cache import DefinitionMeta, NamespaceRecord, NamespaceCache, SnapshotStore, SnapshotError, decode_snapshot
from .core.resolver import SymbolResolver, split_reference, core_namespace, CLOJURE_CORE, CLJS_CORE
from .core.position import is_valid_macro_position
from .core.classify import Feature, VerbosityPolicy, Face, Classification, ClassificationSpec, Classifier
from .core.suggest import Suggestion, suggest

# Config (stays at root)
from .config import Config, ConfigManager, get_config

__all__ = [
    # Core
    'DefinitionMeta', 'NamespaceRecord', 'NamespaceCache', 'SnapshotStore', 'SnapshotError', 'decode_snapshot',
    'SymbolResolver', 'split_reference', 'core_namespace', 'CLOJURE_CORE', 'CLJS_CORE',
    'is_valid_macro_position',
    'Feature', 'VerbosityPolicy', 'Face', 'Classification', 'ClassificationSpec', 'Classifier',
    'Suggestion', 'suggest',
    # Config
    'Config', 'ConfigManager', 'get_config',
]
