"""
Symbol Resolver — Namespace-qualified symbol resolution over a cache snapshot

Answers "what does this symbol denote here?" for bare (`join`) and
prefixed (`str/join`) references.

Resolution order for a bare name:
1. Interns of the current namespace
2. Refers of the current namespace (followed to their target)
3. The core namespace (clojure.core / cljs.core)

A prefixed name is looked up only in the interns of the namespace the
prefix stands for (via the alias table, or literally).

Unresolved is a normal answer (None), never an exception.
"""

import logging
from typing import Dict, Optional, Set, Tuple

from .cache import DefinitionMeta, NamespaceCache, NamespaceRecord


logger = logging.getLogger(__name__)


CLOJURE_CORE = "clojure.core"
CLJS_CORE = "cljs.core"

DIALECT_CORE_NAMESPACES = {
    "clj": CLOJURE_CORE,
    "cljs": CLJS_CORE,
}

DEFAULT_MAX_REFERRAL_DEPTH = 8

VAR_QUOTE = "#'"


def core_namespace(dialect: Optional[str] = None) -> str:
    """Core namespace for a dialect; unknown dialects get clojure.core."""
    return DIALECT_CORE_NAMESPACES.get((dialect or "clj").lower(), CLOJURE_CORE)


def split_reference(ref: str) -> Tuple[Optional[str], str]:
    """
    Split a reference into (prefix, name) at the first '/'.

    Examples:
        >>> split_reference("str/join")
        ('str', 'join')
        >>> split_reference("map")
        (None, 'map')
        >>> split_reference("a/b/c")
        ('a', 'b/c')
        >>> split_reference("clojure.core//")
        ('clojure.core', '/')
        >>> split_reference("/")
        (None, '/')
        >>> split_reference("#'str/join")
        ('str', 'join')
    """
    if ref.startswith(VAR_QUOTE):
        ref = ref[len(VAR_QUOTE):]
    prefix, sep, name = ref.partition("/")
    if not sep or not prefix:
        return None, ref
    return prefix, name


class SymbolResolver:
    """
    Resolves references against one namespace cache snapshot.

    The snapshot is handed in explicitly and may be None (no active
    connection), in which case everything is unresolved.
    """

    def __init__(
        self,
        cache: Optional[NamespaceCache],
        core_ns: str = CLOJURE_CORE,
        max_referral_depth: int = DEFAULT_MAX_REFERRAL_DEPTH
    ):
        self.cache = cache
        self.core_ns = core_ns
        self.max_referral_depth = max_referral_depth

    def _record(self, ns: str) -> Optional[NamespaceRecord]:
        if self.cache is None:
            return None
        return self.cache.get(ns)

    # =========================================================================
    # Alias resolution
    # =========================================================================

    def resolve_alias(self, ns: str, alias: str) -> str:
        """Full namespace name `alias` stands for inside `ns` (or `alias` itself)."""
        record = self._record(ns)
        if record is None:
            return alias
        return record.aliases.get(alias, alias)

    # =========================================================================
    # Var resolution
    # =========================================================================

    def resolve_var(self, ns: str, ref: str) -> Optional[DefinitionMeta]:
        """
        Resolve `ref` as it appears in `ns` to its definition metadata.

        Args:
            ns: Namespace the reference textually occurs in
            ref: Bare or prefixed symbol text

        Returns:
            DefinitionMeta, or None when unresolved
        """
        if not ref:
            return None
        return self._resolve_var(ns, ref, visited=set(), hops=0)

    def _resolve_var(
        self,
        ns: str,
        ref: str,
        visited: Set[Tuple[str, str]],
        hops: int
    ) -> Optional[DefinitionMeta]:
        key = (ns, ref)
        if key in visited:
            logger.debug("Referral cycle at %s in %s, giving up", ref, ns)
            return None
        visited.add(key)

        prefix, name = split_reference(ref)

        # Qualified: interns of the target namespace only
        if prefix is not None:
            target = self._record(self.resolve_alias(ns, prefix))
            if target is None:
                return None
            return target.interns.get(name)

        record = self._record(ns)
        if record is not None:
            meta = record.interns.get(name)
            if meta is not None:
                return meta

            referral = record.refers.get(name)
            if referral is not None:
                if hops >= self.max_referral_depth:
                    logger.debug("Referral chain for %s in %s exceeds %d hops", name, ns, self.max_referral_depth)
                    return None
                # Referrals are qualified; the prefix goes through ns's aliases
                return self._resolve_var(ns, referral, visited, hops + 1)

        if ns != self.core_ns:
            return self._resolve_var(self.core_ns, name, visited, hops)

        return None

    # =========================================================================
    # Provenance
    # =========================================================================

    def resolve_var_namespace(self, ns: str, ref: str) -> Optional[str]:
        """
        Namespace that `ref` (as written in `ns`) belongs to.

        Cheaper than resolve_var: an explicit prefix is trusted without
        checking interns, and a referral's namespace is read from its
        text without following it further.
        """
        if not ref or self.cache is None:
            return None

        prefix, name = split_reference(ref)
        if prefix is not None:
            return self.resolve_alias(ns, prefix)

        record = self._record(ns)
        if record is not None:
            if name in record.interns:
                return ns
            referral = record.refers.get(name)
            if referral is not None:
                return referral.partition("/")[0]

        if ns != self.core_ns and self.resolve_var(self.core_ns, name) is not None:
            return self.core_ns

        return None

    # =========================================================================
    # Enumeration
    # =========================================================================

    def visible_symbols(self, ns: str) -> Dict[str, DefinitionMeta]:
        """
        Every symbol usable from `ns` without going through the core fallback.

        Includes interns, refers that resolve, and `alias/name` for the
        interns of each aliased namespace. Core symbols are not listed.
        """
        record = self._record(ns)
        if record is None:
            return {}

        symbols: Dict[str, DefinitionMeta] = {}
        for alias, target_ns in sorted(record.aliases.items()):
            target = self._record(target_ns)
            if target is None:
                continue
            for name, meta in target.interns.items():
                symbols[f"{alias}/{name}"] = meta

        for name in record.refers:
            meta = self.resolve_var(ns, name)
            if meta is not None:
                symbols[name] = meta

        symbols.update(record.interns)
        return symbols
