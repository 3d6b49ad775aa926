"""
Tests for SymbolResolver — Alias, var and namespace-of resolution

Covers resolution order (interns > refers > core), the effect of an
explicit prefix, termination on malformed data, and the absent-snapshot
case.
"""

import pytest

from nsresolve.core.resolver import (
    SymbolResolver, split_reference, core_namespace, CLOJURE_CORE, CLJS_CORE
)
from nsresolve.core.cache import NamespaceCache


# ============================================================================
# REFERENCE SPLITTING
# ============================================================================

class TestSplitReference:
    """Split at the first '/' into prefix and name."""

    def test_bare_name(self):
        """No '/' means no prefix."""
        assert split_reference("map") == (None, "map")

    def test_prefixed_name(self):
        """Prefix and name."""
        assert split_reference("str/join") == ("str", "join")

    def test_only_first_slash_splits(self):
        """Further slashes belong to the name."""
        assert split_reference("a/b/c") == ("a", "b/c")

    def test_division_var(self):
        """A lone '/' is a name, not a separator."""
        assert split_reference("/") == (None, "/")

    def test_qualified_division_var(self):
        """clojure.core// names the division var."""
        assert split_reference("clojure.core//") == ("clojure.core", "/")

    def test_var_quote_is_stripped(self):
        """#'str/join splits like str/join."""
        assert split_reference("#'str/join") == ("str", "join")
        assert split_reference("#'map") == (None, "map")


class TestCoreNamespace:
    """Dialect selects the core namespace."""

    def test_clj(self):
        assert core_namespace("clj") == CLOJURE_CORE

    def test_cljs(self):
        assert core_namespace("cljs") == CLJS_CORE

    def test_default_and_unknown(self):
        """Missing or unknown dialect falls back to clojure.core."""
        assert core_namespace(None) == CLOJURE_CORE
        assert core_namespace("cljr") == CLOJURE_CORE


# ============================================================================
# ALIAS RESOLUTION
# ============================================================================

class TestResolveAlias:
    """Alias round-trip and literal fallback."""

    def test_known_alias(self, sample_resolver):
        """Alias maps to its full namespace."""
        assert sample_resolver.resolve_alias("my.app", "str") == "clojure.string"

    def test_unknown_alias_is_literal(self, sample_resolver):
        """Absent alias is returned unchanged."""
        assert sample_resolver.resolve_alias("my.app", "clojure.set") == "clojure.set"

    def test_unknown_namespace_is_literal(self, sample_resolver):
        """A namespace missing from the cache behaves like an empty alias table."""
        assert sample_resolver.resolve_alias("no.such.ns", "str") == "str"

    def test_alias_is_scoped_to_namespace(self, sample_resolver):
        """Aliases of one namespace do not leak into another."""
        assert sample_resolver.resolve_alias("my.util", "str") == "str"


# ============================================================================
# VAR RESOLUTION
# ============================================================================

class TestResolveVarQualified:
    """Prefixed references look only at the target's interns."""

    def test_alias_prefix(self, sample_resolver):
        """str/join resolves through the alias."""
        meta = sample_resolver.resolve_var("my.app", "str/join")
        assert meta is not None
        assert meta.arglists == "([coll] [sep coll])"

    def test_full_namespace_prefix(self, sample_resolver):
        """A full namespace name works as a prefix."""
        assert sample_resolver.resolve_var("my.app", "clojure.string/join") is not None

    def test_prefix_disables_core_fallback(self, sample_resolver):
        """str/map is unresolved even though clojure.core/map exists."""
        assert sample_resolver.resolve_var("my.app", "str/map") is None

    def test_prefix_disables_refers(self, cache_factory):
        """A qualified miss never consults the current namespace's refers."""
        cache_factory.add_ns("a", refers={"x": "b/x"})
        cache_factory.add_fn("b", "x")
        cache_factory.add_ns("c")
        resolver = cache_factory.resolver()
        assert resolver.resolve_var("a", "c/x") is None

    def test_unknown_prefix_namespace(self, sample_resolver):
        """Prefix naming no known namespace is unresolved."""
        assert sample_resolver.resolve_var("my.app", "nope/map") is None

    def test_name_with_extra_slashes(self, cache_factory):
        """a/b/c looks up name 'b/c' in namespace a."""
        cache_factory.add_var("a", "b/c", doc="odd")
        resolver = cache_factory.resolver()
        meta = resolver.resolve_var("user", "a/b/c")
        assert meta is not None
        assert meta.doc == "odd"

    def test_var_quoted_reference(self, sample_resolver):
        """#'str/join resolves like str/join."""
        assert sample_resolver.resolve_var("my.app", "#'str/join") == \
            sample_resolver.resolve_var("my.app", "str/join")


class TestResolveVarUnqualified:
    """Bare names: interns, then refers, then core."""

    def test_intern(self, sample_resolver):
        """Local definition resolves."""
        meta = sample_resolver.resolve_var("my.app", "start")
        assert meta.arglists == "([opts])"

    def test_interns_beat_refers(self, cache_factory):
        """A name both interned and referred resolves to the intern."""
        cache_factory.add_fn("a", "f", arglists="([local])")
        cache_factory.add_refer("a", "f", "b/f")
        cache_factory.add_macro("b", "f")
        resolver = cache_factory.resolver()

        meta = resolver.resolve_var("a", "f")
        assert meta.arglists == "([local])"
        assert not meta.is_macro

    def test_referral_is_followed(self, cache_factory):
        """refers f -> other/g resolves to other's g."""
        cache_factory.add_refer("ns", "f", "other/g")
        cache_factory.add_fn("other", "g", arglists="([g])")
        resolver = cache_factory.resolver()
        assert resolver.resolve_var("ns", "f").arglists == "([g])"

    def test_referral_prefix_goes_through_aliases(self, cache_factory):
        """A referral written with an alias resolves through the alias table."""
        cache_factory.add_ns("a", aliases={"s": "clojure.string"}, refers={"j": "s/join"})
        cache_factory.add_fn("clojure.string", "join")
        resolver = cache_factory.resolver()
        assert resolver.resolve_var("a", "j") is not None

    def test_sample_referral(self, sample_resolver):
        """helper is referred from my.util."""
        meta = sample_resolver.resolve_var("my.app", "helper")
        assert meta is not None
        assert meta.is_instrumented

    def test_core_fallback(self, sample_resolver):
        """map falls back to clojure.core."""
        meta = sample_resolver.resolve_var("my.app", "map")
        assert meta.arglists == "([f coll])"

    def test_core_fallback_for_unknown_namespace(self, sample_resolver):
        """Namespaces missing from the cache still see core."""
        assert sample_resolver.resolve_var("not.loaded", "map") is not None

    def test_core_fallback_division(self, cache_factory):
        """'/' resolves in core both bare and qualified."""
        cache_factory.add_fn(CLOJURE_CORE, "/")
        resolver = cache_factory.resolver()
        assert resolver.resolve_var("user", "/") is not None
        assert resolver.resolve_var("user", "clojure.core//") is not None

    def test_self_core_does_not_loop(self, sample_resolver):
        """Unknown name in core is unresolved without re-entering core."""
        assert sample_resolver.resolve_var(CLOJURE_CORE, "undefined-name") is None

    def test_unknown_everywhere(self, sample_resolver):
        """Unknown name is unresolved."""
        assert sample_resolver.resolve_var("my.app", "frobnicate") is None

    def test_empty_reference(self, sample_resolver):
        """Empty text is unresolved."""
        assert sample_resolver.resolve_var("my.app", "") is None

    def test_cljs_core(self, cache_factory):
        """cljs dialect falls back to cljs.core."""
        cache_factory.add_fn(CLJS_CORE, "clj->js")
        cache_factory.add_fn(CLOJURE_CORE, "slurp")
        resolver = cache_factory.resolver(core_ns=CLJS_CORE)
        assert resolver.resolve_var("app.ui", "clj->js") is not None
        assert resolver.resolve_var("app.ui", "slurp") is None


class TestReferralGuards:
    """Malformed referral data terminates as unresolved."""

    def test_referral_cycle(self, cache_factory):
        """Unqualified referrals pointing at each other do not recurse forever."""
        cache_factory.add_ns("a", refers={"x": "y", "y": "x"})
        resolver = cache_factory.resolver()
        assert resolver.resolve_var("a", "x") is None

    def test_self_referral(self, cache_factory):
        """A name referred to itself is unresolved."""
        cache_factory.add_ns("a", refers={"x": "x"})
        resolver = cache_factory.resolver()
        assert resolver.resolve_var("a", "x") is None

    def test_chain_within_depth(self, cache_factory):
        """Chains up to the hop limit resolve."""
        cache_factory.add_ns("a", refers={"r0": "r1", "r1": "r2", "r2": "r3"})
        cache_factory.add_var("a", "r3")
        resolver = cache_factory.resolver(max_referral_depth=3)
        assert resolver.resolve_var("a", "r0") is not None

    def test_chain_beyond_depth(self, cache_factory):
        """Chains longer than the hop limit are unresolved."""
        cache_factory.add_ns("a", refers={"r0": "r1", "r1": "r2", "r2": "r3", "r3": "r4"})
        cache_factory.add_var("a", "r4")
        resolver = cache_factory.resolver(max_referral_depth=3)
        assert resolver.resolve_var("a", "r0") is None


# ============================================================================
# NAMESPACE-OF RESOLUTION
# ============================================================================

class TestResolveVarNamespace:
    """Provenance without metadata."""

    def test_prefix_is_trusted(self, sample_resolver):
        """An explicit prefix is returned without checking interns."""
        assert sample_resolver.resolve_var_namespace("my.app", "str/nope") == "clojure.string"

    def test_intern(self, sample_resolver):
        """Interned name belongs to the current namespace."""
        assert sample_resolver.resolve_var_namespace("my.app", "start") == "my.app"

    def test_referral(self, sample_resolver):
        """Referred name belongs to the referral's namespace."""
        assert sample_resolver.resolve_var_namespace("my.app", "helper") == "my.util"

    def test_core(self, sample_resolver):
        """Core fallback reports the core namespace."""
        assert sample_resolver.resolve_var_namespace("my.app", "map") == CLOJURE_CORE

    def test_unresolved(self, sample_resolver):
        """Unknown name has no namespace."""
        assert sample_resolver.resolve_var_namespace("my.app", "frobnicate") is None
        assert sample_resolver.resolve_var_namespace(CLOJURE_CORE, "frobnicate") is None

    def test_referral_namespace_is_textual(self, cache_factory):
        """
        Referral provenance is the referral's literal prefix.

        resolve_var follows the alias in the referral; resolve_var_namespace
        does not. This pins the current asymmetry between the two.
        """
        cache_factory.add_ns("a", aliases={"s": "clojure.string"}, refers={"j": "s/join"})
        cache_factory.add_fn("clojure.string", "join")
        resolver = cache_factory.resolver()

        assert resolver.resolve_var("a", "j") is not None
        assert resolver.resolve_var_namespace("a", "j") == "s"


# ============================================================================
# ABSENT SNAPSHOT
# ============================================================================

class TestNoSnapshot:
    """Without a snapshot everything is unresolved."""

    @pytest.mark.parametrize("ref", ["map", "str/join", "#'when", "/", ""])
    def test_resolve_var(self, ref):
        resolver = SymbolResolver(None)
        assert resolver.resolve_var("user", ref) is None

    @pytest.mark.parametrize("ref", ["map", "str/join", "start"])
    def test_resolve_var_namespace(self, ref):
        resolver = SymbolResolver(None)
        assert resolver.resolve_var_namespace("user", ref) is None

    def test_alias_passthrough(self):
        """Alias resolution degrades to the literal alias."""
        assert SymbolResolver(None).resolve_alias("user", "str") == "str"

    def test_visible_symbols(self):
        assert SymbolResolver(None).visible_symbols("user") == {}

    def test_empty_snapshot(self):
        """An empty snapshot behaves like no snapshot."""
        resolver = SymbolResolver(NamespaceCache())
        assert resolver.resolve_var("user", "map") is None
        assert resolver.resolve_var_namespace("user", "map") is None


# ============================================================================
# VISIBLE SYMBOLS
# ============================================================================

class TestVisibleSymbols:
    """Enumeration of names usable from a namespace."""

    def test_includes_interns_refers_and_aliased(self, sample_resolver):
        visible = sample_resolver.visible_symbols("my.app")
        assert {"start", "config", "defthing", "helper"} <= set(visible)
        assert {"str/join", "str/blank?", "u/helper", "u/debug"} <= set(visible)

    def test_excludes_core(self, sample_resolver):
        """Core names are reachable but not listed."""
        assert "map" not in sample_resolver.visible_symbols("my.app")

    def test_skips_unresolvable_refers(self, cache_factory):
        cache_factory.add_ns("a", refers={"ghost": "gone/ghost"})
        resolver = cache_factory.resolver()
        assert "ghost" not in resolver.visible_symbols("a")

    def test_intern_wins_over_refer(self, cache_factory):
        cache_factory.add_fn("a", "f", arglists="([local])")
        cache_factory.add_refer("a", "f", "b/f")
        cache_factory.add_macro("b", "f")
        resolver = cache_factory.resolver()
        assert resolver.visible_symbols("a")["f"].arglists == "([local])"
