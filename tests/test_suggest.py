"""
Tests for suggestions on unresolved references.
"""

from nsresolve.core.resolver import SymbolResolver
from nsresolve.core.suggest import suggest


class TestSuggest:
    """Near names ranked by similarity."""

    def test_local_typo(self, sample_resolver):
        names = [s.name for s in suggest(sample_resolver, "my.app", "strt")]
        assert names[0] == "start"

    def test_core_typo(self, sample_resolver):
        names = [s.name for s in suggest(sample_resolver, "my.app", "mapp")]
        assert "map" in names

    def test_prefix_must_match(self, sample_resolver):
        """A prefixed typo only suggests names under the same alias."""
        results = suggest(sample_resolver, "my.app", "str/jion")
        assert [s.name for s in results] == ["str/join"]

    def test_exact_match_excluded(self, sample_resolver):
        names = [s.name for s in suggest(sample_resolver, "my.app", "start")]
        assert "start" not in names

    def test_scores_sorted(self, sample_resolver):
        results = suggest(sample_resolver, "my.app", "conf", min_score=0.0)
        scores = [s.score for s in results]
        assert scores == sorted(scores, reverse=True)
        assert all(0.0 <= score <= 1.0 for score in scores)

    def test_limit(self, sample_resolver):
        assert len(suggest(sample_resolver, "my.app", "x", limit=2, min_score=0.0)) == 2

    def test_nothing_close(self, sample_resolver):
        assert suggest(sample_resolver, "my.app", "zzzzzzzzzz") == []

    def test_empty_reference(self, sample_resolver):
        assert suggest(sample_resolver, "my.app", "") == []

    def test_no_snapshot(self):
        assert suggest(SymbolResolver(None), "user", "mapp") == []
