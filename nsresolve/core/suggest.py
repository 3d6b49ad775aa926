"""
Suggestions — Near names for a reference that did not resolve

Candidates are the symbols visible from the namespace plus the core
namespace's interns. Scoring uses rapidfuzz; a prefixed reference is
only compared against candidates with the same prefix.
"""

from dataclasses import dataclass
from typing import List

from rapidfuzz import fuzz

from .resolver import SymbolResolver, split_reference


DEFAULT_LIMIT = 5
MIN_SCORE = 0.6


@dataclass
class Suggestion:
    """A candidate name and its similarity (0.0 - 1.0)."""
    name: str
    score: float


def _candidates(resolver: SymbolResolver, ns: str) -> List[str]:
    names = set(resolver.visible_symbols(ns))
    core = resolver.cache.get(resolver.core_ns) if resolver.cache is not None else None
    if core is not None:
        names.update(core.interns)
    return sorted(names)


def suggest(
    resolver: SymbolResolver,
    ns: str,
    ref: str,
    limit: int = DEFAULT_LIMIT,
    min_score: float = MIN_SCORE
) -> List[Suggestion]:
    """
    Rank names similar to `ref` that are usable from `ns`.

    Returns:
        Up to `limit` suggestions, best first (ties broken by name)
    """
    if not ref:
        return []

    prefix, name = split_reference(ref)
    scored = []
    for candidate in _candidates(resolver, ns):
        cand_prefix, cand_name = split_reference(candidate)
        if cand_prefix != prefix or candidate == ref:
            continue
        score = fuzz.ratio(name.lower(), cand_name.lower()) / 100.0
        if score >= min_score:
            scored.append(Suggestion(name=candidate, score=score))

    scored.sort(key=lambda s: (-s.score, s.name))
    return scored[:limit]
