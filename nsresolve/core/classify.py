"""
Classification — Turn a resolved symbol into face tags for highlighting

For each matched symbol the host editor asks: macro, function, plain
var, or unresolved? The answer combines:
- resolved metadata (SymbolResolver)
- syntactic position (macros only right after `(` or `#'`)
- the verbosity policy (which kinds the user wants highlighted)

Symbols that resolve into the core namespace are always fully
classified when the policy includes `core`, regardless of the other
kinds it lists.

Usage:
    resolver = SymbolResolver(cache)
    classifier = Classifier(resolver, VerbosityPolicy.parse("maximal"))
    spec = classifier.classify("when", "my.app", start=1, buffer="(when x)")
    spec.classification   # Classification.MACRO
    spec.faces            # (Face.KEYWORD,)
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Iterable, List, Optional, Sequence, Tuple, Union

from .cache import DefinitionMeta
from .position import is_valid_macro_position
from .resolver import SymbolResolver


logger = logging.getLogger(__name__)


class Feature(Enum):
    """Kinds of symbols the user may ask to have highlighted."""
    MACRO = "macro"
    FUNCTION = "function"
    VAR = "var"
    CORE = "core"
    DEPRECATED = "deprecated"


MAXIMAL = "maximal"


@dataclass(frozen=True)
class VerbosityPolicy:
    """Which features are active. `maximal` turns all of them on."""
    features: FrozenSet[Feature]

    @classmethod
    def maximal(cls) -> 'VerbosityPolicy':
        return cls(frozenset(Feature))

    @classmethod
    def parse(cls, value: Union[str, Iterable[str], None]) -> 'VerbosityPolicy':
        """
        Parse "maximal", a comma-separated string, or a list of names.

        None means maximal; an empty list means nothing is highlighted.

        Raises:
            ValueError: an unknown feature name
        """
        if value is None:
            return cls.maximal()
        if isinstance(value, str):
            if value.strip().lower() in (MAXIMAL, "true", "t"):
                return cls.maximal()
            value = [part for part in value.split(",") if part.strip()]

        features = set()
        for name in value:
            try:
                features.add(Feature(str(name).strip().lower()))
            except ValueError:
                valid = ", ".join(f.value for f in Feature)
                raise ValueError(f"Unknown font-lock feature '{name}'. Valid: {MAXIMAL}, {valid}") from None
        return cls(frozenset(features))

    @property
    def is_maximal(self) -> bool:
        return self.features == frozenset(Feature)

    def includes(self, feature: Feature) -> bool:
        return feature in self.features

    def to_value(self) -> Union[str, List[str]]:
        """Config representation (inverse of parse)."""
        if self.is_maximal:
            return MAXIMAL
        return [f.value for f in Feature if f in self.features]


class Face(Enum):
    """Abstract face tags; styling them is the host's business."""
    KEYWORD = "font-lock-keyword-face"
    FUNCTION_NAME = "font-lock-function-name-face"
    VARIABLE_NAME = "font-lock-variable-name-face"
    INSTRUMENTED = "cider-instrumented-face"
    ENLIGHTENED = "cider-enlightened-face"
    TRACED = "cider-traced-face"
    DEPRECATED = "cider-deprecated-face"


class Classification(Enum):
    MACRO = "macro"
    FUNCTION = "function"
    VAR = "var"
    UNRESOLVED = "unresolved"


SEMANTIC_FACES = {
    Classification.MACRO: Face.KEYWORD,
    Classification.FUNCTION: Face.FUNCTION_NAME,
    Classification.VAR: Face.VARIABLE_NAME,
}


@dataclass(frozen=True)
class ClassificationSpec:
    """
    Result for one matched token.

    faces are ordered: static face first, then overlays, then the
    semantic face. An UNRESOLVED spec may still carry a static face.
    """
    classification: Classification
    faces: Tuple[Face, ...] = ()

    @property
    def semantic_face(self) -> Optional[Face]:
        return SEMANTIC_FACES.get(self.classification)

    def face_names(self) -> List[str]:
        return [face.value for face in self.faces]


def overlay_faces(meta: Optional[DefinitionMeta], policy: VerbosityPolicy) -> List[Face]:
    """Overlays attached independently of the semantic classification."""
    if meta is None:
        return []
    faces = []
    if meta.is_instrumented:
        faces.append(Face.ENLIGHTENED if meta.is_enlightened else Face.INSTRUMENTED)
    if meta.is_traced:
        faces.append(Face.TRACED)
    if meta.is_deprecated and policy.includes(Feature.DEPRECATED):
        faces.append(Face.DEPRECATED)
    return faces


class Classifier:
    """
    Classification builder for matched symbol spans.

    Stateless apart from the resolver (one snapshot) and the policy,
    so one instance can serve a whole rendering pass.
    """

    def __init__(self, resolver: SymbolResolver, policy: Optional[VerbosityPolicy] = None):
        self.resolver = resolver
        self.policy = policy or VerbosityPolicy.maximal()

    def classify_meta(
        self,
        meta: Optional[DefinitionMeta],
        is_core_hit: bool,
        buffer: Optional[Sequence[str]],
        start: Optional[int]
    ) -> Classification:
        """Ordered decision: macro, then function, then var, else unresolved."""
        policy = self.policy
        if meta is None:
            return Classification.UNRESOLVED

        if (meta.is_macro
                and (is_core_hit or policy.includes(Feature.MACRO))
                and is_valid_macro_position(buffer, start)):
            return Classification.MACRO
        if meta.has_arglist and (is_core_hit or policy.includes(Feature.FUNCTION)):
            return Classification.FUNCTION
        if is_core_hit or policy.includes(Feature.VAR):
            return Classification.VAR
        return Classification.UNRESOLVED

    def classify(
        self,
        text: str,
        ns: str,
        start: Optional[int] = None,
        buffer: Optional[Sequence[str]] = None,
        static_face: Optional[Face] = None
    ) -> Optional[ClassificationSpec]:
        """
        Classify one matched symbol.

        Args:
            text: Matched symbol text (bare or prefixed)
            ns: Namespace of the buffer the match is in
            start: Offset of the match in `buffer`
            buffer: Buffer text, consulted only for macro candidates
            static_face: Face the host's static rules already assigned

        Returns:
            ClassificationSpec, or None when nothing contributes a face
        """
        resolver = self.resolver
        meta = resolver.resolve_var(ns, text)

        is_core_hit = (
            self.policy.includes(Feature.CORE)
            and resolver.resolve_var_namespace(ns, text) == resolver.core_ns
        )

        classification = self.classify_meta(meta, is_core_hit, buffer, start)

        faces: List[Face] = []
        if static_face is not None:
            faces.append(static_face)
        faces.extend(overlay_faces(meta, self.policy))
        semantic = SEMANTIC_FACES.get(classification)
        if semantic is not None:
            faces.append(semantic)

        if not faces:
            return None

        logger.debug("%s in %s -> %s %s", text, ns, classification.value, [f.value for f in faces])
        return ClassificationSpec(classification=classification, faces=tuple(faces))
