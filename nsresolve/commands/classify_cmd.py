"""
ClassifyCommand — Classify a matched symbol the way the highlighter would

The symbol's surroundings matter for macros, so the command takes either
the text right before the match (--before) or a file and offset.
"""

from pathlib import Path
from typing import Optional

from ..commands.base import BaseCommand
from ..core.classify import Face
from ..presentation.symbols import safe_print, symbol_for_classification


COMMAND_NAME = 'classify'


def parse_face(value: Optional[str]) -> Optional[Face]:
    """
    Face from its tag ("font-lock-keyword-face") or enum name ("keyword").

    Raises:
        ValueError: unknown face
    """
    if value is None:
        return None
    try:
        return Face(value)
    except ValueError:
        pass
    try:
        return Face[value.upper().replace("-", "_")]
    except KeyError:
        valid = ", ".join(f.name.lower() for f in Face)
        raise ValueError(f"Unknown face '{value}'. Valid: {valid}") from None


class ClassifyCommand(BaseCommand):
    """Command for single-token classification."""

    def classify(self, text: str, ns: str, before: str = "(", file: Path = None,
                 offset: int = None, static_face: str = None, policy: str = None):
        symbols = self.symbols
        template = self.template()
        template.header("NSRESOLVE CLASSIFY", f"{text} in {ns}")

        try:
            face = parse_face(static_face)
            classifier = self._cli.classifier(policy)
        except ValueError as e:
            template.section("ERROR", str(e))
            safe_print(template.render())
            return

        if file is not None:
            if offset is None:
                template.section("ERROR", "--file needs --offset (start of the match in the file)")
                safe_print(template.render())
                return
            try:
                buffer = Path(file).read_text()
            except (OSError, UnicodeDecodeError) as e:
                template.section("ERROR", f"Cannot read {file}: {e}")
                safe_print(template.render())
                return
            start = offset
        else:
            before = before or ""
            buffer = before + text
            start = len(before)

        spec = classifier.classify(text, ns, start=start, buffer=buffer, static_face=face)

        if spec is None:
            template.section("RESULT", f"{symbols.unresolved} No classification")
        else:
            marker = symbol_for_classification(symbols, spec.classification.value)
            template.section("RESULT", f"{marker} {spec.classification.value}")
            template.section("FACES", template.format_list(spec.face_names()))

        policy_value = classifier.policy.to_value()
        policy_text = policy_value if isinstance(policy_value, str) else ",".join(policy_value) or "(none)"
        template.section("POLICY", policy_text)
        template.footer(self.snapshot_note())
        safe_print(template.render())


def register_parser(subparsers):
    """Register classify command parser."""
    p = subparsers.add_parser('classify', help='Classify a matched symbol (macro/function/var/unresolved)')
    p.add_argument('text', help='Matched symbol text')
    p.add_argument('--ns', '-n', required=True, help='Namespace of the buffer')
    p.add_argument('--before', default='(',
                   help='Text immediately before the match (default: "(")')
    p.add_argument('--file', type=Path, help='Buffer file containing the match')
    p.add_argument('--offset', type=int, help='Match start offset in --file (required with --file)')
    p.add_argument('--static', dest='static_face',
                   help='Face already assigned by static rules')
    p.add_argument('--policy',
                   help='Override font_lock.dynamic (e.g., maximal or macro,core)')
    return p


def handle(cli, args):
    """Handle classify command dispatch."""
    cli.classify(
        args.text, args.ns,
        before=args.before,
        file=args.file,
        offset=args.offset,
        static_face=args.static_face,
        policy=args.policy
    )
