"""CLI interface for pobox-check.

Usage:
    # Classify addresses given as arguments (one JSON object per line)
    python -m pobox_check.cli check "P.O. Box 17" "Post Road 123"

    # One result per stdin line (blank lines included), relaxed mode, with
    # match details; over-long lines get "pobox": null and an "error"
    cat addresses.txt | python -m pobox_check.cli check --relaxed --explain

    # Show the active pattern lists
    python -m pobox_check.cli --config pobox.yaml patterns
"""

from __future__ import annotations
import argparse
import json
import logging
import os
import sys

from .classifier import Classifier, REMAINDER_SCOPES
from .config import load_config, load_from_yaml
from .types import AddressTooLong, ConfigError, PatternError, Span, Verdict


DEFAULT_CONFIG = os.environ.get("POBOX_CHECK_CONFIG", "")


def _build_classifier(args: argparse.Namespace) -> Classifier:
    config = load_from_yaml(args.config) if args.config else load_config({})
    if args.remainder_scope:
        config.remainder_scope = args.remainder_scope
    return Classifier(config)


def _spans(spans: list[Span]) -> list[dict]:
    return [{"start": s.start, "end": s.end, "text": s.text} for s in spans]


def _result(address: str, verdict: Verdict, *, relaxed: bool, explain: bool) -> dict:
    out = {
        "address": address,
        "pobox": verdict.relaxed if relaxed else verdict.strict,
        "mode": "relaxed" if relaxed else "strict",
    }
    if explain:
        out.update({
            "blacklist": _spans(verdict.blacklist),
            "whitelist": _spans(verdict.whitelist),
            "neutralized": _spans(verdict.neutralized),
            "remainder": verdict.remainder,
        })
    return out


def cmd_check(args: argparse.Namespace, classifier: Classifier) -> None:
    """Classify addresses from the command line or stdin."""
    if args.addresses:
        addresses = args.addresses
    else:
        addresses = (line.rstrip("\n") for line in sys.stdin)

    # one output line per input line, blank and rejected ones included
    for address in addresses:
        try:
            verdict = classifier.explain(address)
        except AddressTooLong as e:
            result = {"address": address, "pobox": None, "error": str(e)}
        else:
            result = _result(address, verdict, relaxed=args.relaxed, explain=args.explain)
        json.dump(result, sys.stdout, ensure_ascii=False)
        sys.stdout.write("\n")


def cmd_patterns(args: argparse.Namespace, classifier: Classifier) -> None:
    """Dump the active pattern lists as JSON."""
    json.dump(
        {
            "blacklist": list(classifier.blacklist),
            "whitelist": list(classifier.whitelist),
            "remainder_scope": classifier.config.remainder_scope,
        },
        sys.stdout,
        indent=2,
        ensure_ascii=False,
    )
    sys.stdout.write("\n")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="pobox-check",
        description="Tell P.O.-box addresses from deliverable street addresses",
    )
    parser.add_argument("--config", default=DEFAULT_CONFIG, help="YAML config path")
    parser.add_argument(
        "--remainder-scope", choices=REMAINDER_SCOPES, default=None,
        help="Strict-mode remainder check: text before the box, or the whole address",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")

    sub = parser.add_subparsers(dest="command", required=True)
    check = sub.add_parser("check", help="Classify addresses (args or stdin lines)")
    check.add_argument("addresses", nargs="*", help="Addresses to classify")
    check.add_argument("--relaxed", action="store_true", help="Any whitelist hit accepts")
    check.add_argument("--explain", action="store_true", help="Include matched spans")
    sub.add_parser("patterns", help="Dump active pattern lists")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        classifier = _build_classifier(args)
    except (ConfigError, PatternError, OSError) as e:
        parser.exit(2, f"pobox-check: {e}\n")

    cmds = {
        "check": cmd_check,
        "patterns": cmd_patterns,
    }
    cmds[args.command](args, classifier)


if __name__ == "__main__":
    main()
