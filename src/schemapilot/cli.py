# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""SchemaPilot CLI: generate, hint and lint commands.

Usage:
    schemapilot generate URL --html page.html [--hint TEXT] [--text FILE] [--render-mode MODE] [-o FILE]
    schemapilot hint TEXT
    schemapilot lint FILE

Pages are read from local files (or stdin with ``--html -``); the CLI never
touches the network.  JSON goes to stdout (or ``-o``), logs and errors to
stderr.

Exit codes: 0 success, 1 failure or blocking lint errors, 2 invalid input.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from .config import Settings, load_settings
from .errors import InvalidInputError
from .vocabulary import RenderMode

logger = logging.getLogger(__name__)

EXIT_FAILURE = 1
EXIT_INVALID_INPUT = 2


def _read_input(path_str: str, what: str) -> str:
    """Read a UTF-8 file, or stdin for ``-``."""
    if path_str == "-":
        return sys.stdin.read()
    path = Path(path_str)
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise InvalidInputError(f"Cannot read {what} file {path_str}: {e.strerror or e}", field=what) from e


def _emit(payload: Any, args: argparse.Namespace, settings: Settings) -> None:
    text = json.dumps(payload, indent=settings.indent, ensure_ascii=False)
    output = getattr(args, "output", None)
    if output:
        path = Path(output)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text + "\n", encoding="utf-8")
        print(f"Saved to {path}", file=sys.stderr)
    else:
        print(text)


def cmd_generate(args: argparse.Namespace, settings: Settings) -> int:
    """Generate JSON-LD for a page read from disk."""
    from .normalizer import normalize_html
    from .pipeline import generate

    if args.html is None and args.text is None:
        raise InvalidInputError("generate needs --html FILE (or --text FILE); network fetching is not built in")
    if args.html == "-" and args.text == "-":
        raise InvalidInputError("--html and --text cannot both read stdin")

    html = _read_input(args.html, "html") if args.html is not None else ""
    text = _read_input(args.text, "text") if args.text is not None else None

    def fetch_local(url: str, *, render_mode: RenderMode):
        if render_mode is RenderMode.HEADLESS:
            logger.info("Headless rendering is not available for local files; using the HTML as given")
        return normalize_html(url, html, text=text)

    render_mode = args.render_mode or settings.render_mode
    request = {
        "url": args.url,
        "hint": args.hint or "",
        "options": {"renderMode": render_mode} if render_mode else {},
    }
    response = generate(request, fetch_local)
    _emit(response.jsonld if args.jsonld_only else response.to_dict(), args, settings)
    return 0


def cmd_hint(args: argparse.Namespace, settings: Settings) -> int:
    """Print the directive a hint string parses to."""
    from .hint_parser import parse_hint

    _emit(parse_hint(" ".join(args.text)).to_dict(), args, settings)
    return 0


def cmd_lint(args: argparse.Namespace, settings: Settings) -> int:
    """Validate a JSON-LD document; exit 1 when it has blocking errors."""
    from .jsonld import validate

    raw = _read_input(args.file, "jsonld")
    try:
        document = json.loads(raw)
    except json.JSONDecodeError as e:
        raise InvalidInputError(f"{args.file} is not valid JSON: {e.msg} (line {e.lineno})", field="jsonld") from e

    result = validate(document)
    _emit(result.to_dict(), args, settings)
    return 0 if result.schema_org_valid else EXIT_FAILURE


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate and lint schema.org JSON-LD for web pages",
        prog="schemapilot",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--json-logs", action="store_true", help="Emit logs as JSON lines on stderr")
    subparsers = parser.add_subparsers(dest="command", required=True)

    _generate_epilog = """\
examples:
  %(prog)s https://shop.example/p/1 --html page.html
  %(prog)s https://example.com/blog/x --html page.html --hint "BlogPosting, strict"
  curl -s https://example.com | %(prog)s https://example.com --html - -o schema.json
"""
    p_generate = subparsers.add_parser(
        "generate",
        help="Generate JSON-LD for a page",
        epilog=_generate_epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p_generate.add_argument("url", metavar="URL", help="URL the page was fetched from")
    p_generate.add_argument("--hint", type=str, default="", help="Free-text steering hint")
    p_generate.add_argument("--html", type=str, metavar="FILE", help="Page HTML file, or - for stdin")
    p_generate.add_argument("--text", type=str, metavar="FILE", help="Visible page text (extracted from HTML if omitted)")
    p_generate.add_argument(
        "--render-mode",
        type=str,
        choices=[m.value for m in RenderMode],
        help="Overrides the hint and SCHEMAPILOT_RENDER_MODE",
    )
    p_generate.add_argument("--jsonld-only", action="store_true", help="Print only the JSON-LD document")
    p_generate.add_argument("-o", "--output", type=str, metavar="FILE", help="Write JSON to FILE instead of stdout")

    p_hint = subparsers.add_parser("hint", help="Show how a hint is parsed")
    p_hint.add_argument("text", nargs="+", help="Hint text")

    p_lint = subparsers.add_parser("lint", help="Validate a JSON-LD document")
    p_lint.add_argument("file", metavar="FILE", help="JSON-LD file, or - for stdin")

    return parser


_COMMANDS = {"generate": cmd_generate, "hint": cmd_hint, "lint": cmd_lint}


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = load_settings()

    from .logging_config import configure

    configure(
        json_output=args.json_logs or settings.log_json,
        level="DEBUG" if args.verbose else settings.log_level,
    )

    try:
        code = _COMMANDS[args.command](args, settings)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(130)
    except Exception as e:
        from .problem_details import from_exception

        problem = from_exception(e, instance=args.command)
        print(problem.to_cli_text(), file=sys.stderr)
        if args.verbose:
            import traceback

            traceback.print_exc(file=sys.stderr)
        sys.exit(EXIT_INVALID_INPUT if isinstance(e, InvalidInputError) else EXIT_FAILURE)
    sys.exit(code)


if __name__ == "__main__":
    main()
