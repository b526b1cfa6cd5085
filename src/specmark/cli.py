"""CLI for specmark - compile specification sources to cross-referenced HTML."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from . import __version__
from .core.model import Query
from .core.utils import split_for_values
from .document import STDIO, Document
from .errors import SpecmarkError
from .runtime import build_runtime

logger = logging.getLogger(__name__)


def setup_logging(verbose: int) -> None:
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def cmd_spec(args: argparse.Namespace, rt: Any) -> int:
    """Compile a source document."""
    doc = Document(args.infile, rt).preprocess()
    out = doc.finish(args.outfile)
    if out is not None and not args.quiet:
        print(f"Wrote {out}")
    return 0


def cmd_refs(args: argparse.Namespace, rt: Any) -> int:
    """Look up a link text in the anchor data."""
    query = Query(
        link_type=args.type,
        link_text=args.text,
        status=args.status,
        for_values=split_for_values(args.for_) if args.for_ is not None else None,
        explicit_for=args.for_ is not None,
    )
    ref = rt.new_reference_manager().get_reference(query, allow_inexact=not args.exact)

    if args.json:
        print(json.dumps({
            "type": ref.link_type,
            "url": ref.url,
            "status": ref.status,
            "spec": ref.spec,
            "for": list(ref.for_values),
        }))
    else:
        print(f"{ref.url}\t{ref.link_type}\t{ref.spec or '-'}\t{ref.status}")
    return 0


def cmd_biblio(args: argparse.Namespace, rt: Any) -> int:
    """Print a biblio entry, following aliases."""
    entry = rt.new_biblio_manager().get_biblio(args.key)
    if entry is None:
        print(f"Error: No biblio entry for '{args.key}'", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(entry.to_dict(), ensure_ascii=False))
        return 0

    print(entry.title or entry.data or entry.link_text)
    for label, value in (("url", entry.url), ("date", entry.date), ("status", entry.status)):
        if value:
            print(f"  {label}: {value}")
    if entry.authors:
        print(f"  authors: {'; '.join(entry.authors)}")
    return 0


def cmd_watch(args: argparse.Namespace, rt: Any) -> int:
    """Rebuild the document on every change."""
    try:
        from .watch import watch_document
    except ImportError as e:
        print(
            "Error: watchdog library not installed. Install with: pip install specmark[watch]",
            file=sys.stderr,
        )
        print(f"Details: {e}", file=sys.stderr)
        return 1

    source = Path(args.infile)

    def build() -> Path | None:
        # Settings may have changed too, so every build reloads them.
        fresh = build_runtime(doc_path=source, config_path=args.config, data_dir=args.data_dir)
        return Document(source, fresh).preprocess().finish(args.outfile)

    return watch_document(
        source,
        build,
        config_path=rt.config.path,
        debounce_ms=args.debounce_ms,
    )


def cmd_serve(args: argparse.Namespace, rt: Any) -> int:
    """Start local JSON API server."""
    try:
        import uvicorn

        from .api.app import create_app, generate_token
    except ImportError as e:
        print(
            "Error: API dependencies not installed. "
            "Install with: pip install specmark[api]",
            file=sys.stderr,
        )
        print(f"Details: {e}", file=sys.stderr)
        return 1

    token_arg = args.token or rt.config.serve.token or "none"
    if token_arg == "auto":
        token = generate_token()
        print(f"Generated bearer token: {token}")
        print(f"Use in requests: Authorization: Bearer {token}")
    elif token_arg == "none":
        token = None
    else:
        token = token_arg

    host = args.host or rt.config.serve.host
    port = args.port or rt.config.serve.port

    app = create_app(rt, token=token)
    print(f"Serving on http://{host}:{port}")
    uvicorn.run(app, host=host, port=port, log_level="warning")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="specmark", description="Compile specification sources to cross-referenced HTML"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: search cwd/specmark.toml, then the document's directory)",
    )
    parser.add_argument(
        "--data-dir",
        dest="data_dir",
        type=Path,
        default=None,
        help="Directory holding anchors/ and biblio/ data (overrides config)",
    )
    parser.add_argument(
        "-v", "--verbose", action="count", default=0, help="More logging (-v info, -vv debug)"
    )
    parser.add_argument("-q", "--quiet", action="store_true", help="Minimize output")
    parser.add_argument("--json", action="store_true", help="Machine-readable output")

    subparsers = parser.add_subparsers(dest="cmd", required=True)

    # spec command
    parser_spec = subparsers.add_parser("spec", help="Compile a source document to HTML")
    parser_spec.add_argument("infile", help="Source file (.bs), or - for stdin")
    parser_spec.add_argument(
        "outfile", nargs="?", default=None,
        help="Output file, or - for stdout (default: next to the source)",
    )

    # refs command
    parser_refs = subparsers.add_parser("refs", help="Resolve a link text against the anchor data")
    parser_refs.add_argument("text", help="Link text")
    parser_refs.add_argument("--type", default="dfn", help="Link type (default: dfn)")
    parser_refs.add_argument("--for", dest="for_", default=None, help="Comma-separated for-values, or /")
    parser_refs.add_argument("--status", default=None, help="Required status (default: from config)")
    parser_refs.add_argument("--exact", action="store_true", help="Disable inflected matching")

    # biblio command
    parser_biblio = subparsers.add_parser("biblio", help="Show a bibliography entry")
    parser_biblio.add_argument("key", help="Citation key")

    # watch command
    parser_watch = subparsers.add_parser("watch", help="Rebuild whenever the source changes")
    parser_watch.add_argument("infile", help="Source file")
    parser_watch.add_argument("outfile", nargs="?", default=None, help="Output file")
    parser_watch.add_argument(
        "--debounce-ms", type=int, default=150,
        help="Debounce window in milliseconds (default: 150)"
    )

    # serve command
    parser_serve = subparsers.add_parser("serve", help="Start local JSON API server")
    parser_serve.add_argument("--host", default=None, help="Host to bind to (default: 127.0.0.1)")
    parser_serve.add_argument("--port", type=int, default=None, help="Port to bind to (default: 8000)")
    parser_serve.add_argument(
        "--token", default=None,
        help="Bearer token (auto|<string>|none, default: none)"
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    handlers = {
        "spec": cmd_spec,
        "refs": cmd_refs,
        "biblio": cmd_biblio,
        "watch": cmd_watch,
        "serve": cmd_serve,
    }
    handler = handlers.get(args.cmd)
    if handler is None:
        print(f"Unknown command: {args.cmd}", file=sys.stderr)
        sys.exit(1)

    try:
        infile = getattr(args, "infile", None)
        rt = build_runtime(
            doc_path=Path(infile) if infile and infile != STDIO else None,
            config_path=args.config,
            data_dir=args.data_dir,
        )
        exit_code = handler(args, rt)
    except SpecmarkError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
