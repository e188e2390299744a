import argparse
import base64
import json
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from . import __version__
from .log import configure_logging
from .runtime import HandlerError, invoke, load_handler
from .utils import get_settings, read_json


def _parse_header(raw: str) -> tuple:
    name, sep, value = raw.partition(":")
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f"Invalid header {raw!r}; expected 'Name: value'")
    return name.strip(), value.strip()


def build_event(args: argparse.Namespace) -> Dict[str, Any]:
    if args.event:
        return read_json(Path(args.event))
    event: Dict[str, Any] = {
        "method": args.method,
        "path": args.path,
        "headers": dict(args.header or []),
    }
    if args.data is not None:
        if args.binary:
            event["body"] = base64.b64encode(args.data.encode("utf-8")).decode("ascii")
            event["encoding"] = "base64"
        else:
            event["body"] = args.data
    return event


def cmd_invoke(args: argparse.Namespace) -> int:
    settings = get_settings()
    configure_logging(args.log_level or settings.log_level)
    entrypoint: Optional[str] = args.entrypoint or settings.handler
    if not entrypoint:
        print("No handler given; pass ENTRYPOINT or set FNEVENT_HANDLER", file=sys.stderr)
        return 2
    try:
        handler = load_handler(entrypoint)
    except HandlerError as e:
        print(str(e), file=sys.stderr)
        return 2
    try:
        event = build_event(args)
    except (OSError, ValueError) as e:
        print(f"Cannot read event: {e}", file=sys.stderr)
        return 2
    print(json.dumps(invoke(handler, event), indent=2 if args.pretty else None))
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="fnevent", description="Invoke HTTP handlers with serverless invocation events")
    p.add_argument("--version", action="version", version=f"fnevent {__version__}")
    sub = p.add_subparsers(dest="cmd", required=True)

    i = sub.add_parser("invoke", help="Invoke a handler with an event and print the response event")
    i.add_argument("entrypoint", nargs="?", help="'path/to/file.py:func' or 'package.module:func'")
    i.add_argument("-X", "--method", default="GET")
    i.add_argument("--path", default="/")
    i.add_argument("-H", "--header", action="append", type=_parse_header, help="Request header 'Name: value'")
    i.add_argument("-d", "--data", default=None, help="Request body")
    i.add_argument("--binary", action="store_true", help="Send the body base64-encoded")
    i.add_argument("--event", default=None, help="Read the whole event from a JSON file")
    i.add_argument("--log-level", default=None)
    i.add_argument("--pretty", action="store_true")
    i.set_defaults(func=cmd_invoke)

    return p


def main(argv: Optional[list] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
