from __future__ import annotations
import sys

from gcli.args import build_parser
from gcli.server import via_server

ARITY = {"add-vertex": 1, "add-edge": 2}

def main(argv=None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)

    expected = ARITY.get(args.command, 0)
    if len(args.names) != expected:
        ap.print_usage(sys.stderr)
        print(f"error: '{args.command}' takes {expected} name argument(s), got {len(args.names)}",
              file=sys.stderr)
        return 2

    return via_server(args)

if __name__ == "__main__":
    sys.exit(main())
