from __future__ import annotations
import sys
from pathlib import Path

import requests

from gcli.printers import print_latest, print_saved

def via_server(args) -> int:
    """
    Talks to the running FastAPI server.
    Returns a process exit code: 0 ok, 1 server rejected the request, 2 unreachable.
    """
    base = args.server.rstrip("/")
    try:
        if args.command == "add-vertex":
            r = requests.post(f"{base}/addVertice", json={"name": args.names[0]}, timeout=args.timeout)
        elif args.command == "add-edge":
            r = requests.post(f"{base}/addEdge", json={"from": args.names[0], "to": args.names[1]},
                              timeout=args.timeout)
        elif args.command == "reset":
            r = requests.post(f"{base}/reset", timeout=args.timeout)
        elif args.command == "latest":
            r = requests.get(f"{base}/latestImage", timeout=args.timeout)
        else:
            r = requests.post(f"{base}/graph", timeout=args.timeout)
    except requests.RequestException as e:
        print(f"[remote {args.command}] {e}", file=sys.stderr)
        return 2

    if r.status_code >= 400:
        print(f"[remote {args.command}] HTTP {r.status_code}: {r.text}", file=sys.stderr)
        return 1

    if args.command == "latest":
        print_latest(r.json())
    elif args.command == "render":
        if r.headers.get("content-type", "").startswith("image/png"):
            Path(args.out).write_bytes(r.content)
            print_saved(args.out, len(r.content), r.headers.get("x-image-path"))
        else:
            print("Graph unchanged; latest image:")
            print_latest(r.json())
    else:
        print(r.text)
    return 0
