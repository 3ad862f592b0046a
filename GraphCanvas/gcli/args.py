from __future__ import annotations
import argparse
import os

COMMANDS = ["add-vertex", "add-edge", "render", "latest", "reset"]

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="graphcanvas", description="Client for a running Graph Canvas server.")
    ap.add_argument("command", choices=COMMANDS)
    ap.add_argument("names", nargs="*",
                    help="add-vertex NAME | add-edge FROM TO")

    ap.add_argument("--server", default=os.getenv("GRAPH_SERVER", "http://127.0.0.1:3000"),
                    help="Base URL of the running FastAPI app (default: $GRAPH_SERVER or http://127.0.0.1:3000)")
    ap.add_argument("--out", default="graph.png", help="Where `render` writes PNG bytes (default: graph.png)")
    ap.add_argument("--timeout", type=float, default=30.0)
    return ap
