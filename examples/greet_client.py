#!/usr/bin/env python3
"""Send a few payloads to a tcpgreeter listener and print what comes back.

Usage:
    python examples/greet_client.py --host 127.0.0.1 --port 5000 --message ping --count 3
"""

import argparse
import socket
import sys
import time
from contextlib import closing


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="tcpgreeter demo client")
    parser.add_argument("--host", default="127.0.0.1", help="Listener address (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, required=True, help="Listener TCP port")
    parser.add_argument("--message", default="ping", help="Payload to send")
    parser.add_argument("--count", type=int, default=1, help="How many times to send it")
    parser.add_argument("--interval", type=float, default=0.2, help="Seconds between sends")
    return parser.parse_args()


def main() -> int:
    args = parse_args()

    with closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as sock:
        try:
            sock.connect((args.host, args.port))
        except OSError as exc:
            print(f"[client] failed to connect to {args.host}:{args.port}: {exc}", file=sys.stderr)
            return 1
        sock.settimeout(5.0)

        for _ in range(max(args.count, 1)):
            sock.sendall(args.message.encode())
            reply = sock.recv(4096)
            print(f"[client] reply: {reply.decode(errors='replace')}", end="")
            time.sleep(max(args.interval, 0.0))
        sock.shutdown(socket.SHUT_WR)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
