"""Command-line entry: ``tcpgreeter <port>``.

Binds a greeting listener on all interfaces at <port> and runs until
interrupted. A server error (port in use, invalid port) is logged to stderr
and the process keeps running without a listener.
"""

import asyncio
import sys
from typing import List, Optional

from tcpgreeter.config import ConfigError, ListenerConfig
from tcpgreeter.listener import Listener
from tcpgreeter.logger import get_logger

USAGE = "Usage: tcpgreeter <port>"


async def _serve(port_arg: str) -> None:
    try:
        cfg = ListenerConfig.from_port(port_arg, allow_ephemeral=False)
    except ConfigError as e:
        get_logger().error(f"Server error: {e}")
        await asyncio.Event().wait()
        return

    listener = Listener(cfg)
    try:
        if await listener.start():
            await listener.serve_forever()
        else:
            await asyncio.Event().wait()
    finally:
        await listener.close()


def main(argv: Optional[List[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 1:
        print(USAGE)
        return 1
    try:
        asyncio.run(_serve(args[0]))
    except KeyboardInterrupt:
        pass
    return 0
