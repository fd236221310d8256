"""CLI entry point: python -m rewardledger.mcp [ledger_file]"""

from __future__ import annotations

import sys


def main() -> None:
    from rewardledger.config import DATA_FILE
    from rewardledger.logging_setup import setup_logger

    path = sys.argv[1] if len(sys.argv) > 1 else DATA_FILE
    # stdout carries the MCP protocol; logs go to the rotating file only
    setup_logger()

    from rewardledger.cli import build_engine
    from rewardledger.mcp.server import create_server

    server = create_server(build_engine(path))
    server.run(transport="stdio")


if __name__ == "__main__":
    main()
