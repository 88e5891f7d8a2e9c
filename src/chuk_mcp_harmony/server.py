#!/usr/bin/env python3
"""
Entry point for the CHUK Harmony MCP Server.

Supports the stdio and http transports. Project presets are read from
./presets unless --presets-dir (or CHUK_HARMONY_PRESETS_DIR) points
elsewhere.
"""

import argparse
import asyncio
import logging
import os

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Command-line options for the server."""
    parser = argparse.ArgumentParser(description="CHUK Harmony MCP Server")
    parser.add_argument(
        "--transport",
        choices=["stdio", "http"],
        default="stdio",
        help="Transport mode (default: stdio)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="HTTP port (only for http transport)",
    )
    parser.add_argument(
        "--presets-dir",
        default=None,
        help="Directory holding project presets (default: ./presets)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def main() -> None:
    """Main entry point with transport detection."""
    args = build_parser().parse_args()

    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)
    if args.presets_dir:
        os.environ["CHUK_HARMONY_PRESETS_DIR"] = args.presets_dir

    # Import after argument parsing so the presets directory is honoured
    from chuk_mcp_harmony.async_server import mcp

    if args.transport == "stdio":
        logger.info("Starting CHUK Harmony MCP Server (stdio)")
        asyncio.run(mcp.run_stdio())
    else:
        logger.info(f"Starting CHUK Harmony MCP Server (http:{args.port})")
        asyncio.run(mcp.run_http(port=args.port))


if __name__ == "__main__":
    main()
