"""NorthStar command line: data setup, API server, MCP server and quick lookups."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date

from northstar import (
    PERIOD_TYPES,
    Config,
    build_goal_tree,
    create_default_goal,
    current_period,
    ensure_data_dirs,
    period_hierarchy,
    period_to_path,
    read_goal,
    today,
    write_goal,
)

logger = logging.getLogger(__name__)


# ── Commands ──────────────────────────────────────────────────

def cmd_init(config: Config, args: argparse.Namespace) -> int:
    root = config.data_root
    for path in ensure_data_dirs(root):
        logger.info("Created %s", path)

    vision = current_period("vision", today=today(root))
    path = period_to_path(vision)
    if read_goal(path, root) is not None:
        logger.info("Vision %s already exists, leaving it untouched", path)
        return 0
    fm, content = create_default_goal(vision, root=root)
    if not write_goal(path, fm, content, root):
        logger.error("Could not write %s", path)
        return 1
    logger.info("Wrote starter vision %s", path)
    return 0


def cmd_api(config: Config, args: argparse.Namespace) -> int:
    from ui.app import run

    run(config)
    return 0


def cmd_mcp(config: Config, args: argparse.Namespace) -> int:
    from northstar.agent_tools import create_server

    mcp = create_server(config)
    logger.info("Starting MCP server on port %s...", config.mcp_port)
    mcp.run(transport="sse", host="0.0.0.0", port=config.mcp_port)
    return 0


def cmd_tree(config: Config, args: argparse.Namespace) -> int:
    year = args.year or today(config.data_root).year
    tree = build_goal_tree(year, config.data_root)
    print(json.dumps(tree.to_dict(), indent=2, ensure_ascii=False))
    return 0


def cmd_period(config: Config, args: argparse.Namespace) -> int:
    anchor = date.fromisoformat(args.date) if args.date else None
    period = current_period(args.type, anchor, today(config.data_root))
    out = {
        "period": period.to_dict(),
        "path": period_to_path(period),
        "hierarchy": [p.label for p in period_hierarchy(period, today(config.data_root))],
    }
    print(json.dumps(out, indent=2, ensure_ascii=False))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="northstar", description="NorthStar goal planner")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("init", help="Create the data directories and a starter vision")
    p.set_defaults(func=cmd_init)

    p = sub.add_parser("api", help="Serve the HTTP JSON API")
    p.set_defaults(func=cmd_api)

    p = sub.add_parser("mcp", help="Run the MCP server for the coaching agent (SSE)")
    p.add_argument(
        "--read-only",
        action="store_true",
        help="Run in read-only mode (disable write tools)",
    )
    p.set_defaults(func=cmd_mcp)

    p = sub.add_parser("tree", help="Print the goal tree of a year as JSON")
    p.add_argument("--year", type=int, default=None, help="Year (default: current)")
    p.set_defaults(func=cmd_tree)

    p = sub.add_parser("period", help="Show the period containing a date")
    p.add_argument("type", choices=PERIOD_TYPES)
    p.add_argument("--date", default=None, help="YYYY-MM-DD (default: today)")
    p.set_defaults(func=cmd_period)

    return parser


def main(argv: list[str] | None = None) -> int:
    # Configure logging here to avoid side effects on import
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    args = build_parser().parse_args(argv)
    read_only = getattr(args, "read_only", False)
    try:
        config = Config.from_env(read_only_override=True if read_only else None)
    except ValueError as e:
        logger.error("%s", e)
        return 2

    if args.command in ("api", "mcp"):
        logger.info("=" * 50)
        logger.info("NorthStar starting...")
        logger.info("  NORTHSTAR_ROOT: %s", config.data_root)
        logger.info("  API_PORT:       %s", config.api_port)
        logger.info("  MCP_PORT:       %s", config.mcp_port)
        logger.info("  READ_ONLY:      %s", config.read_only)
        logger.info("=" * 50)

    try:
        return args.func(config, args)
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
        return 0
    except ValueError as e:
        logger.error("%s", e)
        return 2


if __name__ == "__main__":
    sys.exit(main())
