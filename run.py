#!/usr/bin/env python
"""
Development launcher for the Tag Index MCP server.

    python run.py --tags ~/go/src/myproject
"""
import argparse
import os
import sys
import traceback

src_path = os.path.join(os.path.dirname(os.path.abspath(__file__)), "src")
if src_path not in sys.path:
    sys.path.insert(0, src_path)


def _explain_missing_dependency(error: ModuleNotFoundError) -> None:
    missing = getattr(error, "name", None) or str(error)
    sys.stderr.write(
        f"Missing required dependency: {missing}\n"
        "Install the project first: pip install -e .\n"
    )


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the Tag Index MCP server over stdio")
    parser.add_argument("--tags", help="tag file, or a directory to search upward from for one")
    parser.add_argument("--log-level", help="server log level (default: ERROR)")
    args = parser.parse_args()

    # the server reads its configuration from the environment
    if args.tags:
        os.environ["TAG_INDEX_PATH"] = args.tags
    if args.log_level:
        os.environ["TAG_INDEX_LOG_LEVEL"] = args.log_level

    try:
        from tag_index_mcp.server import main as server_main
    except ModuleNotFoundError as exc:
        _explain_missing_dependency(exc)
        raise SystemExit(1) from exc
    except Exception:
        traceback.print_exc()
        raise SystemExit(1)
    else:
        server_main()


if __name__ == "__main__":
    main()
