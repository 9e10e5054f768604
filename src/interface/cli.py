"""Command line entry point: run one engine tool on JSON arguments."""

from __future__ import annotations

import argparse
import json
import sys
from datetime import datetime
from pathlib import Path
from typing import Iterable

from application.tool_executor import ToolExecutor
from domain.schemas import ToolContext, ToolRequest
from infrastructure.settings import get_settings
from tools.registry import registry


def build_executor() -> ToolExecutor:
    import tools  # noqa: F401

    return ToolExecutor(registry)


def build_context() -> ToolContext:
    settings = get_settings()
    return ToolContext(
        user_id="u_cli",
        ledger_id=settings.ledger_id,
        timezone=settings.timezone,
        base_currency=settings.base_currency,
    )


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run a MyBudget engine tool on JSON arguments.")
    parser.add_argument("tool", nargs="?", help="Tool name, e.g. budget.month_state.")
    parser.add_argument(
        "args_file",
        nargs="?",
        type=Path,
        help="JSON file holding the tool arguments. Reads stdin when omitted or '-'.",
    )
    parser.add_argument("--list", action="store_true", help="List registered tools and their argument schemas.")
    parser.add_argument("--indent", type=int, default=2, help="JSON output indentation (default: 2).")
    return parser.parse_args(list(argv) if argv is not None else None)


def _read_args(args_file: Path | None) -> dict:
    if args_file is None or str(args_file) == "-":
        text = sys.stdin.read()
    else:
        text = args_file.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    payload = json.loads(text)
    if not isinstance(payload, dict):
        raise ValueError("tool arguments must be a JSON object")
    return payload


def main(argv: Iterable[str] | None = None) -> int:
    options = parse_args(argv)
    executor = build_executor()

    if options.list:
        specs = [
            {"name": spec.name, "description": spec.description, "args_schema": spec.args_schema}
            for spec in registry.list_specs()
        ]
        print(json.dumps(specs, indent=options.indent))
        return 0

    if not options.tool:
        print("error: a tool name is required (see --list)", file=sys.stderr)
        return 2

    try:
        args = _read_args(options.args_file)
    except (OSError, ValueError) as exc:
        print(f"error: could not read tool arguments: {exc}", file=sys.stderr)
        return 2

    request = ToolRequest(
        request_id=f"req_cli_{datetime.now().strftime('%Y%m%d%H%M%S')}",
        tool=options.tool,
        args=args,
        context=build_context(),
    )
    response = executor.run_call(request)
    print(response.model_dump_json(indent=options.indent))
    return 0 if response.ok else 1


if __name__ == "__main__":
    sys.exit(main())
