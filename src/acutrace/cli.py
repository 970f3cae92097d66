import argparse
import json
import sys
from pathlib import Path

from acutrace.config import settings
from acutrace.core.exceptions import AnalyticsError
from acutrace.services.dashboard import DashboardService


def analyze(results_path: str, criteria_path: str | None = None) -> dict:
    payload = json.loads(Path(results_path).read_text(encoding="utf-8"))
    criteria = None
    if criteria_path:
        criteria = json.loads(Path(criteria_path).read_text(encoding="utf-8"))

    view = DashboardService().build(payload, criteria)
    return view.model_dump(mode="json")


def serve() -> None:
    import uvicorn

    uvicorn.run("acutrace.main:app", host=settings.host, port=settings.port)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="acutrace", description="Statement analytics dashboard")
    commands = parser.add_subparsers(dest="command", required=True)

    analyze_cmd = commands.add_parser("analyze", help="Build the dashboard view for a results file")
    analyze_cmd.add_argument("results", help="Analysis results JSON file")
    analyze_cmd.add_argument("criteria", nargs="?", help="Optional filter criteria JSON file")

    commands.add_parser("serve", help="Run the HTTP API")
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point.

    Returns 0 on success and 1 on any input or payload error. Usage errors
    exit with status 2 through argparse.
    """
    args = build_parser().parse_args(argv)

    if args.command == "serve":
        serve()
        return 0

    if not Path(args.results).exists():
        print(f"Error: File not found: {args.results}", file=sys.stderr)
        return 1

    try:
        result = analyze(args.results, args.criteria)
    except json.JSONDecodeError as e:
        print(f"Error: Invalid JSON: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except AnalyticsError as e:
        print(f"Error: {e.error_code}", file=sys.stderr)
        return 1

    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
