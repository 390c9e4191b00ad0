#!/usr/bin/env python3
"""
Run a recommendation query against a workspace and print the JSON result

Usage:
    python scripts/recommend.py <workspace_id> assignees "Login fails after reset"
    python scripts/recommend.py <workspace_id> priority "URGENT: production down" -d "details"
    python scripts/recommend.py <workspace_id> response-time --assignee-id user-1
    python scripts/recommend.py <workspace_id> similar "Printer offline" --exclude-id 42 --limit 10
"""
import argparse
import asyncio
import json
from pathlib import Path
from typing import Any, List, Optional

from dotenv import load_dotenv

# Load .env file explicitly
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

from recommender.services.recommendation_service import RecommendationService  # noqa: E402
from recommender.utils.logger import get_logger  # noqa: E402

logger = get_logger(__name__)

COMMANDS = ["assignees", "priority", "response-time", "similar"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Workspace recommendation queries")
    parser.add_argument("workspace_id", help="Workspace identifier")
    parser.add_argument("command", choices=COMMANDS, help="Query to run")
    parser.add_argument("title", nargs="?", default=None, help="Ticket title")
    parser.add_argument("-d", "--description", default=None, help="Ticket description")
    parser.add_argument("--assignee-id", default=None, help="Assignee filter (response-time)")
    parser.add_argument("--exclude-id", default=None, help="Ticket to leave out (similar)")
    parser.add_argument("--limit", type=int, default=5, help="Maximum results (assignees, similar)")
    return parser


def to_json(result: Any) -> str:
    """Serialize a result model or list of models with API field names"""
    if isinstance(result, list):
        payload = [item.model_dump(by_alias=True, mode="json") for item in result]
    else:
        payload = result.model_dump(by_alias=True, mode="json")
    return json.dumps(payload, ensure_ascii=False, indent=2)


async def run(args: argparse.Namespace, service: Optional[RecommendationService] = None) -> Any:
    service = service or RecommendationService()

    if args.command == "response-time":
        return await service.estimate_response_time(args.workspace_id, args.title, args.assignee_id)

    if not args.title:
        raise SystemExit(f"'{args.command}' requires a title")

    if args.command == "assignees":
        return await service.recommend_assignees(
            args.workspace_id, args.title, args.description, args.limit
        )
    if args.command == "priority":
        return await service.recommend_priority(args.workspace_id, args.title, args.description)
    return await service.find_similar(
        args.workspace_id, args.title, args.description, args.exclude_id, args.limit
    )


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    logger.info(f"Running '{args.command}' for workspace {args.workspace_id}")
    result = asyncio.run(run(args))
    print(to_json(result))


if __name__ == "__main__":
    main()
