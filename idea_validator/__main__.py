"""Main entry point for Idea Validator."""

import argparse
import json
import sys
from dataclasses import asdict
from pathlib import Path

from loguru import logger

from .errors import IdeaValidatorError
from .scoring.layout import ChartLayout
from .scoring.validation import ValidationResult, ingest_validation
from .storage.repository import build_repository
from .utils.config import get_config
from .utils.logger import setup_logging


def run_api():
    """Run the FastAPI server."""
    import uvicorn

    from .api.main import app

    config = get_config()

    logger.info("=" * 80)
    logger.info("Idea Validator API - Starting")
    logger.info("=" * 80)

    uvicorn.run(
        app,
        host=config.api.host,
        port=config.api.port,
        log_level="info",
        log_config=None,
    )


def print_bubbles():
    """Print chart metrics for every stored idea."""
    repo = build_repository(get_config())
    bubbles = repo.bubbles()
    logger.info(f"Derived {len(bubbles)} bubbles")
    print(json.dumps([asdict(b) for b in bubbles], indent=2))


def print_heatmap(selected_id=None):
    """Print the heatmap layout for the stored ideas.

    Args:
        selected_id: Optional id of the bubble to highlight
    """
    repo = build_repository(get_config())
    chart = ChartLayout(scorer=repo.scorer).render(repo.bubbles(), selected_id=selected_id)
    print(json.dumps(asdict(chart), indent=2))


def print_stats():
    """Print the dashboard figures for the stored ideas."""
    repo = build_repository(get_config())
    print(json.dumps(repo.dashboard_stats(), indent=2))


def import_ideas(path: Path) -> int:
    """Import validation results from a JSON export.

    The file may hold a single result or a list of results, most recent
    first, the way the browser client stores its history.

    Args:
        path: JSON file to read

    Returns:
        Number of imported ideas
    """
    config = get_config()
    repo = build_repository(config)

    with open(path, "r") as f:
        payload = json.load(f)

    if not isinstance(payload, list):
        payload = [payload]

    imported = 0
    # Oldest first so the newest ends up on top of the history
    for item in reversed(payload):
        result = ValidationResult.model_validate(item)
        idea = ingest_validation(result, min_idea_length=config.storage.min_idea_length)
        repo.add_idea(idea)
        imported += 1

    logger.info(f"Imported {imported} ideas from {path}")
    return imported


def reset_storage():
    """Clear all stored data."""
    repo = build_repository(get_config())
    repo.reset()


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Idea Validator")

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # API command
    subparsers.add_parser("api", help="Run the API server")

    # Bubbles command
    subparsers.add_parser("bubbles", help="Print chart metrics for stored ideas")

    # Heatmap command
    heatmap_parser = subparsers.add_parser("heatmap", help="Print the heatmap layout")
    heatmap_parser.add_argument("--selected", default=None, help="Idea id to highlight")

    # Stats command
    subparsers.add_parser("stats", help="Print dashboard statistics")

    # Import command
    import_parser = subparsers.add_parser("import", help="Import validation results")
    import_parser.add_argument("file", type=Path, help="JSON file with validation results")

    # Reset command
    subparsers.add_parser("reset", help="Clear all stored data")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    setup_logging()

    try:
        if args.command == "api":
            run_api()
        elif args.command == "bubbles":
            print_bubbles()
        elif args.command == "heatmap":
            print_heatmap(args.selected)
        elif args.command == "stats":
            print_stats()
        elif args.command == "import":
            import_ideas(args.file)
        elif args.command == "reset":
            reset_storage()
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    except IdeaValidatorError as e:
        logger.error(str(e))
        sys.exit(1)
    except Exception as e:
        logger.exception(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
