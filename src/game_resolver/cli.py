"""
Command-line interface for the game resolver.

Provides commands to sync the local catalog, resolve titles and run the
background service.
"""

import asyncio
import json
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from game_resolver.config import LoggingConfig, get_settings
from game_resolver.logger import get_logger, setup_logging

if TYPE_CHECKING:
    from game_resolver.app import GameResolverService

logger = get_logger(__name__, component="cli")


class CLIOutput(BaseModel):
    """Structured output for CLI commands."""

    success: bool
    command: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    data: dict[str, Any] | list[Any] | None = None
    error: str | None = None


def print_json(output: CLIOutput) -> None:
    """Print output as formatted JSON."""
    print(json.dumps(output.model_dump(), indent=2, default=str))


@asynccontextmanager
async def one_shot_service() -> AsyncIterator["GameResolverService"]:
    """Open the service for a single command, without the background timers."""
    from game_resolver.app import GameResolverService

    service = GameResolverService()
    await service.start(schedule=False)
    try:
        yield service
    finally:
        await service.stop()


async def cmd_test_config() -> None:
    """Test configuration loading."""
    settings = get_settings()

    output = CLIOutput(
        success=True,
        command="test-config",
        data={
            "environment": settings.environment,
            "steam_app_list_url": settings.steam.app_list_url,
            "steam_store_url": settings.steam.store_url,
            "steam_requests_per_minute": settings.steam.requests_per_minute,
            "api_key_configured": bool(settings.steam.api_key.get_secret_value()),
            "catalog_database_url": settings.catalog.database_url,
            "catalog_refresh_interval_days": settings.catalog.refresh_interval_days,
            "catalog_prune_missing": settings.catalog.prune_missing,
            "resolver": settings.resolver.model_dump(),
            "cache": settings.cache.model_dump(),
        },
    )
    print_json(output)


async def cmd_sync(force: bool = False) -> None:
    """Run one catalog sync (only if due unless forced)."""
    from game_resolver.ingestion.sync import SyncOutcome

    logger.info("Running catalog sync", force=force)

    async with one_shot_service() as service:
        report = await service.sync(force=force)

    if report is None:
        output = CLIOutput(success=True, command="sync", data={"outcome": "not_due"})
    else:
        output = CLIOutput(
            success=report.outcome is not SyncOutcome.FAILED,
            command="sync",
            data=report.to_dict(),
            error=report.error,
        )
    print_json(output)


async def cmd_resolve(query: str) -> None:
    """Resolve a free-text title against the local catalog."""
    async with one_shot_service() as service:
        outcome = await service.resolve(query)

    print_json(CLIOutput(success=True, command="resolve", data=outcome.to_dict()))


async def cmd_lookup(query: str) -> None:
    """Resolve a title, then fetch player count, reviews and store details."""
    async with one_shot_service() as service:
        lookup = await service.lookup(query)

    print_json(CLIOutput(success=True, command="lookup", data=lookup.to_dict()))


async def cmd_stats() -> None:
    """Show catalog size and last sync time."""
    async with one_shot_service() as service:
        stats = await service.stats()

    print_json(CLIOutput(success=True, command="stats", data=stats))


async def cmd_run() -> None:
    """Start the sync and sweep timers and block until interrupted."""
    from game_resolver.app import GameResolverService

    async with GameResolverService():
        logger.info("Game resolver running, press Ctrl+C to stop")
        await asyncio.Event().wait()


def print_usage() -> None:
    """Print CLI usage information."""
    usage = """
Game Resolver CLI
=================

Usage: game-resolver <command> [arguments]

Commands:
  test-config                 Test configuration loading
  sync [--force]              Sync the local catalog if due (always with --force)
  resolve <query...>          Resolve a free-text game title
  lookup <query...>           Resolve a title and fetch players, reviews and details
  stats                       Show catalog size and last sync time
  run                         Run the background sync and cache sweep timers

Examples:
  game-resolver sync --force
  game-resolver resolve gta5
  game-resolver lookup elden ring
"""
    print(usage)


def main() -> None:
    """Main CLI entry point."""
    load_dotenv()
    setup_logging(LoggingConfig())

    if len(sys.argv) < 2:
        print_usage()
        sys.exit(1)

    command = sys.argv[1]
    args = sys.argv[2:]

    try:
        if command == "test-config":
            asyncio.run(cmd_test_config())

        elif command == "sync":
            asyncio.run(cmd_sync(force="--force" in args))

        elif command in ("resolve", "lookup"):
            query = " ".join(args).strip()
            if not query:
                print("Error: query required")
                sys.exit(1)
            if command == "resolve":
                asyncio.run(cmd_resolve(query))
            else:
                asyncio.run(cmd_lookup(query))

        elif command == "stats":
            asyncio.run(cmd_stats())

        elif command == "run":
            asyncio.run(cmd_run())

        elif command in ("help", "--help", "-h"):
            print_usage()

        else:
            print(f"Unknown command: {command}")
            print_usage()
            sys.exit(1)

    except KeyboardInterrupt:
        print("\nInterrupted by user")
        sys.exit(130)
    except Exception as e:
        logger.exception("CLI error", error=str(e))
        output = CLIOutput(
            success=False,
            command=command,
            error=str(e),
        )
        print_json(output)
        sys.exit(1)


if __name__ == "__main__":
    main()
