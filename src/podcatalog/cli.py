"""Command-line interface for Podcatalog.

Provides commands for preparing the database, browsing the catalog
locally and running the HTTP API.
"""

import argparse
import sys

import structlog

from podcatalog.config import get_settings
from podcatalog.logging import setup_logging
from podcatalog.storage import CatalogStore, StoreError

logger = structlog.get_logger(__name__)


def cmd_serve(args: argparse.Namespace) -> int:
    """Initialize the store, then start the API server."""
    import uvicorn

    from podcatalog.api import create_app

    settings = get_settings()
    setup_logging(log_level=settings.log_level, json_format=settings.log_json)

    store = CatalogStore()
    try:
        store.ping()
        store.initialize()
    except StoreError:
        logger.exception("Store initialization failed, not starting server")
        store.close()
        return 1

    host = args.host or settings.host
    port = args.port or settings.port
    logger.info("Server starting", host=host, port=port)

    # uvicorn installs its own loggers; keep ours for the app
    try:
        uvicorn.run(create_app(store, settings), host=host, port=port, log_config=None)
    finally:
        store.close()
    return 0


def cmd_init_db(args: argparse.Namespace) -> int:
    """Create the schema and seed an empty database."""
    setup_logging(log_level="WARNING")

    store = CatalogStore()
    try:
        seeded = store.initialize()
        counts = store.counts()
        users = store.list_users()
    except StoreError as e:
        print(f"Error: {e}")
        return 1
    finally:
        store.close()

    print("\nSeed data inserted." if seeded else "\nUsers already present, seed skipped.")
    for table, count in counts.items():
        print(f"  {table:<10} {count}")

    if users:
        print("\nUsers:")
        for user in users:
            print(f"  {user.id}. {user.username} <{user.email}>")

    return 0


def cmd_list(args: argparse.Namespace) -> int:
    """List all podcasts in the catalog."""
    setup_logging(log_level="WARNING")

    store = CatalogStore()
    try:
        podcasts = store.list_podcasts()
    except StoreError as e:
        print(f"Error: {e}")
        return 1
    finally:
        store.close()

    if not podcasts:
        print("\nNo podcasts found.")
        print("Run: podcatalog init-db")
        return 0

    print(f"\n{'=' * 60}")
    print(f"  PODCASTS ({len(podcasts)})")
    print(f"{'=' * 60}")
    for podcast in podcasts:
        print(f"\n  ID:      {podcast.id}")
        print(f"  Title:   {podcast.title}")
        print(f"  Author:  {podcast.author_name}")
        print(f"  Created: {podcast.created_at:%Y-%m-%d %H:%M}")

    return 0


def cmd_show(args: argparse.Namespace) -> int:
    """Show a podcast and its episodes."""
    setup_logging(log_level="WARNING")

    store = CatalogStore()
    try:
        podcast = store.get_podcast(args.podcast_id)
    except StoreError as e:
        print(f"Error: {e}")
        return 1
    finally:
        store.close()

    if podcast is None:
        print(f"\nPodcast not found: {args.podcast_id}")
        print("Run: podcatalog list  (to see available IDs)")
        return 1

    print(f"\n{podcast.title}")
    print(f"by {podcast.author_name}\n")
    print(podcast.description)
    print(f"\nEpisodes: {len(podcast.episodes)}\n")

    for i, ep in enumerate(podcast.episodes, 1):
        print(f"{i}. {ep.title}")
        print(f"   Published: {ep.published_at:%Y-%m-%d}")
        print(f"   Duration: {ep.duration // 60}m")
        print(f"   Audio: {ep.audio_url}")
        print()

    return 0


def main() -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="podcatalog",
        description="Podcast catalog - read-only HTTP API over a relational store",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # serve command
    sv_parser = subparsers.add_parser("serve", help="Initialize the database and start the API")
    sv_parser.add_argument("--host", help="Host to bind (default: HOST or 0.0.0.0)")
    sv_parser.add_argument("--port", "-p", type=int, help="Port (default: PORT or 3000)")
    sv_parser.set_defaults(func=cmd_serve)

    # init-db command
    init_parser = subparsers.add_parser("init-db", help="Create tables and insert seed data")
    init_parser.set_defaults(func=cmd_init_db)

    # list command
    list_parser = subparsers.add_parser("list", help="List all podcasts")
    list_parser.set_defaults(func=cmd_list)

    # show command
    show_parser = subparsers.add_parser("show", help="Show a podcast and its episodes")
    show_parser.add_argument("podcast_id", help="Podcast ID (run 'podcatalog list' to see IDs)")
    show_parser.set_defaults(func=cmd_show)

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
