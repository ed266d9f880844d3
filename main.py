"""
Entrypoint: load config, init logging, fetch one resource list and print it
"""

import argparse
import asyncio
import sys

import structlog

from marvel_data.callback import FutureCallback
from marvel_data.config import get_config
from marvel_data.dispatcher import ComicType, DataManager
from marvel_data.errors import HttpStatusError, MarvelApiError
from marvel_data.logging_config import setup_logging


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Query the Marvel public API")
    sub = parser.add_subparsers(dest="resource", required=True)

    characters = sub.add_parser("characters", help="List characters")
    characters.add_argument("--search", help="Name prefix filter")
    characters.add_argument("--offset", type=int, default=0)
    characters.add_argument("--limit", type=int, default=20)

    character = sub.add_parser("character", help="Fetch one character")
    character.add_argument("character_id", type=int)

    for comic_type in ComicType:
        p = sub.add_parser(comic_type.value, help=f"List a character's {comic_type.value}")
        p.add_argument("character_id", type=int)
        p.add_argument("--offset", type=int, default=0)
        p.add_argument("--limit", type=int, default=20)

    return parser.parse_args(argv)


async def main(args) -> int:
    """Initialize dependencies and run one query"""
    config = get_config()
    setup_logging(config.logging)
    logger = structlog.get_logger(__name__)

    try:
        manager = DataManager.get_instance()
    except ValueError as e:
        # Missing credentials
        logger.error("configuration_error", error=str(e))
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    callback = FutureCallback()

    if args.resource == "characters":
        manager.list_characters(args.offset, args.limit, args.search, callback)
    elif args.resource == "character":
        manager.get_character(args.character_id, callback)
    else:
        list_by_type = {
            ComicType.COMICS: manager.list_comics,
            ComicType.SERIES: manager.list_series,
            ComicType.STORIES: manager.list_stories,
            ComicType.EVENTS: manager.list_events,
        }[ComicType(args.resource)]
        list_by_type(args.character_id, args.offset, args.limit, callback)

    try:
        wrapper = await callback
    except HttpStatusError as e:
        logger.error("request_failed", status_code=e.status_code, code=e.code, message=e.message)
        return 1
    except MarvelApiError as e:
        logger.error("request_failed", error=str(e))
        return 1
    finally:
        await manager.aclose()

    container = wrapper.data
    for item in container.results:
        print(f"{item.id}\t{getattr(item, 'name', None) or getattr(item, 'title', '')}")
    print(f"-- {container.count} of {container.total} (offset {container.offset})")
    if wrapper.attribution_text:
        print(wrapper.attribution_text)
    return 0


def run():
    sys.exit(asyncio.run(main(parse_args())))


if __name__ == "__main__":
    run()
