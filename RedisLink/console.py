"""
RedisLink Console

Operator commands against the configured Redis server:

    redislink show [pattern]            all keys (or those matching pattern) with values
    redislink hshow <hash>              all fields of a hash with values
    redislink set <key> [field] <value> create or update an entry
    redislink del <key>                 remove an entry
    redislink get <key> [field]         print one value
    redislink exists <key>              print 1 or 0
    redislink publish <channel> <msg>   publish and print the subscriber count

Pattern examples: h?llo matches hello, hallo and hxllo; h*llo matches hllo
and heeeello; h[ae]llo matches hello and hallo, but not hillo.
"""

import os
import sys
import argparse
import logging
from typing import Callable, List, Optional, Sequence, Tuple

import redis

from . import config as link_config
from .exceptions import ConfigError, ConnectionError as LinkConnectionError, RedisLinkError, UsageError
from .redislink import RedisLink

SERVICE_NAME = "RedisLink.Console"
EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="redislink", description="Redis key-value console")
    parser.add_argument("--config", type=str, default=None,
                        help=f"INI config file (default: {link_config.DEFAULT_CONFIG_FILE} if present, else REDIS_* env)")
    parser.add_argument("--verbose", action="store_true", help="Log every command sent")
    subparsers = parser.add_subparsers(dest="command", required=True)

    show_parser = subparsers.add_parser("show", help="Get all Redis values or by pattern in key")
    show_parser.add_argument("pattern", nargs="?", default="*")

    hshow_parser = subparsers.add_parser("hshow", help="Get all hash values in key")
    hshow_parser.add_argument("hash")

    set_parser = subparsers.add_parser("set", help="Creates a new key - value in Redis")
    set_parser.add_argument("args", nargs="+", metavar="key [field] value")

    del_parser = subparsers.add_parser("del", help="Delete a key - value in Redis")
    del_parser.add_argument("key")

    get_parser = subparsers.add_parser("get", help="Read a key or hash field")
    get_parser.add_argument("args", nargs="+", metavar="key [field]")

    exists_parser = subparsers.add_parser("exists", help="Check whether a key exists")
    exists_parser.add_argument("key")

    publish_parser = subparsers.add_parser("publish", help="Publish a message in a Redis channel")
    publish_parser.add_argument("channel")
    publish_parser.add_argument("message")

    return parser


def format_entries(entries: List[Tuple[str, Optional[str]]]) -> str:
    """Render listing results as aligned name/value rows plus a count line"""
    lines = [f"{name:<50}: {'' if value is None else value:<25}" for name, value in entries]
    lines.append(f"{len(entries)} results found.")
    return "\n".join(lines)


def _config_path(requested: Optional[str]) -> Optional[str]:
    if requested:
        return requested
    if os.path.isfile(link_config.DEFAULT_CONFIG_FILE):
        return link_config.DEFAULT_CONFIG_FILE
    return None  # environment / defaults


def run_command(link: RedisLink, args: argparse.Namespace) -> int:
    """Execute one parsed console command against a loaded RedisLink"""
    if args.command == "show":
        print(format_entries(link.list_all(args.pattern)))
        return EXIT_OK

    if args.command == "hshow":
        print(format_entries(link.list_hash(args.hash)))
        return EXIT_OK

    if args.command == "set":
        if len(args.args) not in (2, 3):
            print("Usage: redislink set <key> <value>\n"
                  "       redislink set <key> <hash> <value>", file=sys.stderr)
            return EXIT_USAGE
        try:
            link.write(*args.args)
        except RedisLinkError:
            print("Redis database error.")
            return EXIT_FAILURE
        print("Redis database entry created.")
        return EXIT_OK

    if args.command == "del":
        if not link.exists(args.key):
            print("Redis database entry does not exist.")
            return EXIT_FAILURE
        link.delete(args.key)
        print("Redis database entry removed.")
        return EXIT_OK

    if args.command == "get":
        value = link.read(*args.args)
        if value is None:
            return EXIT_FAILURE
        print(value)
        return EXIT_OK

    if args.command == "exists":
        found = link.exists(args.key)
        print("1" if found else "0")
        return EXIT_OK if found else EXIT_FAILURE

    if args.command == "publish":
        try:
            print(link.publish(args.channel, args.message))
        except RedisLinkError as e:
            print(f"Error publishing message: {e}", file=sys.stderr)
            return EXIT_FAILURE
        return EXIT_OK

    return EXIT_USAGE


def main(argv: Optional[Sequence[str]] = None,
         client_factory: Callable[..., redis.Redis] = redis.Redis) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.getLogger("RedisLink").setLevel(logging.DEBUG)
    logger = logging.getLogger(SERVICE_NAME)

    link = RedisLink(config_path=_config_path(args.config), client_factory=client_factory)
    try:
        link.load()
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        return EXIT_FAILURE
    except LinkConnectionError as e:
        logger.error(f"Redis unavailable: {e}")
        return EXIT_FAILURE

    try:
        return run_command(link, args)
    except UsageError as e:
        print(str(e), file=sys.stderr)
        return EXIT_USAGE
    finally:
        link.shutdown(persist=False)


if __name__ == "__main__":
    sys.exit(main())
