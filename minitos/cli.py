# -*- coding: utf-8 -*-
"""
minitos.cli
~~~~~~~~~~~

Command-line maintenance tasks.

Connection settings come from the environment: ``TOS_REGION``,
``TOS_ENDPOINT``, ``TOS_ACCESS_KEY_ID``, ``TOS_ACCESS_KEY_SECRET`` and,
optionally, ``TOS_BUCKET``.

Example::

    TOS_REGION=cn-shanghai TOS_ENDPOINT=tos-cn-shanghai.volces.com \\
    TOS_ACCESS_KEY_ID=xxx TOS_ACCESS_KEY_SECRET=xxx \\
        minitos update-cache-control --bucket my-bucket
"""

import argparse
import logging
import sys
import time

import lxml.etree
import requests

from .connection import Connection
from .exceptions import ConfigError

ONE_YEAR_CACHE = "public, max-age=31536000, immutable"
DEFAULT_DELAY = 0.05


def parse_args(argv=None):
    """
    Parse command-line arguments.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        argparse.Namespace: Parsed arguments
    """
    parser = argparse.ArgumentParser(
        prog="minitos", description="Maintenance tasks for TOS buckets"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log requests and signing details"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    update = subparsers.add_parser(
        "update-cache-control",
        help="Set the Cache-Control header of every object in a bucket",
    )
    update.add_argument(
        "-b", "--bucket", help="Bucket to update (default: $TOS_BUCKET)"
    )
    update.add_argument("-p", "--prefix", help="Only update keys under this prefix")
    update.add_argument(
        "--cache-control",
        default=ONE_YEAR_CACHE,
        help="Cache-Control value (default: {0})".format(ONE_YEAR_CACHE),
    )
    update.add_argument(
        "--delay",
        type=float,
        default=DEFAULT_DELAY,
        help="Seconds to wait between updates (default: {0})".format(DEFAULT_DELAY),
    )
    update.add_argument(
        "--dry-run",
        action="store_true",
        help="List the keys that would be updated and exit",
    )
    update.add_argument(
        "keys",
        nargs="*",
        help="Update only these keys instead of listing the bucket",
    )

    return parser.parse_args(argv)


def list_keys(conn, bucket, prefix=None):
    keys = []
    print("Listing objects in {0}...".format(bucket))
    for obj in conn.list_all(bucket, prefix=prefix):
        keys.append(obj["key"])
    print("Total objects found: {0}".format(len(keys)))
    return keys


def update_cache_control(conn, bucket, keys, cache_control, delay=DEFAULT_DELAY):
    """
    Update Cache-Control on each key, carrying on past failures.

    Returns:
        tuple: ``(succeeded, failed)`` counts
    """
    succeeded = failed = 0
    total = len(keys)
    for index, key in enumerate(keys, 1):
        try:
            conn.update_metadata(key, bucket, cache_control=cache_control)
        except (requests.RequestException, ValueError) as exc:
            failed += 1
            print("[{0}/{1}] FAILED {2}: {3}".format(index, total, key, exc), file=sys.stderr)
        else:
            succeeded += 1
            print("[{0}/{1}] {2}".format(index, total, key))
        if delay and index < total:
            time.sleep(delay)
    return succeeded, failed


def main(argv=None):
    """
    Main entry point.

    Returns:
        int: 0 on success, 1 on configuration errors or failed updates
    """
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    try:
        conn = Connection.from_env(debug=args.verbose)
        bucket = conn.bucket(args.bucket)
    except (ConfigError, ValueError) as exc:
        print("Configuration error: {0}".format(exc), file=sys.stderr)
        return 1

    print("Bucket: {0}".format(bucket))
    print("Region: {0}".format(conn.region))
    print("Endpoint: {0}".format(conn.endpoint))
    print("Cache-Control: {0}".format(args.cache_control))

    if args.keys:
        keys = args.keys
        print("Updating {0} specified objects".format(len(keys)))
    else:
        try:
            keys = list_keys(conn, bucket, prefix=args.prefix)
        except (requests.RequestException, ValueError, lxml.etree.XMLSyntaxError) as exc:
            print("Listing failed: {0}".format(exc), file=sys.stderr)
            return 1
        if not keys:
            print("No objects found in bucket")
            return 0

    if args.dry_run:
        print("Objects that would be updated:")
        for key in keys:
            print("  - {0}".format(key))
        print("Total: {0}. Run without --dry-run to update them.".format(len(keys)))
        return 0

    succeeded, failed = update_cache_control(
        conn, bucket, keys, args.cache_control, delay=args.delay
    )
    print("Updated: {0}, failed: {1}".format(succeeded, failed))
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
