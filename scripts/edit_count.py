"""
Print the members of a user group together with their edit counts.

Usage:
    export MW_API_BASE_URL=https://wiki.example.org/w/api.php
    python scripts/edit_count.py sysop 2024-01-01T00:00:00Z 2024-12-31T23:59:59Z
"""

import argparse
import asyncio

from mw_api_ext.wiki.api_client import MediaWikiClient, MediaWikiClientError
from mw_api_ext.wiki.context import build_context
from mw_api_ext.wiki.extensions import ApiExtensions


async def main(group: str, start: str, end: str) -> int:
    client = MediaWikiClient()
    extensions = ApiExtensions(client, build_context(client))

    users = await extensions.get_users_in_group(group)
    print(f"Found {len(users)} users in '{group}'.")

    for name in users:
        try:
            total = await extensions.get_total_edits_by_user(name, start, end)
        except MediaWikiClientError as e:
            print(f"{name}: failed ({e})")
            continue
        print(f"{name}: {total}")

    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("group")
    parser.add_argument("start")
    parser.add_argument("end")
    args = parser.parse_args()
    raise SystemExit(asyncio.run(main(args.group, args.start, args.end)))
