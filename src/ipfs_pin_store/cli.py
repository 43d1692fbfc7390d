r"""Command line access to a `PinStore`.

State (credentials and the pointer) is persisted where the settings say. The in-memory default
forgets everything between invocations, so set `IPFS_PIN_STORE_STATE_BACKEND=file` (or `redis`)
for anything beyond a single command.

Examples:
    export IPFS_PIN_STORE_STATE_BACKEND=file

    ipfs-pin-store set-credential pinata "$PINATA_JWT"
    ipfs-pin-store put '{"note": "hello"}' --commit
    ipfs-pin-store pointer
    ipfs-pin-store update bafy... '{"note": "world"}' --commit
    ipfs-pin-store get bafy...
    ipfs-pin-store delete bafy...
    ipfs-pin-store clear
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from collections.abc import Sequence

from loguru import logger

from ipfs_pin_store import PROVIDER_NAME
from ipfs_pin_store.errors import PinStoreError, UpdateInconsistentError
from ipfs_pin_store.logging_config import configure_logger
from ipfs_pin_store.pin_store import PinStore


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ipfs-pin-store",
        description="Store and retrieve content on IPFS through a pinning provider.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log requests and state changes")

    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("set-credential", help="Store the credential of a provider")
    p.add_argument("provider", choices=[str(provider) for provider in PROVIDER_NAME])
    p.add_argument("value", help="Pinata JWT, or 'project_id:project_secret' for Infura")

    p = sub.add_parser("clear-credential", help="Remove the credential of a provider")
    p.add_argument("provider", choices=[str(provider) for provider in PROVIDER_NAME])

    p = sub.add_parser("put", help="Pin content and print its address")
    p.add_argument("content")
    p.add_argument("--commit", action="store_true", help="Record the new address as the pointer")

    p = sub.add_parser("get", help="Print the content at an address")
    p.add_argument("address")

    p = sub.add_parser("update", help="Replace the content at an address and print the new address")
    p.add_argument("address")
    p.add_argument("content")
    p.add_argument("--commit", action="store_true", help="Record the new address as the pointer")

    p = sub.add_parser("delete", help="Unpin an address")
    p.add_argument("address")

    sub.add_parser("pointer", help="Print the persisted state")
    sub.add_parser("clear", help="Remove all credentials and the pointer")

    return parser


async def run(args: argparse.Namespace, store: PinStore) -> str | None:
    """Run the command in `args` against `store` and return what should be printed."""
    if args.command == "set-credential":
        await store.set_credential(args.provider, args.value)
        return None
    if args.command == "clear-credential":
        await store.clear_credential(args.provider)
        return None
    if args.command == "put":
        address = await store.put_content(args.content)
        if args.commit:
            await store.commit_pointer(address)
        return address
    if args.command == "get":
        content = await store.get_content(args.address)
        return content if isinstance(content, str) else json.dumps(content)
    if args.command == "update":
        address = await store.update_content(args.address, args.content)
        if args.commit:
            await store.commit_pointer(address)
        return address
    if args.command == "delete":
        await store.delete_content(args.address)
        return None
    if args.command == "pointer":
        return json.dumps(await store.get_persisted_state(), indent=2)
    if args.command == "clear":
        await store.clear_state()
        return None

    raise ValueError(f"Unknown command {args.command}")


def setup_logging(verbose: bool) -> None:
    """Replace loguru's default handler with the package handler on stderr."""
    logger.remove()
    configure_logger("DEBUG" if verbose else "WARNING")


def main(argv: Sequence[str] | None = None, *, store: PinStore | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        output = asyncio.run(run(args, store if store is not None else PinStore()))
    except UpdateInconsistentError as e:
        logger.error(f"Content lost: {e.deleted_address} was unpinned and the new content was not pinned")
        print(f"error: {e}", file=sys.stderr)
        return 2
    except PinStoreError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    if output is not None:
        print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
