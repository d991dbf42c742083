import argparse
import asyncio
import json
import sys

import uvicorn

from backend.auto_init import init_index
from backend.config import close_client, get_document_store, get_settings
from backend.domains.board import Board, BoardRepository
from shared.utils.logging import setup_logging


def _read_boards(path: str):
    """Read boards from a newline-delimited JSON file."""
    with open(path, 'r', encoding='utf-8') as f:
        for line in f:
            line = line.strip()
            if line:
                yield Board.model_validate(json.loads(line))


async def _init_index() -> bool:
    settings = get_settings()
    try:
        return await init_index(
            get_document_store(),
            settings.index_name,
            shards=settings.index_shards,
            replicas=settings.index_replicas,
        )
    finally:
        await close_client()


async def _seed(path: str, replace: bool = False) -> int:
    # Read the whole file before touching the index.
    boards = list(_read_boards(path))
    repository = BoardRepository(get_document_store())
    try:
        if replace:
            await repository.delete_all()
        indexed = await repository.bulk_post(boards)
        return len(indexed)
    finally:
        await close_client()


def main():
    """
    Command line entry point: serve the API, provision the index, or seed boards.
    """
    parser = argparse.ArgumentParser(description="Board Search Backend")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the HTTP API.")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    serve.add_argument("--reload", action="store_true")

    subparsers.add_parser("init-index", help="Create the board index if it does not exist.")

    seed = subparsers.add_parser("seed", help="Bulk load boards from an NDJSON file.")
    seed.add_argument("filepath", type=str, help="Path to a file with one board JSON object per line.")
    seed.add_argument("--replace", action="store_true", help="Delete all stored boards before loading.")

    args = parser.parse_args()
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)

    if args.command == "serve":
        uvicorn.run("backend.main:app", host=args.host, port=args.port, reload=args.reload)
    elif args.command == "init-index":
        created = asyncio.run(_init_index())
        print(f"Index {settings.index_name}: {'created' if created else 'already present'}")
    elif args.command == "seed":
        try:
            count = asyncio.run(_seed(args.filepath, replace=args.replace))
        except FileNotFoundError:
            print(f"[ERROR] File not found: {args.filepath}")
            sys.exit(1)
        print(f"Seeded {count} boards into {settings.index_name}")

if __name__ == '__main__':
    main()
