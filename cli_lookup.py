"""Terminal client that reuses the in-process lookup logic."""
from __future__ import annotations

import argparse
import asyncio
from pathlib import Path
from typing import Iterable

from catalog_lookup.config import settings
from catalog_lookup.errors import LookupFailure
from catalog_lookup.lookup_service import LookupResult, lookup_products
from catalog_lookup.notion_client import get_store
from catalog_lookup.schema import resolve_mapping

GREEN = "\033[92m"
RED = "\033[91m"
RESET = "\033[0m"


async def perform_lookup(query: str, gtin: str | None = None, name: str | None = None) -> LookupResult:
    mapping = resolve_mapping(settings.catalog_schema)
    return await lookup_products(get_store(), query, gtin=gtin, name=name, mapping=mapping)


def run_and_print(query: str, gtin: str | None = None, name: str | None = None) -> bool:
    try:
        result = asyncio.run(perform_lookup(query, gtin=gtin, name=name))
    except LookupFailure as exc:
        print(f"{RED}[{exc.status_code}] {exc.message}{RESET} {exc.details if exc.details is not None else ''}")
        return False
    pretty_print_result(query or gtin or name or "", result)
    return True


def pretty_print_result(label: str, result: LookupResult) -> None:
    color = GREEN if result.eta_ms < 1000 else RED
    eta_label = f"{color}{result.eta_ms:.1f} ms{RESET}"
    mode = "gtin" if result.query.is_code_like else "name"
    print(f"Query: {label} | mode: {mode} | results: {len(result.items)} | ETA: {eta_label}")
    if not result.found:
        print("  (nenhum produto encontrado)")
    for idx, item in enumerate(result.items, start=1):
        record = item.record
        price = f"{record.price:.2f}" if record.price is not None else "-"
        print(f"  {idx:02d}. score={item.score:3d} | {record.code or '-'} | {price} | {record.name}")


def interactive_shell() -> None:
    print("Interactive product lookup. Type 'exit' to quit.")
    while True:
        try:
            query = input("> ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            return
        if not query:
            continue
        if query.lower() in {"exit", "quit", "sair"}:
            return
        run_and_print(query)


def batch_mode(file_path: Path) -> bool:
    ok = True
    with file_path.open("r", encoding="utf-8") as fh:
        for line in fh:
            query = line.strip()
            if not query:
                continue
            ok = run_and_print(query) and ok
    return ok


def main(argv: Iterable[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="CLI client for the product lookup service")
    parser.add_argument("query", nargs="?", help="Query string. If omitted, starts REPL mode.")
    parser.add_argument("--gtin", help="Explicit GTIN (full or partial)")
    parser.add_argument("--name", help="Explicit product name")
    parser.add_argument("--batch", type=Path, help="File with queries to execute line by line")
    args = parser.parse_args(list(argv) if argv is not None else None)

    if args.batch:
        return 0 if batch_mode(args.batch) else 1
    if args.query or args.gtin or args.name:
        return 0 if run_and_print(args.query or "", gtin=args.gtin, name=args.name) else 1
    interactive_shell()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
