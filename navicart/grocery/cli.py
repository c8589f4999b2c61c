"""CLI entry point for the grocery list engine."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import asdict

from dotenv import load_dotenv

from .classifier import Classifier
from .config import GroceryConfig, load_config
from .consolidator import Consolidator
from .db import SQLiteItemStore, StoreError
from .grocery_list import GroceryList
from .inference import create_backend
from .inference.category import CategoryInference
from .recipe import load_recipe
from .taxonomy import load_taxonomy


def main(argv: list[str] | None = None) -> None:
    load_dotenv()

    parser = argparse.ArgumentParser(
        prog="navicart-grocery",
        description="Shared grocery list: categorize items and merge duplicates",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to the configuration file (TOML)",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )

    sub = parser.add_subparsers(dest="command")

    # classify
    classify_parser = sub.add_parser("classify", help="Print the category of each item")
    classify_parser.add_argument("text", nargs="+", help="Item descriptions")

    # add
    add_parser = sub.add_parser("add", help="Add an item to the list")
    add_parser.add_argument("text", help="Item description")
    add_parser.add_argument("--quantity", "-q", type=int, default=1)

    # list
    list_parser = sub.add_parser("list", help="Show the list grouped by category")
    list_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # toggle / delete
    toggle_parser = sub.add_parser("toggle", help="Mark an item done or not done")
    toggle_parser.add_argument("id", type=int)
    delete_parser = sub.add_parser("delete", help="Delete an item")
    delete_parser.add_argument("id", type=int)

    # clear
    clear_parser = sub.add_parser("clear", help="Delete items from the list")
    clear_parser.add_argument(
        "--completed", action="store_true", help="Only delete completed items"
    )

    # recipe
    recipe_parser = sub.add_parser("recipe", help="Add a recipe's ingredients")
    recipe_parser.add_argument("file", help="Recipe JSON file")
    recipe_parser.add_argument(
        "--pantry", nargs="*", default=[], metavar="TERM",
        help="Ingredients already at home",
    )

    # consolidate / watch
    sub.add_parser("consolidate", help="Merge duplicate and component items now")
    sub.add_parser("watch", help="Run scheduled consolidation until interrupted")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config)

    try:
        match args.command:
            case "classify":
                asyncio.run(_cmd_classify(config, args))
            case "add":
                asyncio.run(_cmd_add(config, args))
            case "list":
                asyncio.run(_cmd_list(config, args))
            case "toggle":
                asyncio.run(_cmd_toggle(config, args))
            case "delete":
                asyncio.run(_cmd_delete(config, args))
            case "clear":
                asyncio.run(_cmd_clear(config, args))
            case "recipe":
                asyncio.run(_cmd_recipe(config, args))
            case "consolidate":
                asyncio.run(_cmd_consolidate(config, args))
            case "watch":
                asyncio.run(_cmd_watch(config, args))
    except StoreError as e:
        print(f"Store error: {e}", file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        pass


def _build_classifier(config: GroceryConfig) -> Classifier:
    taxonomy = load_taxonomy(config.taxonomy.path or None)
    backend = create_backend(config)
    inference = None
    if backend is not None:
        inference = CategoryInference(
            backend,
            taxonomy=taxonomy,
            max_attempts=config.inference.max_attempts,
            base_delay=config.inference.base_delay,
        )
    return Classifier(taxonomy=taxonomy, inference=inference)


def _build_list(config: GroceryConfig) -> tuple[SQLiteItemStore, GroceryList]:
    store = SQLiteItemStore(config.database.path)
    classifier = _build_classifier(config)
    consolidator = Consolidator(
        store,
        classifier.taxonomy,
        debounce_seconds=config.consolidation.debounce_seconds,
    )
    grocery = GroceryList(
        store,
        classifier,
        consolidator=consolidator,
        auto_consolidate=config.consolidation.auto,
    )
    return store, grocery


async def _cmd_classify(config, args) -> None:
    classifier = _build_classifier(config)
    for text in args.text:
        category = await classifier.classify(text)
        print(f"{text:<30} {category}")


async def _cmd_add(config, args) -> None:
    store, grocery = _build_list(config)
    try:
        item = await grocery.add_item(args.text, args.quantity)
        await grocery.consolidator.flush()
    finally:
        store.close()
    print(f"[{item.id}] {item.text} x{item.quantity}  ({item.category})")


async def _cmd_list(config, args) -> None:
    store, grocery = _build_list(config)
    try:
        groups = await grocery.grouped()
    finally:
        store.close()

    if args.json:
        data = {
            category: [asdict(item) for item in items]
            for category, items in groups.items()
        }
        print(json.dumps(data, ensure_ascii=False, indent=2))
        return

    if not groups:
        print("The list is empty.")
        return
    for category, items in groups.items():
        print(f"{category}:")
        for item in items:
            mark = "x" if item.completed else " "
            qty = f" x{item.quantity}" if item.quantity > 1 else ""
            print(f"  [{mark}] {item.id:>4}  {item.text}{qty}")


async def _cmd_toggle(config, args) -> None:
    store, grocery = _build_list(config)
    try:
        item = await grocery.toggle(args.id)
    finally:
        store.close()
    state = "done" if item.completed else "not done"
    print(f"{item.text}: {state}")


async def _cmd_delete(config, args) -> None:
    store, grocery = _build_list(config)
    try:
        await grocery.delete(args.id)
    finally:
        store.close()
    print(f"Deleted item {args.id}")


async def _cmd_clear(config, args) -> None:
    store, grocery = _build_list(config)
    try:
        count = await grocery.clear(completed_only=args.completed)
    finally:
        store.close()
    print(f"Deleted {count} items")


async def _cmd_recipe(config, args) -> None:
    recipe = load_recipe(args.file)
    store, grocery = _build_list(config)
    try:
        added = await grocery.add_recipe(recipe, args.pantry)
        await grocery.consolidator.flush()
    finally:
        store.close()

    print(f"{recipe.name}: {len(added)} of {len(recipe.ingredients)} ingredients added")
    for item in added:
        print(f"  {item.text} x{item.quantity}  ({item.category})")


async def _cmd_consolidate(config, args) -> None:
    store, grocery = _build_list(config)
    try:
        result = await grocery.consolidate()
    finally:
        store.close()

    if not result.changed:
        print("Nothing to merge.")
        return
    for item in result.merged:
        print(f"  merged: {item.text} x{item.quantity}")
    print(f"Deleted {len(result.deleted)} duplicate records")


async def _cmd_watch(config, args) -> None:
    from .scheduler import ConsolidationScheduler

    store, grocery = _build_list(config)
    scheduler = ConsolidationScheduler(config, grocery.consolidator)
    scheduler.start()
    print(f"Consolidating on schedule {config.consolidation.schedule!r}; Ctrl+C to stop")
    try:
        await asyncio.Event().wait()
    finally:
        scheduler.stop()
        store.close()
