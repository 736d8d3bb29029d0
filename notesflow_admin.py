#!/usr/bin/env python3
"""
Command line administration for NotesFlow.

Subcommands:

    browse    walk the hierarchy interactively (branches → … → notes)
    add       insert a record into one level
    delete    delete a record, optionally with everything below it
    token     mint an admin bearer token locally from SECRET_KEY
    init-db   create the storage and seed the admin / demo records

``browse``, ``add`` and ``delete`` talk to a running server through
:class:`notesflow_client.NotesFlowClient`.  The server address comes from
``--base-url`` or ``NOTESFLOW_BASE_URL``; the bearer token from
``--token`` or ``NOTESFLOW_API_KEY`` (or log in with ``--email``).

Usage:
    python notesflow_admin.py browse
    python notesflow_admin.py add sections --parent b1 --name "Section C"
    python notesflow_admin.py add notes --parent t1 --type video --url https://youtu.be/x
    python notesflow_admin.py delete branches b2 --cascade
    python notesflow_admin.py token --days 365
"""

import argparse
import getpass
import logging
import os
import sys
from typing import Any, Dict, List, Optional

from notesflow_client import NotesFlowClient

from notesflow_api.app.services.navigation import LEVELS, PARENT_PARAM, HierarchyNavigator

# Field shown for an item of each level.
DISPLAY_FIELDS: Dict[str, str] = {
    "branches": "branch_name",
    "sections": "section_name",
    "subjects": "subject_name",
    "units": "unit_title",
    "topics": "topic_title",
    "notes": "title",
}


def display_name(level: str, item: Dict[str, Any]) -> str:
    name = item.get(DISPLAY_FIELDS[level])
    if level == "notes":
        label = name or (item.get("note_url", "")[:40] if item.get("note_type") == "text" else item.get("note_url"))
        return f"[{item.get('note_type')}] {label}"
    return name or item.get("id", "")


def make_client(args: argparse.Namespace) -> NotesFlowClient:
    client = NotesFlowClient(base_url=args.base_url, api_key=args.token)
    if args.email:
        password = getpass.getpass("Admin password: ")
        _, error = client.admin_login(args.email, password)
        if error:
            print(f"[!] Login failed: {error['message']}", file=sys.stderr)
            sys.exit(2)
    return client


def print_items(level: str, items: List[Dict[str, Any]]) -> None:
    if not items:
        print("  (empty)")
        return
    for index, item in enumerate(items, start=1):
        print(f"  {index:>2}. {display_name(level, item)}  <{item['id']}>")


def browse(client: NotesFlowClient, input_func=input) -> None:
    """Interactive drill-down loop.

    Commands: a number opens that item, ``b`` goes back, ``r`` returns to
    the branches and ``q`` quits.
    """
    nav = HierarchyNavigator()
    while True:
        items, error = client.list_items(nav.current_level, nav.parent_id)
        print()
        print(nav.breadcrumbs())
        if error:
            print(f"[!] {error['message']}")
        print_items(nav.current_level, items)
        try:
            choice = input_func("> ").strip().lower()
        except EOFError:
            return
        if choice in ("q", "quit", "exit"):
            return
        if choice == "b":
            if not nav.go_back():
                print("Already at the top.")
            continue
        if choice == "r":
            nav.reset()
            continue
        if choice.isdigit() and 1 <= int(choice) <= len(items):
            item = items[int(choice) - 1]
            if nav.at_leaf:
                print(f"  {item['note_type']}: {item['note_url']}")
            else:
                nav.drill_down(item["id"], display_name(nav.current_level, item))
            continue
        print("Unknown command. Use a number, b (back), r (root) or q (quit).")


def build_payload(args: argparse.Namespace) -> Dict[str, Any]:
    level = args.level
    payload: Dict[str, Any] = {}
    parent_field = PARENT_PARAM[level]
    if parent_field:
        if not args.parent:
            raise ValueError(f"--parent is required when adding {level}")
        payload[parent_field] = args.parent
    if level == "notes":
        if not args.type or not args.url:
            raise ValueError("--type and --url are required when adding notes")
        payload.update({"note_type": args.type, "note_url": args.url, "title": args.name})
    else:
        if not args.name:
            raise ValueError(f"--name is required when adding {level}")
        payload[DISPLAY_FIELDS[level]] = args.name
    if level == "topics" and args.description:
        payload["description"] = args.description
    if args.id:
        payload["id"] = args.id
    return payload


def cmd_browse(args: argparse.Namespace) -> int:
    browse(make_client(args))
    return 0


def cmd_add(args: argparse.Namespace) -> int:
    try:
        payload = build_payload(args)
    except ValueError as exc:
        print(f"[!] {exc}", file=sys.stderr)
        return 1
    data, error = make_client(args).add_item(args.level, payload)
    if error:
        print(f"[!] {error['message']}", file=sys.stderr)
        return 2
    print(f"[+] Added {data['id']} to {args.level}")
    return 0


def cmd_delete(args: argparse.Namespace) -> int:
    ok, error = make_client(args).delete_item(args.level, args.item_id, cascade=args.cascade)
    if error:
        print(f"[!] {error['message']}", file=sys.stderr)
        return 2
    print(f"[+] Deleted {args.item_id}" if ok else f"[!] Nothing deleted for {args.item_id}")
    return 0 if ok else 2


def cmd_token(args: argparse.Namespace) -> int:
    from notesflow_api.app.core.config import settings
    from notesflow_api.app.core.security import ROLE_ADMIN, create_access_token

    email = args.email or settings.admin_email
    token = create_access_token({"sub": email, "role": ROLE_ADMIN}, expires_delta=args.days * 24 * 60 * 60)
    print(token)
    return 0


def cmd_init_db(args: argparse.Namespace) -> int:
    from notesflow_api.app.core.errors import StorageUnavailableError
    from notesflow_api.app.core.storage import get_store
    from notesflow_api.app.services.seed import seed_store

    try:
        store = get_store()
        store.initialise()
        seed_store(store)
    except StorageUnavailableError as exc:
        print(f"[!] {exc.message}", file=sys.stderr)
        return 1
    print(f"[+] {store.name} storage ready")
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="NotesFlow administration.")
    ap.add_argument("--base-url", default=os.getenv("NOTESFLOW_BASE_URL", "http://localhost:8000"),
                    help="Server address (default: $NOTESFLOW_BASE_URL)")
    ap.add_argument("--token", default=os.getenv("NOTESFLOW_API_KEY"),
                    help="Admin bearer token (default: $NOTESFLOW_API_KEY)")
    ap.add_argument("--email", help="Log in as this admin instead of using a token; prompts for the password")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = ap.add_subparsers(dest="command", required=True)

    p = sub.add_parser("browse", help="Walk the hierarchy interactively")
    p.set_defaults(func=cmd_browse)

    p = sub.add_parser("add", help="Insert a record")
    p.add_argument("level", choices=LEVELS)
    p.add_argument("--parent", help="Id of the parent record")
    p.add_argument("--name", help="Name or title of the record")
    p.add_argument("--id", help="Explicit id (default: generated)")
    p.add_argument("--description", help="Topic description")
    p.add_argument("--type", choices=["pdf", "img", "video", "text"], help="Note type")
    p.add_argument("--url", help="Note URL, or the text itself for text notes")
    p.set_defaults(func=cmd_add)

    p = sub.add_parser("delete", help="Delete a record")
    p.add_argument("level", choices=LEVELS)
    p.add_argument("item_id")
    p.add_argument("--cascade", action="store_true", help="Also delete everything below the record")
    p.set_defaults(func=cmd_delete)

    p = sub.add_parser("token", help="Mint an admin token locally")
    p.add_argument("--days", type=int, default=365, help="Validity in days (default: 365)")
    p.set_defaults(func=cmd_token)

    p = sub.add_parser("init-db", help="Create the storage and seed it")
    p.set_defaults(func=cmd_init_db)
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
