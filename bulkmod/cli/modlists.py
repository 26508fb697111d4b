"""Command-line front end for browsing and editing mod lists."""
import argparse
import getpass
import os
import sys
from pathlib import Path

import httpx

from bulkmod.client import ApiError, ModListClient, TokenStore

DEFAULT_API_URL = "http://localhost:8000/api"
DEFAULT_TOKEN_PATH = Path.home() / ".bulkmod" / "token"


def _print_mod_list(mod_list: dict) -> None:
    visibility = "public" if mod_list["isPublic"] else "private"
    print(f"#{mod_list['id']} {mod_list['name']} ({visibility}, {mod_list['modCount']} mods)")
    if mod_list.get("description"):
        print(f"    {mod_list['description']}")
    if "user" in mod_list:
        print(f"    by {mod_list['user']['username']}")
    for mod in mod_list.get("mods", []):
        print(f"    - {mod['modTitle']} [{mod['modSlug']}] by {mod['modAuthor']}")


def cmd_login(client, args):
    password = args.password or getpass.getpass("Password: ")
    user = client.login(args.email, password)
    print(f"Logged in as {user['username']}")


def cmd_register(client, args):
    password = args.password or getpass.getpass("Password: ")
    user = client.register(args.username, args.email, password)
    print(f"Registered {user['username']}")


def cmd_logout(client, args):
    client.logout()
    print("Logged out")


def cmd_whoami(client, args):
    user = client.profile()
    print(f"{user['username']} <{user['email']}>")


def cmd_lists(client, args):
    for mod_list in client.get_user_mod_lists():
        _print_mod_list(mod_list)


def cmd_show(client, args):
    _print_mod_list(client.get_mod_list(args.list_id))


def cmd_create(client, args):
    mod_list = client.create_mod_list(
        args.name, description=args.description, is_public=args.public
    )
    print(f"Created mod list #{mod_list['id']}")


def _update(client, list_id, **fields):
    if client.update_mod_list(list_id, **fields) is None:
        raise ApiError("Mod list not found")
    print(f"Updated mod list #{list_id}")


def cmd_rename(client, args):
    _update(client, args.list_id, name=args.name)


def cmd_describe(client, args):
    _update(client, args.list_id, description=args.description)


def cmd_publish(client, args):
    _update(client, args.list_id, is_public=True)


def cmd_unpublish(client, args):
    _update(client, args.list_id, is_public=False)


def cmd_delete(client, args):
    client.delete_mod_list(args.list_id)
    print(f"Deleted mod list #{args.list_id}")


def cmd_add(client, args):
    client.add_mod(
        args.list_id, args.slug, args.title, args.author, icon_url=args.icon_url
    )
    print(f"Added {args.slug} to mod list #{args.list_id}")


def cmd_remove(client, args):
    client.remove_mod(args.list_id, args.slug)
    print(f"Removed {args.slug} from mod list #{args.list_id}")


def cmd_check(client, args):
    present = client.is_mod_in_mod_list(args.list_id, args.slug)
    print("yes" if present else "no")


def cmd_containing(client, args):
    for mod_list in client.get_mod_lists_containing(args.slug):
        _print_mod_list(mod_list)


def cmd_public(client, args):
    for mod_list in client.get_public_mod_lists():
        _print_mod_list(mod_list)


def cmd_copy(client, args):
    mod_list = client.copy_public_mod_list(args.list_id)
    print(f"Copied to mod list #{mod_list['id']} ({mod_list['name']})")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="bulkmod-cli")
    parser.add_argument(
        "--api-url", default=os.environ.get("BULKMOD_API_URL", DEFAULT_API_URL)
    )
    parser.add_argument("--token-file", type=Path, default=DEFAULT_TOKEN_PATH)
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("login")
    p.add_argument("email")
    p.add_argument("--password")
    p.set_defaults(func=cmd_login)

    p = sub.add_parser("register")
    p.add_argument("username")
    p.add_argument("email")
    p.add_argument("--password")
    p.set_defaults(func=cmd_register)

    sub.add_parser("logout").set_defaults(func=cmd_logout)
    sub.add_parser("whoami").set_defaults(func=cmd_whoami)
    sub.add_parser("lists").set_defaults(func=cmd_lists)
    sub.add_parser("public").set_defaults(func=cmd_public)

    p = sub.add_parser("show")
    p.add_argument("list_id", type=int)
    p.set_defaults(func=cmd_show)

    p = sub.add_parser("create")
    p.add_argument("name")
    p.add_argument("--description")
    p.add_argument("--public", action="store_true")
    p.set_defaults(func=cmd_create)

    p = sub.add_parser("rename")
    p.add_argument("list_id", type=int)
    p.add_argument("name")
    p.set_defaults(func=cmd_rename)

    p = sub.add_parser("describe")
    p.add_argument("list_id", type=int)
    p.add_argument("description")
    p.set_defaults(func=cmd_describe)

    for name, func in (("publish", cmd_publish), ("unpublish", cmd_unpublish)):
        p = sub.add_parser(name)
        p.add_argument("list_id", type=int)
        p.set_defaults(func=func)

    p = sub.add_parser("delete")
    p.add_argument("list_id", type=int)
    p.set_defaults(func=cmd_delete)

    p = sub.add_parser("add")
    p.add_argument("list_id", type=int)
    p.add_argument("slug")
    p.add_argument("title")
    p.add_argument("author")
    p.add_argument("--icon-url")
    p.set_defaults(func=cmd_add)

    p = sub.add_parser("remove")
    p.add_argument("list_id", type=int)
    p.add_argument("slug")
    p.set_defaults(func=cmd_remove)

    p = sub.add_parser("check")
    p.add_argument("list_id", type=int)
    p.add_argument("slug")
    p.set_defaults(func=cmd_check)

    p = sub.add_parser("containing")
    p.add_argument("slug")
    p.set_defaults(func=cmd_containing)

    p = sub.add_parser("copy")
    p.add_argument("list_id", type=int)
    p.set_defaults(func=cmd_copy)

    return parser


def main(argv=None, client: ModListClient | None = None) -> int:
    args = build_parser().parse_args(argv)
    if client is None:
        client = ModListClient(args.api_url, TokenStore(args.token_file))
    client.on_logout(lambda reason: print("Session expired, please log in again."))
    try:
        args.func(client, args)
    except ApiError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except httpx.HTTPError as exc:
        print(f"Error: cannot reach {args.api_url}: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
