"""
Command-line interface for the Yopmail client.
"""

from __future__ import annotations
import sys
import argparse

from yopmail.config import _load_env, _init_client
from yopmail.exceptions import RateLimitError, YopmailError
from yopmail.logging import logger, setup_logging


def _client(args):
    cfg = _load_env()
    setup_logging(
        log_level=cfg["LOG_LEVEL"],
        log_file=cfg["LOG_FILE"],
    )
    if args.proxy:
        cfg["PROXY"] = args.proxy
    return _init_client(cfg, args.username)


def cmd_inbox(args):
    """Print the mail ids of one inbox page, newest first."""
    with _client(args) as client:
        for mail_id in client.get_mail_ids(args.page):
            print(mail_id)


def cmd_read(args):
    """Print the HTML of one mail."""
    with _client(args) as client:
        message = client.get_mail_body(args.mail_id, show_images=args.images)
        if message.is_empty:
            logger.warning(f"Mail {message.mail_id} has no content")
        print(message)


def cmd_delete(args):
    """Delete one mail."""
    with _client(args) as client:
        with client.delete_mail(args.mail_id, args.page):
            pass
        print(f"Deleted {args.mail_id}")


def cmd_domains(args):
    """Print the alternate domains."""
    with _client(args) as client:
        for domain in client.get_alternative_domains():
            print(domain)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="yopmail",
        description="Yopmail client - read disposable inboxes from the command line",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s inbox test              List mail ids of test@yopmail.com
  %(prog)s read test e_ZwZ...      Print one mail
  %(prog)s delete test e_ZwZ...    Delete one mail
  %(prog)s domains                 List alternate domains
        """
    )
    parser.add_argument("--proxy", default=None, help="Proxy URL (overrides YOPMAIL_PROXY)")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    inbox_parser = subparsers.add_parser("inbox", help="List mail ids")
    inbox_parser.add_argument("username")
    inbox_parser.add_argument("--page", type=int, default=1)
    inbox_parser.set_defaults(func=cmd_inbox)

    read_parser = subparsers.add_parser("read", help="Print one mail")
    read_parser.add_argument("username")
    read_parser.add_argument("mail_id")
    read_parser.add_argument("--images", action="store_true", help="Load embedded images")
    read_parser.set_defaults(func=cmd_read)

    delete_parser = subparsers.add_parser("delete", help="Delete one mail")
    delete_parser.add_argument("username")
    delete_parser.add_argument("mail_id")
    delete_parser.add_argument("--page", type=int, default=1)
    delete_parser.set_defaults(func=cmd_delete)

    domains_parser = subparsers.add_parser("domains", help="List alternate domains")
    # Any valid mailbox works; the endpoint is not tied to one
    domains_parser.add_argument("username", nargs="?", default="yopmail")
    domains_parser.set_defaults(func=cmd_domains)

    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        args.func(args)
    except RateLimitError as e:
        logger.error(f"{e}")
        sys.exit(2)
    except (YopmailError, ValueError) as e:
        logger.error(f"{args.command} failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
