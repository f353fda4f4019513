from __future__ import annotations

import argparse
import logging

from dotenv import load_dotenv
from rich.logging import RichHandler

from sizewatch.errors import ConfigError
from sizewatch.runner import build_service

LOG = logging.getLogger("sizewatch")


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True)],
    )
    # apscheduler logs every job execution at INFO
    logging.getLogger("apscheduler").setLevel(logging.DEBUG if verbose else logging.WARNING)


def main() -> None:
    parser = argparse.ArgumentParser(prog="sizewatch")
    parser.add_argument("--verbose", action="store_true")

    sub = parser.add_subparsers(dest="command", required=True)

    for cmd in ("run", "once"):
        p = sub.add_parser(cmd)
        p.add_argument("--config", help="optional YAML file; environment variables override it")
        p.add_argument("--env-file", default=".env")
        p.add_argument("--dry-run", action="store_true", help="log alerts instead of sending them")
        p.add_argument("--headed", action="store_true", help="show the browser window")

    args = parser.parse_args()
    configure_logging(args.verbose)
    load_dotenv(args.env_file)

    try:
        service = build_service(
            config_path=args.config,
            dry_run=args.dry_run,
            headless=not args.headed,
        )
    except ConfigError as exc:
        LOG.error("%s", exc)
        raise SystemExit(2) from exc

    if args.command == "once":
        result = service.run_once()
        raise SystemExit(result.outcome.exit_code or 0)

    if args.command == "run":
        try:
            code = service.run_forever()
        except KeyboardInterrupt:
            LOG.info("interrupted")
            code = 130
        raise SystemExit(code)

    raise RuntimeError(f"unsupported command: {args.command}")


if __name__ == "__main__":
    main()
