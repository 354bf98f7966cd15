# src/pkg_token/cli.py

from __future__ import annotations

import argparse
import asyncio
import dataclasses
import json
import logging
import sys
from typing import Any, Sequence

from .adapters.jwt.claims_decoder import decode_access_token
from .config.env import settings_from_env
from .integrations.common.token_factory import create_token_dependencies


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Obtain and inspect identity service bearer tokens",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging on stderr.",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    token = sub.add_parser(
        "token",
        help="Generate a token using HPEGL_* environment settings.",
    )
    token.add_argument(
        "--iam-service-url",
        help="Override the identity service URL (default: env HPEGL_IAM_SERVICE_URL).",
    )
    token.add_argument(
        "--identity",
        action="store_true",
        help="Use the JSON identity flow instead of the issuer flow.",
    )
    token.add_argument(
        "--decode",
        "-d",
        action="store_true",
        help="Include the decoded (unverified) claims in the output.",
    )

    decode = sub.add_parser(
        "decode",
        help="Decode the claims of a bearer token without verifying it.",
    )
    decode.add_argument("access_token", help="Bearer token to decode.")

    return parser.parse_args(args=argv)


async def _generate(args: argparse.Namespace) -> dict[str, Any]:
    settings = settings_from_env()
    if args.iam_service_url:
        settings.iam_service_url = args.iam_service_url
    if args.identity:
        settings.api_vended_service_client = False

    deps = create_token_dependencies(settings)
    try:
        token = await deps.retrieve()
    finally:
        await deps.aclose()

    summary: dict[str, Any] = {"access_token": token}
    if args.decode:
        summary["claims"] = dataclasses.asdict(decode_access_token(token))
    return summary


def _run(args: argparse.Namespace) -> dict[str, Any]:
    if args.command == "decode":
        return {"claims": dataclasses.asdict(decode_access_token(args.access_token))}
    return asyncio.run(_generate(args))


def main(argv: Sequence[str] | None = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        summary = _run(args)
        json.dump({"ok": True, **summary}, sys.stdout, indent=2)
        sys.stdout.write("\n")
    except Exception as exc:  # noqa: BLE001
        json.dump({"ok": False, "error": str(exc)}, sys.stdout, indent=2)
        sys.stdout.write("\n")
        raise


if __name__ == "__main__":
    main()
