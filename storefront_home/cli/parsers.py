from __future__ import annotations

import argparse


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Storefront home page (critical + deferred loading)")
    sub = ap.add_subparsers(dest="cmd", required=True)

    # Load page data as JSON lines: critical first, deferred once it settles
    add_subparser(sub, "load")

    # Stream the progressive HTML to stdout
    add_subparser(sub, "render")

    sv = sub.add_parser("serve")
    sv.add_argument("--host", default="127.0.0.1")
    sv.add_argument("--port", type=int, default=8080)
    sv.add_argument("--debug", action="store_true")

    return ap


def positive_int(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {raw!r}")
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return value


def add_subparser(sub, name):
    """
    Adds a page-loading subparser (load or render) to the CLI argument parser.

    Args:
        sub: The subparsers object from argparse.
        name: The name of the subcommand to add.

    Returns:
        argparse.ArgumentParser: The configured subparser.
    """
    result = sub.add_parser(name)
    result.add_argument(
        "--locale",
        required=False,
        help="language-country prefix (e.g. en-us); defaults to STOREFRONT_DEFAULT_LANGUAGE/COUNTRY",
    )
    result.add_argument("--first", type=positive_int, default=None, help="Recommended products count; defaults to $HOME_RECOMMENDED_COUNT")
    return result
