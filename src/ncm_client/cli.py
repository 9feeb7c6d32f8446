"""Command line interface for the NCM client.

Examples
--------
.. code-block:: bash

    # List every online router as JSON
    ncm-client list routers --limit all -p state=online

    # Chunked membership filter
    ncm-client list net_devices -p router__in=101,102,103

    # Router-scoped collections need the router
    ncm-client list router_logs --router 101 --limit 50

    # Show the endpoint catalog
    ncm-client endpoints

API keys are read from ``X_CP_API_ID``, ``X_CP_API_KEY``, ``X_ECM_API_ID``
and ``X_ECM_API_KEY`` in the environment or a ``.env`` file.
"""

import argparse
import json
import logging
import os
import sys
from typing import Dict, List, Optional

from dotenv import load_dotenv

from .client import NcmClient
from .endpoints import ENDPOINTS
from .exceptions import NcmClientError
from .utils.security import setup_secure_logging

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_TRUNCATED = 1
EXIT_USAGE = 2


def parse_param(value: str) -> Dict[str, str]:
    """Parse one ``key=value`` query parameter argument.

    :param value: Raw argument
    :type value: str
    :return: Single-entry mapping
    :rtype: Dict[str, str]
    :raises argparse.ArgumentTypeError: If there is no ``=`` or no key
    """
    key, sep, val = value.partition("=")
    if not sep or not key.strip():
        raise argparse.ArgumentTypeError(
            "expected key=value, got {0!r}".format(value)
        )
    return {key.strip(): val}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ncm-client", description="Query the Cradlepoint NCM API"
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        default=None,
        help="Logging level (default: LOG_LEVEL or INFO)",
    )
    parser.add_argument("--base-url", default=None, help="Override the API base URL")
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Do not log a notice for every API response",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    list_parser = sub.add_parser("list", help="Print the records of an endpoint")
    list_parser.add_argument("endpoint", choices=sorted(ENDPOINTS))
    list_parser.add_argument(
        "--limit", default=None, help="Maximum records per walk, or 'all'"
    )
    list_parser.add_argument(
        "--router",
        default=None,
        help="Router ID, required by router-scoped endpoints",
    )
    list_parser.add_argument(
        "-p",
        "--param",
        dest="params",
        action="append",
        type=parse_param,
        default=[],
        metavar="KEY=VALUE",
        help="Query parameter, may be repeated",
    )

    sub.add_parser("endpoints", help="Show the endpoint catalog")
    return parser


def _print_json(value) -> None:
    sys.stdout.write(json.dumps(value, indent=2, default=str))
    sys.stdout.write("\n")


def _show_endpoints() -> int:
    _print_json(
        {
            name: {
                "label": spec.label,
                "method": spec.method,
                "params": sorted(spec.allowed_params),
                "in_filters": sorted(spec.in_filters),
                "scope": spec.scope,
            }
            for name, spec in sorted(ENDPOINTS.items())
        }
    )
    return EXIT_OK


def _list_records(args: argparse.Namespace) -> int:
    params: Dict[str, str] = {}
    for param in args.params:
        params.update(param)
    if args.limit is not None:
        params["limit"] = args.limit

    client_kwargs = {"base_url": args.base_url}
    if args.quiet:
        client_kwargs["log_events"] = False

    with NcmClient(**client_kwargs) as client:
        records = client.list_endpoint(args.endpoint, scope_id=args.router, **params)

    _print_json(list(records))
    if records.truncated:
        logger.warning(
            "Result for %s is incomplete (%d records)", args.endpoint, len(records)
        )
        return EXIT_TRUNCATED
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """Run the ``ncm-client`` command.

    :param argv: Arguments without the program name, ``sys.argv`` if None
    :type argv: Optional[List[str]]
    :return: Process exit code
    :rtype: int
    """
    load_dotenv()

    args = build_parser().parse_args(argv)
    setup_secure_logging(level=args.log_level or os.environ.get("LOG_LEVEL", "INFO"))
    logger.debug("Environment variables loaded")

    if args.command == "endpoints":
        return _show_endpoints()

    try:
        return _list_records(args)
    except NcmClientError as e:
        sys.stderr.write("error: {0}\n".format(e.message))
        return EXIT_USAGE


if __name__ == "__main__":
    sys.exit(main())
