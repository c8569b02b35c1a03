"""Command line entry point.

Usage::

    localwebserver [ip-address [port [home-page [not-found [working-directory]]]]]

Pass ``!`` for any position to keep its default::

    localwebserver ! 8080 ! 404.html ./public
"""

import logging
import sys
from collections.abc import Sequence

from localwebserver.config import ConfigurationError, ServerConfiguration
from localwebserver.server import HttpServer


def main(argv: Sequence[str] | None = None) -> None:
    arguments = sys.argv[1:] if argv is None else argv
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    try:
        configuration = ServerConfiguration.from_arguments(arguments)
    except ConfigurationError as error:
        raise SystemExit(str(error)) from error
    HttpServer(configuration).launch()
