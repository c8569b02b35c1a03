"""
The accept loop.

``HttpServer`` owns a uvicorn server running a starlette application that
mounts one handler for every path and method. Every request goes through
``_respond`` under a single lock, so requests are handled one after another
in the order they were accepted and the request counter and log lines follow
that order.

The loop runs until ``shutdown`` is called or the process is stopped; a server
is launched once.
"""

from __future__ import annotations

import asyncio
import logging
import socket
from http import HTTPStatus

import uvicorn
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.trustedhost import TrustedHostMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import Mount, request_response

from localwebserver.config import LOOPBACK_IPV6_ADDRESS, ServerConfiguration
from localwebserver.handler import PendingResponse, RequestContext, handle

logger = logging.getLogger(__name__)

_WILDCARD_ADDRESSES = frozenset({"0.0.0.0", "::"})


def _reason_phrase(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return ""


def _allowed_hosts(configuration: ServerConfiguration) -> list[str]:
    if configuration.ip_address in _WILDCARD_ADDRESSES:
        return ["*"]
    if ":" in configuration.ip_address:
        # Host headers carrying IPv6 literals are not matched by host name.
        return ["*"]
    return list(configuration.host_names)


def _listening_socket(host: str, port: int) -> socket.socket:
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    listening_socket = socket.socket(family, socket.SOCK_STREAM)
    try:
        listening_socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        if family == socket.AF_INET6:
            listening_socket.setsockopt(socket.IPPROTO_IPV6, socket.IPV6_V6ONLY, 1)
        listening_socket.bind((host, port))
    except OSError:
        listening_socket.close()
        raise
    return listening_socket


def bind_sockets(configuration: ServerConfiguration) -> list[socket.socket]:
    """
    Bind one socket per address in ``configuration.bind_hosts``.

    Every socket shares the port of the first one, so port ``0`` picks a single
    port for all of them. The IPv6 loopback is skipped when the host has none.
    """
    first_host, *other_hosts = configuration.bind_hosts
    first = _listening_socket(first_host, configuration.port)
    port = first.getsockname()[1]
    sockets = [first]
    for host in other_hosts:
        try:
            sockets.append(_listening_socket(host, port))
        except OSError as error:
            if host != LOOPBACK_IPV6_ADDRESS:
                for bound in sockets:
                    bound.close()
                raise
            logger.warning("Not listening on '%s': %s", host, error)
    return sockets


def log_launch(working_directory: str, prefix: str) -> None:
    logger.info("Working directory is '%s'.", working_directory)
    logger.info("Listening at '%s'.", prefix)


def log_request(context: RequestContext) -> None:
    logger.info("Request %d:", context.sequence_number)
    logger.info("  %s", context.url_path)
    logger.info("  %s", context.method)
    logger.info("  %s", context.host)
    logger.info("  %s", context.user_agent)


def log_response(status_code: int) -> None:
    logger.info("  -> %d %s", status_code, _reason_phrase(status_code))


class HttpServer:
    def __init__(self, configuration: ServerConfiguration) -> None:
        self._configuration = configuration
        self._request_count = 0
        self._is_listening = False
        self._lock = asyncio.Lock()
        self._application = Starlette(
            # Mounted rather than routed so every method reaches the loop.
            routes=[Mount("", app=request_response(self._respond))],
            middleware=[
                Middleware(
                    TrustedHostMiddleware,
                    allowed_hosts=_allowed_hosts(configuration),
                    www_redirect=False,
                )
            ],
        )
        self._uvicorn_server = uvicorn.Server(
            uvicorn.Config(
                self._application,
                host=configuration.bind_hosts[0],
                port=configuration.port,
                log_level="error",
            )
        )

    @property
    def configuration(self) -> ServerConfiguration:
        return self._configuration

    @property
    def ip_address(self) -> str:
        return self._configuration.ip_address

    @property
    def port(self) -> int:
        return self._configuration.port

    @property
    def prefix(self) -> str:
        return self._configuration.prefix

    @property
    def prefixes(self) -> tuple[str, ...]:
        return self._configuration.prefixes

    @property
    def working_directory(self) -> str:
        return self._configuration.working_directory

    @property
    def request_count(self) -> int:
        return self._request_count

    @property
    def is_listening(self) -> bool:
        return self._is_listening

    @property
    def application(self) -> Starlette:
        return self._application

    @property
    def uvicorn_server(self) -> uvicorn.Server:
        return self._uvicorn_server

    def launch(self) -> None:
        """Serve until shut down, blocking the calling thread."""
        asyncio.run(self.serve())

    async def serve(self) -> None:
        sockets = bind_sockets(self._configuration)
        self._is_listening = True
        log_launch(self.working_directory, self.prefix)
        await self._uvicorn_server.serve(sockets=sockets)
        if self._is_listening:
            self.shutdown()

    def shutdown(self) -> None:
        if not self._is_listening:
            return
        logger.info("Shutting down.")
        self._uvicorn_server.should_exit = True
        self._is_listening = False

    async def _respond(self, request: Request) -> Response:
        async with self._lock:
            response = PendingResponse()
            try:
                self._request_count += 1
                context = RequestContext.from_request(request, self._request_count)
                log_request(context)
                await handle(context, self._configuration, response)
                log_response(response.status_code)
            except Exception as error:
                logger.error("%s", error)
            logger.info("")
            return response.close()
