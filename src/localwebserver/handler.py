"""
Handling of a single request.

``handle`` fills in a ``PendingResponse``; the caller closes it, which turns
it into the starlette ``Response`` that is sent back.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import final

from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import Response

from localwebserver.config import ServerConfiguration
from localwebserver.content_type import content_type
from localwebserver.path_resolver import resolve_path, resolve_target

CHARSET = "utf-8"


@final
@dataclass(frozen=True, kw_only=True, slots=True, weakref_slot=True)
class RequestContext:
    url_path: str
    sequence_number: int
    """Position of the request in acceptance order, starting at 1."""

    method: str
    host: str
    user_agent: str

    @classmethod
    def from_request(cls, request: Request, sequence_number: int) -> RequestContext:
        return cls(
            url_path=request.url.path,
            sequence_number=sequence_number,
            method=request.method,
            host=request.headers.get("host", ""),
            user_agent=request.headers.get("user-agent", ""),
        )


@final
@dataclass(kw_only=True, slots=True)
class PendingResponse:
    """Response state that is mutated while a request is handled."""

    status_code: int = 200
    content_type: str | None = None
    body: bytes = b""
    served_path: str | None = None
    """The file whose bytes became the body, if any."""

    closed: bool = False

    def close(self) -> Response:
        if self.closed:
            raise RuntimeError("Response is already closed.")
        self.closed = True
        headers = {"content-length": str(len(self.body))}
        if self.content_type is not None:
            headers["content-type"] = f"{self.content_type}; charset={CHARSET}"
        return Response(
            content=self.body, status_code=self.status_code, headers=headers
        )


def _read_bytes(path: str) -> bytes:
    return Path(path).read_bytes()


async def handle(
    context: RequestContext,
    configuration: ServerConfiguration,
    response: PendingResponse,
) -> PendingResponse:
    target = resolve_target(
        context.url_path, configuration.working_directory, configuration.home_page
    )
    target_path = target.filesystem_path
    if not target.is_valid:
        target_path = resolve_path(
            configuration.not_found,
            configuration.working_directory,
            configuration.home_page,
        )
        response.status_code = 404

    try:
        data = await run_in_threadpool(_read_bytes, target_path)
    except (OSError, ValueError):
        response.status_code = 404
        return response

    response.content_type = content_type(target_path)
    response.body = data
    response.served_path = target_path
    return response
