"""
Server configuration.

A ``ServerConfiguration`` is validated once, when it is constructed, so every
instance that exists is one a server may be built from.
"""

from __future__ import annotations

import ipaddress
import os
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import final

DEFAULT_IP_ADDRESS = "localhost"
DEFAULT_PORT = 8000
DEFAULT_HOME_PAGE = "index.html"
DEFAULT_NOT_FOUND = "not_found.html"

LOCALHOST = "localhost"
LOOPBACK_ADDRESS = "127.0.0.1"
LOOPBACK_IPV6_ADDRESS = "::1"

NO_ARGUMENT = "!"
"""Positional argument meaning "use the default"."""

_ARGUMENT_COUNT = 5


class ConfigurationError(ValueError):
    """Raised when a configuration cannot be used to build a server."""


def is_valid_ip_address(ip_address: str) -> bool:
    if ip_address == LOCALHOST:
        return True
    try:
        ipaddress.ip_address(ip_address)
    except ValueError:
        return False
    return True


@final
@dataclass(frozen=True, kw_only=True, slots=True, weakref_slot=True)
class ServerConfiguration:
    ip_address: str = DEFAULT_IP_ADDRESS
    """``"localhost"`` or a literal IPv4/IPv6 address."""

    port: int = DEFAULT_PORT
    """Non-negative port number. ``0`` lets the operating system pick one."""

    home_page: str = DEFAULT_HOME_PAGE
    """File served for the root path and for extensionless paths."""

    not_found: str = DEFAULT_NOT_FOUND
    """File served, with status 404, for paths that cannot be served."""

    working_directory: str = field(default_factory=os.getcwd)
    """Directory that rooted URL paths are resolved against."""

    def __post_init__(self) -> None:
        if not is_valid_ip_address(self.ip_address):
            raise ConfigurationError(
                f"{self.ip_address!r} is not a valid IP address."
            )
        if isinstance(self.port, bool) or not isinstance(self.port, int):
            raise ConfigurationError(f"{self.port!r} is not a valid port.")
        if self.port < 0:
            raise ConfigurationError(f"{self.port!r} is not a valid port.")

    @classmethod
    def from_arguments(cls, arguments: Sequence[str]) -> ServerConfiguration:
        """
        Build a configuration from up to five positional values.

        The positions are: IP address, port, home page, not-found page and
        working directory. A missing position or ``NO_ARGUMENT`` keeps the
        default for that field.
        """
        if len(arguments) > _ARGUMENT_COUNT:
            raise ConfigurationError(
                f"Expected at most {_ARGUMENT_COUNT} arguments, got {len(arguments)}."
            )
        padded: list[str | None] = [
            None if argument == NO_ARGUMENT else argument for argument in arguments
        ]
        padded.extend([None] * (_ARGUMENT_COUNT - len(padded)))
        ip_address, port, home_page, not_found, working_directory = padded

        overrides: dict[str, object] = {}
        if ip_address is not None:
            overrides["ip_address"] = ip_address
        if port is not None:
            try:
                overrides["port"] = int(port)
            except ValueError:
                raise ConfigurationError(f"{port!r} is not a valid port.") from None
        if home_page is not None:
            overrides["home_page"] = home_page
        if not_found is not None:
            overrides["not_found"] = not_found
        if working_directory is not None:
            overrides["working_directory"] = working_directory
        return cls(**overrides)  # type: ignore[arg-type]

    @property
    def is_loopback(self) -> bool:
        return self.ip_address in (LOCALHOST, LOOPBACK_ADDRESS)

    @property
    def bind_hosts(self) -> tuple[str, ...]:
        """
        Addresses a listening socket is bound to.

        ``localhost`` may resolve to either loopback address, so the loopback
        forms bind both.
        """
        if self.is_loopback:
            return (LOOPBACK_ADDRESS, LOOPBACK_IPV6_ADDRESS)
        return (self.ip_address,)

    @property
    def host_names(self) -> tuple[str, ...]:
        """Host names the server answers to."""
        if self.is_loopback:
            return (LOCALHOST, LOOPBACK_ADDRESS)
        return (self.ip_address,)

    @property
    def prefix(self) -> str:
        return get_prefix(self.ip_address, self.port)

    @property
    def prefixes(self) -> tuple[str, ...]:
        return tuple(get_prefix(host_name, self.port) for host_name in self.host_names)


def get_prefix(ip_address: str, port: int) -> str:
    if ":" in ip_address:
        # IPv6 literal
        return f"http://[{ip_address}]:{port}/"
    return f"http://{ip_address}:{port}/"
