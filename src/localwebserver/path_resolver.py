"""
Mapping of URL paths onto files in the working directory.

Resolution is purely lexical: nothing here touches the filesystem except
``is_servable``, and ``..`` segments are joined as they are.
"""

from __future__ import annotations

import os.path
from dataclasses import dataclass
from typing import final

from localwebserver.config import DEFAULT_HOME_PAGE

SEPARATORS = ("/", "\\")

HTML_EXTENSION = ".html"


@final
@dataclass(frozen=True, kw_only=True, slots=True, weakref_slot=True)
class ResolvedTarget:
    filesystem_path: str
    is_valid: bool


def get_extension(path: str) -> str:
    """
    Return the extension of the last path component, including the dot.

    A leading dot counts (``.env`` has the extension ``.env``) and a trailing
    dot does not (``file.`` has none).
    """
    name = path
    for separator in SEPARATORS:
        name = name.rpartition(separator)[2]
    index = name.rfind(".")
    if index == -1 or index == len(name) - 1:
        return ""
    return name[index:]


def has_extension(path: str) -> bool:
    return get_extension(path) != ""


def is_root(url_path: str) -> bool:
    return url_path == "" or url_path in SEPARATORS


def resolve_path(
    url_path: str, working_directory: str, home_page: str = DEFAULT_HOME_PAGE
) -> str:
    """
    Resolve ``url_path`` to a candidate filesystem path.

    >>> resolve_path("/assets/app.js", "/srv")
    '/srv/assets/app.js'
    >>> resolve_path("/docs", "/srv")
    '/srv/docs/index.html'
    >>> resolve_path("page.html", "/srv")
    'page.html'
    """
    if is_root(url_path):
        url_path = home_page
    if url_path.startswith(SEPARATORS):
        remainder = url_path[1:]
        if has_extension(remainder):
            return os.path.join(working_directory, remainder)
        return os.path.join(working_directory, remainder, home_page)
    if has_extension(url_path):
        return url_path
    return os.path.join(url_path, home_page)


def is_servable(path: str) -> bool:
    """
    Decide whether ``path`` should be read or replaced by the not-found page.

    A missing path with an extension other than ``.html`` is reported as
    servable; reading it fails later and the handler answers 404 then.
    """
    if os.path.isfile(path):
        return True
    elif not has_extension(path):
        return False
    elif get_extension(path) == HTML_EXTENSION:
        return False
    else:
        return True


def resolve_target(
    url_path: str, working_directory: str, home_page: str = DEFAULT_HOME_PAGE
) -> ResolvedTarget:
    filesystem_path = resolve_path(url_path, working_directory, home_page)
    return ResolvedTarget(
        filesystem_path=filesystem_path,
        is_valid=is_servable(filesystem_path),
    )
