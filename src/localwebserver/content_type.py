"""Extension to MIME type lookup.

Only the final extension is looked up, so ``bundle.js.gz`` is a gzip file,
not JavaScript.
"""

import mimetypes

from localwebserver.path_resolver import get_extension

DEFAULT_CONTENT_TYPE = "application/octet-stream"


def content_type(path: str) -> str:
    extension = get_extension(path).lower()
    if not extension:
        return DEFAULT_CONTENT_TYPE
    if not mimetypes.inited:
        mimetypes.init()
    guessed = mimetypes.types_map.get(extension) or mimetypes.common_types.get(
        extension
    )
    return guessed if guessed is not None else DEFAULT_CONTENT_TYPE
