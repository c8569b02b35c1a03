"""
localwebserver: serve the files of a working directory over HTTP.

```python
from localwebserver import HttpServer, ServerConfiguration

HttpServer(ServerConfiguration(port=8080, working_directory="public")).launch()
```

``/`` and extensionless paths map to the home page of the corresponding
directory; paths that cannot be served are answered with the not-found page
and status 404.
"""

from localwebserver.config import ConfigurationError, ServerConfiguration
from localwebserver.content_type import content_type
from localwebserver.handler import PendingResponse, RequestContext, handle
from localwebserver.path_resolver import (
    ResolvedTarget,
    is_servable,
    resolve_path,
    resolve_target,
)
from localwebserver.server import HttpServer

__all__ = [
    "ConfigurationError",
    "HttpServer",
    "PendingResponse",
    "RequestContext",
    "ResolvedTarget",
    "ServerConfiguration",
    "content_type",
    "handle",
    "is_servable",
    "resolve_path",
    "resolve_target",
]
