from __future__ import annotations


class GraphError(Exception):
    """Base error for graph operations; carries the HTTP status the boundary uses."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidArgument(GraphError):
    status_code = 400


class NotFound(GraphError):
    status_code = 404

    def __init__(self, message: str, *, what: str | None = None):
        super().__init__(message)
        self.what = what


class Conflict(GraphError):
    # 400 rather than 409: clients of the original service expect 400 on duplicates.
    status_code = 400


class StorageError(GraphError):
    status_code = 400
