"""Saving a streamed request body to a single file inside an uploads directory."""

from __future__ import annotations

import os
from collections.abc import AsyncIterable, AsyncIterator, Iterable
from http import HTTPStatus
from pathlib import Path
from typing import Union

UPLOADS_DIRECTORY = "uploads"
"""Directory that uploaded files land in unless told otherwise."""

Chunks = Union[AsyncIterable[bytes], Iterable[bytes]]


class UploadError(Exception):
    """An upload that could not be stored, with the HTTP status it maps to."""

    def __init__(self, status: int, message: str) -> None:
        super().__init__(message)
        self.status = HTTPStatus(status)
        self.message = message


def path_is_valid(path: str) -> bool:
    """True when ``path`` is exactly one plain file-name component.

    This guards against directory traversal: absolute paths, paths that start
    with ``.`` or ``..``, and paths with more than one component are refused.
    """
    if not path or path.startswith("/"):
        return False
    pieces = path.split("/")
    if pieces[0] == ".":
        return False
    components = [piece for piece in pieces if piece and piece != "."]
    return len(components) == 1 and components[0] != ".."


async def _iterate(chunks: Chunks) -> AsyncIterator[bytes]:
    if isinstance(chunks, AsyncIterable):
        async for chunk in chunks:
            yield chunk
    else:
        for chunk in chunks:
            yield chunk


async def stream_to_file(
    path: str,
    chunks: Chunks,
    directory: str | os.PathLike[str] = UPLOADS_DIRECTORY,
) -> Path:
    """Write every chunk to ``directory/path`` and return the file written.

    Raises :class:`UploadError` with status 400 for an unsafe path and with
    status 500 when the chunks cannot be read or the file cannot be written.
    """
    if not path_is_valid(path):
        raise UploadError(HTTPStatus.BAD_REQUEST, "Invalid path")

    target = Path(directory) / path
    try:
        with target.open("wb") as file:
            async for chunk in _iterate(chunks):
                file.write(chunk)
    except Exception as err:  # any failure of the body or the disk is a server error
        raise UploadError(HTTPStatus.INTERNAL_SERVER_ERROR, str(err)) from err
    return target