"""Port origin sources: command-line arguments or a whitespace-separated stream."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import TextIO

MAX_TOKEN_BYTES = 64 * 1024
READ_CHUNK_CHARS = 4096


class OriginTooLongError(ValueError):
    """A single origin token from the input stream exceeds the size limit."""


def iter_origins(args: Iterable[str], stream: TextIO | None = None) -> Iterator[str]:
    """Yield origins from ``args``; read ``stream`` only when no args are given."""

    explicit = tuple(args)
    if explicit:
        yield from explicit
        return
    if stream is not None:
        yield from iter_stream_origins(stream)


def iter_stream_origins(
    stream: TextIO,
    max_token_bytes: int = MAX_TOKEN_BYTES,
    chunk_chars: int = READ_CHUNK_CHARS,
) -> Iterator[str]:
    """Lazily split ``stream`` on whitespace, e.g. the output of ``portgrep -1``.

    The stream is read in fixed-size chunks, so a single huge line (``portgrep -1``
    prints every origin on one line) never has to fit in memory at once. Only
    the token that straddles a chunk boundary is carried over.
    """

    pending = ""
    while True:
        chunk = stream.read(chunk_chars)
        if not chunk:
            break
        data = pending + chunk
        tokens = data.split()
        pending = tokens.pop() if tokens and not data[-1].isspace() else ""
        for token in tokens:
            _check_token(token, max_token_bytes)
            yield token
        _check_token(pending, max_token_bytes)
    if pending:
        yield pending


def _check_token(token: str, max_token_bytes: int) -> None:
    if len(token.encode("utf-8", errors="surrogateescape")) > max_token_bytes:
        raise OriginTooLongError(
            f"origin token exceeds {max_token_bytes} bytes: {token[:40]!r}...",
        )
