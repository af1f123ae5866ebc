"""Incremental decoding of vendor streaming bodies.

Vendors stream chat completions in one of two formats:

* Server-Sent Events: ``data: {...}`` lines, optionally terminated by a
  literal ``data: [DONE]``.
* Bare JSON objects, either one per line or as the elements of a single
  JSON array that may be pretty-printed across many lines (Google's
  streaming endpoint without ``alt=sse``).

Bytes arrive in arbitrarily sized chunks, so decoding happens in three
composable steps: ``iter_lines`` reassembles lines, ``iter_sse_data`` /
``iter_json_objects`` turn lines into parsed JSON events.
"""

import codecs
import json
import logging
from collections.abc import AsyncIterable, AsyncIterator

logger = logging.getLogger(__name__)

DONE_SENTINEL = "[DONE]"
_SSE_PREFIX = "data: "


class LineDecoder:
    """Turn arbitrarily split byte chunks into complete text lines.

    Multi-byte UTF-8 sequences may straddle chunk boundaries; a trailing
    partial line is kept until the next chunk (or ``flush``) completes it.
    """

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""

    def feed(self, chunk: bytes) -> list[str]:
        self._buffer += self._decoder.decode(chunk)
        *lines, self._buffer = self._buffer.split("\n")
        return [line.rstrip("\r") for line in lines]

    def flush(self) -> list[str]:
        self._buffer += self._decoder.decode(b"", final=True)
        rest, self._buffer = self._buffer, ""
        rest = rest.rstrip("\r")
        return [rest] if rest else []


async def iter_lines(chunks: AsyncIterable[bytes]) -> AsyncIterator[str]:
    decoder = LineDecoder()
    async for chunk in chunks:
        for line in decoder.feed(chunk):
            yield line
    for line in decoder.flush():
        yield line


def _parse(payload: str) -> dict | None:
    try:
        event = json.loads(payload)
    except ValueError:
        # Partial or keep-alive fragments are expected on the wire.
        logger.debug("Skipping undecodable stream line: %.80r", payload)
        return None
    return event if isinstance(event, dict) else None


async def iter_sse_data(lines: AsyncIterable[str]) -> AsyncIterator[dict]:
    async for line in lines:
        if not line.startswith(_SSE_PREFIX):
            continue
        payload = line[len(_SSE_PREFIX) :].strip()
        if payload == DONE_SENTINEL:
            return
        event = _parse(payload)
        if event is not None:
            yield event


_JSON = json.JSONDecoder()
# Array brackets, separators and blank space between streamed objects.
_FRAMING = " \t\r\n[,]"


async def iter_json_objects(lines: AsyncIterable[str]) -> AsyncIterator[dict]:
    """Objects of a streamed JSON array or of newline-delimited JSON.

    An object may span several lines, as in Google's pretty-printed array
    body, so lines are buffered until the pending object is complete. A line
    that cannot be part of a valid object is dropped.
    """
    buffer = ""
    async for line in lines:
        buffer += line + "\n"
        while buffer := buffer.lstrip(_FRAMING):
            if not buffer.startswith("{"):
                _, _, buffer = buffer.partition("\n")
                logger.debug("Skipping undecodable stream line")
                continue
            try:
                event, end = _JSON.raw_decode(buffer)
            except json.JSONDecodeError as exc:
                if exc.pos >= len(buffer.rstrip()):
                    break  # incomplete, wait for more lines
                _, _, buffer = buffer.partition("\n")
                logger.debug("Skipping undecodable stream line: %s", exc.msg)
                continue
            buffer = buffer[end:]
            if isinstance(event, dict):
                yield event
    if buffer.strip():
        logger.debug("Dropping incomplete JSON object at end of stream: %.80r", buffer)
