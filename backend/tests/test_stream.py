import json

import pytest

from coda.providers.stream import LineDecoder, iter_json_objects, iter_lines, iter_sse_data

SSE_BODY = (
    'data: {"choices":[{"delta":{"role":"assistant"}}]}\n\n'
    'data: {"choices":[{"delta":{"content":"café "}}]}\n\n'
    ": keep-alive comment\n"
    'data: {"choices":[{"delta":{"content":"\U0001f680 launch"}}]}\n\n'
    "data: {not json\n\n"
    "data: [DONE]\n\n"
    'data: {"choices":[{"delta":{"content":"after done"}}]}\n\n'
).encode()


async def _chunks(parts):
    for part in parts:
        yield part


def _split(data: bytes, *cuts: int) -> list[bytes]:
    bounds = [0, *cuts, len(data)]
    return [data[a:b] for a, b in zip(bounds, bounds[1:])]


async def _collect(aiter) -> list:
    return [item async for item in aiter]


# ── Line reassembly ───────────────────────────────────────────────────────────


def test_line_decoder_keeps_partial_line_until_completed():
    decoder = LineDecoder()
    assert decoder.feed(b"data: one\nda") == ["data: one"]
    assert decoder.feed(b"ta: two") == []
    assert decoder.feed(b"\n") == ["data: two"]


def test_line_decoder_joins_split_multibyte_characters():
    encoded = "é\n".encode()
    decoder = LineDecoder()
    assert decoder.feed(encoded[:1]) == []
    assert decoder.feed(encoded[1:]) == ["é"]


def test_line_decoder_strips_carriage_returns():
    decoder = LineDecoder()
    assert decoder.feed(b"a\r\nb\r\n") == ["a", "b"]


def test_line_decoder_flushes_unterminated_last_line():
    decoder = LineDecoder()
    assert decoder.feed(b'{"x": 1}\n{"y": 2}') == ['{"x": 1}']
    assert decoder.flush() == ['{"y": 2}']
    assert decoder.flush() == []


@pytest.mark.asyncio
async def test_lines_are_independent_of_chunk_boundaries():
    expected = await _collect(iter_lines(_chunks([SSE_BODY])))

    for cut in range(1, len(SSE_BODY)):
        assert await _collect(iter_lines(_chunks(_split(SSE_BODY, cut)))) == expected

    single_bytes = [SSE_BODY[i : i + 1] for i in range(len(SSE_BODY))]
    assert await _collect(iter_lines(_chunks(single_bytes))) == expected


# ── SSE framing ───────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_sse_events_stop_at_done_and_skip_garbage():
    events = await _collect(iter_sse_data(iter_lines(_chunks([SSE_BODY]))))

    contents = [e["choices"][0]["delta"].get("content") for e in events]
    assert contents == [None, "café ", "\U0001f680 launch"]


@pytest.mark.asyncio
async def test_sse_events_are_independent_of_chunk_boundaries():
    expected = await _collect(iter_sse_data(iter_lines(_chunks([SSE_BODY]))))
    for cut_a, cut_b in [(1, 2), (7, 60), (45, 46), (100, len(SSE_BODY) - 3)]:
        parts = _split(SSE_BODY, cut_a, cut_b)
        assert await _collect(iter_sse_data(iter_lines(_chunks(parts)))) == expected


@pytest.mark.asyncio
async def test_sse_without_done_runs_to_end_of_body():
    body = b'data: {"n": 1}\n\ndata: {"n": 2}'
    events = await _collect(iter_sse_data(iter_lines(_chunks([body]))))
    assert events == [{"n": 1}, {"n": 2}]


# ── JSON lines ────────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_json_lines_one_object_per_line():
    objects = [{"candidates": [{"content": {"parts": [{"text": t}]}}]} for t in ("a", "b")]
    body = "\n".join(json.dumps(o) for o in objects).encode() + b"\n"

    events = await _collect(iter_json_objects(iter_lines(_chunks(_split(body, 5, 30)))))

    assert events == objects


@pytest.mark.asyncio
async def test_json_lines_tolerate_array_framing_and_garbage():
    body = b'[{"n": 1}\n,{"n": 2}\n{"n": \n]\n'
    events = await _collect(iter_json_objects(iter_lines(_chunks([body]))))
    assert events == [{"n": 1}, {"n": 2}]


@pytest.mark.asyncio
async def test_json_objects_of_pretty_printed_array():
    objects = [{"candidates": [{"content": {"parts": [{"text": t}], "role": "model"}}]} for t in ("An", "chor")]
    body = json.dumps(objects, indent=2).encode()

    for parts in ([body], _split(body, 3, 40), [body[i : i + 1] for i in range(len(body))]):
        assert await _collect(iter_json_objects(iter_lines(_chunks(parts)))) == objects


@pytest.mark.asyncio
async def test_json_objects_recover_after_broken_object():
    body = b'[{\n  "n": 1\n},\nnot json\n{"n": 2, oops}\n{"n": 3}\n]'
    events = await _collect(iter_json_objects(iter_lines(_chunks([body]))))
    assert events == [{"n": 1}, {"n": 3}]
