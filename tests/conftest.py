import asyncio
import io
import json

import pytest

from gnode.main import build_pipeline
from gnode.nucleus.outbox import Outbox
from gnode.nucleus.protocol import Envelope
from gnode.nucleus.router import Router
from gnode.nucleus.state import NodeState
from gnode.nucleus.variants import get_variant


def request(body, src="c1", dest="n1"):
    return Envelope.model_validate({"src": src, "dest": dest, "body": body})


def wire(body, src="c1", dest="n1"):
    return json.dumps({"src": src, "dest": dest, "body": body})


def feed(engine, lines, stream):
    """Runs `lines` through the engine, writing replies to `stream`."""
    async def _run():
        reader = asyncio.StreamReader()
        reader.feed_data("".join(line + "\n" for line in lines).encode("utf-8"))
        reader.feed_eof()
        await engine.run(reader, Outbox(stream))

    asyncio.run(_run())


def replies(stream):
    return [json.loads(line) for line in stream.getvalue().splitlines()]


@pytest.fixture
def state():
    return NodeState()


@pytest.fixture
def broadcast_router(state):
    return Router(state, get_variant("broadcast"))


@pytest.fixture
def run_node():
    """Feeds wire lines to a fresh node and returns the decoded replies."""
    def _run(variant, lines):
        stream = io.StringIO()
        feed(build_pipeline(variant), lines, stream)
        return replies(stream)
    return _run
