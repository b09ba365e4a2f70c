# gnode/nucleus/variants.py
import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from gnode.nucleus.correlation import reply_to
from gnode.nucleus.protocol import (
    Broadcast,
    BroadcastOk,
    Echo,
    EchoOk,
    Generate,
    GenerateOk,
    Init,
    InitOk,
    MessageBody,
    Read,
    ReadOk,
    Topology,
    TopologyOk,
)
from gnode.nucleus.state import NodeState

logger = logging.getLogger(__name__)

Handler = Callable[[MessageBody, NodeState], Optional[MessageBody]]


def handle_init(body: Init, state: NodeState) -> InitOk:
    state.initialize(body.node_id, body.node_ids)
    return reply_to(body, InitOk)


def handle_echo(body: Echo, state: NodeState) -> EchoOk:
    return reply_to(body, EchoOk, echo=body.echo)


def handle_generate(body: Generate, state: NodeState) -> GenerateOk:
    return reply_to(body, GenerateOk, id=state.next_unique_id())


def handle_broadcast(body: Broadcast, state: NodeState) -> BroadcastOk:
    if not state.deliver(body.message):
        logger.debug(f"Message {body.message} already delivered.")
    return reply_to(body, BroadcastOk)


def handle_read(body: Read, state: NodeState) -> ReadOk:
    return reply_to(body, ReadOk, messages=state.delivered())


def handle_topology(body: Topology, state: NodeState) -> TopologyOk:
    state.replace_topology(body.topology)
    return reply_to(body, TopologyOk)


@dataclass(frozen=True)
class NodeVariant:
    """A node flavour: its name and the closed set of request types it answers."""

    name: str
    handlers: Dict[str, Handler]


ECHO = NodeVariant(
    name="echo",
    handlers={
        "init": handle_init,
        "echo": handle_echo,
    },
)

UNIQUE_IDS = NodeVariant(
    name="unique-ids",
    handlers={
        "init": handle_init,
        "generate": handle_generate,
    },
)

BROADCAST = NodeVariant(
    name="broadcast",
    handlers={
        "init": handle_init,
        "broadcast": handle_broadcast,
        "read": handle_read,
        "topology": handle_topology,
    },
)

VARIANTS: Dict[str, NodeVariant] = {v.name: v for v in (ECHO, UNIQUE_IDS, BROADCAST)}


def get_variant(name: str) -> NodeVariant:
    try:
        return VARIANTS[name]
    except KeyError:
        raise ValueError(f"Unknown node variant '{name}'. Expected one of: {', '.join(VARIANTS)}") from None
