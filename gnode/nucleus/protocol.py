# gnode/nucleus/protocol.py
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from typing import Annotated, ClassVar, Dict, List, Literal, Optional, Union
import json

from gnode.nucleus.errors import MalformedMessageError

# Ids and message values: non-negative JSON integers only, never coerced.
WireInt = Annotated[int, Field(strict=True, ge=0)]


class MessageBody(BaseModel):
    """Common base for every body variant. `type` is the union discriminant."""

    model_config = ConfigDict(extra="ignore")

    type: str


class RequestBody(MessageBody):
    msg_id: WireInt


class ReplyBody(MessageBody):
    # Whether this reply type carries its own outgoing msg_id.
    carries_msg_id: ClassVar[bool] = False

    msg_id: Optional[WireInt] = None
    in_reply_to: WireInt


# --- Requests ---

class Init(RequestBody):
    type: Literal["init"] = "init"
    node_id: str
    node_ids: List[str] = Field(default_factory=list)


class Echo(RequestBody):
    type: Literal["echo"] = "echo"
    echo: str


class Generate(RequestBody):
    type: Literal["generate"] = "generate"


class Broadcast(RequestBody):
    type: Literal["broadcast"] = "broadcast"
    message: WireInt


class Read(RequestBody):
    type: Literal["read"] = "read"


class Topology(RequestBody):
    type: Literal["topology"] = "topology"
    topology: Dict[str, List[str]]


# --- Replies ---

class InitOk(ReplyBody):
    type: Literal["init_ok"] = "init_ok"


class EchoOk(ReplyBody):
    carries_msg_id: ClassVar[bool] = True

    type: Literal["echo_ok"] = "echo_ok"
    echo: str


class GenerateOk(ReplyBody):
    carries_msg_id: ClassVar[bool] = True

    type: Literal["generate_ok"] = "generate_ok"
    id: str


class BroadcastOk(ReplyBody):
    type: Literal["broadcast_ok"] = "broadcast_ok"


class ReadOk(ReplyBody):
    type: Literal["read_ok"] = "read_ok"
    messages: List[WireInt]


class TopologyOk(ReplyBody):
    type: Literal["topology_ok"] = "topology_ok"


class Error(MessageBody):
    """Error body. Peers send these to us; we send them for reportable failures."""

    type: Literal["error"] = "error"
    in_reply_to: Optional[WireInt] = None
    code: WireInt
    text: str


Body = Annotated[
    Union[
        Init,
        InitOk,
        Echo,
        EchoOk,
        Generate,
        GenerateOk,
        Broadcast,
        BroadcastOk,
        Read,
        ReadOk,
        Topology,
        TopologyOk,
        Error,
    ],
    Field(discriminator="type"),
]


class Envelope(BaseModel):
    """
    One protocol message: addressing plus a typed body.
    `src` and `dest` are opaque node identifiers and are never validated.
    """

    model_config = ConfigDict(extra="ignore")

    src: str = Field(..., description="The node or client that sent the message.")
    dest: str = Field(..., description="The node or client the message is addressed to.")
    body: Body = Field(..., description="The tagged payload, selected by `body.type`.")


def decode_envelope(line: str) -> Envelope:
    """Parses one wire line. Any failure means the stream is unusable."""
    try:
        return Envelope.model_validate(json.loads(line))
    except json.JSONDecodeError as e:
        raise MalformedMessageError(f"Input line is not valid JSON: {e}") from e
    except ValidationError as e:
        raise MalformedMessageError(f"Input line does not match the message schema: {e}") from e


def encode_envelope(envelope: Envelope) -> str:
    """Serializes an envelope to a single line, without the trailing newline."""
    return envelope.model_dump_json(exclude_none=True)
