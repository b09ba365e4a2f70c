# gnode/nucleus/correlation.py
from typing import Any, Type, TypeVar

from gnode.nucleus.protocol import Envelope, MessageBody, ReplyBody, RequestBody

R = TypeVar("R", bound=ReplyBody)


def build_reply(request: Envelope, reply_body: MessageBody) -> Envelope:
    """
    Addresses a reply back to whoever sent the request.
    The body is used as given; only `src` and `dest` are derived here.
    """
    return Envelope(src=request.dest, dest=request.src, body=reply_body)


def reply_to(request_body: RequestBody, reply_cls: Type[R], **fields: Any) -> R:
    """
    Builds a reply body correlated with `request_body`.

    Every reply gets `in_reply_to` set to the request's `msg_id`. Reply types
    that declare `carries_msg_id` also get an outgoing `msg_id`, one past the
    request's.
    """
    fields["in_reply_to"] = request_body.msg_id
    if reply_cls.carries_msg_id:
        fields["msg_id"] = request_body.msg_id + 1
    return reply_cls(**fields)
