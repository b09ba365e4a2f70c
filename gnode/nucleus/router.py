# gnode/nucleus/router.py
import logging
from typing import Optional

from gnode.nucleus.correlation import build_reply
from gnode.nucleus.errors import UnsupportedMessageError
from gnode.nucleus.outbox import Outbox
from gnode.nucleus.protocol import Envelope, Error
from gnode.nucleus.state import NodeState
from gnode.nucleus.variants import NodeVariant

logger = logging.getLogger(__name__)


class Router:
    """
    The Nucleus Router. The final destination in the pipeline.
    It dispatches each request to the active variant's handler and sends back the reply.
    """
    def __init__(self, state: NodeState, variant: NodeVariant):
        self._state = state
        self._variant = variant

    @property
    def state(self) -> NodeState:
        return self._state

    @property
    def variant(self) -> NodeVariant:
        return self._variant

    def handle(self, request: Envelope) -> Optional[Envelope]:
        """
        Runs the handler for `request.body.type` and returns the addressed reply,
        or None when the message needs no answer.
        """
        body = request.body

        if isinstance(body, Error):
            logger.warning(
                f"Peer '{request.src}' reported error {body.code} "
                f"(in reply to {body.in_reply_to}): {body.text}"
            )
            return None

        handler = self._variant.handlers.get(body.type)
        if handler is None:
            raise UnsupportedMessageError(self._variant.name, body.type)

        reply_body = handler(body, self._state)
        if reply_body is None:
            return None
        return build_reply(request, reply_body)

    async def route(self, envelope: Envelope, outbox: Outbox) -> None:
        """
        Handles the envelope and writes the reply, if any, to the outbox.
        """
        reply = self.handle(envelope)
        if reply is not None:
            outbox.send(reply)
