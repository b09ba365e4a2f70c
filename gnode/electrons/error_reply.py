# gnode/electrons/error_reply.py
import logging
from typing import Callable, Awaitable

from gnode.electrons.base import BaseElectron
from gnode.nucleus.correlation import build_reply
from gnode.nucleus.errors import ReportableError
from gnode.nucleus.outbox import Outbox
from gnode.nucleus.protocol import Envelope, Error

logger = logging.getLogger(__name__)


class ErrorReplyElectron(BaseElectron):
    """
    Answers requests whose handler raised a ReportableError with an `error`
    body, so the run keeps going. Fatal errors pass through untouched.
    """

    def __init__(self):
        self.reported = 0

    async def process(
        self,
        envelope: Envelope,
        outbox: Outbox,
        next_electron: Callable[[], Awaitable[None]],
    ) -> None:
        try:
            await next_electron()
        except ReportableError as e:
            self.reported += 1
            logger.error(f"[ErrorReply] '{envelope.body.type}' from '{envelope.src}' failed: {e}")
            error_body = Error(
                in_reply_to=getattr(envelope.body, "msg_id", None),
                code=int(e.code),
                text=str(e),
            )
            outbox.send(build_reply(envelope, error_body))
