# gnode/electrons/logger.py
import logging
from typing import Callable, Awaitable

from gnode.electrons.base import BaseElectron
from gnode.nucleus.outbox import Outbox
from gnode.nucleus.protocol import Envelope

logger = logging.getLogger(__name__)


class LoggerElectron(BaseElectron):
    """Debug-logs the type, msg_id and addressing of every request."""

    async def process(
        self,
        envelope: Envelope,
        outbox: Outbox,
        next_electron: Callable[[], Awaitable[None]],
    ) -> None:
        logger.debug(
            f"[LoggerElectron] Processing '{envelope.body.type}' "
            f"(msg_id: {getattr(envelope.body, 'msg_id', None)}, from: {envelope.src}, to: {envelope.dest})"
        )

        await next_electron()
