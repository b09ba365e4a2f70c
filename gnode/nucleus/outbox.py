# gnode/nucleus/outbox.py
import logging
from typing import TextIO

from gnode.nucleus.protocol import Envelope, encode_envelope

logger = logging.getLogger(__name__)


class Outbox:
    """
    The node's single output channel. Each envelope becomes one line,
    flushed immediately so replies leave in request order.
    """

    def __init__(self, stream: TextIO):
        self._stream = stream
        self.sent = 0

    def send(self, envelope: Envelope) -> None:
        self._stream.write(encode_envelope(envelope) + "\n")
        self._stream.flush()
        self.sent += 1
        logger.debug(f"[Outbox] Sent '{envelope.body.type}' to '{envelope.dest}'.")
