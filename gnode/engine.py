# gnode/engine.py
import asyncio
import functools
import logging
from typing import List, Callable, Awaitable

from gnode.nucleus.errors import MalformedMessageError
from gnode.nucleus.outbox import Outbox
from gnode.nucleus.protocol import Envelope, decode_envelope
from gnode.electrons.base import BaseElectron

logger = logging.getLogger(__name__)


class PipelineEngine:
    """
    The engine that runs the middleware pipeline over the node's input stream.

    It takes a list of Electrons (middleware) and a final Nucleus handler,
    and chains them together to process incoming messages one at a time.
    """

    def __init__(
        self,
        electrons: List[BaseElectron],
        nucleus_handler: Callable[[Envelope, Outbox], Awaitable[None]],
    ):
        self._electrons = electrons
        self._nucleus_handler = nucleus_handler
        self.processed = 0
        logger.info(f"PipelineEngine initialized with {len(self._electrons)} electrons.")

    async def run(self, reader: asyncio.StreamReader, outbox: Outbox) -> None:
        """
        Reads newline-delimited requests until end of input. Each request is
        fully handled, and its reply flushed, before the next line is read.
        Decode, dispatch and write failures propagate and end the run.
        """
        logger.info("Run loop started.")
        while True:
            try:
                raw = await reader.readline()
            except ValueError as e:
                # StreamReader reports an over-long line this way
                raise MalformedMessageError(f"Input line exceeds the reader limit: {e}") from e

            if not raw:
                break

            try:
                line = raw.decode("utf-8")
            except UnicodeDecodeError as e:
                raise MalformedMessageError(f"Input line is not valid UTF-8: {e}") from e

            if not line.strip():
                continue

            envelope = decode_envelope(line)
            await self.process_message(envelope, outbox)

        logger.info(f"End of input reached after {self.processed} messages. Replies sent: {outbox.sent}.")

    async def process_message(self, envelope: Envelope, outbox: Outbox) -> None:
        await self._execute_pipeline(envelope, outbox)
        self.processed += 1

    async def _execute_pipeline(self, envelope: Envelope, outbox: Outbox) -> None:
        """Nests the electrons around the nucleus handler and runs the result once."""
        # Start with the nucleus handler as the final step in the chain.
        next_handler = functools.partial(self._nucleus_handler, envelope, outbox)

        # Wrapped in reverse, so the first electron in the list runs first.
        for electron in reversed(self._electrons):
            next_handler = functools.partial(electron.process, envelope, outbox, next_handler)

        await next_handler()
