# gnode/gateway.py
import asyncio
import logging
import os
import stat
import sys
from typing import BinaryIO, Optional, TextIO

from gnode.settings import settings
from gnode.engine import PipelineEngine
from gnode.nucleus.errors import TransportError
from gnode.nucleus.outbox import Outbox

logger = logging.getLogger(__name__)

FILE_CHUNK_BYTES = 64 * 1024


class StdioGateway:
    """
    Attaches the process's standard streams to the pipeline engine:
    requests are read from stdin, replies written to stdout.
    """
    def __init__(
        self,
        pipeline: PipelineEngine,
        stdin: Optional[BinaryIO] = None,
        stdout: Optional[TextIO] = None,
    ):
        self._pipeline = pipeline
        self._stdin = stdin if stdin is not None else sys.stdin.buffer
        self._outbox = Outbox(stdout if stdout is not None else sys.stdout)
        logger.info("StdioGateway initialized.")

    @property
    def outbox(self) -> Outbox:
        return self._outbox

    async def start(self):
        """
        Attaches stdin and runs the engine until end of input. Pipes and
        sockets are read through the event loop; a regular file (`< requests.jsonl`)
        is read in a worker thread and fed to the same reader.
        """
        reader = asyncio.StreamReader(limit=settings.MAX_LINE_BYTES)

        try:
            is_file = stat.S_ISREG(os.fstat(self._stdin.fileno()).st_mode)
        except (OSError, ValueError) as e:
            raise TransportError(f"Cannot inspect stdin: {e}") from e

        if not is_file:
            await self._connect_pipe(reader)
            logger.info("StdioGateway connected to stdin.")
            await self._pipeline.run(reader, self._outbox)
            return

        logger.info("StdioGateway reading stdin from a regular file.")
        feeder = asyncio.create_task(self._feed_from_file(reader))
        try:
            await self._pipeline.run(reader, self._outbox)
        finally:
            if not feeder.done():
                feeder.cancel()
        # Surfaces a read error that ended the input early.
        await feeder

    async def _connect_pipe(self, reader: asyncio.StreamReader):
        loop = asyncio.get_running_loop()
        try:
            await loop.connect_read_pipe(lambda: asyncio.StreamReaderProtocol(reader), self._stdin)
        except (OSError, ValueError) as e:
            raise TransportError(f"Cannot attach stdin to the event loop: {e}") from e

    async def _feed_from_file(self, reader: asyncio.StreamReader):
        loop = asyncio.get_running_loop()
        try:
            while True:
                chunk = await loop.run_in_executor(None, self._stdin.read, FILE_CHUNK_BYTES)
                if not chunk:
                    break
                reader.feed_data(chunk)
        except (OSError, ValueError) as e:
            reader.feed_eof()
            raise TransportError(f"Reading stdin failed: {e}") from e
        reader.feed_eof()
