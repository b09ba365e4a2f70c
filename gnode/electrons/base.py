# gnode/electrons/base.py
from abc import ABC, abstractmethod
from typing import Callable, Awaitable

from gnode.nucleus.outbox import Outbox
from gnode.nucleus.protocol import Envelope


class BaseElectron(ABC):
    """
    Middleware stage wrapped around the dispatcher for one request at a time.
    A stage may look at the request, answer it through the outbox itself,
    or decline to pass it on.
    """

    @abstractmethod
    async def process(
        self,
        envelope: Envelope,
        outbox: Outbox,
        next_electron: Callable[[], Awaitable[None]],
    ) -> None:
        """
        Args:
            envelope: The decoded request.
            outbox: The node's output channel, for electrons that answer
                    on their own (e.g., sending an `error` body).
            next_electron: Invokes the next electron in the pipeline. If it is
                           not awaited, the chain is halted and the request
                           never reaches the dispatcher.
        """
        pass
