# gnode/nucleus/state.py
import logging
from typing import Dict, List, Optional

from gnode.nucleus.errors import NodeNotInitializedError

logger = logging.getLogger(__name__)


class NodeState:
    """
    Process-lifetime state of a single node.
    Owned by the run loop's task; handlers read and mutate it one request at a time.
    """

    def __init__(self):
        self.identity: Optional[str] = None
        self.membership: List[str] = []
        # dict keys as an insertion-ordered set
        self._delivered: Dict[int, None] = {}
        self.topology: Dict[str, List[str]] = {}
        self.next_local_id = 1

    @property
    def is_initialized(self) -> bool:
        return self.identity is not None

    def initialize(self, node_id: str, node_ids: List[str]):
        """Assigns this node's identity and the cluster membership. A repeat init overwrites both."""
        if self.identity is not None:
            logger.warning(f"[State] Re-initialized: identity '{self.identity}' replaced by '{node_id}'.")
        self.identity = node_id
        self.membership = list(node_ids)
        logger.info(f"[State] Node '{node_id}' initialized with {len(self.membership)} cluster members.")

    def require_identity(self, message_type: str) -> str:
        if self.identity is None:
            raise NodeNotInitializedError(message_type)
        return self.identity

    def deliver(self, message: int) -> bool:
        """Records a broadcast value. Returns False if it had already been delivered."""
        if message in self._delivered:
            return False
        self._delivered[message] = None
        return True

    def delivered(self) -> List[int]:
        """Snapshot of every delivered value, in first-delivery order."""
        return list(self._delivered)

    def replace_topology(self, topology: Dict[str, List[str]]):
        self.topology = {node: list(neighbors) for node, neighbors in topology.items()}
        logger.info(f"[State] Topology replaced ({len(self.topology)} nodes). Neighbors: {self.neighbors()}")

    def neighbors(self) -> List[str]:
        """Peers this node would fan out to. A node missing from the topology has none."""
        if self.identity is None:
            return []
        return list(self.topology.get(self.identity, []))

    def next_unique_id(self) -> str:
        """Returns `<identity>-<counter>` and advances the counter."""
        identity = self.require_identity("generate")
        unique_id = f"{identity}-{self.next_local_id}"
        self.next_local_id += 1
        return unique_id
