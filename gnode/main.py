# gnode/main.py
import asyncio
import logging
import sys
from typing import Optional

from gnode.settings import settings
from gnode.engine import PipelineEngine
from gnode.electrons.logger import LoggerElectron
from gnode.electrons.error_reply import ErrorReplyElectron
from gnode.nucleus.errors import FatalNodeError
from gnode.nucleus.router import Router
from gnode.nucleus.state import NodeState
from gnode.nucleus.variants import get_variant
from gnode.gateway import StdioGateway

logger = logging.getLogger("gnode_main")


def build_pipeline(variant_name: str) -> PipelineEngine:
    """Wires a fresh node of the given variant: state, router and electrons."""
    variant = get_variant(variant_name)
    router = Router(NodeState(), variant)

    active_electrons = [
        LoggerElectron(),
        ErrorReplyElectron(), # Innermost, directly around the router.
    ]

    return PipelineEngine(
        electrons=active_electrons,
        nucleus_handler=router.route,
    )


async def serve(variant_name: str):
    """
    Runs one node over stdin/stdout until end of input.
    """
    logger.info(f"Starting '{variant_name}' node...")
    pipeline_engine = build_pipeline(variant_name)
    gateway = StdioGateway(pipeline_engine)
    await gateway.start()


def main(variant_name: Optional[str] = None) -> int:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format=settings.LOG_FORMAT,
        stream=sys.stderr,
    )

    try:
        asyncio.run(serve(variant_name or settings.NODE_VARIANT))
    except (FatalNodeError, OSError) as e:
        logger.critical(f"Node stopped: {e}", exc_info=True)
        return 1
    except KeyboardInterrupt:
        logger.info("Node is shutting down.")
    return 0


def main_cli():
    sys.exit(main())


def run_echo():
    sys.exit(main("echo"))


def run_unique_ids():
    sys.exit(main("unique-ids"))


def run_broadcast():
    sys.exit(main("broadcast"))


if __name__ == "__main__":
    main_cli()
