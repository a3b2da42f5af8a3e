"""Process orchestration.

Runs the shared long-poll loop, the command dispatcher and the interaction
poller as independent asyncio tasks. The tasks only share the transport and
the quote service; everything else flows through two queues.
"""

import asyncio
import logging

from ..models import CommandRequest, InteractionEvent
from .dispatcher import CommandDispatcher
from .gateway import ChatTransport
from .poller import InteractionPoller
from .updates import UpdateRouter

logger = logging.getLogger(__name__)


async def run_bot(
    gateway: ChatTransport,
    dispatcher: CommandDispatcher,
    poller: InteractionPoller,
    timeout: int = 30,
    drop_pending: bool = True,
    retry_delay: float = 1.0,
    max_retry_delay: float = 30.0,
) -> None:
    """Run all bot loops until one of them stops.

    The loops never return in normal operation. If one does finish or
    crash, the others are cancelled and its exception is re-raised so the
    process exits instead of idling without a retrieval loop.

    This deliberately ends the run when any single loop ends, rather than
    staying alive while at least one loop is still running. The handler
    loops only see updates through the retrieval loop, so a survivor would
    never receive work again.

    Args:
        gateway: Shared chat transport.
        dispatcher: Command dispatcher.
        poller: Interaction poller.
        timeout: Long-poll timeout in seconds.
        drop_pending: Whether to discard the update backlog on start.
        retry_delay: Initial delay after a failed poll.
        max_retry_delay: Maximum delay after repeated poll failures.
    """
    commands: asyncio.Queue[CommandRequest] = asyncio.Queue()
    interactions: asyncio.Queue[InteractionEvent] = asyncio.Queue()

    router = UpdateRouter(
        gateway,
        commands,
        interactions,
        timeout=timeout,
        drop_pending=drop_pending,
        retry_delay=retry_delay,
        max_retry_delay=max_retry_delay,
    )

    tasks = [
        asyncio.create_task(router.run(), name="updates"),
        asyncio.create_task(dispatcher.run(commands), name="commands"),
        asyncio.create_task(poller.run(interactions), name="interactions"),
    ]
    logger.info("Bot loops started")

    try:
        done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
    finally:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    for task in done:
        if task.cancelled():
            continue
        error = task.exception()
        if error is not None:
            logger.error(f"Loop {task.get_name()} crashed: {error}")
            raise error
        logger.warning(f"Loop {task.get_name()} stopped")
