"""Tracked background tasks and graceful shutdown.

Delayed follow-up replies run as asyncio tasks that outlive the webhook
request that scheduled them. They are registered here so the application
lifespan can wait for them (or cancel them) on shutdown instead of silently
dropping them.
"""

import asyncio

import logfire

# Shutdown event for graceful termination
shutdown_event = asyncio.Event()

# Track pending background tasks for graceful shutdown
_pending_tasks: set[asyncio.Task] = set()


def track_background_task(task: asyncio.Task) -> None:
    """
    Track a background task for graceful shutdown.

    Example:
        task = asyncio.create_task(send_after_delay(...))
        track_background_task(task)
    """
    _pending_tasks.add(task)
    task.add_done_callback(_pending_tasks.discard)


def pending_task_count() -> int:
    """Number of tracked tasks that have not finished yet."""
    return len(_pending_tasks)


def is_shutting_down() -> bool:
    """Check if the application is in shutdown mode."""
    return shutdown_event.is_set()


async def drain_background_tasks(timeout_seconds: float) -> tuple[int, int]:
    """Wait for tracked tasks, cancelling whatever is still running at timeout.

    Returns:
        (completed_count, cancelled_count)
    """
    if not _pending_tasks:
        logfire.info("No pending background tasks during shutdown")
        return 0, 0

    logfire.info(
        "Waiting for pending background tasks to complete",
        task_count=len(_pending_tasks),
        timeout_seconds=timeout_seconds,
    )

    done, pending = await asyncio.wait(
        set(_pending_tasks),
        timeout=timeout_seconds,
        return_when=asyncio.ALL_COMPLETED,
    )

    if pending:
        logfire.warning(
            "Cancelling remaining tasks after timeout",
            completed_count=len(done),
            cancelled_count=len(pending),
        )
        for task in pending:
            task.cancel()

        # Wait briefly for cancellation to complete
        await asyncio.gather(*pending, return_exceptions=True)
    else:
        logfire.info(
            "All background tasks completed successfully",
            completed_count=len(done),
        )

    return len(done), len(pending)
