"""
Fire-and-forget execution of side work (audit delivery) on daemon threads,
so request handlers never wait on it.
"""

import threading
import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class BackgroundTaskService:

    @staticmethod
    def run_async(
        task: Callable,
        *args,
        task_name: Optional[str] = None,
        on_error: Optional[Callable[[Exception], None]] = None,
        **kwargs
    ) -> threading.Thread:
        """
        Start ``task(*args, **kwargs)`` on a daemon thread.

        Errors are logged and handed to ``on_error`` if given; they never
        propagate to the caller. Returns the started thread so tests can join it.
        """
        name = task_name or task.__name__

        def wrapper():
            try:
                task(*args, **kwargs)
                logger.debug(f"[BackgroundTask] Completed: {name}")
            except Exception as e:
                logger.error(f"[BackgroundTask] Failed: {name} - {e}", exc_info=True)
                if on_error:
                    try:
                        on_error(e)
                    except Exception as callback_error:
                        logger.error(f"[BackgroundTask] Error callback failed: {callback_error}")

        thread = threading.Thread(target=wrapper, name=f"bg-{name}", daemon=True)
        thread.start()
        return thread
