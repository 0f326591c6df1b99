"""Fire-and-forget visit recording.

The redirect path hands visits to a VisitRecorder and returns immediately.
Classification (including the geo lookup) and the atomic append run on a
background thread pool. Whatever happens there is logged and never reaches
the caller: a visit either fully lands (log entry + counter) or is dropped.

A crash between the redirect and the append loses that visit. Visits are
non-critical telemetry and are not retried.
"""

import functools
import logging
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from datetime import datetime

from linkpulse.core.classifier import VisitClassifier
from linkpulse.dao.base import LinkBaseDAO
from linkpulse.dao.exceptions import DataStoreError, LinkNotFoundError


logger = logging.getLogger(__name__)

# Worker threads shared by every recorder in the process
RECORDER_MAX_WORKERS = 4


@functools.cache
def default_executor() -> ThreadPoolExecutor:
    """Return the process-wide executor, created on first use."""
    return ThreadPoolExecutor(max_workers=RECORDER_MAX_WORKERS, thread_name_prefix='visit-recorder')


def shutdown_default_executor(wait: bool = True) -> None:
    """Shut down the shared pool, if started. The next default_executor() call starts a fresh one."""
    if default_executor.cache_info().currsize:
        default_executor().shutdown(wait=wait)
        default_executor.cache_clear()


class VisitRecorder:
    """Record visits asynchronously.

    Args:
        link_dao (LinkBaseDAO):
            DAO providing the atomic append_visit().
        classifier (VisitClassifier):
            Builds the VisitRecord from request context.
        executor (Executor | None):
            Executor running the recording tasks. Defaults to the shared
            process-wide thread pool, which outlives any single recorder.

    Example:
        >>> recorder = VisitRecorder(dao, VisitClassifier())
        >>> future = recorder.record('abc123', user_agent='Mozilla/5.0 ...', source_address='203.0.113.7')
        >>> future.result()  # only tests wait; the redirect path never does
        1
    """

    def __init__(self, link_dao: LinkBaseDAO, classifier: VisitClassifier, executor: Executor | None = None):
        self.link_dao = link_dao
        self.classifier = classifier
        self._executor = executor

    @property
    def executor(self) -> Executor:
        return self._executor or default_executor()

    def record(
        self,
        shortcode: str,
        user_agent: str | None = None,
        source_address: str | None = None,
        timestamp: datetime | None = None,
    ) -> Future:
        """Schedule a visit append and return without waiting for it

        The returned future resolves to the link's new click count, or to None
        if the visit was dropped. It never raises.
        """
        timestamp = timestamp or self.classifier.clock()
        try:
            return self.executor.submit(self._record, shortcode, user_agent, source_address, timestamp)
        except RuntimeError:
            # Executor already shut down (process teardown)
            logger.warning('Visit recorder is shut down. Dropping visit.', extra={'shortcode': shortcode})
            future = Future()
            future.set_result(None)
            return future

    def _record(self, shortcode: str, user_agent: str | None, source_address: str | None, timestamp: datetime) -> int | None:
        try:
            visit = self.classifier.classify(user_agent, source_address, timestamp=timestamp)
            total_clicks = self.link_dao.append_visit(shortcode, visit)
        except LinkNotFoundError:
            logger.info('Link vanished before its visit was recorded. Dropping visit.', extra={'shortcode': shortcode})
            return None
        except DataStoreError:
            logger.warning('Failed to record visit. Dropping visit.', exc_info=True, extra={'shortcode': shortcode})
            return None
        except Exception:
            logger.exception('Unexpected error while recording visit. Dropping visit.', extra={'shortcode': shortcode})
            return None

        logger.debug('Recorded visit.', extra={'shortcode': shortcode, 'totalClicks': total_clicks})
        return total_clicks

    def shutdown(self, wait: bool = True) -> None:
        """Shut down an injected executor. The shared pool is left to shutdown_default_executor()."""
        if self._executor is not None:
            self._executor.shutdown(wait=wait)
