"""Batch execution of an intent over every ResourceQuota in scope."""

import logging
import time
from concurrent.futures import ThreadPoolExecutor

from kubernetes.client import CoreV1Api

from metrics import PATCH_TOTAL, RUN_DURATION, RUN_SUCCESS, init_metrics
from models import BatchResult, Intent, PatchOutcome, QuotaObject
from ratelimit import RateLimiter
from resources.applier import apply_patch
from resources.patch import compute_patch
from resources.scope import resolve_scope
from utils import describe_namespace

logger = logging.getLogger(__name__)


class BatchRunner:
    """Drives scope resolution, patch computation and application.

    A failure on one object never stops the batch: every object in scope
    gets exactly one outcome, reported in listing order.
    """

    def __init__(
        self,
        api: CoreV1Api,
        workers: int = 1,
        rate_limiter: RateLimiter | None = None,
    ) -> None:
        self.api = api
        self.workers = workers
        self.rate_limiter = rate_limiter

    def _process(self, intent: Intent, obj: QuotaObject) -> PatchOutcome:
        """Compute and apply the patch for one object."""
        patch = compute_patch(intent, obj)
        if isinstance(patch, str):
            logger.info("Skipping ResourceQuota %s: %s", obj.ref, patch)
            outcome = PatchOutcome.skipped(obj.ref, patch)
        else:
            outcome = apply_patch(
                self.api, obj.ref, patch, intent.field_manager, self.rate_limiter
            )
            if outcome.error is None:
                logger.debug("Successful %s on ResourceQuota %s", intent.name, obj.ref)
        PATCH_TOTAL.labels(intent=intent.name, outcome=outcome.status.value).inc()
        return outcome

    def run(self, namespace: str | None, intent: Intent) -> BatchResult:
        """Apply an intent to every ResourceQuota in a namespace scope.

        Args:
            namespace: Namespace to act on, or None for all namespaces
            intent: What to do with each ResourceQuota

        Returns:
            BatchResult with one outcome per object, in listing order

        Raises:
            ListFailureError: if listing ResourceQuotas failed
            NoQuotaObjectsError: if the scope is empty
        """
        init_metrics(intent.name, intent.field_manager)
        start_time = time.monotonic()

        objects = resolve_scope(self.api, namespace)
        logger.info(
            "Applying %s to %d ResourceQuotas in %s",
            intent.name,
            len(objects),
            describe_namespace(namespace),
        )

        if self.workers > 1 and len(objects) > 1:
            with ThreadPoolExecutor(max_workers=self.workers) as pool:
                outcomes = list(pool.map(lambda obj: self._process(intent, obj), objects))
        else:
            outcomes = [self._process(intent, obj) for obj in objects]

        result = BatchResult(outcomes=tuple(outcomes))
        RUN_DURATION.labels(intent=intent.name).set(time.monotonic() - start_time)
        RUN_SUCCESS.labels(intent=intent.name).set(1 if result.ok else 0)
        return result
