"""Application of computed patches to ResourceQuota objects."""

import logging
import time
from contextlib import nullcontext

from kubernetes.client import ApiException, CoreV1Api
from urllib3.exceptions import HTTPError

from metrics import PATCH_DURATION
from models import PatchOutcome, QuotaPatch, QuotaRef
from ratelimit import RateLimiter

logger = logging.getLogger(__name__)


def apply_patch(
    api: CoreV1Api,
    ref: QuotaRef,
    patch: QuotaPatch,
    field_manager: str,
    rate_limiter: RateLimiter | None = None,
) -> PatchOutcome:
    """Send one strategic-merge patch for a ResourceQuota.

    Exactly one request is issued. Errors are returned as a failed outcome,
    never retried and never raised.

    Args:
        api: Kubernetes CoreV1Api client
        ref: ResourceQuota to patch
        patch: Patch to send
        field_manager: Field manager recorded for the mutation
        rate_limiter: Optional limiter wrapped around the request

    Returns:
        PatchOutcome.applied or PatchOutcome.failed
    """
    logger.debug("Patching ResourceQuota %s with %s", ref, patch)
    start_time = time.monotonic()
    try:
        with rate_limiter.acquire() if rate_limiter else nullcontext():
            # A dict body is sent as application/strategic-merge-patch+json
            api.patch_namespaced_resource_quota(
                ref.name,
                ref.namespace,
                patch.to_body(),
                field_manager=field_manager,
            )
    except ApiException as e:
        logger.warning("Failed to patch ResourceQuota %s: %s %s", ref, e.status, e.reason)
        return PatchOutcome.failed(ref, e)
    except HTTPError as e:
        logger.warning("Failed to patch ResourceQuota %s: %s", ref, e)
        return PatchOutcome.failed(ref, e)
    except Exception as e:
        logger.error("Unexpected error patching ResourceQuota %s: %s", ref, e)
        return PatchOutcome.failed(ref, e)
    finally:
        PATCH_DURATION.labels(field_manager=field_manager).observe(time.monotonic() - start_time)

    return PatchOutcome.applied(ref)
