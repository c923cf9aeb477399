"""Prometheus metrics for the storage-class quota tool.

The tool is a short-lived batch job, so metrics live on a dedicated registry
and are pushed to a Pushgateway once at the end of a run.
"""

import logging

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram, push_to_gateway

from constants import METRICS_JOB_NAME

logger = logging.getLogger(__name__)

REGISTRY = CollectorRegistry()

PATCH_TOTAL = Counter(
    "storageclass_quota_patch_total",
    "Total number of ResourceQuota objects processed",
    ["intent", "outcome"],
    registry=REGISTRY,
)

PATCH_DURATION = Histogram(
    "storageclass_quota_patch_duration_seconds",
    "Time spent in ResourceQuota patch calls",
    ["field_manager"],
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
    registry=REGISTRY,
)

RATE_LIMIT_WAIT_SECONDS = Histogram(
    "storageclass_quota_rate_limit_wait_seconds",
    "Time spent waiting for rate limit slot",
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
    registry=REGISTRY,
)

RUN_DURATION = Gauge(
    "storageclass_quota_run_duration_seconds",
    "Duration of the last run",
    ["intent"],
    registry=REGISTRY,
)

RUN_SUCCESS = Gauge(
    "storageclass_quota_last_run_success",
    "1 if the last run had no per-object failures, 0 otherwise",
    ["intent"],
    registry=REGISTRY,
)


def init_metrics(intent: str, field_manager: str) -> None:
    """Initialize labelled metrics with zero values for an intent.

    Prometheus metrics with labels don't appear until used.
    """
    for outcome in ["Applied", "Skipped", "Failed"]:
        PATCH_TOTAL.labels(intent=intent, outcome=outcome)
    PATCH_DURATION.labels(field_manager=field_manager)


def push_metrics(gateway: str | None) -> None:
    """Push collected metrics to a Pushgateway, if one is configured.

    Failures are logged and otherwise ignored; metrics never change the
    outcome of a run.
    """
    if not gateway:
        return
    try:
        push_to_gateway(gateway, job=METRICS_JOB_NAME, registry=REGISTRY)
        logger.info("Pushed metrics to %s", gateway)
    except OSError as e:
        logger.warning("Failed to push metrics to %s: %s", gateway, e)
