"""Tests for metrics."""

from unittest.mock import MagicMock
from urllib.error import URLError

import metrics
from metrics import PATCH_TOTAL, REGISTRY, init_metrics, push_metrics


class TestInitMetrics:
    """Tests for init_metrics function."""

    def test_outcomes_visible_before_use(self):
        init_metrics("set-zero", "storageclass-quota-zero")

        value = REGISTRY.get_sample_value(
            "storageclass_quota_patch_total",
            {"intent": "set-zero", "outcome": "Failed"},
        )
        assert value is not None

    def test_counter_increments(self):
        labels = {"intent": "migrate", "outcome": "Applied"}
        init_metrics("migrate", "storageclass-migration")
        before = REGISTRY.get_sample_value("storageclass_quota_patch_total", labels)

        PATCH_TOTAL.labels(**labels).inc()

        after = REGISTRY.get_sample_value("storageclass_quota_patch_total", labels)
        assert after == before + 1


class TestPushMetrics:
    """Tests for push_metrics function."""

    def test_no_gateway(self, monkeypatch):
        push = MagicMock()
        monkeypatch.setattr(metrics, "push_to_gateway", push)

        push_metrics(None)

        push.assert_not_called()

    def test_pushes_dedicated_registry(self, monkeypatch):
        push = MagicMock()
        monkeypatch.setattr(metrics, "push_to_gateway", push)

        push_metrics("gw:9091")

        push.assert_called_once_with("gw:9091", job="storageclass-quota", registry=REGISTRY)

    def test_push_failure_is_not_raised(self, monkeypatch):
        monkeypatch.setattr(
            metrics, "push_to_gateway", MagicMock(side_effect=URLError("refused"))
        )

        push_metrics("gw:9091")
