"""Tests for scope resolution and StorageClass checks."""

from unittest.mock import MagicMock

import pytest
from kubernetes.client import ApiException
from urllib3.exceptions import MaxRetryError

from models import (
    ListFailureError,
    LookupFailureError,
    NoQuotaObjectsError,
    QuotaRef,
    StorageClassNotFoundError,
)
from resources.scope import resolve_scope
from resources.storage_class import ensure_storage_classes, storage_class_exists


class TestResolveScope:
    """Tests for resolve_scope function."""

    def test_all_namespaces_in_listing_order(self, fake_api):
        fake_api.add("b", "quota")
        fake_api.add("a", "quota")

        objects = resolve_scope(fake_api, None)

        assert [o.ref for o in objects] == [QuotaRef("b", "quota"), QuotaRef("a", "quota")]

    def test_single_namespace(self, fake_api):
        fake_api.add("a", "quota", {"requests.storage": "1Ti"})
        fake_api.add("b", "quota")

        objects = resolve_scope(fake_api, "a")

        assert len(objects) == 1
        assert objects[0].hard == {"requests.storage": "1Ti"}

    def test_empty_scope(self, fake_api):
        fake_api.add("a", "quota")

        with pytest.raises(NoQuotaObjectsError, match="namespace/missing"):
            resolve_scope(fake_api, "missing")

    def test_api_error(self, fake_api):
        fake_api.list_error = ApiException(status=401, reason="Unauthorized")

        with pytest.raises(ListFailureError, match="Unauthorized"):
            resolve_scope(fake_api, None)

    def test_transport_error(self, fake_api):
        fake_api.list_error = MaxRetryError(None, "/api/v1/resourcequotas")

        with pytest.raises(ListFailureError):
            resolve_scope(fake_api, None)


class TestStorageClass:
    """Tests for StorageClass existence checks."""

    def test_exists(self):
        api = MagicMock()

        assert storage_class_exists(api, "fast") is True
        api.read_storage_class.assert_called_once_with("fast")

    def test_not_found(self):
        api = MagicMock()
        api.read_storage_class.side_effect = ApiException(status=404, reason="Not Found")

        assert storage_class_exists(api, "fast") is False

    def test_lookup_failure(self):
        api = MagicMock()
        api.read_storage_class.side_effect = ApiException(status=500, reason="Boom")

        with pytest.raises(LookupFailureError):
            storage_class_exists(api, "fast")

    def test_ensure_stops_at_first_missing(self):
        api = MagicMock()
        api.read_storage_class.side_effect = [
            None,
            ApiException(status=404, reason="Not Found"),
        ]

        with pytest.raises(StorageClassNotFoundError, match="fast"):
            ensure_storage_classes(api, ("slow", "fast"))
