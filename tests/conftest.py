"""Shared fixtures: an in-memory CoreV1 API holding ResourceQuotas."""

from dataclasses import dataclass, field
from typing import Any

import pytest
from kubernetes.client import (
    ApiException,
    V1ObjectMeta,
    V1ResourceQuota,
    V1ResourceQuotaList,
    V1ResourceQuotaSpec,
)


@dataclass
class PatchCall:
    namespace: str
    name: str
    body: dict[str, Any]
    field_manager: str | None


@dataclass
class FakeCoreApi:
    """Stores spec.hard per ResourceQuota and applies strategic-merge patches.

    Objects listed in ``fail_on`` reject every patch with a 500; objects in
    ``patch_errors`` raise the given exception instead.
    """

    quotas: dict[tuple[str, str], dict[str, str]] = field(default_factory=dict)
    fail_on: set[tuple[str, str]] = field(default_factory=set)
    list_error: Exception | None = None
    patch_errors: dict[tuple[str, str], Exception] = field(default_factory=dict)
    patch_calls: list[PatchCall] = field(default_factory=list)

    def add(self, namespace: str, name: str, hard: dict[str, str] | None = None) -> None:
        self.quotas[(namespace, name)] = dict(hard or {})

    def hard(self, namespace: str, name: str) -> dict[str, str]:
        return self.quotas[(namespace, name)]

    def _list(self, namespace: str | None) -> V1ResourceQuotaList:
        if self.list_error is not None:
            raise self.list_error
        items = [
            V1ResourceQuota(
                metadata=V1ObjectMeta(name=name, namespace=ns),
                spec=V1ResourceQuotaSpec(hard=dict(hard)),
            )
            for (ns, name), hard in self.quotas.items()
            if namespace is None or ns == namespace
        ]
        return V1ResourceQuotaList(items=items)

    def list_namespaced_resource_quota(self, namespace: str, **_: Any) -> V1ResourceQuotaList:
        return self._list(namespace)

    def list_resource_quota_for_all_namespaces(self, **_: Any) -> V1ResourceQuotaList:
        return self._list(None)

    def patch_namespaced_resource_quota(
        self,
        name: str,
        namespace: str,
        body: dict[str, Any],
        field_manager: str | None = None,
        **_: Any,
    ) -> None:
        self.patch_calls.append(PatchCall(namespace, name, body, field_manager))
        if (namespace, name) in self.fail_on:
            raise ApiException(status=500, reason="Internal Server Error")
        if (namespace, name) in self.patch_errors:
            raise self.patch_errors[(namespace, name)]
        hard = self.quotas[(namespace, name)]
        for key, value in body["spec"]["hard"].items():
            if value is None:
                hard.pop(key, None)
            else:
                hard[key] = value


@pytest.fixture
def fake_api() -> FakeCoreApi:
    return FakeCoreApi()
