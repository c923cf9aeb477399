"""Resolution of the namespace scope into ResourceQuota objects."""

import logging

from kubernetes.client import ApiException, CoreV1Api
from urllib3.exceptions import HTTPError

from models import ListFailureError, NoQuotaObjectsError, QuotaObject
from utils import describe_namespace

logger = logging.getLogger(__name__)


def resolve_scope(api: CoreV1Api, namespace: str | None) -> list[QuotaObject]:
    """List the ResourceQuotas a run acts on.

    Args:
        api: Kubernetes CoreV1Api client
        namespace: Namespace to act on, or None for all namespaces

    Returns:
        Quota objects in the order the API server listed them

    Raises:
        ListFailureError: if the listing call failed
        NoQuotaObjectsError: if the scope holds no ResourceQuota
    """
    scope = describe_namespace(namespace)
    try:
        if namespace:
            rqs = api.list_namespaced_resource_quota(namespace)
        else:
            rqs = api.list_resource_quota_for_all_namespaces()
    except ApiException as e:
        raise ListFailureError(
            f"failed to list ResourceQuotas in {scope}: {e.status} {e.reason}"
        ) from e
    except HTTPError as e:
        raise ListFailureError(f"failed to list ResourceQuotas in {scope}: {e}") from e

    objects = [QuotaObject.from_api(rq) for rq in rqs.items or []]
    if not objects:
        raise NoQuotaObjectsError(f"no ResourceQuota found in {scope}")

    logger.debug("Found %d ResourceQuotas in %s", len(objects), scope)
    return objects
