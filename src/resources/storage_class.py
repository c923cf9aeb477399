"""StorageClass existence checks."""

import logging

from kubernetes.client import ApiException, StorageV1Api
from urllib3.exceptions import HTTPError

from models import LookupFailureError, StorageClassNotFoundError

logger = logging.getLogger(__name__)


def storage_class_exists(api: StorageV1Api, name: str) -> bool:
    """Check whether a StorageClass exists.

    Raises:
        LookupFailureError: if the lookup itself failed
    """
    try:
        api.read_storage_class(name)
    except ApiException as e:
        if e.status == 404:
            return False
        raise LookupFailureError(
            f"error happened when get storageclass {name}, error: {e.reason}"
        ) from e
    except HTTPError as e:
        raise LookupFailureError(
            f"error happened when get storageclass {name}, error: {e}"
        ) from e
    return True


def ensure_storage_classes(api: StorageV1Api, names: tuple[str, ...]) -> None:
    """Verify every referenced StorageClass exists before any mutation.

    Raises:
        StorageClassNotFoundError: if a StorageClass is missing
        LookupFailureError: if a lookup failed
    """
    for name in names:
        if not storage_class_exists(api, name):
            raise StorageClassNotFoundError(f"storageclass {name} does not exist")
        logger.debug("StorageClass %s exists", name)
