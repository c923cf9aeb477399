"""Kubernetes client bootstrap for the quota tool."""

import logging
from dataclasses import dataclass

from kubernetes import client as k8s_client
from kubernetes import config as k8s_config

from models import ConnectFailureError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KubeClients:
    """Authenticated API clients shared by one run."""

    core: k8s_client.CoreV1Api
    storage: k8s_client.StorageV1Api


def _load_config(kubeconfig: str | None, context: str | None) -> k8s_client.ApiClient:
    """Load cluster configuration into a fresh ApiClient.

    An explicit kubeconfig or context always wins. Otherwise the in-cluster
    service account is tried first, falling back to ~/.kube/config.
    """
    configuration = k8s_client.Configuration()
    if kubeconfig or context:
        k8s_config.load_kube_config(
            config_file=kubeconfig,
            context=context,
            client_configuration=configuration,
        )
    else:
        try:
            k8s_config.load_incluster_config(client_configuration=configuration)
            logger.debug("Using in-cluster configuration")
        except k8s_config.ConfigException:
            k8s_config.load_kube_config(client_configuration=configuration)
            logger.debug("Using kubeconfig from default location")
    return k8s_client.ApiClient(configuration)


def connect(kubeconfig: str | None = None, context: str | None = None) -> KubeClients:
    """Build the API clients used by a run.

    Raises:
        ConnectFailureError: if no usable cluster configuration could be loaded
    """
    try:
        api_client = _load_config(kubeconfig, context)
    except (k8s_config.ConfigException, OSError, TypeError) as e:
        raise ConnectFailureError(
            f"error happened when building kubernetes config: {e}"
        ) from e

    logger.info("Connected to Kubernetes API at %s", api_client.configuration.host)
    return KubeClients(
        core=k8s_client.CoreV1Api(api_client),
        storage=k8s_client.StorageV1Api(api_client),
    )
