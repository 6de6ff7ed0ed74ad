"""Kubernetes client helpers."""

import logging
from kubernetes import client, config
from kubernetes.client.rest import ApiException

from . import crd

logger = logging.getLogger(__name__)

# Initialize clients
_custom_api = None


def load_config():
    """Load in-cluster config, falling back to kubeconfig."""
    try:
        config.load_incluster_config()
        logger.info("Loaded in-cluster Kubernetes config")
    except config.ConfigException:
        config.load_kube_config()
        logger.info("Loaded kubeconfig")


def init_clients():
    """Initialize Kubernetes clients."""
    global _custom_api

    load_config()
    _custom_api = client.CustomObjectsApi()

    return _custom_api


def get_clients():
    """Get initialized Kubernetes clients."""
    if _custom_api is None:
        init_clients()
    return _custom_api


def _timeout_kwargs(request_timeout):
    if request_timeout is None:
        return {}
    return {"_request_timeout": request_timeout}


def list_legacy_profiles(custom_api, namespace=None, label_selector=None, request_timeout=None):
    """List legacy dashboard hardware profiles.

    Lists across all namespaces unless ``namespace`` is given.
    """
    kwargs = _timeout_kwargs(request_timeout)
    if label_selector:
        kwargs["label_selector"] = label_selector

    if namespace:
        result = custom_api.list_namespaced_custom_object(
            group=crd.LEGACY_GROUP,
            version=crd.LEGACY_VERSION,
            namespace=namespace,
            plural=crd.LEGACY_PLURAL,
            **kwargs,
        )
    else:
        result = custom_api.list_cluster_custom_object(
            group=crd.LEGACY_GROUP,
            version=crd.LEGACY_VERSION,
            plural=crd.LEGACY_PLURAL,
            **kwargs,
        )
    return result.get("items", [])


def get_hardware_profile(custom_api, name, namespace, request_timeout=None):
    """Get a target hardware profile, or None if it does not exist."""
    try:
        return custom_api.get_namespaced_custom_object(
            group=crd.TARGET_GROUP,
            version=crd.TARGET_VERSION,
            namespace=namespace,
            plural=crd.TARGET_PLURAL,
            name=name,
            **_timeout_kwargs(request_timeout),
        )
    except ApiException as e:
        if e.status == 404:
            return None
        logger.error(f"Error getting hardware profile {namespace}/{name}: {e}")
        raise


def create_hardware_profile(custom_api, body, request_timeout=None):
    """Create a target hardware profile. Raises ApiException(409) if it exists."""
    metadata = body["metadata"]
    return custom_api.create_namespaced_custom_object(
        group=crd.TARGET_GROUP,
        version=crd.TARGET_VERSION,
        namespace=metadata["namespace"],
        plural=crd.TARGET_PLURAL,
        body=body,
        **_timeout_kwargs(request_timeout),
    )


def replace_hardware_profile(custom_api, body, request_timeout=None):
    """Replace a target hardware profile. Raises ApiException(409) on a stale resourceVersion."""
    metadata = body["metadata"]
    return custom_api.replace_namespaced_custom_object(
        group=crd.TARGET_GROUP,
        version=crd.TARGET_VERSION,
        namespace=metadata["namespace"],
        plural=crd.TARGET_PLURAL,
        name=metadata["name"],
        body=body,
        **_timeout_kwargs(request_timeout),
    )


def replace_legacy_profile(custom_api, body, request_timeout=None):
    """Replace a legacy hardware profile."""
    metadata = body["metadata"]
    return custom_api.replace_namespaced_custom_object(
        group=crd.LEGACY_GROUP,
        version=crd.LEGACY_VERSION,
        namespace=metadata["namespace"],
        plural=crd.LEGACY_PLURAL,
        name=metadata["name"],
        body=body,
        **_timeout_kwargs(request_timeout),
    )
