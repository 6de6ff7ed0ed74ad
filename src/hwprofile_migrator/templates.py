"""HardwareProfile resource templates."""

import copy

from . import crd
from .errors import TransformError

# Legacy spec fields, their expected type and the value used when absent
_LEGACY_FIELDS = {
    "displayName": (str, ""),
    "description": (str, ""),
    "enabled": (bool, False),
    "nodeSelector": (dict, {}),
    "tolerations": (list, []),
    "identifiers": (list, []),
}


def read_legacy_profile(legacy):
    """Read and type-check the fields of a legacy hardware profile.

    Returns ``(name, namespace, annotations, fields)`` where ``fields`` holds
    deep copies of every spec field in ``_LEGACY_FIELDS``.
    """
    metadata = legacy.get("metadata") or {}
    name = metadata.get("name")
    namespace = metadata.get("namespace")
    if not isinstance(name, str) or not name:
        raise TransformError("metadata.name must be a non-empty string", namespace, name)
    if not isinstance(namespace, str) or not namespace:
        raise TransformError("metadata.namespace must be a non-empty string", namespace, name)

    annotations = metadata.get("annotations") or {}
    if not isinstance(annotations, dict):
        raise TransformError("metadata.annotations must be a mapping", namespace, name)

    spec = legacy.get("spec")
    if spec is None:
        spec = {}
    if not isinstance(spec, dict):
        raise TransformError("spec must be a mapping", namespace, name)

    fields = {}
    for field, (expected, default) in _LEGACY_FIELDS.items():
        value = spec.get(field)
        if value is None:
            value = default
        if not isinstance(value, expected):
            raise TransformError(
                f"spec.{field} must be of type {expected.__name__}, got {type(value).__name__}",
                namespace,
                name,
            )
        fields[field] = copy.deepcopy(value)

    return name, namespace, dict(annotations), fields


def create_target_annotations(name, annotations, fields, domain=crd.DOMAIN):
    """Derive the target annotation set from a legacy profile.

    The four derived keys are applied on top of the legacy annotations and win
    on conflict.
    """
    derived = dict(annotations)
    derived[crd.ANNOTATION_MIGRATED_FROM] = crd.migrated_from(name, domain)
    derived[crd.ANNOTATION_DISPLAY_NAME] = fields["displayName"]
    derived[crd.ANNOTATION_DESCRIPTION] = fields["description"]
    derived[crd.ANNOTATION_DISABLED] = str(not fields["enabled"]).lower()
    return derived


def create_scheduling_spec(node_selector, tolerations):
    """Create a node-scheduling schedulingSpec."""
    return {
        "type": crd.SCHEDULING_NODE,
        "node": {
            "nodeSelector": node_selector,
            "tolerations": tolerations,
        },
    }


def create_hardware_profile_manifest(legacy, domain=crd.DOMAIN):
    """Convert a legacy hardware profile into a target HardwareProfile manifest."""
    name, namespace, annotations, fields = read_legacy_profile(legacy)

    return {
        "apiVersion": f"infrastructure.{domain}/{crd.TARGET_VERSION}",
        "kind": crd.TARGET_KIND,
        "metadata": {
            "name": name,
            "namespace": namespace,
            "annotations": create_target_annotations(name, annotations, fields, domain),
        },
        "spec": {
            "schedulingSpec": create_scheduling_spec(
                fields["nodeSelector"], fields["tolerations"]
            ),
            "identifiers": fields["identifiers"],
        },
    }


def merge_hardware_profile_manifest(existing, desired):
    """Apply a converted manifest onto an existing target.

    Annotations are merged (desired keys overwrite, other existing keys stay),
    ``schedulingSpec`` and ``identifiers`` are replaced wholesale and every
    other field of ``existing``, ``resourceVersion`` included, is kept. Neither
    argument is modified.
    """
    merged = copy.deepcopy(existing)
    metadata = merged.setdefault("metadata", {})

    annotations = dict(metadata.get("annotations") or {})
    annotations.update(copy.deepcopy(desired["metadata"]["annotations"]))
    metadata["annotations"] = annotations

    spec = merged.get("spec") or {}
    spec["schedulingSpec"] = copy.deepcopy(desired["spec"]["schedulingSpec"])
    spec["identifiers"] = copy.deepcopy(desired["spec"]["identifiers"])
    merged["spec"] = spec

    return merged


def mark_legacy_manifest(legacy, domain=crd.DOMAIN):
    """Return a copy of ``legacy`` carrying the migration marker."""
    marked = copy.deepcopy(legacy)
    metadata = marked.setdefault("metadata", {})
    annotations = dict(metadata.get("annotations") or {})
    annotations[crd.ANNOTATION_MIGRATED_TO] = crd.migrated_to(metadata["name"], domain)
    metadata["annotations"] = annotations
    return marked
