"""Core migration logic."""

import logging
from kubernetes.client.rest import ApiException

from . import crd
from .errors import DiscoveryError, MarkError, MigrationCancelled, PersistError
from .k8s import (
    create_hardware_profile,
    get_hardware_profile,
    list_legacy_profiles,
    replace_hardware_profile,
    replace_legacy_profile,
)
from .templates import (
    create_hardware_profile_manifest,
    mark_legacy_manifest,
    merge_hardware_profile_manifest,
)

logger = logging.getLogger(__name__)

# Per-item outcomes
CREATED = "created"
UPDATED = "updated"
SKIPPED = "skipped"


def _key(obj):
    metadata = obj.get("metadata") or {}
    return metadata.get("namespace"), metadata.get("name")


def is_migrated(legacy):
    """Whether a legacy hardware profile already carries the migration marker."""
    annotations = (legacy.get("metadata") or {}).get("annotations")
    return isinstance(annotations, dict) and crd.ANNOTATION_MIGRATED_TO in annotations


def _check_stopped(stopped, namespace=None, name=None):
    if stopped:
        raise MigrationCancelled("migration stopped", namespace, name)


def _fetch_hardware_profile(custom_api, name, namespace, request_timeout):
    try:
        return get_hardware_profile(custom_api, name, namespace, request_timeout)
    except Exception as e:
        raise PersistError(
            f"failed to get infrastructure hardware profile: {e}", namespace, name, step="get"
        ) from e


def ensure_hardware_profile(custom_api, desired, request_timeout=None):
    """Create the target hardware profile, or update it if it already exists.

    Returns CREATED or UPDATED. A create that loses a race with another writer
    falls back to the update path.
    """
    namespace, name = _key(desired)
    existing = _fetch_hardware_profile(custom_api, name, namespace, request_timeout)

    if existing is None:
        logger.info(f"Creating infrastructure hardware profile {namespace}/{name}")
        try:
            create_hardware_profile(custom_api, desired, request_timeout)
            logger.info(f"Infrastructure hardware profile {namespace}/{name} created")
            return CREATED
        except ApiException as e:
            if e.status != 409:
                raise PersistError(
                    f"failed to create infrastructure hardware profile: {e}",
                    namespace,
                    name,
                    step="create",
                ) from e
        except Exception as e:
            raise PersistError(
                f"failed to create infrastructure hardware profile: {e}",
                namespace,
                name,
                step="create",
            ) from e

        logger.info(f"Infrastructure hardware profile {namespace}/{name} already exists, updating")
        existing = _fetch_hardware_profile(custom_api, name, namespace, request_timeout)
        if existing is None:
            raise PersistError(
                "infrastructure hardware profile vanished after create conflict",
                namespace,
                name,
                step="create",
            )

    body = merge_hardware_profile_manifest(existing, desired)
    try:
        replace_hardware_profile(custom_api, body, request_timeout)
    except Exception as e:
        raise PersistError(
            f"failed to update infrastructure hardware profile: {e}", namespace, name, step="update"
        ) from e

    logger.info(f"Infrastructure hardware profile {namespace}/{name} updated")
    return UPDATED


def mark_migrated(custom_api, legacy, request_timeout=None):
    """Write the migration marker onto a legacy hardware profile."""
    namespace, name = _key(legacy)
    body = mark_legacy_manifest(legacy)
    try:
        replace_legacy_profile(custom_api, body, request_timeout)
    except Exception as e:
        raise MarkError(
            f"failed to mark dashboard hardware profile as migrated: {e}", namespace, name
        ) from e

    logger.info(
        f"Marked dashboard hardware profile {namespace}/{name} as "
        f"{crd.ANNOTATION_MIGRATED_TO}={body['metadata']['annotations'][crd.ANNOTATION_MIGRATED_TO]}"
    )


def migrate_hardware_profile(custom_api, legacy, request_timeout=None):
    """Migrate a single legacy hardware profile.

    Returns SKIPPED for an already marked profile, otherwise the outcome of
    persisting its target. The marker is written only after the target has
    been persisted.
    """
    namespace, name = _key(legacy)
    if is_migrated(legacy):
        logger.debug(f"Dashboard hardware profile {namespace}/{name} already migrated, skipping")
        return SKIPPED

    desired = create_hardware_profile_manifest(legacy)
    outcome = ensure_hardware_profile(custom_api, desired, request_timeout)
    mark_migrated(custom_api, legacy, request_timeout)
    return outcome


def migrate_hardware_profiles(
    custom_api, namespace=None, label_selector=None, stopped=None, request_timeout=None
):
    """Migrate every visible dashboard hardware profile to an infrastructure one.

    Stops at the first failure and raises it; the remaining profiles are left
    for the next pass. Returns a summary of what was done.
    """
    summary = {CREATED: 0, UPDATED: 0, SKIPPED: 0, "migrated": []}

    _check_stopped(stopped)
    try:
        items = list_legacy_profiles(custom_api, namespace, label_selector, request_timeout)
    except Exception as e:
        raise DiscoveryError(f"failed to list dashboard hardware profiles: {e}") from e

    logger.info(f"Found {len(items)} dashboard hardware profiles")

    for legacy in items:
        item_namespace, item_name = _key(legacy)
        _check_stopped(stopped, item_namespace, item_name)

        outcome = migrate_hardware_profile(custom_api, legacy, request_timeout)
        summary[outcome] += 1
        if outcome != SKIPPED:
            summary["migrated"].append(f"{item_namespace}/{item_name}")

    logger.info(
        f"Hardware profile migration finished: {summary[CREATED]} created, "
        f"{summary[UPDATED]} updated, {summary[SKIPPED]} skipped"
    )
    return summary
