"""CRD schema constants and helpers."""

import os

# Domain shared by every API group below
DOMAIN = os.environ.get("HWPROFILE_MIGRATION_DOMAIN", "opendatahub.io")

VERSION = "v1alpha1"

# Legacy dashboard hardware profiles (source of the migration)
LEGACY_GROUP = f"dashboard.{DOMAIN}"
LEGACY_VERSION = VERSION
LEGACY_PLURAL = "hardwareprofiles"
LEGACY_KIND = "HardwareProfile"

# Infrastructure hardware profiles (target of the migration)
TARGET_GROUP = f"infrastructure.{DOMAIN}"
TARGET_VERSION = VERSION
TARGET_PLURAL = "hardwareprofiles"
TARGET_KIND = "HardwareProfile"
TARGET_API_VERSION = f"{TARGET_GROUP}/{TARGET_VERSION}"

# Dashboard component whose reconcile drives the migration
DASHBOARD_GROUP = f"components.platform.{DOMAIN}"
DASHBOARD_VERSION = VERSION
DASHBOARD_PLURAL = "dashboards"

# Scheduling types of the target schedulingSpec
SCHEDULING_NODE = "Node"
SCHEDULING_QUEUE = "Queue"

# Annotations written on the target
ANNOTATION_MIGRATED_FROM = "migrated-from"
ANNOTATION_DISPLAY_NAME = "display-name"
ANNOTATION_DESCRIPTION = "description"
ANNOTATION_DISABLED = "disabled"

# Marker written on the legacy resource once its target is persisted
ANNOTATION_MIGRATED_TO = "migrated-to"


def migrated_from(name, domain=DOMAIN):
    """Pointer from a target back to its legacy resource."""
    return f"{LEGACY_PLURAL}.dashboard.{domain}/{name}"


def migrated_to(name, domain=DOMAIN):
    """Pointer from a legacy resource to its target."""
    return f"{TARGET_PLURAL}.infrastructure.{domain}/{name}"
