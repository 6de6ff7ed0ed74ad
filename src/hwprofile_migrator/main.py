"""Main operator entrypoint using Kopf."""

import logging
import os

import kopf

from . import crd
from .errors import MigrationCancelled, MigrationError, TransformError
from .k8s import get_clients, init_clients
from .reconcile import migrate_hardware_profiles

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

INTERVAL = float(os.environ.get("HWPROFILE_MIGRATION_INTERVAL", "60"))
RETRY_DELAY = float(os.environ.get("HWPROFILE_MIGRATION_RETRY_DELAY", "30"))
NAMESPACE = os.environ.get("HWPROFILE_MIGRATION_NAMESPACE") or None
LABEL_SELECTOR = os.environ.get("HWPROFILE_MIGRATION_LABEL_SELECTOR") or None


@kopf.on.startup()
def configure(**kwargs):
    """Initialize Kubernetes clients before any handler runs."""
    init_clients()


def run_migration(stopped=None):
    """Run one migration pass, mapping failures to Kopf errors."""
    custom_api = get_clients()
    try:
        return migrate_hardware_profiles(
            custom_api,
            namespace=NAMESPACE,
            label_selector=LABEL_SELECTOR,
            stopped=stopped,
        )
    except MigrationCancelled:
        logger.info("Hardware profile migration stopped, resuming on next pass")
        return None
    except TransformError as e:
        logger.error(f"Invalid dashboard hardware profile: {e}")
        raise kopf.PermanentError(str(e))
    except MigrationError as e:
        logger.error(f"Hardware profile migration error: {e}", exc_info=True)
        raise kopf.TemporaryError(f"Hardware profile migration failed: {e}", delay=RETRY_DELAY)


@kopf.on.resume(crd.DASHBOARD_GROUP, crd.DASHBOARD_VERSION, crd.DASHBOARD_PLURAL)
@kopf.on.create(crd.DASHBOARD_GROUP, crd.DASHBOARD_VERSION, crd.DASHBOARD_PLURAL)
@kopf.on.update(crd.DASHBOARD_GROUP, crd.DASHBOARD_VERSION, crd.DASHBOARD_PLURAL)
def dashboard_handler(name, **kwargs):
    """Migrate hardware profiles when the Dashboard is reconciled."""
    logger.info(f"Handling Dashboard {name}, migrating hardware profiles")
    return run_migration()


@kopf.timer(crd.DASHBOARD_GROUP, crd.DASHBOARD_VERSION, crd.DASHBOARD_PLURAL, interval=INTERVAL)
def dashboard_timer(name, stopped=None, **kwargs):
    """Periodic migration pass."""
    logger.debug(f"Timer migration for Dashboard {name}")
    return run_migration(stopped=stopped)


if __name__ == "__main__":
    kopf.run()
