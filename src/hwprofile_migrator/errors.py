"""Migration error taxonomy."""


class MigrationError(Exception):
    """Base class for failures of a migration pass.

    ``namespace`` and ``name`` identify the legacy resource being processed
    (both ``None`` when the failure is not tied to one resource) and ``step``
    names the operation that failed.
    """

    step = "migrate"

    def __init__(self, message, namespace=None, name=None, step=None):
        super().__init__(message)
        self.message = message
        self.namespace = namespace
        self.name = name
        if step is not None:
            self.step = step

    @property
    def resource(self):
        if self.name is None:
            return None
        return f"{self.namespace}/{self.name}"

    def __str__(self):
        if self.resource is None:
            return f"{self.step}: {self.message}"
        return f"{self.step} {self.resource}: {self.message}"


class DiscoveryError(MigrationError):
    """Listing legacy hardware profiles failed."""

    step = "list"


class TransformError(MigrationError):
    """A legacy hardware profile could not be converted."""

    step = "convert"


class PersistError(MigrationError):
    """Fetching, creating or updating the target hardware profile failed."""

    step = "persist"


class MarkError(MigrationError):
    """The target was persisted but the legacy marker could not be written."""

    step = "mark"


class MigrationCancelled(MigrationError):
    """The pass was stopped before all resources were processed."""

    step = "cancel"
