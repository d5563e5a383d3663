"""
Error taxonomy for the notifier.

Only ConfigurationError and ComposerDataError are raised across the
engine boundary in normal operation. Gateway failures are recorded in the
attempt trace and surfaced through DeliveryOutcome instead.
"""


class NotifierError(Exception):
    """Base class for all notifier errors."""


class ConfigurationError(NotifierError):
    """A required setting (e.g. the gateway credential) is missing."""


class TransientGatewayError(NotifierError):
    """A single gateway call failed at the network level."""

    def __init__(self, configuration_name: str, reason: str) -> None:
        super().__init__(f"{configuration_name}: {reason}")
        self.configuration_name = configuration_name
        self.reason = reason


class ExhaustedCatalogError(NotifierError):
    """Every gateway configuration was tried and none succeeded."""

    def __init__(self, reason: str, fallback_url: str | None = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.fallback_url = fallback_url


class ComposerDataError(NotifierError):
    """A business entity referenced by a notification could not be resolved."""

    def __init__(self, entity: str, entity_id: str) -> None:
        super().__init__(f"{entity} with ID {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id
