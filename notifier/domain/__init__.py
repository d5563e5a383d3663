from .delivery import DeliveryAttemptResult, DeliveryOutcome
from .errors import (
    ComposerDataError,
    ConfigurationError,
    ExhaustedCatalogError,
    NotifierError,
    TransientGatewayError,
)

__all__ = [
    "ComposerDataError",
    "ConfigurationError",
    "DeliveryAttemptResult",
    "DeliveryOutcome",
    "ExhaustedCatalogError",
    "NotifierError",
    "TransientGatewayError",
]
