from .catalog import (
    BodyEncoding,
    GatewayCatalog,
    GatewayConfiguration,
    HttpMethod,
    build_default_catalog,
    field_map_builder,
)
from .classifier import ClassificationRule, ResponseClassifier, classify
from .diagnostics import CredentialProbe, CredentialProbeResult, GatewayDiagnostics
from .fallback import FallbackLinkGenerator
from .phone import PhoneNormalizer, normalize

__all__ = [
    "BodyEncoding",
    "ClassificationRule",
    "CredentialProbe",
    "CredentialProbeResult",
    "FallbackLinkGenerator",
    "GatewayCatalog",
    "GatewayConfiguration",
    "GatewayDiagnostics",
    "HttpMethod",
    "PhoneNormalizer",
    "ResponseClassifier",
    "build_default_catalog",
    "classify",
    "field_map_builder",
    "normalize",
]
