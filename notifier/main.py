"""
Composition root.

Builds the delivery engine and notification service from Settings. The
settings object is read once here and its values are passed explicitly;
nothing below this module reads configuration on its own.
"""

import httpx
import structlog

from .application.services import (
    DeliveryEngine,
    GatewayDiscovery,
    NotificationComposer,
    NotificationService,
)
from .config import Settings
from .domain.ports import FailureLogSink, ProductLookup
from .gateway import (
    FallbackLinkGenerator,
    GatewayCatalog,
    GatewayDiagnostics,
    PhoneNormalizer,
    build_default_catalog,
)
from .infrastructure.adapters import StructlogFailureLogSink
from .infrastructure.logging import sanitize_for_logging

logger = structlog.get_logger()


def build_catalog(settings: Settings) -> GatewayCatalog:
    """The default catalog for the configured gateway, sender and device."""
    device_id = ""
    if settings.admin_whatsapp_number:
        normalizer = PhoneNormalizer(settings.default_country_code)
        device_id = normalizer.normalize(settings.admin_whatsapp_number).digits_only

    return build_default_catalog(
        settings.gateway_base_url,
        sender=settings.sender_id,
        device_id=device_id,
    )


def create_delivery_engine(
    settings: Settings,
    *,
    catalog: GatewayCatalog | None = None,
    failure_sink: FailureLogSink | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> DeliveryEngine:
    """Wire a DeliveryEngine, using the default catalog unless one is given."""
    if catalog is None:
        catalog = build_catalog(settings)

    logger.info(
        "Delivery engine initialized",
        base_url=settings.gateway_base_url,
        api_secret=sanitize_for_logging(settings.gateway_api_secret) or "not set",
        admin_number_set=bool(settings.admin_whatsapp_number),
        fallback_enabled=settings.whatsapp_fallback_enabled,
        configurations=len(catalog),
    )

    return DeliveryEngine(
        catalog,
        fallback=FallbackLinkGenerator(settings.fallback_base_url),
        failure_sink=failure_sink or StructlogFailureLogSink(),
        attempt_timeout=settings.attempt_timeout_seconds,
        fallback_enabled=settings.whatsapp_fallback_enabled,
        http_client=http_client,
    )


def create_notification_service(
    settings: Settings,
    products: ProductLookup,
    *,
    engine: DeliveryEngine | None = None,
) -> NotificationService:
    """
    Wire a NotificationService.

    Raises:
        ConfigurationError: If no gateway credential is configured
    """
    credential = settings.require_credential()
    if not settings.admin_whatsapp_number:
        logger.warning("ADMIN_WHATSAPP_NUMBER is not set, admin alerts are disabled")

    return NotificationService(
        engine or create_delivery_engine(settings),
        NotificationComposer(products),
        credential=credential,
        admin_number=settings.admin_whatsapp_number,
        normalizer=PhoneNormalizer(settings.default_country_code),
    )


def create_diagnostics(
    settings: Settings,
    *,
    http_client: httpx.AsyncClient | None = None,
) -> GatewayDiagnostics:
    return GatewayDiagnostics(
        settings.gateway_base_url,
        timeout=settings.probe_timeout_seconds,
        http_client=http_client,
    )


def create_gateway_discovery(
    settings: Settings,
    *,
    http_client: httpx.AsyncClient | None = None,
) -> GatewayDiscovery:
    return GatewayDiscovery(
        create_diagnostics(settings, http_client=http_client),
        build_catalog(settings),
        lambda catalog: create_delivery_engine(settings, catalog=catalog, http_client=http_client),
    )
