from .delivery_engine import DeliveryEngine
from .gateway_discovery import DiscoveryResult, GatewayDiscovery
from .notification_composer import (
    CartLine,
    CartSummary,
    CustomerInfo,
    NotificationComposer,
    ProductInquiry,
)
from .notification_service import (
    AdminAlertPayload,
    CartSummaryPayload,
    NotificationKind,
    NotificationReport,
    NotificationService,
    ProductInquiryPayload,
    RawMessagePayload,
)

__all__ = [
    "AdminAlertPayload",
    "CartLine",
    "CartSummary",
    "CartSummaryPayload",
    "CustomerInfo",
    "DeliveryEngine",
    "DiscoveryResult",
    "GatewayDiscovery",
    "NotificationComposer",
    "NotificationKind",
    "NotificationReport",
    "NotificationService",
    "ProductInquiry",
    "ProductInquiryPayload",
    "RawMessagePayload",
]
