from .failure_log_sink import FailedMessageRecord, FailureLogSink
from .product_lookup import ProductLookup

__all__ = [
    "FailedMessageRecord",
    "FailureLogSink",
    "ProductLookup",
]
