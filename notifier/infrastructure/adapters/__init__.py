from .in_memory_product_lookup import InMemoryProductLookup
from .structlog_failure_sink import StructlogFailureLogSink

__all__ = [
    "InMemoryProductLookup",
    "StructlogFailureLogSink",
]
