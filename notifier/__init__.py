"""Outbound WhatsApp notification delivery for the storefront back-office."""

__version__ = "0.1.0"
