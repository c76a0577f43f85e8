"""Ingestion layer.

This package converts data received from the gateway and the event feed
into normalized Python values and event models.
"""

__all__: list[str] = []
