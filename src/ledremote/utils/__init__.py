"""Generic utility modules for ledremote.

- network: Device address validation and endpoint URLs
"""

from .network import device_url, normalize_address

__all__ = ["device_url", "normalize_address"]
