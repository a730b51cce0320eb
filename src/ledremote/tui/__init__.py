"""Terminal UI for ledremote."""

from .app import LedRemoteApp

__all__ = ["LedRemoteApp"]
