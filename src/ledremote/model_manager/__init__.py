"""Generic model management helpers for Pydantic models.

- **PydanticPersistence**: Load/save Pydantic models to JSON
- **ObserverManager**: Generic observer pattern implementation
"""

from ledremote.model_manager.observer import ObserverManager
from ledremote.model_manager.persistence import PydanticPersistence

__all__ = [
    "ObserverManager",
    "PydanticPersistence",
]
