"""Decorators for TUI components."""

import inspect
from functools import wraps

from ledremote.exceptions import handle_errors as _handle_errors


def handle_action_errors(operation_name: str):
    """
    Decorator for TUI action methods that wraps the centralized error handler.

    This is a TUI-specific wrapper around the centralized error handler that:
    - Uses self.notify for user notifications
    - Doesn't re-raise exceptions (keeps TUI responsive)
    - Returns None on error

    Works on plain and async methods.

    Example:
        @handle_action_errors("delete step")
        def action_delete_step(self):
            ...
    """
    def decorator(func):
        def _handler(self):
            return _handle_errors(
                operation_name=operation_name,
                user_notification=lambda msg: self.notify(msg, severity="error", timeout=5),
                re_raise=False,
                fallback_value=None
            )

        if inspect.iscoroutinefunction(func):
            @wraps(func)
            async def async_wrapper(self, *args, **kwargs):
                return await _handler(self)(func)(self, *args, **kwargs)
            return async_wrapper

        @wraps(func)
        def wrapper(self, *args, **kwargs):
            return _handler(self)(func)(self, *args, **kwargs)
        return wrapper
    return decorator
