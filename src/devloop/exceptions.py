"""Exception classes for the development loop.

Exception classes support two patterns:
1. No-argument raise: raise ResolutionError()
2. Contextual attributes: err = ResolutionError(target="x"); raise err
"""

from typing import Any


class ApplicationError(Exception):
    """Base exception for all application errors.

    Supports keyword arguments that are stored as attributes for debugging.
    """

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        if not message:
            message = self.__class__.__doc__ or "Application error occurred"
        super().__init__(message)
        for key, value in kwargs.items():
            setattr(self, key, value)


class ResolutionError(ApplicationError):
    """Target could not be resolved to a runnable, watchable unit."""

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        if not message:
            message = "Target could not be resolved"
        super().__init__(message, **kwargs)

    @classmethod
    def not_a_command(cls, import_path: str, package_name: str) -> "ResolutionError":
        return cls(
            f"expected package \"main\", got {package_name!r}",
            target=import_path,
            package_name=package_name,
        )

    @classmethod
    def unreadable_root(cls, root: str, reason: str) -> "ResolutionError":
        return cls(f"cannot walk watch root {root}: {reason}", root=root)


__all__ = ["ApplicationError", "ResolutionError"]
