from __future__ import annotations


class InjectorError(Exception):
    pass


class InvalidArgumentError(InjectorError, ValueError):
    """Raised for malformed registrations and references that cannot be reflected."""


class ResolutionError(InjectorError, RuntimeError):
    def __init__(self, msg: str, token: str) -> None:
        super().__init__(msg)
        self.token = token


class UnknownDependencyError(ResolutionError, LookupError):
    def __init__(self, token: str) -> None:
        super().__init__(f"{token} has not been registered", token)


class RecursiveDependencyError(ResolutionError):
    """Raised when a type's factory requires that type while it is still being built.

    `chain` holds the identifiers under construction, in order, followed by the
    identifier that was requested again.
    """

    def __init__(self, token: str, chain: tuple[str, ...]) -> None:
        path = " -> ".join(chain)
        super().__init__(f"Recursive dependency: {token} is currently being constructed ({path})", token)
        self.chain = chain
