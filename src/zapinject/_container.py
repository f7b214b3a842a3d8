from __future__ import annotations

import inspect
import logging
import threading
from typing import TYPE_CHECKING, Any, TypeVar, overload

from ._errors import InvalidArgumentError, RecursiveDependencyError, UnknownDependencyError
from ._reflection import Parameter, is_constructed_object, reflect_callable, reflect_constructor, type_id


logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    T = TypeVar("T")

    Token = type[T] | str


class Registry:
    """Factories and pre-built instances, keyed by type identifier."""

    def __init__(self) -> None:
        self.factories: dict[str, Callable[..., Any]] = {}
        self.instances: dict[str, object] = {}

    def add_factory(self, token: str, factory: Callable[..., Any]) -> None:
        if not callable(factory):
            msg = "Dependency supplied is not callable."
            raise InvalidArgumentError(msg)
        self.factories[token] = factory

    def add_instance(self, token: str, instance: object) -> None:
        if not is_constructed_object(instance):
            msg = f"Instance is not an object: {instance!r}"
            raise InvalidArgumentError(msg)
        self.instances[token] = instance

    def has(self, token: str) -> bool:
        return token in self.instances or token in self.factories

    def remove(self, token: str) -> None:
        self.factories.pop(token, None)
        self.instances.pop(token, None)

    def tokens(self) -> list[str]:
        return sorted(self.factories.keys() | self.instances.keys())


class ResolutionStack:
    """Type identifiers currently being built by factories, outermost first."""

    def __init__(self) -> None:
        self._items: list[str] = []

    def __contains__(self, token: str) -> bool:
        return token in self._items

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def push(self, token: str) -> None:
        if token in self._items:
            raise RecursiveDependencyError(token, (*self._items, token))
        self._items.append(token)

    def pop(self) -> str:
        return self._items.pop()


class Injector:
    """Reflection-driven dependency injector.

    Parameters are resolved by their annotated class:

        injector = Injector()
        injector.add_factory(Request, lambda: Request())
        injector.add_instance(Session())
        injector.add_class(Response)

        req, sess = injector.invoke(lambda_or_function_taking_request_and_session)
        response = injector.create(Response)

    - instances are returned as registered, on every lookup
    - factories are invoked with their own parameters injected, on every lookup
    - a factory requiring its own type, directly or transitively, raises
      `RecursiveDependencyError`.
    """

    def __init__(self) -> None:
        self._registry = Registry()
        self._resolving = ResolutionStack()
        self._lock = threading.RLock()

    def add_factory(self, token: Token[Any], factory: Callable[..., Any]) -> None:
        """Register a factory for a type. Its parameters are injected when it is invoked."""
        key = type_id(token)
        with self._lock:
            self._registry.add_factory(key, factory)
        logger.debug("Registered factory for %s", key)

    def add_instance(self, instance: object, *, token: Token[Any] | None = None) -> None:
        """Register a pre-built instance under its own class, or under `token` when given."""
        key = type_id(type(instance) if token is None else token)
        with self._lock:
            self._registry.add_instance(key, instance)
        logger.debug("Registered instance for %s", key)

    def add_class(self, token: Token[Any]) -> None:
        """Register a type to be built through its own constructor on every lookup."""
        if not (isinstance(token, str) or inspect.isclass(token)):
            msg = f"Classname is not a string: {token!r}"
            raise InvalidArgumentError(msg)

        key = type_id(token)

        def factory() -> object:
            return self.create(token)

        with self._lock:
            self._registry.add_factory(key, factory)
        logger.debug("Registered class %s", key)

    def has(self, token: Token[Any]) -> bool:
        """Whether `token` is registered. Values that are not type identifiers are never registered."""
        try:
            key = type_id(token)
        except InvalidArgumentError:
            return False
        with self._lock:
            return self._registry.has(key)

    def __contains__(self, token: Token[Any]) -> bool:
        return self.has(token)

    def remove(self, token: Token[Any]) -> None:
        """Forget any factory or instance for `token`. Unknown or invalid tokens are ignored."""
        try:
            key = type_id(token)
        except InvalidArgumentError:
            return
        with self._lock:
            self._registry.remove(key)
        logger.debug("Removed %s", key)

    def registered(self) -> list[str]:
        with self._lock:
            return self._registry.tokens()

    @property
    def resolving(self) -> tuple[str, ...]:
        """Type identifiers whose factories are running, outermost first."""
        with self._lock:
            return tuple(self._resolving)

    @overload
    def get(self, token: type[T]) -> T: ...

    @overload
    def get(self, token: str) -> Any: ...

    def get(self, token: Token[T]) -> Any:
        """Resolve a type to a value.

        Resolution order:
        1. registered instance
        2. registered factory, invoked with its own dependencies
        3. error.
        """
        key = type_id(token)
        with self._lock:
            if key in self._registry.instances:
                return self._registry.instances[key]

            factory = self._registry.factories.get(key)
            if factory is None:
                raise UnknownDependencyError(key)

            self._resolving.push(key)
            try:
                logger.debug("Building %s (depth %d)", key, len(self._resolving))
                return self.invoke(factory)
            finally:
                self._resolving.pop()

    def invoke(self, func: Any) -> Any:
        """Call `func` with every parameter resolved from its type annotation."""
        with self._lock:
            target, params = reflect_callable(func)
            args, kwargs = self._resolve_arguments(params)
            return target(*args, **kwargs)

    @overload
    def create(self, token: type[T]) -> T: ...

    @overload
    def create(self, token: str) -> Any: ...

    def create(self, token: Token[T]) -> Any:
        """Build a new instance of a type, injecting its constructor parameters."""
        with self._lock:
            cls, params = reflect_constructor(token)
            args, kwargs = self._resolve_arguments(params)
            return cls(*args, **kwargs)

    def _resolve_arguments(self, params: list[Parameter]) -> tuple[list[Any], dict[str, Any]]:
        args: list[Any] = []
        kwargs: dict[str, Any] = {}

        for p in params:
            if p.nullable and not self._registry.has(p.token):
                value = None
            else:
                value = self.get(p.token)

            if p.keyword_only:
                kwargs[p.name] = value
            else:
                args.append(value)

        return args, kwargs
