from __future__ import annotations

import inspect
import logging
import pkgutil
import types
import typing
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ForwardRef, Union, get_args, get_origin, get_type_hints

from ._errors import InvalidArgumentError


if TYPE_CHECKING:
    from collections.abc import Callable


logger = logging.getLogger(__name__)

_SCALARS = (str, bytes, int, float, complex, bool)

_UNION_TYPES = (Union, types.UnionType)
_OPTIONAL_PREFIXES = ("Optional[", "typing.Optional[")


@dataclass(frozen=True)
class Parameter:
    """Describes one injectable parameter of a callable or constructor.

    Attributes:
        name: The parameter name in the signature.
        token: Type identifier of the declared annotation.
        nullable: Whether `None` is an acceptable value.
        keyword_only: Whether the argument must be passed by name.
    """

    name: str
    token: str
    nullable: bool = False
    keyword_only: bool = False


def type_id(token: object) -> str:
    """Normalise a class or dotted name into the identifier used as registry key.

    `pkg.mod.Service`, the class itself, `"pkg.mod.Service"`, `"pkg.mod:Service"`
    and `".pkg.mod.Service"` all map to `"pkg.mod.Service"`.
    """
    if inspect.isclass(token):
        return f"{token.__module__}.{token.__qualname__}"

    if isinstance(token, str):
        name = token.strip().lstrip(".").replace(":", ".")
        if name:
            return name

    msg = f"Type identifier must be a class or a dotted class name, got {token!r}"
    raise InvalidArgumentError(msg)


def load_type(token: object) -> type:
    """Return the class named by `token`, importing its module when needed."""
    if inspect.isclass(token):
        return token

    name = type_id(token)
    try:
        cls = pkgutil.resolve_name(name)
    except (ImportError, AttributeError, ValueError) as exc:
        msg = f"Class {name} does not exist"
        raise InvalidArgumentError(msg) from exc

    if not inspect.isclass(cls):
        msg = f"{name} does not name a class"
        raise InvalidArgumentError(msg)
    return cls


def reflect_callable(ref: Any) -> tuple[Callable[..., Any], list[Parameter]]:
    """Resolve a callable reference and describe its parameters.

    Accepted references:
    - functions, lambdas, bound methods and objects implementing `__call__`
    - `"pkg.mod.Class::method"` strings
    - `(target, "method")` pairs, where target is an object, a class or a class name
    - dotted function names, `"pkg.mod.func"` or `"pkg.mod:func"`
    """
    func = _resolve_callable(ref)

    if inspect.isclass(func):
        return reflect_constructor(func)

    return func, _describe(func, _get_hints(func))


def reflect_constructor(ref: Any) -> tuple[type, list[Parameter]]:
    cls = load_type(ref)

    if cls.__init__ is object.__init__ and cls.__new__ is object.__new__:
        return cls, []

    init = cls.__init__ if cls.__init__ is not object.__init__ else cls.__new__
    return cls, _describe(cls, _get_hints(init))


def _resolve_callable(ref: Any) -> Callable[..., Any]:
    if isinstance(ref, str) and "::" in ref:
        class_name, method = ref.split("::", 1)
        ref = (class_name, method)

    if isinstance(ref, (list, tuple)):
        if len(ref) != 2 or not isinstance(ref[1], str):
            msg = f"Callable pair must be (target, method_name), got {ref!r}"
            raise InvalidArgumentError(msg)

        target, method = ref
        if isinstance(target, str):
            target = load_type(target)

        try:
            func = getattr(target, method.strip())
        except AttributeError as exc:
            owner = target.__name__ if inspect.isclass(target) else type(target).__name__
            msg = f"Method {owner}::{method} does not exist"
            raise InvalidArgumentError(msg) from exc

    elif isinstance(ref, str):
        try:
            func = pkgutil.resolve_name(ref.strip())
        except (ImportError, AttributeError, ValueError) as exc:
            msg = f"Function {ref} does not exist"
            raise InvalidArgumentError(msg) from exc

    else:
        func = ref

    if not callable(func):
        msg = f"{ref!r} is not callable"
        raise InvalidArgumentError(msg)

    return func


def _get_hints(func: Any) -> dict[str, Any]:
    if not (inspect.isroutine(func) or inspect.isclass(func)):
        # callable object: annotations live on its __call__
        func = getattr(type(func), "__call__", func)

    try:
        hints = get_type_hints(func)
    except TypeError:
        hints = {}
    except NameError as exc:
        logger.warning(
            "'%s' name error retrieving %s type hints, evaluating annotations one at a time",
            exc.name,
            getattr(func, "__qualname__", func),
        )
        hints = _evaluate_each(func)

    return hints


def _evaluate_each(func: Any) -> dict[str, Any]:
    """Evaluate string annotations separately, keeping the ones that fail as raw strings."""
    try:
        raw = inspect.get_annotations(func)
    except TypeError:
        return {}

    globalns = getattr(inspect.unwrap(func), "__globals__", {})
    hints = {}

    for name, ann in raw.items():
        if isinstance(ann, str):
            try:
                ann = eval(ann, globalns)  # noqa: S307
            except (NameError, AttributeError, SyntaxError):
                logger.debug("Using annotation %r of %s as an explicit type token", ann, name)
        hints[name] = ann

    return hints


def _strip_optional(text: str) -> tuple[str, bool]:
    text = text.strip()

    for prefix in _OPTIONAL_PREFIXES:
        if text.startswith(prefix) and text.endswith("]"):
            return text[len(prefix) : -1].strip().strip("'\""), True

    members = [m.strip() for m in text.split("|")]
    if len(members) == 2 and "None" in members:
        members.remove("None")
        return members[0].strip("'\""), True

    return text, False


def _describe(func: Any, hints: dict[str, Any]) -> list[Parameter]:
    try:
        sig = inspect.signature(func)
    except (TypeError, ValueError) as exc:
        msg = f"Cannot reflect {func!r}: {exc}"
        raise InvalidArgumentError(msg) from exc

    owner = getattr(func, "__qualname__", repr(func))
    params = []

    for name, p in sig.parameters.items():
        if p.kind in (p.VAR_POSITIONAL, p.VAR_KEYWORD):
            continue

        ann = hints.get(name, p.annotation)
        if ann is inspect.Parameter.empty:
            msg = f"Parameter '{name}' of {owner} has no type annotation"
            raise InvalidArgumentError(msg)

        token, nullable = _declared_type(ann, owner, name)
        params.append(
            Parameter(
                name=name,
                token=token,
                nullable=nullable or p.default is None,
                keyword_only=p.kind is p.KEYWORD_ONLY,
            )
        )

    return params


def _declared_type(ann: Any, owner: str, name: str) -> tuple[str, bool]:
    nullable = False

    if get_origin(ann) in _UNION_TYPES:
        members = get_args(ann)
        rest = [a for a in members if a is not type(None)]
        if len(rest) == 1 and len(members) == 2:
            ann = rest[0]
            nullable = True
        else:
            msg = f"Parameter '{name}' of {owner} is annotated with an unsupported union {ann!r}"
            raise InvalidArgumentError(msg)

    if isinstance(ann, ForwardRef):
        ann = ann.__forward_arg__

    if isinstance(ann, str):
        ann, optional = _strip_optional(ann)
        if not all(part.isidentifier() for part in ann.lstrip(".").replace(":", ".").split(".")):
            msg = f"Parameter '{name}' of {owner} is not annotated with a class name: {ann!r}"
            raise InvalidArgumentError(msg)
        return type_id(ann), nullable or optional

    if get_origin(ann) is not None or ann is typing.Any or not inspect.isclass(ann):
        msg = f"Parameter '{name}' of {owner} is not annotated with a class: {ann!r}"
        raise InvalidArgumentError(msg)

    return type_id(ann), nullable


def is_constructed_object(value: object) -> bool:
    return value is not None and not inspect.isclass(value) and not isinstance(value, _SCALARS)
