"""Typed functions: argument and return contracts around a callable.

Parameters are declared up front as an ordered list of descriptors
(name, spec, optional default); nothing is introspected from the call
site or the implementation's signature.

Call protocol:
1. Bind positional arguments by declared order, then keywords by name
2. Validate every supplied argument (fail fast, before the implementation runs)
3. Call the implementation with every parameter passed by keyword
4. Validate the result; a failure is reported AFTER the implementation's
   side effects have happened - there is no rollback
"""

from __future__ import annotations

import functools
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from typecontract.contracts.errors import (
    ContractConfigError,
    MissingArgumentError,
    ReturnTypeError,
    TypeMismatchViolation,
    UnexpectedArgumentError,
)
from typecontract.contracts.type_spec import AnyType, TypeSpec, as_type_spec, describe_spec
from typecontract.core.logging import get_logger
from typecontract.engine.validator import validate_property

logger = get_logger(__name__)


class _Missing:
    """Sentinel type for 'no default'."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


@dataclass(frozen=True, slots=True)
class Parameter:
    """One declared parameter of a typed function.

    Attributes:
        name: Keyword name passed to the implementation
        spec: Type spec (shorthand accepted, resolved on construction)
        default: Value used when the argument is omitted; MISSING = required.
            Defaults are trusted and not validated.
    """

    name: str
    spec: TypeSpec = AnyType()
    default: Any = MISSING

    def __post_init__(self) -> None:
        if not self.name.isidentifier():
            raise ContractConfigError(f"Parameter name must be an identifier, got {self.name!r}")
        object.__setattr__(self, "spec", as_type_spec(self.spec))

    @property
    def required(self) -> bool:
        return self.default is MISSING


def _build_parameters(params: Mapping[str, Any] | Sequence[Parameter]) -> tuple[Parameter, ...]:
    if isinstance(params, Mapping):
        built = tuple(
            spec if isinstance(spec, Parameter) else Parameter(name, as_type_spec(spec)) for name, spec in params.items()
        )
    else:
        built = tuple(params)
        for param in built:
            if not isinstance(param, Parameter):
                raise ContractConfigError(f"Expected Parameter descriptors, got {type(param).__name__}")

    names = [p.name for p in built]
    if len(names) != len(set(names)):
        duplicates = sorted({n for n in names if names.count(n) > 1})
        raise ContractConfigError(f"Duplicate parameter names: {', '.join(duplicates)}")

    seen_optional = False
    for param in built:
        if param.required and seen_optional:
            raise ContractConfigError(f"Required parameter '{param.name}' follows a parameter with a default")
        seen_optional = seen_optional or not param.required
    return built


class TypedFunction:
    """Callable wrapper validating arguments before and the result after."""

    def __init__(
        self,
        params: Mapping[str, Any] | Sequence[Parameter],
        returns: Any,
        impl: Callable[..., Any],
        *,
        name: str | None = None,
    ) -> None:
        """Initialize TypedFunction.

        Args:
            params: Ordered name -> spec mapping, or Parameter descriptors
            returns: Return type spec (shorthand accepted)
            impl: The implementation; receives every parameter by keyword
            name: Display name (defaults to impl.__name__)

        Raises:
            ContractConfigError: If impl is not callable or a spec is invalid
        """
        if not callable(impl):
            raise ContractConfigError(f"Typed function implementation must be callable, got {type(impl).__name__}")
        functools.update_wrapper(self, impl)
        self._parameters = _build_parameters(params)
        self._returns = as_type_spec(returns)
        self._impl = impl
        self._name = name or getattr(impl, "__name__", "typed_function")

    @property
    def parameters(self) -> tuple[Parameter, ...]:
        return self._parameters

    @property
    def returns(self) -> TypeSpec:
        return self._returns

    @property
    def impl(self) -> Callable[..., Any]:
        return self._impl

    @property
    def name(self) -> str:
        return self._name

    def bind(self, args: Sequence[Any], kwargs: Mapping[str, Any]) -> dict[str, Any]:
        """Resolve call arguments to parameter names.

        Returns:
            Supplied arguments by parameter name (defaults not included)

        Raises:
            UnexpectedArgumentError: Too many positionals, unknown or repeated names
            MissingArgumentError: A required parameter was not supplied
        """
        if len(args) > len(self._parameters):
            raise UnexpectedArgumentError(
                f"{self._name}() takes {len(self._parameters)} argument(s) but {len(args)} were given"
            )
        bound: dict[str, Any] = {param.name: value for param, value in zip(self._parameters, args)}
        declared = {param.name for param in self._parameters}
        for key, value in kwargs.items():
            if key not in declared:
                raise UnexpectedArgumentError(f"{self._name}() got an unexpected argument '{key}'")
            if key in bound:
                raise UnexpectedArgumentError(f"{self._name}() got multiple values for argument '{key}'")
            bound[key] = value

        for param in self._parameters:
            if param.required and param.name not in bound:
                raise MissingArgumentError(param.name, self._name)
        return bound

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        bound = self.bind(args, kwargs)

        for param in self._parameters:
            if param.name not in bound:
                continue
            value = bound[param.name]
            errors = validate_property(param.name, value, param.spec, kind="Argument")
            if errors:
                logger.debug("typed_function_argument_rejected", function=self._name, argument=param.name)
                raise TypeMismatchViolation(param.name, value, errors)

        call_kwargs = {param.name: bound.get(param.name, param.default) for param in self._parameters}
        result = self._impl(**call_kwargs)

        errors = validate_property(self._name, result, self._returns, kind="Return value")
        if errors:
            logger.debug("typed_function_return_rejected", function=self._name)
            raise ReturnTypeError(self._name, result, errors)
        return result

    def describe(self) -> str:
        lines = [f"Typed function: {self._name}", "Arguments:"]
        for param in self._parameters:
            default = "" if param.required else f" = {param.default!r}"
            lines.append(f"  {param.name}: {describe_spec(param.spec)}{default}")
        lines.append(f"Return type: {describe_spec(self._returns)}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        args = ", ".join(f"{p.name}: {describe_spec(p.spec)}" for p in self._parameters)
        return f"<TypedFunction {self._name}({args}) -> {describe_spec(self._returns)}>"


def define_typed_function(
    params: Mapping[str, Any] | Sequence[Parameter],
    returns: Any,
    impl: Callable[..., Any],
    *,
    name: str | None = None,
) -> TypedFunction:
    """Functional form of TypedFunction(params, returns, impl)."""
    return TypedFunction(params, returns, impl, name=name)


def typed_function(
    args: Mapping[str, Any] | Sequence[Parameter] | None = None,
    *,
    returns: Any = None,
    **kw_args: Any,
) -> Callable[[Callable[..., Any]], TypedFunction]:
    """Decorator form.

    Example:
        @typed_function({"x": float, "y": float}, returns=float)
        def add(x, y):
            return x + y

    Keyword arguments add parameter specs after those in args.
    """

    def decorator(impl: Callable[..., Any]) -> TypedFunction:
        params: list[Parameter] = []
        if isinstance(args, Mapping):
            params.extend(_build_parameters(args))
        elif args is not None:
            params.extend(args)
        params.extend(Parameter(name, as_type_spec(spec)) for name, spec in kw_args.items())
        return TypedFunction(params, returns, impl)

    return decorator
