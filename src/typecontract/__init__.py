"""
typecontract: runtime type contracts for Python objects, functions and tables.

Contracts declare property types checked at construction and on every
write. Enums restrict values to a fixed set. Typed functions check their
arguments before and their result after each call. Typed tables guard a
pandas DataFrame with per-column specs and a configurable violation policy.
"""

__version__ = "0.1.0"

from typecontract.contracts import (
    AnyType,
    Contract,
    ContractConfigError,
    ContractInstance,
    ContractRef,
    ContractRegistry,
    ContractValidationError,
    EnumInstance,
    EnumRef,
    EnumType,
    FrozenColumnsError,
    InstanceOf,
    InvalidEnumValueError,
    Predicate,
    Primitive,
    TableValidationError,
    TableValidationWarning,
    TypeContractError,
    TypeMismatchViolation,
    Union,
    ValidationReport,
    ViolationPolicy,
    define_contract,
    define_enum,
    instantiate,
)
from typecontract.core import configure, configure_logging, get_settings, load_settings, reset_settings
from typecontract.engine import (
    Parameter,
    TableFactory,
    TypedFunction,
    TypedTable,
    concat,
    define_table,
    define_typed_function,
    typed_function,
    validate_property,
)

__all__ = [
    "AnyType",
    "Contract",
    "ContractConfigError",
    "ContractInstance",
    "ContractRef",
    "ContractRegistry",
    "ContractValidationError",
    "EnumInstance",
    "EnumRef",
    "EnumType",
    "FrozenColumnsError",
    "InstanceOf",
    "InvalidEnumValueError",
    "Parameter",
    "Predicate",
    "Primitive",
    "TableFactory",
    "TableValidationError",
    "TableValidationWarning",
    "TypeContractError",
    "TypeMismatchViolation",
    "TypedFunction",
    "TypedTable",
    "Union",
    "ValidationReport",
    "ViolationPolicy",
    "__version__",
    "concat",
    "configure",
    "configure_logging",
    "define_contract",
    "define_enum",
    "define_table",
    "define_typed_function",
    "get_settings",
    "instantiate",
    "load_settings",
    "reset_settings",
    "typed_function",
    "validate_property",
]
