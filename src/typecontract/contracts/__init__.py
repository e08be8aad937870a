"""Type contract definitions: specs, contracts, enums, errors and reports.

This package is a LEAF MODULE: its only module-level import from the rest
of typecontract is the logger factory in core.logging. Validation and
settings lookups happen through lazy imports inside functions, and numpy
and pandas are only imported once a value is actually checked.

Import patterns:
    # Definitions (lightweight)
    from typecontract.contracts import define_contract, define_enum, Primitive

    # Settings (from core, pulls in pydantic and PyYAML)
    from typecontract.core.config import TypeContractSettings, configure
"""

from typecontract.contracts.contract import (
    Contract,
    ContractInstance,
    define_contract,
    instantiate,
)
from typecontract.contracts.enum_type import (
    EnumInstance,
    EnumType,
    define_enum,
)
from typecontract.contracts.enums import (
    PrimitiveTag,
    ViolationPolicy,
    parse_violation_policy,
)
from typecontract.contracts.errors import (
    ColumnCountMismatchError,
    ContractConfigError,
    ContractValidationError,
    FrozenColumnsError,
    InvalidEnumValueError,
    InvalidFieldError,
    MissingArgumentError,
    MissingPropertyViolation,
    PropertyViolation,
    ReturnTypeError,
    RowValidationError,
    TableValidationError,
    TableValidationWarning,
    TypeContractError,
    TypeMismatchViolation,
    UndeclaredPropertyError,
    UnexpectedArgumentError,
)
from typecontract.contracts.registry import ContractRegistry
from typecontract.contracts.reports import ValidationReport
from typecontract.contracts.type_normalization import is_missing, runtime_tags, type_label
from typecontract.contracts.type_spec import (
    AnyType,
    ContractRef,
    EnumRef,
    InstanceOf,
    Predicate,
    Primitive,
    TypeSpec,
    Union,
    as_type_spec,
    describe_spec,
    specs_equal,
)

__all__ = [
    # contract
    "Contract",
    "ContractInstance",
    "define_contract",
    "instantiate",
    # enum_type
    "EnumInstance",
    "EnumType",
    "define_enum",
    # enums
    "PrimitiveTag",
    "ViolationPolicy",
    "parse_violation_policy",
    # errors
    "ColumnCountMismatchError",
    "ContractConfigError",
    "ContractValidationError",
    "FrozenColumnsError",
    "InvalidEnumValueError",
    "InvalidFieldError",
    "MissingArgumentError",
    "MissingPropertyViolation",
    "PropertyViolation",
    "ReturnTypeError",
    "RowValidationError",
    "TableValidationError",
    "TableValidationWarning",
    "TypeContractError",
    "TypeMismatchViolation",
    "UndeclaredPropertyError",
    "UnexpectedArgumentError",
    # registry
    "ContractRegistry",
    # reports
    "ValidationReport",
    # type_normalization
    "is_missing",
    "runtime_tags",
    "type_label",
    # type_spec
    "AnyType",
    "ContractRef",
    "EnumRef",
    "InstanceOf",
    "Predicate",
    "Primitive",
    "TypeSpec",
    "Union",
    "as_type_spec",
    "describe_spec",
    "specs_equal",
]
