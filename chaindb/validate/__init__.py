"""chaindb validation layer: identifier and schema checks."""
from chaindb.validate.identifier_validator import IdentifierValidator, is_identifier
from chaindb.validate.schema_validator import SchemaValidator
from chaindb.validate.validator import StatementValidator

__all__ = [
    "IdentifierValidator",
    "SchemaValidator",
    "StatementValidator",
    "is_identifier",
]
