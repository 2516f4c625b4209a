"""Workflow validators.

Structural and data flow checks return findings as data; they never raise
for a malformed graph.
"""

from flowbuilder.validation.data_flow import DataFlowValidation, validate_data_flow
from flowbuilder.validation.identifiers import (
    UUIDValidation,
    is_valid_uuid,
    validate_uuid_format,
)
from flowbuilder.validation.references import VariableReference, extract_references
from flowbuilder.validation.structure import StructureValidation, validate_structure

__all__ = [
    "DataFlowValidation",
    "StructureValidation",
    "UUIDValidation",
    "VariableReference",
    "extract_references",
    "is_valid_uuid",
    "validate_data_flow",
    "validate_structure",
    "validate_uuid_format",
]
