"""Processors package for OpenAPI extraction logic.

This package contains processor classes that turn the parameters, request bodies
and responses of OpenAPI operations into IR nodes.
"""

from sdkgen.codegen.processors.parameter_processor import ParameterProcessor
from sdkgen.codegen.processors.response_processor import ResponseProcessor

__all__ = [
    'ParameterProcessor',
    'ResponseProcessor',
]
