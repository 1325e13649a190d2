"""
Modelling language support: lexer, parser and parsed types for .cto files.
"""

from .ir import (
    PRIMITIVE_TYPES,
    DeclarationKind,
    DeclarationSpec,
    Decorator,
    ImportSpec,
    ModelFileSpec,
    PropertySpec,
)
from .lexer import Token, TokenType, tokenize
from .parser import ModelParser, parse_model, read_namespace

__all__ = [
    "PRIMITIVE_TYPES",
    "DeclarationKind",
    "DeclarationSpec",
    "Decorator",
    "ImportSpec",
    "ModelFileSpec",
    "PropertySpec",
    "Token",
    "TokenType",
    "tokenize",
    "ModelParser",
    "parse_model",
    "read_namespace",
]
