"""
Parsed representation of .cto model files.

These types are produced by the parser and consumed by the model manager's
validation pass and the code generation visitors.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

PRIMITIVE_TYPES = frozenset({"String", "Boolean", "DateTime", "Double", "Integer", "Long"})


class DeclarationKind(str, Enum):
    """Kinds of top-level declarations in a model file."""

    ASSET = "asset"
    PARTICIPANT = "participant"
    TRANSACTION = "transaction"
    EVENT = "event"
    CONCEPT = "concept"
    ENUM = "enum"


class Decorator(BaseModel):
    """A decorator such as ``@returns(String)`` attached to a declaration or property."""

    name: str
    arguments: list[str | float | bool] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class PropertySpec(BaseModel):
    """
    A field or relationship of a declaration.

    Examples:
        - o String vin: PropertySpec(name="vin", type_name="String")
        - o Double[] readings optional: PropertySpec(..., is_array=True, optional=True)
        - --> Owner owner: PropertySpec(..., is_relationship=True)
    """

    name: str
    type_name: str
    is_array: bool = False
    is_relationship: bool = False
    optional: bool = False
    default: str | None = None
    regex: str | None = None
    range: tuple[str | None, str | None] | None = None
    decorators: list[Decorator] = Field(default_factory=list)
    line: int = 0
    column: int = 0

    model_config = ConfigDict(frozen=True)

    @property
    def is_primitive(self) -> bool:
        return self.type_name in PRIMITIVE_TYPES


class DeclarationSpec(BaseModel):
    """An asset, participant, transaction, event, concept or enum declaration."""

    kind: DeclarationKind
    name: str
    abstract: bool = False
    identified_by: str | None = None
    super_type: str | None = None
    properties: list[PropertySpec] = Field(default_factory=list)
    enum_values: list[str] = Field(default_factory=list)
    decorators: list[Decorator] = Field(default_factory=list)
    line: int = 0
    column: int = 0

    model_config = ConfigDict(frozen=True)

    @property
    def is_enum(self) -> bool:
        return self.kind == DeclarationKind.ENUM

    def get_property(self, name: str) -> PropertySpec | None:
        for prop in self.properties:
            if prop.name == name:
                return prop
        return None


class ImportSpec(BaseModel):
    """An ``import ns.Type`` or ``import ns.*`` statement."""

    namespace: str
    name: str | None = None  # None for wildcard imports
    line: int = 0
    column: int = 0

    model_config = ConfigDict(frozen=True)

    @property
    def is_wildcard(self) -> bool:
        return self.name is None

    @property
    def qualified(self) -> str:
        return f"{self.namespace}.{self.name or '*'}"


class ModelFileSpec(BaseModel):
    """The complete parsed contents of one model file."""

    namespace: str
    imports: list[ImportSpec] = Field(default_factory=list)
    declarations: list[DeclarationSpec] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def get_declaration(self, name: str) -> DeclarationSpec | None:
        for decl in self.declarations:
            if decl.name == name:
                return decl
        return None
