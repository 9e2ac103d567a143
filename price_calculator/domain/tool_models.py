"""
Domain models for tool discovery.
Typed JSON-schema nodes describing tool inputs.
"""
from typing import List, Dict, Any, Optional, Union
from dataclasses import dataclass, field


@dataclass(frozen=True)
class StringSchema:
    """Free-form string input."""
    description: str
    default: Optional[str] = None
    
    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"type": "string", "description": self.description}
        if self.default is not None:
            result["default"] = self.default
        return result


@dataclass(frozen=True)
class IntegerSchema:
    """Integer input with an optional lower bound."""
    description: str
    minimum: Optional[int] = None
    default: Optional[int] = None
    
    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"type": "integer", "description": self.description}
        if self.minimum is not None:
            result["minimum"] = self.minimum
        if self.default is not None:
            result["default"] = self.default
        return result


@dataclass(frozen=True)
class NumberSchema:
    """Decimal number input."""
    description: str
    
    def to_dict(self) -> Dict[str, Any]:
        return {"type": "number", "description": self.description}


@dataclass(frozen=True)
class EnumSchema:
    """String input restricted to a fixed set of values."""
    values: List[str]
    description: str
    default: Optional[str] = None
    
    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "type": "string",
            "enum": list(self.values),
            "description": self.description,
        }
        if self.default is not None:
            result["default"] = self.default
        return result


@dataclass(frozen=True)
class ArraySchema:
    """List input, optionally describing its items."""
    description: str
    items: Optional["SchemaNode"] = None
    
    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"type": "array", "description": self.description}
        if self.items is not None:
            result["items"] = self.items.to_dict()
        return result


@dataclass(frozen=True)
class ObjectSchema:
    """Object input with named properties."""
    properties: Dict[str, "SchemaNode"]
    required: List[str] = field(default_factory=list)
    description: Optional[str] = None
    
    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"type": "object"}
        if self.description is not None:
            result["description"] = self.description
        result["properties"] = {
            name: node.to_dict() for name, node in self.properties.items()
        }
        if self.required:
            result["required"] = list(self.required)
        return result


SchemaNode = Union[StringSchema, IntegerSchema, NumberSchema, EnumSchema, ArraySchema, ObjectSchema]


@dataclass(frozen=True)
class McpTool:
    """Tool definition exposed by the discovery endpoint."""
    name: str
    description: str
    input_schema: ObjectSchema
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema.to_dict(),
        }
