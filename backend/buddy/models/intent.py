# /buddy/models/intent.py

from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, Field


class FieldSpec(BaseModel):
    """Describes one field the extractor should pull out of free text."""
    type: Literal["string", "time", "enum", "boolean"] = "string"
    description: str = ""
    choices: List[str] = Field(default_factory=list)


ExtractionSchema = Dict[str, FieldSpec]


class ParsedIntent(BaseModel):
    """
    Best-effort extraction result. Every schema field is present; values the
    oracle did not provide (or provided in an invalid shape) are None.
    """
    fields: Dict[str, Optional[Any]] = Field(default_factory=dict)
    fault: Optional[str] = Field(default=None, description="Set when the oracle call or decode failed")

    def get(self, name: str) -> Optional[Any]:
        return self.fields.get(name)

    @property
    def is_empty(self) -> bool:
        return all(value is None for value in self.fields.values())

    @classmethod
    def empty(cls, schema: ExtractionSchema, fault: Optional[str] = None) -> "ParsedIntent":
        return cls(fields={name: None for name in schema}, fault=fault)
