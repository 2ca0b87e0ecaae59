"""Configuration management for the ISHNE Holter reader."""

from typing import Optional, Dict, Any
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from enum import Enum


class ExportFormat(str, Enum):
    """Available export formats."""
    JSON = "json"
    CSV = "csv"
    TEXT = "text"


DEFAULT_SEPARATORS = {
    ExportFormat.CSV: ",",
    ExportFormat.TEXT: "\t",
}


class ExportOptions(BaseModel):
    """Options controlling how decoded samples are serialized.

    Attributes can be given in snake_case or camelCase
    (``include_header`` or ``includeHeader``).
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    separator: Optional[str] = Field(default=None, description="Column separator, None for the format default")
    include_header: bool = Field(default=True, description="Emit a column header row")
    time_column: bool = Field(default=True, description="Emit elapsed time in seconds")
    decimal_places: int = Field(default=2, ge=0, le=15, description="Rounding precision for physical values")
    chunk_size: int = Field(default=1000, gt=0, description="Rows or values per produced chunk")

    @field_validator('separator')
    @classmethod
    def validate_separator(cls, v):
        """Validate column separator."""
        if v is not None and (not v or "\n" in v or "\r" in v):
            raise ValueError("Separator must be non-empty and contain no line breaks")
        return v

    def for_format(self, fmt: ExportFormat) -> 'ExportOptions':
        """Return a copy with the separator resolved for ``fmt``.

        Text export always uses a tab, whatever separator was requested.
        """
        fmt = ExportFormat(fmt)
        if fmt is ExportFormat.TEXT:
            return self.model_copy(update={"separator": DEFAULT_SEPARATORS[fmt]})
        if self.separator is None and fmt in DEFAULT_SEPARATORS:
            return self.model_copy(update={"separator": DEFAULT_SEPARATORS[fmt]})
        return self


class Config(BaseModel):
    """Main configuration for the conversion tools."""
    model_config = ConfigDict(validate_assignment=True)

    export: ExportOptions = Field(default_factory=ExportOptions)
    output_format: ExportFormat = Field(default=ExportFormat.CSV)

    log_level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    enable_logging: bool = Field(default=True)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return self.model_dump()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        """Create configuration from dictionary."""
        return cls(**data)

    @classmethod
    def create_default(cls, output_format: ExportFormat = ExportFormat.CSV) -> 'Config':
        """Create default configuration for a given output format."""
        return cls(
            export=ExportOptions(),
            output_format=output_format,
        )
