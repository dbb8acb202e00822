"""Result models of the property evaluation pass."""

from typing import Dict, List

from pydantic import BaseModel, Field

__all__ = ["PropertyFailure", "BuildProperties"]


class PropertyFailure(BaseModel):
    """A property that was skipped because it could not be rendered.

    Attributes:
        key: Property name
        error: Exception class name (e.g. "MalformedPatternError")
        message: Error message
    """

    model_config = {"frozen": True, "extra": "forbid"}

    key: str
    error: str
    message: str


class BuildProperties(BaseModel):
    """Rendered properties plus the properties that failed."""

    model_config = {"frozen": True, "extra": "forbid"}

    properties: Dict[str, str] = Field(default_factory=dict, description="Property name -> rendered timestamp")
    failures: List[PropertyFailure] = Field(default_factory=list, description="Skipped properties")

    @property
    def ok(self) -> bool:
        return not self.failures
