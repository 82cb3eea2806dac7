"""
Schema Base Classes

Shared pydantic configuration for engine models.
"""

from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base model for engine payloads.

    Python attributes are snake_case; the JSON shape shared with the web
    app, CLI files and MCP clients is camelCase. Either form is accepted
    on input and dumps always use the camelCase aliases.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready dict using camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)


# Monetary and usage amounts: finite, non-negative, no str/bool coercion
NonNegativeAmount = Annotated[float, Field(ge=0, strict=True, allow_inf_nan=False)]

# Ratios bounded to [0, 1]
UnitInterval = Annotated[float, Field(ge=0, le=1, strict=True, allow_inf_nan=False)]
