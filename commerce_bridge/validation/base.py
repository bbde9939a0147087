"""
Typed request validation for tool calls.

Every tool operation has a pydantic request model. validate() checks the
raw arguments against it, collects every violation pydantic reports and
raises a single ValidationError so callers see all problems at once.
"""
from typing import Annotated, Any, List, Literal, Mapping, Type

import pydantic
from pydantic import AnyHttpUrl, BaseModel, ConfigDict, EmailStr, Field, StrictBool, StrictFloat, StrictInt, StrictStr

from commerce_bridge.core.exceptions import ValidationError

# Shared field types
Id = Annotated[StrictInt, Field(ge=1)]
NonNegativeInt = Annotated[StrictInt, Field(ge=0)]
PositiveInt = Annotated[StrictInt, Field(ge=1)]
Amount = Annotated[StrictFloat, Field(ge=0)]
Text = StrictStr
NonEmptyText = Annotated[StrictStr, Field(min_length=1)]
Price = Annotated[StrictStr, Field(pattern=r"^\d+(\.\d+)?$")]
Date = Annotated[StrictStr, Field(pattern=r"^\d{4}-\d{2}-\d{2}$")]
Slug = Annotated[StrictStr, Field(pattern=r"^[a-z0-9_\-]+$")]
CountryCode = Annotated[StrictStr, Field(pattern=r"^[A-Z]{2}$")]
CurrencyCode = Annotated[StrictStr, Field(pattern=r"^[A-Z]{3}$")]
Email = EmailStr
Url = AnyHttpUrl
Flag = StrictBool
SortOrder = Literal["asc", "desc"]


class RequestModel(BaseModel):
    """
    Base class of all tool request models.

    Unknown fields are ignored so newer upstream fields pass through to the
    API untouched.
    """
    model_config = ConfigDict(extra="ignore")


def _drop_none(value: Any) -> Any:
    # None means "not given" for every field
    if isinstance(value, Mapping):
        return {key: _drop_none(item) for key, item in value.items() if item is not None}
    if isinstance(value, list):
        return [_drop_none(item) for item in value]
    return value


def _format_issue(error: Mapping[str, Any]) -> str:
    path = ".".join(str(part) for part in error["loc"]) or "input"
    if error["type"] == "missing":
        return f"{path}: is required"
    return f"{path}: {error['msg']}"


def validate(data: Mapping[str, Any], model: Type[RequestModel]) -> RequestModel:
    """
    Validate raw tool arguments against a request model.

    Args:
        data: Input mapping to check
        model: Request model class of the operation

    Returns:
        RequestModel: The validated request

    Raises:
        ValidationError: With every violation, formatted as "path: message"
    """
    try:
        return model.model_validate(_drop_none(data))
    except pydantic.ValidationError as e:
        issues: List[str] = [_format_issue(error) for error in e.errors()]
        raise ValidationError("Validation failed", issues=issues) from e

