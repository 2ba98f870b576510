"""
Pydantic schemas for chart of accounts requests

Unknown fields are rejected so loosely-typed maps never reach the manager.
"""

from typing import Any, Dict, Literal, Optional, Type, TypeVar, Union
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from .errors import InvalidArgumentError


class _Request(BaseModel):
    model_config = ConfigDict(extra="forbid")


class AccountDraft(_Request):
    account_number: Optional[str] = Field(None, max_length=20)
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    account_type: str = Field(..., min_length=1, description="Account type value, e.g. 'Bank'")
    detail_type: str = Field(..., min_length=1)
    parent_account_id: Optional[str] = None
    is_sub_account: Optional[bool] = None


class AccountPatch(_Request):
    """Account type and parent are immutable after creation and not accepted here"""
    account_number: Optional[str] = Field(None, max_length=20)
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    detail_type: Optional[str] = Field(None, min_length=1)
    is_active: Optional[bool] = None

    def changes(self) -> Dict[str, Any]:
        """Only the fields the caller actually sent"""
        return self.model_dump(exclude_unset=True)


class AccountQuery(_Request):
    account_type: Optional[str] = None
    detail_type: Optional[str] = None
    search: Optional[str] = None
    is_active: Optional[bool] = None
    is_sub_account: Optional[bool] = None
    parent_account_id: Optional[str] = None
    sort_by: Optional[Literal[
        "account_number", "name", "account_type", "current_balance", "created_at"
    ]] = None
    sort_order: Literal["asc", "desc"] = "asc"


ModelT = TypeVar("ModelT", bound=BaseModel)


def parse_request(model_cls: Type[ModelT], data: Union[ModelT, Dict[str, Any], None]) -> ModelT:
    """
    Coerce a dict (or an existing model) into a request model

    Raises:
        InvalidArgumentError: on missing, malformed or unknown fields
    """
    if isinstance(data, model_cls):
        return data
    try:
        return model_cls.model_validate(data or {})
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or None
        raise InvalidArgumentError(
            f"Invalid {model_cls.__name__}: {first.get('msg')}"
            + (f" ({field})" if field else ""),
            field=field,
            value=first.get("input")
        ) from e
