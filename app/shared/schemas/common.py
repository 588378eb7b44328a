# app/shared/schemas/common.py
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from typing import Any, Dict, Generic, List, Optional, TypeVar
from datetime import datetime
import math

T = TypeVar("T")


class CamelModel(BaseModel):
    """Schema con nombres camelCase en el cable; acepta también snake_case"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class BaseResponse(CamelModel):
    success: bool
    message: str = ""
    timestamp: datetime = Field(default_factory=datetime.now)


class ErrorResponse(BaseResponse):
    success: bool = False
    error_code: Optional[str] = None
    details: Optional[Dict[str, Any]] = None


class CreatedResponse(BaseResponse):
    success: bool = True
    uuid: str


class PaginatedResponse(CamelModel, Generic[T]):
    items: List[T]
    total: int
    page: int
    size: int
    pages: int
    has_next: bool
    has_previous: bool

    @classmethod
    def build(cls, items: List[T], total: int, page: int, size: int) -> "PaginatedResponse[T]":
        pages = math.ceil(total / size) if size else 0
        return cls(
            items=items,
            total=total,
            page=page,
            size=size,
            pages=pages,
            has_next=page < pages,
            has_previous=page > 1
        )
