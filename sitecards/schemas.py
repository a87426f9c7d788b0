"""
Pydantic schemas for the cards API.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, field_validator

from sitecards.db import DEFAULT_STATUS


class CardPayload(BaseModel):
    # siteName/productName are forwarded unchecked; the SQL store rejects nulls.
    id: Optional[str] = None
    companyName: str = ""
    siteName: Optional[str] = None
    productName: Optional[str] = None
    constructionDate: str = ""
    arrivalDate: str = ""
    status: str = DEFAULT_STATUS
    notes: str = ""

    @field_validator(
        "companyName", "constructionDate", "arrivalDate", "notes", mode="before"
    )
    @classmethod
    def _null_as_blank(cls, value):
        return "" if value is None else value

    @field_validator("status", mode="before")
    @classmethod
    def _null_as_default_status(cls, value):
        return DEFAULT_STATUS if value is None else value


class DeleteResponse(BaseModel):
    success: Literal[True]


class ErrorResponse(BaseModel):
    error: str
