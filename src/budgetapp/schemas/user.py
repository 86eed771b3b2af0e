"""Profile and salary schemas."""

from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from budgetapp.schemas.common import Money


class SalaryUpdateRequest(BaseModel):
    salary: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)


class SalaryUpdateResponse(BaseModel):
    message: str
    salary: Money


class ProfileUpdateRequest(BaseModel):
    name: str = Field(..., max_length=255)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name cannot be empty")
        return v
