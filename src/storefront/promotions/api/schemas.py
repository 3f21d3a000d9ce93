"""Pydantic request/response schemas for the Promotions API."""

from datetime import datetime

from pydantic import BaseModel, Field, model_validator


class CreateCouponRequest(BaseModel):
    code: str = Field(min_length=1, max_length=50)
    percent_off: int | None = Field(default=None, ge=0, le=100)
    amount_off_cents: int | None = Field(default=None, ge=0)
    starts_at: datetime | None = None
    ends_at: datetime | None = None

    @model_validator(mode="after")
    def one_reduction(self):
        if (self.percent_off is None) == (self.amount_off_cents is None):
            raise ValueError("Provide exactly one of percent_off or amount_off_cents")
        return self

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"code": "SUMMER20", "percent_off": 20, "ends_at": "2026-09-01T00:00:00Z"},
            ]
        }
    }


class CouponIdResponse(BaseModel):
    coupon_id: str


class StatusResponse(BaseModel):
    status: str = "ok"
