"""FastAPI endpoints for the Promotions context."""

from fastapi import APIRouter, Depends
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from protean.utils.globals import current_domain

from storefront.api.auth import require_admin
from storefront.promotions.api.schemas import CouponIdResponse, CreateCouponRequest, StatusResponse
from storefront.promotions.coupon.management import CreateCoupon, DeactivateCoupon
from storefront.promotions.coupon.queries import list_coupons
from storefront.promotions.coupon.resolver import CouponResolver

coupon_router = APIRouter(prefix="/coupons", tags=["coupons"])


@coupon_router.get("", dependencies=[Depends(require_admin)])
async def coupons() -> list[dict]:
    return list_coupons()


@coupon_router.post("", status_code=201, response_model=CouponIdResponse, dependencies=[Depends(require_admin)])
async def create_coupon(body: CreateCouponRequest) -> CouponIdResponse:
    command = CreateCoupon(
        code=body.code,
        percent_off=body.percent_off,
        amount_off_cents=body.amount_off_cents,
        starts_at=body.starts_at,
        ends_at=body.ends_at,
    )
    result = current_domain.process(command, asynchronous=False)
    return CouponIdResponse(coupon_id=result)


@coupon_router.put("/{code}/deactivate", response_model=StatusResponse, dependencies=[Depends(require_admin)])
async def deactivate_coupon(code: str) -> StatusResponse:
    current_domain.process(DeactivateCoupon(code=code), asynchronous=False)
    return StatusResponse()


@coupon_router.get("/{code}")
async def check_coupon(code: str):
    """Public validity check used by the cart before checkout."""
    coupon = CouponResolver(current_domain).resolve(code)
    if coupon is None:
        return JSONResponse(status_code=404, content={"valid": False})
    return JSONResponse(content=jsonable_encoder({"valid": True, "coupon": coupon.to_dict()}))
