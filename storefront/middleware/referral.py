"""
Referral capture middleware

Any request carrying ?ref=CODE stores the code in a cookie, replacing the
previous one (last touch wins). The code is also put on request.state so
a signup or checkout in the same request can use it.
"""
from fastapi import Request
import logging

from storefront.core.config import settings
from storefront.utils.helpers import normalize_code

logger = logging.getLogger(__name__)

REFERRAL_QUERY_PARAM = "ref"


async def capture_referral(request: Request, call_next):
    code = normalize_code(request.query_params.get(REFERRAL_QUERY_PARAM))
    if code:
        request.state.referral_code = code

    response = await call_next(request)

    if code:
        response.set_cookie(
            key=settings.REFERRAL_COOKIE_NAME,
            value=code,
            max_age=settings.referral_cookie_max_age,
            httponly=True,
            samesite="lax",
        )
        logger.debug(f"Referral code {code} captured")
    return response
