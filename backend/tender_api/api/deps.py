"""
Request dependencies shared by the routers: bearer token check and paging.

The token is only validated (HS256 signature and expiry); the caller identity
itself is the ``username`` the endpoints receive.
"""
import logging
from typing import Annotated

import jwt
from fastapi import Depends, Query, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from tender_api.services.exceptions import UnauthenticatedError
from tender_api.services.pagination import Page, parse_page

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def verify_token(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> None:
    settings = request.app.state.settings
    if credentials is None:
        if settings.skip_auth:
            return
        raise UnauthenticatedError("Missing or malformed bearer token")
    try:
        jwt.decode(
            credentials.credentials,
            settings.jwt_secret,
            algorithms=["HS256"],
            options={"require": ["exp"]},
        )
    except jwt.ExpiredSignatureError:
        raise UnauthenticatedError("Token expired") from None
    except jwt.InvalidTokenError as e:
        logger.warning("rejected bearer token: %s", e)
        raise UnauthenticatedError("Invalid token") from None


def page_params(
    limit: Annotated[str | None, Query()] = None,
    offset: Annotated[str | None, Query()] = None,
) -> Page:
    return parse_page(limit, offset)


PageDep = Annotated[Page, Depends(page_params)]
