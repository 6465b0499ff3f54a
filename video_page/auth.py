import logging
from typing import Callable

from fastapi import Request

from .errors import AuthorizationError

logger = logging.getLogger(__name__)

CallerPolicy = Callable[[str], bool]


def allow_only(address: str) -> CallerPolicy:
    """Policy that admits exactly one literal address."""

    def policy(caller: str) -> bool:
        return caller == address

    return policy


def caller_address(request: Request) -> str:
    # ASGI already splits (host, port); keep the host only
    if request.client is None:
        return ""
    return request.client.host or ""


def authorize(request: Request, policy: CallerPolicy) -> str:
    caller = caller_address(request)
    logger.info("Connection from IP: %s", caller)
    if not policy(caller):
        raise AuthorizationError()
    return caller
