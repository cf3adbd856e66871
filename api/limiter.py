"""Rate limiter shared by the application and its routers."""

from slowapi import Limiter
from slowapi.util import get_remote_address

from config import config

limiter = Limiter(
    key_func=get_remote_address,
    enabled=config.rate_limit.enabled,
    default_limits=[f"{config.rate_limit.requests_per_minute}/minute"],
)
