"""HTTP request handling for the chat translation service.

This package provides the aiohttp handlers for the translate endpoints and the sliding-window
rate limiter applied to incoming translation requests.
"""

from handlers.rate_limiter import RateLimitDecision, SlidingWindowRateLimiter
from handlers.translate_api import SHARED_DATA_KEY, TranslateApi, TranslateRequestError, create_app

__all__: list[str] = [
    "SHARED_DATA_KEY",
    "RateLimitDecision",
    "SlidingWindowRateLimiter",
    "TranslateApi",
    "TranslateRequestError",
    "create_app",
]
