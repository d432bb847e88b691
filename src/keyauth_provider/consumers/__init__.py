"""Consumer site profile lookup."""

from keyauth_provider.consumers.fetcher import (
    ConsumerInfoFetcher,
    ConsumerProfile,
    absolutize,
    parse_consumer_id,
)

__all__ = [
    "ConsumerInfoFetcher",
    "ConsumerProfile",
    "absolutize",
    "parse_consumer_id",
]
