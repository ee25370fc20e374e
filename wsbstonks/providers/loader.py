from wsbstonks.config import Settings
from wsbstonks.providers.base import MarketDataProvider
from wsbstonks.providers.finnhub import FinnhubProvider


def get_provider(settings: Settings) -> MarketDataProvider:
    """
    Provider loader / factory.

    This is the single place that knows about concrete providers.
    """
    return FinnhubProvider(
        api_key=settings.finnhub_api_key,
        sandbox_key=settings.finnhub_sandbox_key,
        base_url=settings.finnhub_base_url,
        timeout_s=settings.finnhub_timeout_seconds,
    )
