import logging

import uvicorn

from wsbstonks.config import get_settings
from wsbstonks.providers.loader import get_provider
from wsbstonks.server import create_app
from wsbstonks.state import Services
from wsbstonks.storage.store import PortfolioStore

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
)

app = create_app(
    Services(
        settings=settings,
        store=PortfolioStore(settings.database_path),
        provider=get_provider(settings),
    )
)


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
