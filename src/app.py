"""Storefront FastAPI application.

The domain is initialized at module level so uvicorn workers share it.
PROTEAN_ENV selects the domain.toml overlay (memory stores by default,
PostgreSQL under "production").

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 4000 --reload
"""

import uvicorn

from storefront.api.application import create_app
from storefront.config import get_settings
from storefront.domain import storefront

storefront.init()

app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=get_settings().port)
