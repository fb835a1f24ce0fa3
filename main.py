from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import Response
from dotenv import load_dotenv

from app.config import settings
from app.amadeus.client import AmadeusClient
from app.search.proxy import FlightSearchProxy
from app.search.responses import preflight_response, to_response
from app.obs.middleware import ObservabilityMiddleware
from app.obs.logger import log_event
from app.obs.metrics import get_metrics_snapshot

load_dotenv()

SEARCH_PATH = "/amadeus-flight-search"


def create_app(amadeus: Optional[AmadeusClient] = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        client = amadeus or AmadeusClient(settings)
        app.state.amadeus = client
        app.state.proxy = FlightSearchProxy(client)
        log_event("startup", amadeus_host=settings.amadeus_host, app_env=settings.APP_ENV)

        yield

        await client.aclose()
        log_event("shutdown")

    app = FastAPI(
        title="Amadeus Flight Search Proxy",
        version="1.0.0",
        lifespan=lifespan,
    )

    @app.get("/health")
    async def health():
        return {"status": "healthy", "service": "amadeus-flight-search"}

    @app.get("/metrics")
    async def metrics(request: Request):
        snapshot = get_metrics_snapshot()
        amadeus_client = getattr(request.app.state, "amadeus", None)
        snapshot["token_expires_at"] = amadeus_client.tokens.cache.expires_at if amadeus_client else None
        return snapshot

    @app.options(SEARCH_PATH)
    async def flight_search_preflight() -> Response:
        return preflight_response()

    @app.post(SEARCH_PATH)
    async def flight_search(request: Request) -> Response:
        raw_body = await request.body()
        result = await request.app.state.proxy.handle(raw_body)
        return to_response(result)

    return app


# Apply middleware
app = ObservabilityMiddleware(create_app())


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8001,
        reload=settings.APP_ENV == "dev",
        log_level="info"
    )
