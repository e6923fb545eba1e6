import logging
import traceback
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from cryptodash.api.news import router as news_router
from cryptodash.api.prices import router as prices_router
from cryptodash.container import Container

logger = logging.getLogger("cryptodash.api")

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    container = Container()
    app.state.container = container
    settings = container.settings()
    if settings.debug:
        logging.getLogger("cryptodash").setLevel(logging.DEBUG)

    aggregator = container.price_aggregator()
    await aggregator.start()
    news_service = container.news_service() if settings.news_enabled else None
    if news_service is not None:
        await news_service.start()

    yield

    if news_service is not None:
        await news_service.stop()
    await aggregator.stop()
    await container.http_client().close()


app = FastAPI(title="CryptoDash", version=VERSION, lifespan=lifespan)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    tb = traceback.format_exception(type(exc), exc, exc.__traceback__)
    logger.error("Unhandled error on %s %s:\n%s", request.method, request.url.path, "".join(tb))
    return JSONResponse(status_code=500, content={"detail": str(exc)})


app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(prices_router)
app.include_router(news_router)


@app.get("/api/health")
async def health():
    return {"status": "ok", "version": VERSION}
