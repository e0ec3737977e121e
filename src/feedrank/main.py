from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI

from .config import DEFAULT_RANKING_CONFIG
from .lib.elasticsearch import create_es_client
from .routers import feed, health
from .security import verify_api_key


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Tests attach a fake client to app.state.es instead of running this.
    es = create_es_client()
    app.state.es = es
    try:
        yield
    finally:
        if es is not None:
            await es.close()


app = FastAPI(
    title="Feed Ranking API",
    description="Personalized feed ranking with author and tag diversity sampling",
    version="0.1.0",
    lifespan=lifespan,
)

# The lifespan replaces es with a live client.
app.state.es = None
app.state.ranking_config = DEFAULT_RANKING_CONFIG

app.include_router(health.router)
app.include_router(feed.router)


@app.get("/", dependencies=[Depends(verify_api_key)])
async def root():
    return {"message": "Feed Ranking API"}
