from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends, HTTPException, Request
from loguru import logger

from cv_scoring.application.errors import EngineClosedError, ScoringTimeoutError
from cv_scoring.application.log_setup import setup_logging
from cv_scoring.application.schemas import ScoringRequest, ScoringResponse
from cv_scoring.application.services.scoring_client import ScoringClient
from cv_scoring.application.settings import get_settings, Settings

# Configure logging once
setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # One client (and its engine workers) for the app lifetime
    client = ScoringClient.from_settings(get_settings())
    await client.start()
    app.state.scoring_client = client
    try:
        yield
    finally:
        await client.close()


app = FastAPI(title="CV Scoring Engine (TF-IDF relevance, keywords, complexity)", lifespan=lifespan)


# --- Dependencies ---
def settings_dep() -> Settings:
    return get_settings()

def scoring_client_dep(request: Request) -> ScoringClient:
    client = getattr(request.app.state, "scoring_client", None)
    if client is None:
        raise HTTPException(status_code=503, detail="Scoring engine not started")
    return client


# --- Meta ---
@app.get("/", tags=["meta"])
def root(
    settings: Settings = Depends(settings_dep),
    client: ScoringClient = Depends(scoring_client_dep),
):
    return {
        "ok": True,
        "app_name": settings.app_name,
        "environment": settings.app_env,
        "debug": settings.debug,
        "workers": client.worker_count,
    }

@app.get("/health", tags=["meta"])
def health():
    return {"ok": True}


# --- Message protocol over HTTP ---
# Body and reply are the same {type, id, payload} envelopes the workers exchange.
# Engine-side failures come back as `error` envelopes (HTTP 200), like on the channel.
@app.post("/v1/messages", tags=["scoring"], response_model=ScoringResponse)
async def post_message(body: ScoringRequest, client: ScoringClient = Depends(scoring_client_dep)):
    try:
        response = await client.submit(body.type, body.payload)
    except ScoringTimeoutError as e:
        raise HTTPException(status_code=504, detail=str(e))
    except EngineClosedError as e:
        raise HTTPException(status_code=503, detail=str(e))

    if response.is_error:
        logger.info("Request id={} type={} answered with error: {}", body.id, body.type, response.payload)

    # the client correlates on its own ids; hand the caller back theirs
    return response.model_copy(update={"id": body.id})
