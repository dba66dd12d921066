import logging

from fastapi import FastAPI
from fastapi.responses import Response

from api.deps import get_settings
from api.routes.breathing import router as breathing_router
from api.routes.emotion import router as emotion_router
from infrastructure.metrics import get_metrics_response

logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Signal Classification Service")

app.include_router(emotion_router)
app.include_router(breathing_router)


@app.get("/health")
def health() -> dict[str, str]:
    """Return a simple liveness check."""
    return {"status": "ok"}


@app.get("/metrics")
def metrics() -> Response:
    """Prometheus metrics endpoint.

    Returns metrics in Prometheus text exposition format.
    """
    body, content_type = get_metrics_response()
    return Response(content=body, media_type=content_type)
