"""
FastAPI webhook server for receiving AlertManager notifications.

``/hook`` accepts AlertManager webhook POSTs and posts one GitHub comment per
alert. The batch is all-or-nothing from the caller's point of view: the first
failing alert aborts the rest and the request fails with 500.
"""

import time
from datetime import datetime

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError

from . import __version__
from .models import AlertManagerWebhook, alert_id
from .receiver import GhWebhookReceiver


logger = structlog.get_logger(__name__)

# FastAPI app instance
app = FastAPI(
    title="Alertmanager GitHub Notifier",
    description="Posts AlertManager alerts as GitHub pull request comments",
    version=__version__,
)

# Global receiver (set by main before the server starts)
receiver: GhWebhookReceiver | None = None

HOOK_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "TRACE", "CONNECT"]


@app.on_event("shutdown")
async def shutdown_event():
    """Close the GitHub client on shutdown."""
    if receiver is not None:
        await receiver.gh_client.aclose()
        logger.info("GitHub client closed")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": datetime.fromtimestamp(time.time()).isoformat() + "Z",
        "service": "am-github-notifier",
        "version": __version__,
    }


@app.api_route("/hook", methods=HOOK_METHODS)
async def receive_alertmanager_webhook(request: Request):
    """Decode an AlertManager webhook and comment on the target pull requests."""
    remote_addr = request.client.host if request.client else None

    if request.method != "POST":
        logger.warning(
            "Unsupported request method",
            method=request.method,
            remote_addr=remote_addr,
        )
        return Response(status_code=405)

    # Decode the webhook request.
    body = await request.body()
    try:
        msg = AlertManagerWebhook.model_validate_json(body)
    except ValidationError as e:
        logger.warning("Failed to decode webhook data", remote_addr=remote_addr)
        return PlainTextResponse(str(e), status_code=400)

    if receiver is None:
        logger.error("Webhook receiver not initialized")
        return PlainTextResponse("webhook receiver not initialized", status_code=500)

    # Handle the webhook message.
    logger.info("Handling alert", alert_id=alert_id(msg), alert_count=len(msg.alerts))
    try:
        await receiver.process_alerts(msg)
    except Exception as e:
        logger.error(
            "Failed to handle alert",
            alert_id=alert_id(msg),
            error=str(e),
            error_type=type(e).__name__,
        )
        return PlainTextResponse(str(e), status_code=500)

    logger.info("Completed alert", alert_id=alert_id(msg))
    return Response(status_code=200)
