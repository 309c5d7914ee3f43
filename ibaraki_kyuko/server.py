from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import Settings, get_settings
from .fetcher import InvalidPostId, PostNotFound, UpstreamStatusError, UpstreamTimeout, fetch_cancellations


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(title="Ibaraki CT Cancellation Info API", version="1.0.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def cancellations_response(post_id: str) -> JSONResponse:
        try:
            envelope = fetch_cancellations(post_id, settings)
        except InvalidPostId:
            return JSONResponse({"error": "Invalid post id", "id": post_id}, status_code=400)
        except PostNotFound:
            return JSONResponse({"error": "Article Not Found", "id": post_id}, status_code=404)
        except UpstreamStatusError as exc:
            logging.error("Upstream returned %d for post %s", exc.status_code, post_id)
            return JSONResponse({"error": f"WordPress API Error: {exc.status_code}"}, status_code=502)
        except UpstreamTimeout as exc:
            logging.error("%s", exc)
            return JSONResponse({"error": "External API timeout - please try again"}, status_code=504)
        except Exception:
            logging.exception("Failed to build cancellations for post %s", post_id)
            return JSONResponse({"error": "Internal Server Error"}, status_code=500)
        return JSONResponse(envelope)

    @app.get("/api")
    @app.get("/api/")
    def index() -> dict:
        return {
            "message": "Ibaraki CT Cancellation Info API",
            "endpoints": {
                "latest": "/api/cancellations",
                "specific": "/api/cancellations/:id",
            },
            "status": "running",
        }

    @app.get("/api/health")
    def health() -> dict:
        return {"status": "ok"}

    @app.get("/api/cancellations")
    def latest_cancellations() -> JSONResponse:
        return cancellations_response(settings.default_post_id)

    @app.get("/api/cancellations/{post_id}")
    def post_cancellations(post_id: str) -> JSONResponse:
        return cancellations_response(post_id)

    return app
