import uuid
import logging

from fastapi import FastAPI, HTTPException, Request, Response

from . import __version__
from .bot import SpeechBot
from .models import Job
from .schemas import JobOut, QueueOut

log = logging.getLogger("api")

def job_out(job: Job) -> JobOut:
    return JobOut(
        id=job.id,
        requester=job.requester,
        text=job.text,
        volume_percent=job.volume_percent,
        usage_count=job.usage_count,
        enqueued_at=job.enqueued_at,
    )

def create_app(bot: SpeechBot) -> FastAPI:
    app = FastAPI(title="chatspeak status", version=__version__)

    @app.middleware("http")
    async def tag_request(request: Request, call_next):
        request.state.request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        response: Response = await call_next(request)
        response.headers["X-Request-ID"] = request.state.request_id
        log.info(
            f"{request.method} {request.url.path} -> {response.status_code}",
            extra={"request_id": request.state.request_id, "event": "http_request"},
        )
        return response

    @app.get("/healthz")
    def healthz():
        # dispatcher state and backlog alongside liveness
        return {
            "ok": True,
            "state": bot.dispatcher.state.value,
            "queue_length": len(bot.queue),
        }

    @app.get("/readyz")
    def readyz():
        if not bot.chat_connected:
            raise HTTPException(status_code=503, detail="chat not connected")
        return {"ready": True}

    @app.get("/queue", response_model=QueueOut)
    def queue_status():
        jobs = bot.queue.snapshot()
        in_flight = bot.dispatcher.in_flight
        return QueueOut(
            state=bot.dispatcher.state.value,
            in_flight=job_out(in_flight) if in_flight else None,
            length=len(jobs),
            jobs=[job_out(j) for j in jobs],
        )

    return app
