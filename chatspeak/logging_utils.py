import json
import logging
import time

# structured extras copied from the record into every JSON line when present
EXTRA_FIELDS = (
    "request_id",
    "event",
    "job_id",
    "user",
    "state",
    "queue_length",
    "volume_percent",
)

def job_fields(job, **fields) -> dict:
    """Log extras describing a job, merged with any additional fields."""
    return {
        "job_id": job.id,
        "user": job.requester,
        "volume_percent": job.volume_percent,
        **fields,
    }

class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        base = {
            "ts": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime(record.created)),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        base.update({k: getattr(record, k) for k in EXTRA_FIELDS if hasattr(record, k)})
        if record.exc_info:
            base["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(base, ensure_ascii=False, default=str)

def setup_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())

    root.handlers.clear()
    root.addHandler(handler)
    # uvicorn access lines would duplicate the request-id middleware log
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
