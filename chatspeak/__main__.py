import logging
import threading

import uvicorn

from .api import create_app
from .bot import SpeechBot
from .logging_utils import setup_logging
from .settings import get_settings

log = logging.getLogger("chatspeak")

def main():
    settings = get_settings()
    setup_logging(settings.log_level)

    bot = SpeechBot.from_settings(settings)
    bot.start()
    log.info("tts bot starting", extra={"event": "bot_start"})

    try:
        if settings.api_enabled:
            uvicorn.run(
                create_app(bot),
                host=settings.api_host,
                port=settings.api_port,
                log_config=None,
            )
        else:
            threading.Event().wait()
    except KeyboardInterrupt:
        pass
    finally:
        bot.stop()
        log.info("tts bot stopped", extra={"event": "bot_stop"})

if __name__ == "__main__":
    main()
