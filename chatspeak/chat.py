"""
Twitch chat over IRC-on-WebSocket. One reader thread per connection,
outbound messages are sent from whichever thread calls notify().
"""
import logging
import threading
from typing import Callable, Optional, Protocol

from websockets.exceptions import WebSocketException
from websockets.sync.client import ClientConnection, connect

from .exceptions import NotifyFailure
from .models import ChatEvent

log = logging.getLogger("chat")

TWITCH_WS_URL = "wss://irc-ws.chat.twitch.tv:443"
READ_TIMEOUT_SECONDS = 1.0
CONNECT_TIMEOUT_SECONDS = 10.0

class Notifier(Protocol):
    def notify(self, text: str) -> None: ...

def notify_quietly(notifier: Notifier, text: str) -> None:
    """Best-effort send: failures are logged and swallowed."""
    try:
        notifier.notify(text)
    except Exception:
        log.warning("chat notify failed", extra={"event": "notify_failed"}, exc_info=True)

def parse_privmsg(line: str) -> Optional[tuple[str, str, str]]:
    """
    ':nick!nick@nick.tmi.twitch.tv PRIVMSG #channel :text' -> (nick, channel, text).
    IRCv3 tags in front of the prefix are skipped. Anything else returns None.
    """
    if line.startswith("@"):
        _, _, line = line.partition(" ")
    if not line.startswith(":"):
        return None
    prefix, _, rest = line[1:].partition(" ")
    command, _, params = rest.partition(" ")
    if command != "PRIVMSG":
        return None
    channel, _, text = params.partition(" :")
    if not channel or not text:
        return None
    nick = prefix.split("!", 1)[0]
    return nick, channel.lstrip("#"), text

class TwitchChat:
    def __init__(
        self,
        username: str,
        oauth_token: str,
        channel: str,
        on_message: Callable[[ChatEvent], None],
        on_connect: Optional[Callable[[], None]] = None,
        url: str = TWITCH_WS_URL,
        reconnect_seconds: float = 5.0,
        connector: Callable[..., ClientConnection] = connect,
    ):
        self.username = username.lower()
        self.oauth_token = oauth_token if oauth_token.startswith("oauth:") else f"oauth:{oauth_token}"
        self.channel = channel.lower().lstrip("#")
        self.on_message = on_message
        self.on_connect = on_connect
        self.url = url
        self.reconnect_seconds = reconnect_seconds
        self.connector = connector

        self._ws: Optional[ClientConnection] = None
        self._send_lock = threading.Lock()
        self._connected = threading.Event()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def connected(self) -> bool:
        return self._connected.is_set()

    def start(self) -> None:
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="twitch-chat", daemon=True)
        self._thread.start()

    def stop(self, timeout: float = 5.0) -> None:
        self._stop.set()
        self._close()
        if self._thread is not None:
            self._thread.join(timeout)

    def notify(self, text: str) -> None:
        if not self.connected:
            log.info("chat not connected, message dropped", extra={"event": "notify_dropped"})
            return
        line = text.replace("\r", " ").replace("\n", " ")
        try:
            self._send(f"PRIVMSG #{self.channel} :{line}")
        except (OSError, WebSocketException) as e:
            raise NotifyFailure(f"could not send chat message: {e}") from e

    def _send(self, line: str) -> None:
        with self._send_lock:
            if self._ws is None:
                raise ConnectionError("chat socket closed")
            self._ws.send(line)

    def _run(self) -> None:
        while not self._stop.is_set():
            try:
                with self.connector(self.url, open_timeout=CONNECT_TIMEOUT_SECONDS) as ws:
                    self._ws = ws
                    self._send(f"PASS {self.oauth_token}")
                    self._send(f"NICK {self.username}")
                    self._read_loop(ws)
            except (OSError, WebSocketException):
                if not self._stop.is_set():
                    log.warning("chat connection lost", extra={"event": "chat_disconnected"}, exc_info=True)
            finally:
                self._close()
            self._stop.wait(self.reconnect_seconds)

    def _read_loop(self, ws: ClientConnection) -> None:
        # one frame may carry several CRLF-separated IRC lines
        while not self._stop.is_set():
            try:
                frame = ws.recv(timeout=READ_TIMEOUT_SECONDS)
            except TimeoutError:
                continue
            if isinstance(frame, bytes):
                frame = frame.decode("utf-8", errors="replace")
            for line in frame.split("\r\n"):
                if line:
                    self.handle_line(line)

    def handle_line(self, line: str) -> None:
        if line.startswith("PING"):
            self._send("PONG" + line[4:])
            return

        parts = line.split(" ", 2)
        if len(parts) > 1 and parts[1] == "001":
            self._send(f"JOIN #{self.channel}")
            self._connected.set()
            log.info("connected to chat", extra={"event": "chat_connected"})
            if self.on_connect is not None:
                self.on_connect()
            return

        parsed = parse_privmsg(line)
        if parsed is None:
            return
        nick, _, text = parsed
        self.on_message(ChatEvent(speaker=nick, text=text, is_self=nick.lower() == self.username))

    def _close(self) -> None:
        was_connected = self.connected
        self._connected.clear()
        with self._send_lock:
            ws, self._ws = self._ws, None
        if ws is not None:
            ws.close()
        if was_connected:
            log.info("disconnected from chat", extra={"event": "chat_disconnected"})
