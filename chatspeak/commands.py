from .models import ChatEvent, Command, ParsedCommand

TTS_TOKEN = "!tts"
EXACT_COMMANDS = {
    "!volume": Command.volume,
    "!ttshelp": Command.help,
    "!ttsstats": Command.stats,
}

NONE = ParsedCommand(kind=Command.none)

def parse_message(message: str) -> ParsedCommand:
    msg = message.strip()
    lowered = msg.lower()

    if lowered.startswith(TTS_TOKEN + " "):
        return ParsedCommand(kind=Command.tts, payload=msg[len(TTS_TOKEN) + 1:])

    kind = EXACT_COMMANDS.get(lowered)
    if kind is None:
        return NONE
    return ParsedCommand(kind=kind)

def classify(event: ChatEvent, bot_username: str | None = None) -> ParsedCommand:
    """Self-messages are dropped before any parsing happens."""
    if event.is_self:
        return NONE
    if bot_username and event.speaker.lower() == bot_username.lower():
        return NONE
    return parse_message(event.text)
