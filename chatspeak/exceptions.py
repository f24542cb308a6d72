class ChatSpeakError(Exception):
    """Base class for errors raised by the bot."""

class ResolverFailure(ChatSpeakError):
    """Volume service could not produce a usable answer for a user."""

class SynthesisFailure(ChatSpeakError):
    """Speech backend failed while speaking a job."""

class NotifyFailure(ChatSpeakError):
    """Outbound chat message could not be delivered."""

class QueueEmpty(ChatSpeakError, IndexError):
    """remove_head() was called on an empty queue."""
