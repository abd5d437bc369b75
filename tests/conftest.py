"""History builders shared by the test modules."""

from evolve.core.model import SPEAKER_AI, SPEAKER_USER, Message


def make_history(*turns):
    """
    Build a message list from (speaker, text) pairs or bare strings.

    Bare strings are user messages.
    """
    history = []
    for turn in turns:
        if isinstance(turn, str):
            history.append(Message(SPEAKER_USER, turn))
        else:
            speaker, text = turn
            history.append(Message(speaker, text))
    return history


def alternating(count, user_text="はい", ai_text="なるほど"):
    """count messages alternating user / ai, starting with the user."""
    return [
        Message(SPEAKER_USER if i % 2 == 0 else SPEAKER_AI,
                user_text if i % 2 == 0 else ai_text)
        for i in range(count)
    ]
