from typing import Sequence

from agentchat.core.errors import UpstreamFailure
from agentchat.models.message import Message, MessageRole

HISTORY_FALLBACK = (
    "I apologize, but I'm experiencing some technical difficulties right now. "
    "I remember we were talking, but I'm having trouble processing your message. "
    "Please try again in a moment, and I'll be happy to continue our conversation."
)

GREETING_FALLBACK = (
    "Hello! I'm {agent_name}. I apologize, but I'm experiencing some technical "
    "difficulties right now. Please try again in a moment, and I'll be happy to help you."
)


def build_prompt(system_prompt: str, agent_name: str, history: Sequence[Message], user_message: str) -> str:
    """
    Render the persona, the prior turns and the new user message into one prompt.

    `history` is the full ordered history including the just-written user turn;
    its last entry is dropped because the current message is appended explicitly.
    """
    context = f"{system_prompt}\n\nYou are {agent_name}. Here is the conversation history:\n\n"

    for msg in list(history)[:-1]:
        speaker = "Human" if msg.role == MessageRole.USER.value else agent_name
        context += f"{speaker}: {msg.content}\n\n"

    context += f"Human: {user_message}\n\n{agent_name}:"
    return context


def fallback_reply(agent_name: str, had_history: bool) -> str:
    if had_history:
        return HISTORY_FALLBACK
    return GREETING_FALLBACK.format(agent_name=agent_name)


# Replies chosen by failure kind on /chat-handler
ERROR_REPLIES = {
    UpstreamFailure.SAFETY: (
        "I apologize, but I cannot provide a response to that message due to safety considerations. "
        "Please try rephrasing your question, and I'll be happy to help as {agent_name}."
    ),
    UpstreamFailure.AUTH: (
        "I'm experiencing an authentication issue with my AI service. Please contact support to "
        "resolve this issue. As {agent_name}, I'll be back online once this is fixed."
    ),
    UpstreamFailure.RATE_LIMIT: (
        "I'm currently experiencing high demand. Please try again in a few moments. "
        "As {agent_name}, I'm still here to help once the service is available."
    ),
    UpstreamFailure.UNAVAILABLE: (
        "I apologize, but I'm experiencing technical difficulties connecting to my AI service right now. "
        "Please try again in a moment. As {agent_name}, I'm here to help you once the connection is restored."
    ),
}


def error_reply(agent_name: str, kind: UpstreamFailure) -> str:
    template = ERROR_REPLIES.get(kind, ERROR_REPLIES[UpstreamFailure.UNAVAILABLE])
    return template.format(agent_name=agent_name)
