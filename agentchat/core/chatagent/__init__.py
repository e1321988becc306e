from .llm import ReplyGenerator, get_reply_generator
from .prompt import build_prompt, error_reply, fallback_reply
from .turn import ChatTurnResult, handle_chat_turn

__all__ = [
    "ReplyGenerator",
    "get_reply_generator",
    "build_prompt",
    "fallback_reply",
    "error_reply",
    "ChatTurnResult",
    "handle_chat_turn",
]
