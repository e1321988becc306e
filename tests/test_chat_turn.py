import pytest
from sqlalchemy.exc import OperationalError

from agentchat.core import store
from agentchat.core.chatagent import error_reply, handle_chat_turn
from agentchat.core.chatagent.prompt import GREETING_FALLBACK, HISTORY_FALLBACK
from agentchat.core.errors import Forbidden, NotFound, PersistenceError, UpstreamFailure, ValidationError
from agentchat.core.session import SessionContext
from agentchat.models.message import Message, MessageRole
from agentchat.models.profile import ProfileRole

from conftest import StubReplyGenerator


def _session_for(profile):
    return SessionContext(
        user_id=profile.id,
        email=profile.email,
        role=ProfileRole(profile.role),
        token_id="test-token",
        expires_at=0.0,
    )


def _message_count(db, conversation):
    return db.query(Message).filter(Message.conversation_id == conversation.id).count()


def test_turn_appends_user_and_assistant_message(db_session, user_profile, agent, conversation):
    generator = StubReplyGenerator(reply="Nice to meet you!")

    result = handle_chat_turn(db_session, _session_for(user_profile), generator, "Hi there", conversation.id, agent.id)

    history = store.load_history(db_session, conversation.id)
    assert [(m.role, m.content) for m in history] == [
        ("user", "Hi there"),
        ("assistant", "Nice to meet you!"),
    ]
    assert result.message == "Nice to meet you!"
    assert result.message_id == history[1].id
    assert result.generated is True
    assert result.timestamp.tzinfo is not None


def test_first_turn_prompt_has_no_prior_lines(db_session, user_profile, agent, conversation):
    generator = StubReplyGenerator()

    handle_chat_turn(db_session, _session_for(user_profile), generator, "Hi", conversation.id, agent.id)

    assert generator.prompts == [
        "You are a friendly assistant.\n\n"
        "You are Helper. Here is the conversation history:\n\n"
        "Human: Hi\n\n"
        "Helper:"
    ]


def test_second_turn_prompt_includes_earlier_turns(db_session, user_profile, agent, conversation):
    generator = StubReplyGenerator(reply="Hello!")
    session = _session_for(user_profile)

    handle_chat_turn(db_session, session, generator, "Hi", conversation.id, agent.id)
    handle_chat_turn(db_session, session, generator, "How are you?", conversation.id, agent.id)

    assert generator.prompts[1].endswith(
        "Human: Hi\n\nHelper: Hello!\n\nHuman: How are you?\n\nHelper:"
    )
    assert _message_count(db_session, conversation) == 4


def test_generation_failure_on_first_turn_uses_history_fallback(db_session, user_profile, agent, conversation):
    # The loaded history already holds the new user message
    generator = StubReplyGenerator(fail=True)

    result = handle_chat_turn(db_session, _session_for(user_profile), generator, "Hi", conversation.id, agent.id)

    assert result.generated is False
    assert result.message == HISTORY_FALLBACK
    assert _message_count(db_session, conversation) == 2


def test_generation_failure_after_history_load_failure_uses_greeting(
    db_session, user_profile, agent, conversation, monkeypatch
):
    def broken_history(db, conversation_id):
        raise OperationalError("SELECT messages", {}, Exception("database is locked"))

    monkeypatch.setattr(store, "load_history", broken_history)
    generator = StubReplyGenerator(fail=True)

    result = handle_chat_turn(db_session, _session_for(user_profile), generator, "Hi", conversation.id, agent.id)
    monkeypatch.undo()

    assert result.message == GREETING_FALLBACK.format(agent_name="Helper")
    assert result.message.startswith("Hello! I'm Helper.")
    assert generator.prompts[0].endswith("Here is the conversation history:\n\nHuman: Hi\n\nHelper:")
    assert _message_count(db_session, conversation) == 2


@pytest.mark.parametrize("kind, opening", [
    (UpstreamFailure.SAFETY, "I apologize, but I cannot provide a response to that message due to safety"),
    (UpstreamFailure.AUTH, "I'm experiencing an authentication issue with my AI service."),
    (UpstreamFailure.RATE_LIMIT, "I'm currently experiencing high demand."),
    (UpstreamFailure.UNAVAILABLE, "I apologize, but I'm experiencing technical difficulties connecting"),
])
def test_error_specific_fallback_follows_failure_kind(db_session, user_profile, agent, conversation, kind, opening):
    generator = StubReplyGenerator(fail=True, failure_kind=kind)

    result = handle_chat_turn(
        db_session, _session_for(user_profile), generator, "Hi", conversation.id, agent.id,
        error_specific_fallback=True,
    )

    assert result.message == error_reply("Helper", kind)
    assert result.message.startswith(opening)
    assert "Helper" in result.message


def test_generation_failure_with_history_uses_history_fallback(db_session, user_profile, agent, conversation):
    session = _session_for(user_profile)
    handle_chat_turn(db_session, session, StubReplyGenerator(), "Hi", conversation.id, agent.id)

    result = handle_chat_turn(db_session, session, StubReplyGenerator(fail=True), "Again", conversation.id, agent.id)

    assert result.message == HISTORY_FALLBACK
    assert _message_count(db_session, conversation) == 4


def test_missing_input_is_rejected_before_any_write(db_session, user_profile, agent, conversation):
    with pytest.raises(ValidationError) as excinfo:
        handle_chat_turn(db_session, _session_for(user_profile), StubReplyGenerator(), "  ", conversation.id, agent.id)

    assert excinfo.value.message == "Message, conversation ID, and agent ID are required"
    assert _message_count(db_session, conversation) == 0


def test_unknown_agent_and_conversation(db_session, user_profile, agent, conversation):
    session = _session_for(user_profile)

    with pytest.raises(NotFound, match="Agent not found"):
        handle_chat_turn(db_session, session, StubReplyGenerator(), "Hi", conversation.id, "missing-agent")
    with pytest.raises(NotFound, match="Conversation not found"):
        handle_chat_turn(db_session, session, StubReplyGenerator(), "Hi", "missing-conversation", agent.id)


def test_other_users_conversation_is_forbidden(db_session, other_profile, agent, conversation):
    generator = StubReplyGenerator()

    with pytest.raises(Forbidden, match="Access denied"):
        handle_chat_turn(db_session, _session_for(other_profile), generator, "Hi", conversation.id, agent.id)

    assert generator.prompts == []
    assert _message_count(db_session, conversation) == 0


def test_admin_may_extend_any_conversation(db_session, admin_profile, agent, conversation):
    handle_chat_turn(db_session, _session_for(admin_profile), StubReplyGenerator(), "Hi", conversation.id, agent.id)

    assert _message_count(db_session, conversation) == 2


def test_disabled_agent_still_replies_unless_enforced(db_session, user_profile, disabled_agent, monkeypatch):
    from agentchat.core import config
    from agentchat.models.conversation import Conversation

    conversation = Conversation(user_id=user_profile.id, agent_id=disabled_agent.id)
    db_session.add(conversation)
    db_session.commit()
    session = _session_for(user_profile)

    handle_chat_turn(db_session, session, StubReplyGenerator(), "Hi", conversation.id, disabled_agent.id)
    assert _message_count(db_session, conversation) == 2

    monkeypatch.setattr(config, "ENFORCE_AGENT_ENABLED", True)
    with pytest.raises(NotFound):
        handle_chat_turn(db_session, session, StubReplyGenerator(), "Hi", conversation.id, disabled_agent.id)
    assert _message_count(db_session, conversation) == 2


def test_failed_user_write_aborts_turn(db_session, user_profile, agent, conversation, monkeypatch):
    generator = StubReplyGenerator()

    def failing_commit():
        raise OperationalError("INSERT INTO messages", {}, Exception("disk I/O error"))

    monkeypatch.setattr(db_session, "commit", failing_commit)
    with pytest.raises(PersistenceError, match="Failed to save user message"):
        handle_chat_turn(db_session, _session_for(user_profile), generator, "Hi", conversation.id, agent.id)
    monkeypatch.undo()

    assert generator.prompts == []
    assert _message_count(db_session, conversation) == 0

    handle_chat_turn(db_session, _session_for(user_profile), generator, "Hi", conversation.id, agent.id)
    assert _message_count(db_session, conversation) == 2


def test_history_is_ordered_oldest_first(db_session, conversation):
    contents = [f"message {i}" for i in range(6)]
    for i, content in enumerate(contents):
        role = MessageRole.USER if i % 2 == 0 else MessageRole.ASSISTANT
        store.append_message(db_session, conversation, role, content)

    history = store.load_history(db_session, conversation.id)

    assert [m.content for m in history] == contents
    timestamps = [m.created_at for m in history]
    assert all(a < b for a, b in zip(timestamps, timestamps[1:]))
