from agentchat.core import store
from agentchat.models.message import MessageRole


def test_users_only_see_enabled_agents(client, user_headers, agent, disabled_agent):
    response = client.get("/agents", headers=user_headers)

    assert response.status_code == 200
    assert [a["name"] for a in response.json()] == ["Helper"]
    assert client.get(f"/agents/{disabled_agent.id}", headers=user_headers).status_code == 404


def test_admins_see_every_agent(client, admin_headers, agent, disabled_agent):
    response = client.get("/agents", headers=admin_headers)

    assert {a["name"] for a in response.json()} == {"Helper", "Retired"}
    assert client.get(f"/agents/{disabled_agent.id}", headers=admin_headers).status_code == 200


def test_agent_management_is_admin_only(client, user_headers, admin_headers, agent):
    body = {"name": "Poet", "system_prompt": "You write poems."}
    assert client.post("/agents", json=body, headers=user_headers).status_code == 403

    created = client.post("/agents", json=body, headers=admin_headers)
    assert created.status_code == 201
    agent_id = created.json()["id"]

    updated = client.patch(f"/agents/{agent_id}", json={"short_description": "Rhymes"}, headers=admin_headers)
    assert updated.json()["short_description"] == "Rhymes"
    assert updated.json()["name"] == "Poet"

    toggled = client.post(f"/agents/{agent_id}/toggle", headers=admin_headers)
    assert toggled.json()["is_enabled"] is False


def test_create_conversation_defaults_title(client, user_headers, agent):
    response = client.post("/conversations", json={"agent_id": agent.id}, headers=user_headers)

    assert response.status_code == 201
    assert response.json()["title"] == "Chat with Helper"


def test_cannot_start_conversation_with_disabled_agent(client, user_headers, disabled_agent):
    response = client.post("/conversations", json={"agent_id": disabled_agent.id}, headers=user_headers)

    assert response.status_code == 404


def test_conversation_listing_and_messages(client, db_session, user_headers, other_headers, conversation):
    store.append_message(db_session, conversation, MessageRole.USER, "Hi")
    store.append_message(db_session, conversation, MessageRole.ASSISTANT, "Hello!")

    listing = client.get("/conversations", headers=user_headers).json()
    assert len(listing) == 1
    assert listing[0]["message_count"] == 2
    assert listing[0]["agent"]["name"] == "Helper"
    assert listing[0]["last_message_date"] is not None

    messages = client.get(f"/conversations/{conversation.id}/messages", headers=user_headers).json()
    assert [(m["role"], m["content"]) for m in messages["messages"]] == [("user", "Hi"), ("assistant", "Hello!")]

    assert client.get("/conversations", headers=other_headers).json() == []
    assert client.get(f"/conversations/{conversation.id}", headers=other_headers).status_code == 403


def test_admin_dashboard(client, db_session, admin_headers, user_profile, conversation):
    stats = client.get("/admin/stats", headers=admin_headers).json()
    assert stats == {
        "total_users": 2,
        "total_agents": 1,
        "total_conversations": 1,
        "active_conversations": 1,
    }

    users = client.get("/admin/users", headers=admin_headers).json()
    assert {u["email"] for u in users} == {"alice@example.com", "admin@example.com"}

    conversations = client.get(f"/admin/users/{user_profile.id}/conversations", headers=admin_headers)
    assert [c["id"] for c in conversations.json()] == [conversation.id]
    assert client.get("/admin/users/nobody/conversations", headers=admin_headers).status_code == 404
