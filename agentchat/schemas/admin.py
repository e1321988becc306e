# agentchat/schemas/admin.py
from pydantic import BaseModel

class DashboardStats(BaseModel):
    total_users: int
    total_agents: int
    total_conversations: int
    active_conversations: int
