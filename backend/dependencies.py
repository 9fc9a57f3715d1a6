from fastapi import Request

from backend.flows import FlowRegistry
from backend.store import RecruitStore
from backend.utils.n8n_client import N8nClient


# Objects are created once in create_app() and kept on app.state
def get_store(request: Request) -> RecruitStore:
    return request.app.state.store


def get_client(request: Request) -> N8nClient:
    return request.app.state.n8n_client


def get_flows(request: Request) -> FlowRegistry:
    return request.app.state.flows
