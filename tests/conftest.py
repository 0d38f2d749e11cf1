"""Shared test fixtures: a scripted model gateway and canned model replies."""

import asyncio
import json

import pytest

from idealab.credentials import CredentialStore, MemoryStore
from idealab.session import IdeaLabSession

IDEA_PAYLOAD = {
    "title": "ShelfSense",
    "description": "Computer vision that tracks stock levels on grocery shelves.",
    "category": "AI/ML",
    "targetMarket": "Independent grocery stores",
    "problem": "Out-of-stock items go unnoticed for hours.",
    "solution": "Cheap cameras plus a model that flags empty facings.",
}

EVALUATION_PAYLOAD = {
    "marketSize": 4,
    "competition": 3,
    "feasibility": 4,
    "profitability": 3,
    "innovation": 4,
    "timeToMarket": 3,
    "overallScore": 72,
    "strengths": ["Clear pain point", "Low hardware cost"],
    "weaknesses": ["Incumbent retail analytics vendors"],
    "recommendations": ["Pilot with three stores"],
    "marketAnalysis": "Thousands of independents with thin margins.",
    "riskAssessment": "Privacy concerns around in-store cameras.",
}


class FakeGateway:
    """
    Gateway returning scripted replies in order. An exception in the script
    is raised instead of returned. When ``gate`` is set, every call waits on
    it before answering.
    """

    name = "Fake"

    def __init__(self, replies=(), gate: asyncio.Event | None = None):
        self.replies = list(replies)
        self.gate = gate
        self.calls = []

    async def generate(self, prompt, config):
        self.calls.append((prompt, config))
        if self.gate is not None:
            await self.gate.wait()
        reply = self.replies.pop(0)
        if isinstance(reply, BaseException):
            raise reply
        return reply


@pytest.fixture
def idea_reply():
    return "```json\n" + json.dumps(IDEA_PAYLOAD, indent=2) + "\n```"


@pytest.fixture
def evaluation_reply():
    return "Here is the evaluation you asked for:\n" + json.dumps(EVALUATION_PAYLOAD) + "\nGood luck!"


@pytest.fixture
def credentials():
    return CredentialStore(MemoryStore({"gemini-api-key": "AIzaTestKey"}))


@pytest.fixture
def make_session(credentials):
    """Build a session bound to a FakeGateway scripted with ``replies``."""

    def factory(*replies, gate=None, store=None):
        gateway = FakeGateway(replies, gate=gate)
        session = IdeaLabSession(store or credentials, lambda api_key: gateway)
        return session, gateway

    return factory


@pytest.fixture
def make_gateway():
    def factory(*replies, gate=None):
        return FakeGateway(replies, gate=gate)

    return factory
