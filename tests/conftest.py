"""Pytest configuration and shared fixtures for all tests."""

import os
import sys
from pathlib import Path

os.environ.setdefault("DATABASE_URL", "sqlite://")

# Добавить корень проекта в PYTHONPATH
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import pytest

import config
from database import get_session, init_tables
from models import Agent, Client
from commission_system.events.event_bus import eventBus

config.setupLogging()


@pytest.fixture
def session():
    """Fresh in-memory SQLite session with all tables created."""
    sessionFactory, engine = get_session("sqlite://")
    init_tables(engine)
    db = sessionFactory()
    yield db
    db.close()
    engine.dispose()


@pytest.fixture(autouse=True)
def clean_event_bus():
    eventBus.clear()
    yield
    eventBus.clear()


def tierFor(starLevel):
    return "rookie" if starLevel == 0 else f"{starLevel}-star"


@pytest.fixture
def make_agent(session):
    """Create an agent with a given star level and optional supervisor."""
    counter = {"n": 0}

    def _make(starLevel=0, supervisor=None, supervisorID=None):
        counter["n"] += 1
        agent = Agent(
            name=f"Agent {counter['n']}",
            email=f"agent{counter['n']}@test.com",
            starLevel=starLevel,
            tier=tierFor(starLevel),
            supervisorID=supervisor.agentID if supervisor is not None else supervisorID
        )
        session.add(agent)
        session.commit()
        return agent

    return _make


@pytest.fixture
def make_chain(make_agent):
    """
    Build a supervisor chain from star levels listed top to bottom.
    Returns the agents in the same order; the last one is the closer.
    """
    def _make(levels):
        agents = []
        supervisor = None
        for level in levels:
            supervisor = make_agent(level, supervisor=supervisor)
            agents.append(supervisor)
        return agents

    return _make


@pytest.fixture
def make_client(session):
    counter = {"n": 0}

    def _make(agent, intakeStatus="approved"):
        counter["n"] += 1
        client = Client(
            agentID=agent.agentID,
            firstName=f"Client {counter['n']}",
            intakeStatus=intakeStatus
        )
        session.add(client)
        session.commit()
        return client

    return _make
