import json
import pytest
from fastapi.testclient import TestClient
from types import SimpleNamespace
from typing import Dict, Any, List, Generator
from unittest.mock import AsyncMock, MagicMock

from postgrest.exceptions import APIError

from talentmatch.main import app
from talentmatch.config.settings import Settings
from talentmatch.services.entity_store import EntityStore
from talentmatch.services.openai_service import OpenAIService
from talentmatch.services.batch_scheduler import BatchScheduler
from talentmatch.services.result_persister import ResultPersister
from talentmatch.services.matching_service import MatchingService


class FakeQuery:
    """Just enough of the PostgREST query builder for the entity store."""

    def __init__(self, client: "FakePostgrest", table: str):
        self.client = client
        self.table = table
        self.filters: List = []
        self.update_data = None

    def select(self, columns: str):
        return self

    def update(self, data: Dict[str, Any]):
        self.update_data = dict(data)
        return self

    def eq(self, column: str, value: Any):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def in_(self, column: str, values: List[Any]):
        self.filters.append(lambda row: row.get(column) in values)
        return self

    async def execute(self):
        if self.table in self.client.failing_tables:
            raise APIError({"message": "database unavailable", "code": "500"})
        rows = [row for row in self.client.tables.get(self.table, []) if all(f(row) for f in self.filters)]
        if self.update_data is not None:
            for row in rows:
                row.update(self.update_data)
            self.client.updates.append((self.table, [row["id"] for row in rows], self.update_data))
        return SimpleNamespace(data=[dict(row) for row in rows])


class FakePostgrest:
    def __init__(self, tables: Dict[str, List[Dict[str, Any]]]):
        self.tables = tables
        self.updates: List = []
        self.failing_tables: set = set()

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)


def make_tool_call_response(arguments: Dict[str, Any]):
    message = SimpleNamespace(
        content=None,
        tool_calls=[SimpleNamespace(function=SimpleNamespace(arguments=json.dumps(arguments)))]
    )
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def make_text_response(content: str):
    message = SimpleNamespace(content=content, tool_calls=None)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the local .env file."""
    return Settings(
        _env_file=None,
        environment="test",
        openai_api_key="test-key",
        supabase_url="https://example.supabase.co",
        supabase_key="anon-key",
        supabase_service_role_key=None,
        table_suffix="",
        batch_concurrency=5,
        batch_pacing_seconds=0,
        rate_limit_attempts=1,
        eligible_candidate_statuses=None,
    )


@pytest.fixture
def match_arguments() -> Dict[str, Any]:
    """A well-formed single-job scoring result."""
    return {
        "match_score": 82,
        "skills_match": 85,
        "experience_match": 78,
        "strengths": ["Strong Python background", "Led a research group"],
        "weaknesses": ["No teaching experience"],
        "recommendation": "recommended",
        "summary": "Solid fit for the role."
    }


@pytest.fixture
def test_job_data() -> Dict[str, Any]:
    return {
        "id": "job-1",
        "position": "Assistant Professor, Computer Science",
        "department": "Computer Science",
        "experience": "3-5 years",
        "job_description": "Teach undergraduate courses and run a research lab.",
        "expected_qualification": "PhD in Computer Science",
        "status": "open",
    }


@pytest.fixture
def test_candidate_data() -> Dict[str, Any]:
    return {
        "id": "cand-1",
        "full_name": "Test Candidate",
        "email": "test@example.com",
        "experience_years": 4,
        "resume_text": "Researcher in distributed systems with four years of lecturing.",
        "skills": "Python, Distributed Systems",
        "status": "applied",
        "job_id": "job-1",
    }


@pytest.fixture
def fake_db(test_job_data, test_candidate_data) -> FakePostgrest:
    """Three jobs, three candidates and three interview sessions."""
    return FakePostgrest({
        "jobs": [
            dict(test_job_data),
            {"id": "job-2", "position": "Lab Assistant", "job_description": "Maintain the lab.", "status": "active"},
            {"id": "job-3", "position": "Retired Post", "status": "closed"},
        ],
        "candidates": [
            dict(test_candidate_data),
            {"id": "cand-2", "full_name": "Second Candidate", "resume_text": None, "status": "applied"},
            {"id": "cand-3", "full_name": "Third Candidate", "resume_text": "Lecturer", "status": "rejected"},
        ],
        "ai_interviews": [
            {"id": "int-1", "interview_token": "tok-active", "status": "completed", "candidate_id": "cand-1", "archived": False},
            {"id": "int-2", "interview_token": "tok-archived", "status": "completed", "candidate_id": "cand-2", "archived": True},
            {"id": "int-3", "interview_token": "tok-expired", "status": "expired", "candidate_id": "cand-3", "archived": False},
        ],
    })


@pytest.fixture
def mock_openai_client() -> MagicMock:
    """An AsyncOpenAI stand-in; set chat.completions.create.return_value/side_effect per test."""
    client = MagicMock()
    client.chat.completions.create = AsyncMock()
    return client


@pytest.fixture
def entity_store(fake_db, settings) -> EntityStore:
    return EntityStore(supabase_client=fake_db, settings=settings)


@pytest.fixture
def openai_service(settings, mock_openai_client) -> OpenAIService:
    return OpenAIService(settings=settings, client=mock_openai_client)


@pytest.fixture
def matching_service(entity_store, openai_service, settings) -> MatchingService:
    return MatchingService(
        store=entity_store,
        openai_service=openai_service,
        scheduler=BatchScheduler(concurrency=5, pacing_seconds=0),
        persister=ResultPersister(store=entity_store),
        settings=settings
    )


@pytest.fixture
def test_client() -> Generator:
    """Create a test client for FastAPI app; dependency overrides are reset afterwards."""
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture
def tool_call_response():
    return make_tool_call_response


@pytest.fixture
def text_response():
    return make_text_response
