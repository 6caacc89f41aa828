from typing import Dict, Any, Optional, List, Sequence
from datetime import datetime, timezone
import logging

import httpx
from postgrest import AsyncPostgrestClient
from postgrest.exceptions import APIError

from talentmatch.config.settings import Settings
from talentmatch.config.utils import get_table_name
from talentmatch.config.constants import CANDIDATES_TABLE, JOBS_TABLE, INTERVIEWS_TABLE
from talentmatch.db.enums import InterviewStatus
from talentmatch.exceptions import NotFound, Unauthorized, UpstreamError, PersistenceError
from talentmatch.schemas.candidate import CandidateProfile
from talentmatch.schemas.job import JobProfile
from talentmatch.schemas.interview import InterviewSession

logger = logging.getLogger(__name__)

CANDIDATE_COLUMNS = "id, full_name, email, experience_years, resume_text, skills, status, job_id"
JOB_COLUMNS = "id, position, department, experience, job_description, expected_qualification, status"
INTERVIEW_COLUMNS = "id, status, candidate_id, archived"

class EntityStore:
    """Typed reads and the few owned-field writes against the Supabase tables."""

    def __init__(self, supabase_client: AsyncPostgrestClient, settings: Settings):
        self.supabase = supabase_client
        self.candidates_table_name = get_table_name(CANDIDATES_TABLE, settings)
        self.jobs_table_name = get_table_name(JOBS_TABLE, settings)
        self.interviews_table_name = get_table_name(INTERVIEWS_TABLE, settings)

    async def _select(self, table: str, columns: str, **filters: Any) -> List[Dict[str, Any]]:
        """Run a select with equality filters; `in_<column>` keys become IN filters."""
        query = self.supabase.table(table).select(columns)
        for key, value in filters.items():
            if key.startswith("in_"):
                query = query.in_(key[3:], list(value))
            else:
                query = query.eq(key, value)
        try:
            response = await query.execute()
        except (APIError, httpx.HTTPError) as e:
            logger.error(f"Error reading from {table}: {e}")
            raise UpstreamError(f"Failed to read {table}: {e}")
        return response.data or []

    async def get_job(self, job_id: str) -> JobProfile:
        rows = await self._select(self.jobs_table_name, JOB_COLUMNS, id=job_id)
        if not rows:
            logger.warning(f"Job {job_id} not found.")
            raise NotFound(f"Job {job_id} not found")
        return JobProfile.model_validate(rows[0])

    async def get_candidate(self, candidate_id: str) -> CandidateProfile:
        rows = await self._select(self.candidates_table_name, CANDIDATE_COLUMNS, id=candidate_id)
        if not rows:
            logger.warning(f"Candidate {candidate_id} not found.")
            raise NotFound(f"Candidate {candidate_id} not found")
        return CandidateProfile.model_validate(rows[0])

    async def list_candidates(self, statuses: Optional[Sequence[str]] = None) -> List[CandidateProfile]:
        """Candidates eligible for scoring. No status filter means every candidate."""
        if statuses:
            rows = await self._select(self.candidates_table_name, CANDIDATE_COLUMNS, in_status=statuses)
        else:
            rows = await self._select(self.candidates_table_name, CANDIDATE_COLUMNS)
        return [CandidateProfile.model_validate(row) for row in rows]

    async def list_jobs(self, status_in: Sequence[str]) -> List[JobProfile]:
        rows = await self._select(self.jobs_table_name, JOB_COLUMNS, in_status=status_in)
        return [JobProfile.model_validate(row) for row in rows]

    async def get_interview_by_token(self, interview_token: str) -> InterviewSession:
        rows = await self._select(self.interviews_table_name, INTERVIEW_COLUMNS, interview_token=interview_token)
        if not rows:
            logger.warning("Invalid interview token presented.")
            raise Unauthorized("Invalid interview token")
        session = InterviewSession.model_validate(rows[0])
        if session.archived or session.status == InterviewStatus.EXPIRED.value:
            logger.warning(f"Interview {session.id} is no longer active (status={session.status}).")
            raise Unauthorized("Interview session is no longer active")
        return session

    async def _update(self, table: str, record_id: str, update_data: Dict[str, Any]) -> Dict[str, Any]:
        update_data['updated_at'] = datetime.now(timezone.utc).isoformat()
        try:
            response = await self.supabase.table(table)\
                .update(update_data)\
                .eq('id', record_id)\
                .execute()
        except (APIError, httpx.HTTPError) as e:
            logger.error(f"Error updating {table} record {record_id}: {e}")
            raise PersistenceError(f"Failed to update {record_id}: {e}")

        if not response.data:
            raise PersistenceError(f"Update of {record_id} matched no rows")
        return response.data[0]

    async def upsert_candidate_scores(
        self,
        candidate_id: str,
        score: int,
        analysis: Dict[str, Any],
        best_job_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """Replace the candidate's score fields wholesale. The later write wins."""
        update_data: Dict[str, Any] = {
            "ai_match_score": score,
            "ai_match_analysis": analysis,
        }
        if best_job_id is not None:
            update_data["job_id"] = best_job_id
        return await self._update(self.candidates_table_name, candidate_id, update_data)

    async def update_interview_evaluation(self, interview_id: str, score: int, evaluation: Dict[str, Any]) -> Dict[str, Any]:
        return await self._update(self.interviews_table_name, interview_id, {
            "score": score,
            "evaluation": evaluation,
        })
