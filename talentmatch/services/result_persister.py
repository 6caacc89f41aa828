from typing import Optional
import logging

from talentmatch.services.entity_store import EntityStore
from talentmatch.schemas.matching import MatchResult, CandidateJobsResult, JobMatch
from talentmatch.schemas.interview import InterviewEvaluation

logger = logging.getLogger(__name__)

class ResultPersister:
    """Writes validated results back to the owned fields of each record.

    Each write replaces the score and analysis fields as a whole, so re-running
    a batch overwrites the previous result for the same candidate.
    """

    def __init__(self, store: EntityStore):
        self.store = store

    async def persist_candidate_match(self, candidate_id: str, result: MatchResult, job_id: Optional[str] = None) -> None:
        await self.store.upsert_candidate_scores(
            candidate_id,
            score=result.match_score,
            analysis=result.model_dump(mode="json"),
            best_job_id=job_id
        )
        logger.info(f"Stored match score {result.match_score} for candidate {candidate_id}", extra={"subject_id": candidate_id})

    async def persist_candidate_jobs(self, candidate_id: str, result: CandidateJobsResult) -> JobMatch:
        """Store the best-scoring job as the candidate's match, with every match kept for audit."""
        best = result.best_match()
        if result.best_match_job_id and result.best_match_job_id != best.job_id:
            logger.info(
                f"Suggested best job {result.best_match_job_id} outscored by {best.job_id} for candidate {candidate_id}",
                extra={"subject_id": candidate_id}
            )

        analysis = {
            "best_job_id": best.job_id,
            "all_matches": [m.model_dump(mode="json") for m in result.matches],
            "summary": result.overall_summary,
            "analyzed_at": result.analyzed_at.isoformat(),
        }
        await self.store.upsert_candidate_scores(
            candidate_id,
            score=best.match_score,
            analysis=analysis,
            best_job_id=best.job_id
        )
        logger.info(f"Candidate {candidate_id} best matches job {best.job_id} ({best.match_score})", extra={"subject_id": candidate_id})
        return best

    async def persist_interview_evaluation(self, interview_id: str, evaluation: InterviewEvaluation) -> None:
        await self.store.update_interview_evaluation(
            interview_id,
            score=evaluation.overall_score,
            evaluation=evaluation.model_dump(mode="json")
        )
        logger.info(f"Stored evaluation for interview {interview_id} ({evaluation.overall_score})", extra={"subject_id": interview_id})
