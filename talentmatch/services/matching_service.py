from typing import Tuple
import logging

from talentmatch.config.settings import Settings
from talentmatch.exceptions import NotFound, InputValidationError
from talentmatch.services.entity_store import EntityStore
from talentmatch.services.openai_service import OpenAIService
from talentmatch.services.prompt_builder import PromptBuilder
from talentmatch.services.batch_scheduler import BatchScheduler
from talentmatch.services.result_persister import ResultPersister
from talentmatch.services.response_normalizer import normalize, normalize_candidate_jobs, normalize_interview_evaluation
from talentmatch.schemas.matching import BatchResult, EvaluationUnit, MatchResult, CandidateJobsResult, JobMatch
from talentmatch.schemas.interview import EvaluateInterviewRequest, InterviewEvaluation

logger = logging.getLogger(__name__)

class MatchingService:
    """The evaluation handlers: fetch, build, score, normalize, persist.

    Pre-batch problems (unknown ids, bad tokens, missing credentials) raise;
    everything that goes wrong for a single item ends up in the BatchResult.
    """

    def __init__(self,
                 store: EntityStore,
                 openai_service: OpenAIService,
                 scheduler: BatchScheduler,
                 persister: ResultPersister,
                 settings: Settings):
        self.store = store
        self.openai_service = openai_service
        self.scheduler = scheduler
        self.persister = persister
        self.prompt_builder = PromptBuilder(settings)
        self.eligible_job_statuses = settings.eligible_job_statuses
        self.eligible_candidate_statuses = settings.eligible_candidate_statuses

    async def match_candidates_to_job(self, job_id: str) -> BatchResult:
        """Score every eligible candidate against one job."""
        self.openai_service.ensure_configured()
        job = await self.store.get_job(job_id)
        candidates = await self.store.list_candidates(self.eligible_candidate_statuses)
        logger.info(f"Analyzing {len(candidates)} candidates for {job.position} ({job_id})")

        units = [
            EvaluationUnit(subject_id=candidate.id, target_id=job.id, subject=candidate, target=job)
            for candidate in candidates
        ]

        async def score(unit: EvaluationUnit) -> MatchResult:
            request = self.prompt_builder.build_candidate_match_request(unit.subject, unit.target)
            payload = await self.openai_service.complete(request)
            result = normalize(payload, MatchResult)
            await self.persister.persist_candidate_match(unit.subject_id, result, job_id=unit.target_id)
            return result

        return await self.scheduler.run(units, score, batch_name=f"job {job_id}")

    async def match_candidate_to_jobs(self, candidate_id: str) -> BatchResult:
        """Score one candidate against every eligible job in a single request.

        The item result is a (CandidateJobsResult, best JobMatch) tuple.
        """
        self.openai_service.ensure_configured()
        candidate = await self.store.get_candidate(candidate_id)
        jobs = await self.store.list_jobs(self.eligible_job_statuses)
        if not jobs:
            logger.info(f"No active jobs to match candidate {candidate_id} against")
            return BatchResult(total=0)

        logger.info(f"Matching candidate {candidate_id} against {len(jobs)} jobs")
        unit = EvaluationUnit(subject_id=candidate.id, subject=candidate, target=jobs)

        async def score(unit: EvaluationUnit) -> Tuple[CandidateJobsResult, JobMatch]:
            request = self.prompt_builder.build_candidate_jobs_request(unit.subject, unit.target)
            payload = await self.openai_service.complete(request)
            result = normalize_candidate_jobs(payload, [job.id for job in unit.target])
            best = await self.persister.persist_candidate_jobs(unit.subject_id, result)
            return result, best

        return await self.scheduler.run([unit], score, batch_name=f"candidate {candidate_id}")

    async def analyze_candidate(self, candidate_id: str) -> BatchResult:
        """Score a candidate against the job they applied to."""
        self.openai_service.ensure_configured()
        candidate = await self.store.get_candidate(candidate_id)
        if not candidate.job_id:
            raise NotFound(f"Candidate {candidate_id} is not attached to a job")
        job = await self.store.get_job(candidate.job_id)

        async def score(unit: EvaluationUnit) -> MatchResult:
            request = self.prompt_builder.build_candidate_match_request(unit.subject, unit.target)
            payload = await self.openai_service.complete(request)
            result = normalize(payload, MatchResult)
            # job_id is left untouched: the candidate already belongs to this job
            await self.persister.persist_candidate_match(unit.subject_id, result)
            return result

        unit = EvaluationUnit(subject_id=candidate.id, target_id=job.id, subject=candidate, target=job)
        return await self.scheduler.run([unit], score, batch_name=f"analysis {candidate_id}")

    async def evaluate_interview(self, request: EvaluateInterviewRequest) -> Tuple[str, BatchResult]:
        """Evaluate an interview's answers; returns the interview id and the batch outcome."""
        if not request.questions or not request.answers:
            raise InputValidationError("questions and answers are required")
        self.openai_service.ensure_configured()
        session = await self.store.get_interview_by_token(request.interview_token)
        logger.info(f"Evaluating interview {session.id}: {len(request.answers)} answers")

        async def score(unit: EvaluationUnit) -> InterviewEvaluation:
            inference_request = self.prompt_builder.build_interview_evaluation_request(request.questions, request.answers)
            payload = await self.openai_service.complete(inference_request)
            evaluation = normalize_interview_evaluation(payload, len(request.questions))
            await self.persister.persist_interview_evaluation(unit.subject_id, evaluation)
            return evaluation

        unit = EvaluationUnit(subject_id=session.id, target_id=session.candidate_id, subject=request)
        batch = await self.scheduler.run([unit], score, batch_name=f"interview {session.id}")
        return session.id, batch
