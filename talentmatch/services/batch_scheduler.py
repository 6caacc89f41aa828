"""
Wave-based batch execution.

Items are processed in fixed-size waves. Everything in a wave runs
concurrently and the next wave starts only after every item of the current
one has settled, followed by a fixed pause to stay under the scoring
service's rate limits. A failing item is recorded and the batch carries on;
a fatal error (quota exhausted, missing configuration) lets the current wave
finish and then stops the batch.

Outcomes are folded into the BatchResult by the scheduler after each wave,
never by the item coroutines themselves.
"""
from typing import Any, Awaitable, Callable, List, Optional, Sequence
import asyncio
import logging

from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from talentmatch.config.settings import Settings
from talentmatch.exceptions import PipelineError, RateLimited
from talentmatch.schemas.matching import BatchResult, EvaluationUnit

logger = logging.getLogger(__name__)

Worker = Callable[[EvaluationUnit], Awaitable[Any]]
Sleep = Callable[[float], Awaitable[Any]]

class BatchScheduler:
    def __init__(
        self,
        concurrency: int = 5,
        pacing_seconds: float = 1.0,
        rate_limit_attempts: int = 1,
        sleep: Optional[Sleep] = None
    ):
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        self.concurrency = concurrency
        self.pacing_seconds = pacing_seconds
        self.rate_limit_attempts = rate_limit_attempts
        self.sleep = sleep or asyncio.sleep

    @classmethod
    def from_settings(cls, settings: Settings) -> "BatchScheduler":
        return cls(
            concurrency=settings.batch_concurrency,
            pacing_seconds=settings.batch_pacing_seconds,
            rate_limit_attempts=settings.rate_limit_attempts
        )

    def waves(self, units: Sequence[EvaluationUnit]) -> List[Sequence[EvaluationUnit]]:
        return [units[i:i + self.concurrency] for i in range(0, len(units), self.concurrency)]

    async def run(self, units: Sequence[EvaluationUnit], worker: Worker, batch_name: str = "batch") -> BatchResult:
        result = BatchResult(total=len(units))
        if not units:
            logger.info(f"{batch_name}: nothing to process", extra={"batch": batch_name})
            return result

        waves = self.waves(units)
        logger.info(
            f"{batch_name}: processing {len(units)} items in {len(waves)} waves of up to {self.concurrency}",
            extra={"batch": batch_name}
        )

        for number, wave in enumerate(waves, start=1):
            outcomes = await asyncio.gather(
                *(self._run_item(unit, worker) for unit in wave),
                return_exceptions=True
            )

            fatal: Optional[PipelineError] = None
            for unit, outcome in zip(wave, outcomes):
                if not isinstance(outcome, BaseException):
                    result.record_success(unit.subject_id, outcome)
                    continue
                if not isinstance(outcome, Exception):
                    # Cancellation and interpreter shutdown are not item failures
                    raise outcome

                result.record_failure(unit.subject_id, str(outcome))
                if isinstance(outcome, PipelineError):
                    logger.warning(
                        f"{batch_name}: item {unit.subject_id} failed: {outcome}",
                        extra={"subject_id": unit.subject_id, "batch": batch_name, "wave": number}
                    )
                    if outcome.fatal and fatal is None:
                        fatal = outcome
                else:
                    logger.error(
                        f"{batch_name}: unexpected error for item {unit.subject_id}: {outcome}",
                        exc_info=outcome,
                        extra={"subject_id": unit.subject_id, "batch": batch_name, "wave": number}
                    )

            if fatal is not None:
                result.fatal_error = fatal.message
                result.fatal_status_code = fatal.status_code
                result.aborted = True
                logger.error(
                    f"{batch_name}: stopping after wave {number}/{len(waves)}: {fatal.message}",
                    extra={"batch": batch_name, "wave": number}
                )
                break

            if number < len(waves) and self.pacing_seconds > 0:
                await self.sleep(self.pacing_seconds)

        logger.info(
            f"{batch_name}: complete, {result.succeeded} successful, {len(result.errors)} errors",
            extra={"batch": batch_name}
        )
        return result

    async def _run_item(self, unit: EvaluationUnit, worker: Worker) -> Any:
        if self.rate_limit_attempts <= 1:
            return await worker(unit)

        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.rate_limit_attempts),
            wait=wait_exponential(multiplier=1, min=4, max=10),
            retry=retry_if_exception_type(RateLimited),
            sleep=self.sleep,
            reraise=True
        ):
            with attempt:
                return await worker(unit)
