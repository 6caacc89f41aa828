import logging

from talentmatch.exceptions import MalformedResponse
from talentmatch.services.openai_service import OpenAIService
from talentmatch.services.prompt_builder import PromptBuilder
from talentmatch.schemas.inference import TextResult
from talentmatch.schemas.job import JobDescriptionRequest

logger = logging.getLogger(__name__)

class JobDescriptionService:
    """Drafts job descriptions. Generative, so it runs at the higher temperature."""

    def __init__(self, openai_service: OpenAIService, prompt_builder: PromptBuilder):
        self.openai_service = openai_service
        self.prompt_builder = prompt_builder

    async def generate(self, request: JobDescriptionRequest) -> str:
        logger.info(f"Generating job description for {request.position} ({request.department or 'no department'})")
        inference_request = self.prompt_builder.build_job_description_request(request)
        payload = await self.openai_service.complete(inference_request)
        if not isinstance(payload, TextResult) or not payload.content.strip():
            raise MalformedResponse("No job description generated")
        logger.info("Successfully generated job description")
        return payload.content.strip()
