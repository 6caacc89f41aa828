from functools import lru_cache
from fastapi import Depends
from postgrest import AsyncPostgrestClient

from talentmatch.config.settings import Settings, get_settings
from talentmatch.config.supabase import get_supabase_client
from talentmatch.services.entity_store import EntityStore
from talentmatch.services.openai_service import OpenAIService
from talentmatch.services.prompt_builder import PromptBuilder
from talentmatch.services.batch_scheduler import BatchScheduler
from talentmatch.services.result_persister import ResultPersister
from talentmatch.services.matching_service import MatchingService
from talentmatch.services.job_description_service import JobDescriptionService

# Cached settings
@lru_cache()
def get_cached_settings() -> Settings:
    return get_settings()

# Provider for the PostgREST client
def get_supabase_client_dependency(settings: Settings = Depends(get_cached_settings)) -> AsyncPostgrestClient:
    return get_supabase_client(settings)

# Provider for the scoring service client
def get_openai_service(settings: Settings = Depends(get_cached_settings)) -> OpenAIService:
    return OpenAIService(settings=settings)

def get_entity_store(
    supabase_client: AsyncPostgrestClient = Depends(get_supabase_client_dependency),
    settings: Settings = Depends(get_cached_settings)
) -> EntityStore:
    return EntityStore(supabase_client=supabase_client, settings=settings)

# A fresh scheduler per request: no batch state outlives its invocation
def get_batch_scheduler(settings: Settings = Depends(get_cached_settings)) -> BatchScheduler:
    return BatchScheduler.from_settings(settings)

def get_result_persister(store: EntityStore = Depends(get_entity_store)) -> ResultPersister:
    return ResultPersister(store=store)

def get_matching_service(
    store: EntityStore = Depends(get_entity_store),
    openai_service: OpenAIService = Depends(get_openai_service),
    scheduler: BatchScheduler = Depends(get_batch_scheduler),
    persister: ResultPersister = Depends(get_result_persister),
    settings: Settings = Depends(get_cached_settings)
) -> MatchingService:
    return MatchingService(
        store=store,
        openai_service=openai_service,
        scheduler=scheduler,
        persister=persister,
        settings=settings
    )

def get_job_description_service(
    openai_service: OpenAIService = Depends(get_openai_service),
    settings: Settings = Depends(get_cached_settings)
) -> JobDescriptionService:
    return JobDescriptionService(
        openai_service=openai_service,
        prompt_builder=PromptBuilder(settings)
    )

__all__ = [
    'get_cached_settings',
    'get_supabase_client_dependency',
    'get_openai_service',
    'get_entity_store',
    'get_batch_scheduler',
    'get_result_persister',
    'get_matching_service',
    'get_job_description_service'
]
