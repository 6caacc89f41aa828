import httpx
import openai
import pytest

from talentmatch.exceptions import (
    ConfigurationError,
    RateLimited,
    QuotaExhausted,
    UpstreamError,
    MalformedResponse,
)
from talentmatch.schemas.inference import InferenceRequest, ToolCallResult, TextResult
from talentmatch.services.openai_service import OpenAIService

REQUEST = httpx.Request("POST", "https://ai.gateway.lovable.dev/v1/chat/completions")


def status_error(cls, status_code):
    return cls(f"status {status_code}", response=httpx.Response(status_code, request=REQUEST), body=None)


@pytest.fixture
def structured_request():
    return InferenceRequest(
        system_prompt="You are a recruiter.",
        prompt="Score this candidate.",
        temperature=0.3,
        function_name="evaluate_candidate_match",
        parameters={"type": "object", "properties": {}},
    )


async def test_tool_call_is_returned_raw(openai_service, mock_openai_client, tool_call_response, structured_request):
    mock_openai_client.chat.completions.create.return_value = tool_call_response({"match_score": 90})

    payload = await openai_service.complete(structured_request)

    assert isinstance(payload, ToolCallResult)
    assert payload.arguments == '{"match_score": 90}'
    kwargs = mock_openai_client.chat.completions.create.await_args.kwargs
    assert kwargs["model"] == "google/gemini-2.5-flash"
    assert kwargs["temperature"] == 0.3
    assert kwargs["tool_choice"] == {"type": "function", "function": {"name": "evaluate_candidate_match"}}
    assert kwargs["messages"][0] == {"role": "system", "content": "You are a recruiter."}


async def test_text_reply_is_returned_raw(openai_service, mock_openai_client, text_response):
    mock_openai_client.chat.completions.create.return_value = text_response("A job description.")
    request = InferenceRequest(system_prompt="s", prompt="p", temperature=0.7)

    payload = await openai_service.complete(request)

    assert payload == TextResult(content="A job description.")
    assert "tools" not in mock_openai_client.chat.completions.create.await_args.kwargs


@pytest.mark.parametrize("error, expected", [
    (status_error(openai.RateLimitError, 429), RateLimited),
    (status_error(openai.APIStatusError, 402), QuotaExhausted),
    (status_error(openai.InternalServerError, 500), UpstreamError),
    (status_error(openai.BadRequestError, 400), UpstreamError),
    (openai.APITimeoutError(request=REQUEST), UpstreamError),
    (openai.APIConnectionError(request=REQUEST), UpstreamError),
])
async def test_service_errors_are_classified(openai_service, mock_openai_client, structured_request, error, expected):
    mock_openai_client.chat.completions.create.side_effect = error

    with pytest.raises(expected):
        await openai_service.complete(structured_request)


async def test_quota_exhaustion_is_fatal(openai_service, mock_openai_client, structured_request):
    mock_openai_client.chat.completions.create.side_effect = status_error(openai.APIStatusError, 402)

    with pytest.raises(QuotaExhausted) as exc_info:
        await openai_service.complete(structured_request)
    assert exc_info.value.fatal is True
    assert exc_info.value.status_code == 402


async def test_empty_choices_is_malformed(openai_service, mock_openai_client, structured_request):
    mock_openai_client.chat.completions.create.return_value = type("Response", (), {"choices": []})()

    with pytest.raises(MalformedResponse, match="No response from AI"):
        await openai_service.complete(structured_request)


async def test_empty_message_is_malformed(openai_service, mock_openai_client, text_response, structured_request):
    mock_openai_client.chat.completions.create.return_value = text_response("")

    with pytest.raises(MalformedResponse, match="No match data generated"):
        await openai_service.complete(structured_request)


async def test_missing_api_key_is_a_configuration_error(settings, structured_request):
    service = OpenAIService(settings.model_copy(update={"openai_api_key": None}))

    assert service.is_configured() is False
    with pytest.raises(ConfigurationError):
        await service.complete(structured_request)


def test_client_built_from_settings(settings):
    service = OpenAIService(settings)

    assert isinstance(service.client, openai.AsyncOpenAI)
    assert service.client.max_retries == 0
    assert str(service.client.base_url).startswith("https://ai.gateway.lovable.dev/v1")
