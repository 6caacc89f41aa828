import json
import pytest

from talentmatch.db.enums import Recommendation
from talentmatch.exceptions import MalformedResponse
from talentmatch.schemas.inference import ToolCallResult, TextResult
from talentmatch.schemas.interview import InterviewEvaluation
from talentmatch.schemas.matching import MatchResult
from talentmatch.services.response_normalizer import (
    normalize,
    normalize_candidate_jobs,
    normalize_interview_evaluation,
    parse_payload,
    strip_code_fences,
)


def tool_call(data):
    return ToolCallResult(arguments=json.dumps(data))


def test_tool_call_arguments_validate(match_arguments):
    result = normalize(tool_call(match_arguments), MatchResult)

    assert result.match_score == 82
    assert result.skills_match == 85
    assert result.recommendation is Recommendation.RECOMMENDED
    assert result.strengths == ["Strong Python background", "Led a research group"]
    assert result.analyzed_at.tzinfo is not None


def test_text_reply_inside_code_fence(match_arguments):
    content = "```json\n" + json.dumps(match_arguments) + "\n```"

    result = normalize(TextResult(content=content), MatchResult)

    assert result.match_score == 82


def test_text_reply_with_surrounding_prose(match_arguments):
    content = "Here is my assessment:\n" + json.dumps(match_arguments) + "\nLet me know if you need more."

    assert normalize(TextResult(content=content), MatchResult).summary == "Solid fit for the role."


def test_strip_code_fences_without_language_tag():
    assert strip_code_fences('```\n{"a": 1}\n```') == '{"a": 1}'


@pytest.mark.parametrize("score", [150, -1, 100.6])
def test_out_of_range_score_rejected(match_arguments, score):
    match_arguments["match_score"] = score

    with pytest.raises(MalformedResponse):
        normalize(tool_call(match_arguments), MatchResult)


@pytest.mark.parametrize("raw, expected", [(72.5, 73), (72.4, 72), ("64", 64), (99.5, 100), (0.2, 0)])
def test_fractional_scores_round_half_up(match_arguments, raw, expected):
    match_arguments["match_score"] = raw

    assert normalize(tool_call(match_arguments), MatchResult).match_score == expected


@pytest.mark.parametrize("score", ["high", True, None])
def test_non_numeric_score_rejected(match_arguments, score):
    match_arguments["match_score"] = score

    with pytest.raises(MalformedResponse):
        normalize(tool_call(match_arguments), MatchResult)


def test_unknown_recommendation_rejected(match_arguments):
    match_arguments["recommendation"] = "maybe"

    with pytest.raises(MalformedResponse) as exc_info:
        normalize(tool_call(match_arguments), MatchResult)
    assert "recommendation" in exc_info.value.message


def test_missing_required_field_rejected(match_arguments):
    del match_arguments["match_score"]

    with pytest.raises(MalformedResponse):
        normalize(tool_call(match_arguments), MatchResult)


def test_string_strengths_become_a_list(match_arguments):
    match_arguments["strengths"] = "Great communicator"
    match_arguments["weaknesses"] = None

    result = normalize(tool_call(match_arguments), MatchResult)

    assert result.strengths == ["Great communicator"]
    assert result.weaknesses == []


def test_invalid_json_rejected():
    with pytest.raises(MalformedResponse):
        parse_payload(ToolCallResult(arguments="{not json"))
    with pytest.raises(MalformedResponse):
        parse_payload(TextResult(content="I could not evaluate this candidate."))


def test_json_array_rejected():
    with pytest.raises(MalformedResponse):
        parse_payload(TextResult(content="[1, 2, 3]"))


def test_interview_evaluation_accepts_camel_case():
    content = json.dumps({
        "answerEvaluations": [
            {"questionIndex": 0, "score": 80, "feedback": "Clear", "improvements": "More detail"},
            {"questionIndex": 1, "score": 55.5, "feedback": "Vague", "improvements": "Give examples"},
        ],
        "overallScore": 68,
        "recommendation": "consider",
        "strengths": ["Clear communication"],
        "weaknesses": ["Shallow answers"],
        "summary": "Average interview.",
    })

    evaluation = normalize(TextResult(content=f"```json\n{content}\n```"), InterviewEvaluation)

    assert evaluation.overall_score == 68
    assert [a.question_index for a in evaluation.answer_evaluations] == [0, 1]
    assert evaluation.answer_evaluations[1].score == 56
    assert evaluation.recommendation is Recommendation.CONSIDER


def multi_job_payload(**overrides):
    data = {
        "matches": [
            {"job_id": "job-1", "match_score": 70, "skills_match": 75, "experience_match": 60,
             "strengths": ["Research"], "weaknesses": [], "recommendation": "recommended"},
            {"job_id": "job-2", "match_score": 40, "skills_match": 35, "experience_match": 50,
             "strengths": [], "weaknesses": ["Overqualified"], "recommendation": "not_recommended"},
        ],
        "best_match_job_id": "job-1",
        "overall_summary": "Best suited to the faculty post.",
    }
    data.update(overrides)
    return tool_call(data)


def test_candidate_jobs_result_validates():
    result = normalize_candidate_jobs(multi_job_payload(), ["job-1", "job-2"])

    assert [m.job_id for m in result.matches] == ["job-1", "job-2"]
    assert result.best_match_job_id == "job-1"
    assert result.best_match().job_id == "job-1"


def test_candidate_jobs_drops_unknown_jobs():
    result = normalize_candidate_jobs(multi_job_payload(best_match_job_id="job-9"), ["job-2"])

    assert [m.job_id for m in result.matches] == ["job-2"]
    assert result.best_match_job_id is None


def test_candidate_jobs_with_no_known_jobs_rejected():
    with pytest.raises(MalformedResponse):
        normalize_candidate_jobs(multi_job_payload(), ["job-7"])


def test_candidate_jobs_without_matches_list_rejected():
    with pytest.raises(MalformedResponse):
        normalize_candidate_jobs(multi_job_payload(matches="none"), ["job-1"])


@pytest.mark.parametrize("field", ["skills_match", "experience_match"])
@pytest.mark.parametrize("score", [150, -1])
def test_out_of_range_sub_score_rejected(match_arguments, field, score):
    match_arguments[field] = score

    with pytest.raises(MalformedResponse):
        normalize(tool_call(match_arguments), MatchResult)


def test_out_of_range_job_match_score_rejected():
    payload = multi_job_payload()
    data = json.loads(payload.arguments)
    data["matches"][0]["match_score"] = 150

    with pytest.raises(MalformedResponse):
        normalize_candidate_jobs(tool_call(data), ["job-1", "job-2"])


@pytest.mark.parametrize("job_id", [["job-1"], {"id": "job-1"}, 7])
def test_non_string_job_id_is_dropped(job_id):
    data = json.loads(multi_job_payload().arguments)
    data["matches"][0]["job_id"] = job_id

    result = normalize_candidate_jobs(tool_call(data), ["job-1", "job-2"])

    assert [m.job_id for m in result.matches] == ["job-2"]


@pytest.mark.parametrize("best", [{"id": "job-1"}, ["job-1"]])
def test_non_string_best_match_id_is_ignored(best):
    result = normalize_candidate_jobs(multi_job_payload(best_match_job_id=best), ["job-1", "job-2"])

    assert result.best_match_job_id is None
    assert result.best_match().job_id == "job-1"


def test_only_non_string_job_ids_rejected():
    data = json.loads(multi_job_payload().arguments)
    for match in data["matches"]:
        match["job_id"] = [match["job_id"]]

    with pytest.raises(MalformedResponse):
        normalize_candidate_jobs(tool_call(data), ["job-1", "job-2"])


def test_repeated_job_keeps_first_match():
    data = json.loads(multi_job_payload().arguments)
    data["matches"].append(dict(data["matches"][0], match_score=99))

    result = normalize_candidate_jobs(tool_call(data), ["job-1", "job-2"])

    assert [m.job_id for m in result.matches] == ["job-1", "job-2"]
    assert result.matches[0].match_score == 70


def interview_payload(**answer):
    return tool_call({
        "answer_evaluations": [dict({"question_index": 0, "score": 80}, **answer)],
        "overall_score": 80,
        "recommendation": "recommended",
    })


def test_out_of_range_answer_score_rejected():
    with pytest.raises(MalformedResponse):
        normalize_interview_evaluation(interview_payload(score=101), question_count=1)


def test_answer_for_unasked_question_rejected():
    with pytest.raises(MalformedResponse) as exc_info:
        normalize_interview_evaluation(interview_payload(question_index=2), question_count=2)
    assert "question_index 2" in exc_info.value.message


def test_answer_indices_within_question_bank():
    evaluation = normalize_interview_evaluation(interview_payload(question_index=1), question_count=2)

    assert evaluation.answer_evaluations[0].question_index == 1
