"""Tests for the LLM extractor with a stubbed model client."""

import json

import pytest

from models.schemas.raw_extraction import Hyperlink
from services.errors import EmptyInput, MalformedModelResponse, ModelUnavailable
from services.gemini_client import parse_json_object, strip_code_fences
from services.pipeline.llm_extractor import LLMExtractor, clean_payload
from services.prompt_builder import SYSTEM_PROMPT, build_extraction_prompt


def payload(**fields) -> str:
    base = {"name": "Jane Smith", "email": "jane.smith@example.com"}
    base.update(fields)
    return json.dumps(base)


class TestResponseParsing:
    def test_strip_json_fence(self):
        assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_strip_bare_fence(self):
        assert strip_code_fences('```\n{"a": 1}\n```') == '{"a": 1}'

    def test_single_line_fence(self):
        assert parse_json_object('```json {"name": "Jane"}```') == {"name": "Jane"}

    def test_trailing_fence_only(self):
        assert parse_json_object('{"name": "Jane"}\n```') == {"name": "Jane"}

    def test_unfenced_untouched(self):
        assert strip_code_fences('  {"a": 1} ') == '{"a": 1}'

    def test_parse_fenced_object(self):
        assert parse_json_object('```json\n{"name": "Jane"}\n```') == {"name": "Jane"}

    def test_non_object_rejected(self):
        with pytest.raises(MalformedModelResponse):
            parse_json_object("[1, 2]")


class TestPrompt:
    def test_lists_hyperlinks(self):
        prompt = build_extraction_prompt(
            "Jane Smith LinkedIn", [Hyperlink(anchor_text="LinkedIn", url="https://linkedin.com/in/jane")]
        )
        assert '"LinkedIn" -> https://linkedin.com/in/jane' in prompt
        assert "Jane Smith LinkedIn" in prompt

    def test_schema_and_rules(self):
        prompt = build_extraction_prompt("text")
        for key in ("linkedinUrl", "startDate", "remotePreference", "visaStatus", "Dec=12"):
            assert key in prompt
        assert "HYPERLINKS FOUND" not in prompt
        assert "Do NOT generate" in SYSTEM_PROMPT


class TestCleanPayload:
    def test_drops_pipeline_fields_and_bad_entries(self):
        cleaned = clean_payload({
            "confidence": 99,
            "source": "linkedin",
            "originalData": {"rawText": "x"},
            "experience": ["junk", {"jobTitle": "Engineer", "techUsed": ["Go", 3, None]}],
            "education": "none",
            "skills": ["Python", None, 7, " Go "],
        })
        assert "confidence" not in cleaned
        assert "source" not in cleaned
        assert "originalData" not in cleaned
        assert cleaned["experience"] == [{"jobTitle": "Engineer", "techUsed": ["Go"]}]
        assert cleaned["education"] == []
        assert cleaned["skills"] == ["Python", "Go"]

    def test_comma_string_split(self):
        assert clean_payload({"skills": "Python, Go"})["skills"] == ["Python", "Go"]


class TestLLMExtractor:
    @pytest.mark.asyncio
    async def test_fenced_response(self, sample_resume, llm_response, stub_client_factory):
        client = stub_client_factory(llm_response)
        profile = await LLMExtractor(client).extract(sample_resume, [], "jane.pdf")

        assert profile.name == "Jane Smith"
        assert profile.education[0].year == "2016"
        assert profile.remote_preference == "Hybrid"
        assert profile.source == "resume"
        assert profile.original_data.filename == "jane.pdf"
        assert profile.original_data.raw_text == sample_resume[:2000]
        assert profile.confidence == 90

        system, prompt, max_tokens = client.calls[0]
        assert system == SYSTEM_PROMPT
        assert max_tokens == 4000
        # The model sees whitespace-collapsed text
        assert "Jane Smith Senior Software Engineer" in prompt

    @pytest.mark.asyncio
    async def test_discovered_hyperlinks_win(self, stub_client_factory):
        text = "Jane Smith, Senior Software Engineer. LinkedIn GitHub"
        links = [
            Hyperlink(anchor_text="LinkedIn", url="https://www.linkedin.com/in/jane-smith"),
            Hyperlink(anchor_text="GitHub", url="https://github.com/jsmith"),
        ]
        client = stub_client_factory(payload(
            linkedinUrl="https://linkedin.com/in/made-up",
            githubUrl="https://github.com/made-up",
        ))
        profile = await LLMExtractor(client).extract(text, links)
        assert profile.linkedin_url == "https://www.linkedin.com/in/jane-smith"
        assert profile.github_url == "https://github.com/jsmith"

    @pytest.mark.asyncio
    async def test_ungrounded_links_dropped(self, stub_client_factory):
        client = stub_client_factory(payload(
            linkedinUrl="https://linkedin.com/in/jane-smith",
            githubUrl="https://github.com/janesmith",
            portfolioUrl="janesmith.dev",
        ))
        profile = await LLMExtractor(client).extract("Jane Smith engineer, portfolio janesmith.dev", [])
        assert profile.linkedin_url is None
        assert profile.github_url is None
        assert profile.portfolio_url == "https://janesmith.dev"

    @pytest.mark.asyncio
    async def test_wrong_host_dropped(self, stub_client_factory):
        client = stub_client_factory(payload(linkedinUrl="https://github.com/jsmith"))
        profile = await LLMExtractor(client).extract("Jane Smith github.com/jsmith engineer", [])
        assert profile.linkedin_url is None

    @pytest.mark.asyncio
    async def test_linkedin_handle_label_grounds_link(self, stub_client_factory):
        client = stub_client_factory(payload(linkedinUrl="https://linkedin.com/in/janesmith"))
        profile = await LLMExtractor(client).extract("Jane Smith\nLinkedIn: janesmith\n", [])
        assert profile.linkedin_url == "https://linkedin.com/in/janesmith"

    @pytest.mark.asyncio
    async def test_dates_backfilled_from_duration(self, stub_client_factory):
        client = stub_client_factory(payload(experience=[
            {"jobTitle": "Engineer", "company": "Acme Corp", "duration": "Dec 2023 - Feb 2025",
             "startDate": None, "endDate": None},
            {"jobTitle": "Intern", "company": "Initech", "duration": "2019 - Present",
             "startDate": "2019", "endDate": "Current"},
        ]))
        profile = await LLMExtractor(client).extract("Jane Smith, Engineer at Acme Corp", [])
        first, second = profile.experience
        assert (first.start_date, first.end_date) == ("2023-12", "2025-02")
        assert (second.start_date, second.end_date) == ("2019-01", "Present")

    @pytest.mark.asyncio
    async def test_pipeline_fields_ignored(self, stub_client_factory):
        client = stub_client_factory(payload(confidence=3, source="linkedin"))
        profile = await LLMExtractor(client).extract("Jane Smith, engineer", [])
        assert profile.source == "resume"
        assert profile.confidence == 30

    @pytest.mark.asyncio
    async def test_short_text_raises_empty_input(self, stub_client_factory):
        client = stub_client_factory(payload())
        with pytest.raises(EmptyInput):
            await LLMExtractor(client).extract("  short \n ", [])
        assert client.calls == []

    @pytest.mark.asyncio
    async def test_no_client(self):
        with pytest.raises(ModelUnavailable):
            await LLMExtractor(None).extract("Jane Smith, Senior Engineer", [])

    @pytest.mark.asyncio
    async def test_client_error_becomes_model_unavailable(self, stub_client_factory):
        client = stub_client_factory(error=RuntimeError("quota exceeded"))
        with pytest.raises(ModelUnavailable, match="quota exceeded"):
            await LLMExtractor(client).extract("Jane Smith, Senior Engineer", [])

    @pytest.mark.asyncio
    async def test_empty_response(self, stub_client_factory):
        with pytest.raises(ModelUnavailable):
            await LLMExtractor(stub_client_factory("   ")).extract("Jane Smith, Senior Engineer", [])

    @pytest.mark.asyncio
    async def test_malformed_response_written_to_sink(self, stub_client_factory, recording_sink):
        client = stub_client_factory("Sure! Here is the JSON: {name: Jane")
        with pytest.raises(MalformedModelResponse):
            await LLMExtractor(client, recording_sink).extract("Jane Smith, Senior Engineer", [], "jane.pdf")
        filename, raw, error = recording_sink.failed[0]
        assert filename == "jane.pdf"
        assert raw.startswith("Sure!")
        assert isinstance(error, json.JSONDecodeError)

    @pytest.mark.asyncio
    async def test_schema_violation_is_malformed(self, stub_client_factory, recording_sink):
        client = stub_client_factory(payload(name=["Jane", "Smith"]))
        with pytest.raises(MalformedModelResponse):
            await LLMExtractor(client, recording_sink).extract("Jane Smith, Senior Engineer", [])
        assert len(recording_sink.failed) == 1
