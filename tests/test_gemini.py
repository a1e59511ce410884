import asyncio
from types import SimpleNamespace

from google.genai import types

from studyflow.agents.llm.base import GenerationConfig
from studyflow.agents.llm.gemini import GeminiClient, _grounding_chunks


def _response(*candidates: types.Candidate) -> types.GenerateContentResponse:
    return types.GenerateContentResponse(candidates=list(candidates))


def _web_chunk(uri: str, title: str) -> types.GroundingChunk:
    return types.GroundingChunk(web=types.GroundingChunkWeb(uri=uri, title=title))


def test_no_candidates_means_no_sources():
    assert _grounding_chunks(types.GenerateContentResponse()) == []
    assert _grounding_chunks(_response()) == []


def test_candidate_without_grounding_metadata():
    assert _grounding_chunks(_response(types.Candidate())) == []


def test_grounding_metadata_without_chunks():
    candidate = types.Candidate(grounding_metadata=types.GroundingMetadata(grounding_chunks=[]))
    assert _grounding_chunks(_response(candidate)) == []


def test_grounding_chunks_become_plain_dicts():
    candidate = types.Candidate(
        grounding_metadata=types.GroundingMetadata(grounding_chunks=[
            _web_chunk("https://docs.python.org", "docs.python.org"),
            _web_chunk("https://realpython.com", "realpython.com"),
        ])
    )

    chunks = _grounding_chunks(_response(candidate))

    assert [c["web"]["uri"] for c in chunks] == ["https://docs.python.org", "https://realpython.com"]
    assert chunks[0]["web"]["title"] == "docs.python.org"
    assert all(isinstance(c, dict) for c in chunks)


def test_search_call_sends_tool_and_returns_sources():
    candidate = types.Candidate(
        content=types.Content(role="model", parts=[types.Part(text='{"resources": []}')]),
        grounding_metadata=types.GroundingMetadata(grounding_chunks=[
            _web_chunk("https://pandas.pydata.org", "pandas.pydata.org"),
        ]),
    )
    calls = []

    async def generate_content(**kwargs):
        calls.append(kwargs)
        return _response(candidate)

    llm = GeminiClient(api_key="test-key", model="gemini-2.5-flash")
    llm.client = SimpleNamespace(aio=SimpleNamespace(models=SimpleNamespace(generate_content=generate_content)))

    response = asyncio.run(llm.generate_content(prompt="find", config=GenerationConfig(use_search=True)))

    assert response.text == '{"resources": []}'
    assert response.grounding_chunks[0]["web"]["uri"] == "https://pandas.pydata.org"
    config = calls[0]["config"]
    assert config.tools[0].google_search is not None
    assert config.response_schema is None
