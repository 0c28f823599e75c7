"""
Models 服务测试：请求构建 + 通过 MockTransport 的端到端调用
"""

import json
from typing import Any, Dict, List

import httpx
import pytest

from genai_bridge.clients.http_client import ApiClient
from genai_bridge.core.backend import BackendContext
from genai_bridge.core.exceptions import CapabilityNotSupportedError, UnsupportedTypeError
from genai_bridge.models.types import (
    Content,
    EmbedContentConfig,
    EnterpriseWebSearch,
    GenerateContentConfig,
    HttpOptions,
    Part,
    Tool,
)
from genai_bridge.services.models import (
    Models,
    build_embed_content_request,
    build_generate_content_request,
    parse_embed_content_response,
)

GEMINI = BackendContext.gemini()
VERTEX = BackendContext.vertex("my-project", "us-central1")
ROOT = "projects/my-project/locations/us-central1"


class TestBuildGenerateContentRequest:
    def test_minimal_gemini(self) -> None:
        path, payload = build_generate_content_request(GEMINI, "gemini-2.0-flash", "hello")
        assert path == "models/gemini-2.0-flash:generateContent"
        assert payload == {"contents": [{"role": "user", "parts": [{"text": "hello"}]}]}

    def test_vertex_model_path(self) -> None:
        path, _ = build_generate_content_request(VERTEX, "gemini-2.0-flash", "hello")
        assert path == "publishers/google/models/gemini-2.0-flash:generateContent"

    def test_full_config(self) -> None:
        config = GenerateContentConfig(
            system_instruction="be brief",
            temperature=0.2,
            max_output_tokens=64,
            response_mime_type="application/json",
            response_schema={"type": "OBJECT", "properties": {"a": {"type": "STRING"}}},
            speech_config={"voiceConfig": {"prebuiltVoiceConfig": {"voiceName": "Kore"}}},
            tools=[{"googleSearch": {}}],
            cached_content="abc",
        )
        _, payload = build_generate_content_request(GEMINI, "m", [Content(role="user", parts=[Part(text="q")])], config)

        assert payload["systemInstruction"] == {"role": "user", "parts": [{"text": "be brief"}]}
        assert payload["generationConfig"] == {
            "temperature": 0.2,
            "maxOutputTokens": 64,
            "responseMimeType": "application/json",
            "responseSchema": {"type": "OBJECT", "properties": {"a": {"type": "STRING"}}},
            "speechConfig": {"voiceConfig": {"prebuiltVoiceConfig": {"voiceName": "Kore"}}},
        }
        assert payload["tools"] == [{"googleSearch": {}}]
        assert payload["cachedContent"] == "cachedContents/abc"

    def test_vertex_cached_content_is_rooted(self) -> None:
        _, payload = build_generate_content_request(
            VERTEX, "m", "q", GenerateContentConfig(cached_content="abc")
        )
        assert payload["cachedContent"] == f"{ROOT}/cachedContents/abc"

    def test_gemini_rejects_labels(self) -> None:
        with pytest.raises(CapabilityNotSupportedError, match="labels parameter is not supported in Gemini API."):
            build_generate_content_request(GEMINI, "m", "q", GenerateContentConfig(labels={"a": "b"}))

    def test_vertex_accepts_labels(self) -> None:
        _, payload = build_generate_content_request(VERTEX, "m", "q", GenerateContentConfig(labels={"a": "b"}))
        assert payload["labels"] == {"a": "b"}

    def test_gemini_rejects_enterprise_web_search(self) -> None:
        config = GenerateContentConfig(tools=[Tool(enterprise_web_search=EnterpriseWebSearch())])
        with pytest.raises(CapabilityNotSupportedError) as exc_info:
            build_generate_content_request(GEMINI, "m", "q", config)
        assert str(exc_info.value) == "enterpriseWebSearch parameter is not supported in Gemini API."

    def test_vertex_rejects_multi_speaker(self) -> None:
        config = GenerateContentConfig(
            speech_config={"multiSpeakerVoiceConfig": {"speakerVoiceConfigs": [{"speaker": "A"}]}}
        )
        with pytest.raises(CapabilityNotSupportedError) as exc_info:
            build_generate_content_request(VERTEX, "m", "q", config)
        assert str(exc_info.value) == "multiSpeakerVoiceConfig parameter is not supported in Vertex AI."

    def test_missing_model(self) -> None:
        with pytest.raises(ValueError):
            build_generate_content_request(GEMINI, None, "q")

    def test_unsupported_contents(self) -> None:
        with pytest.raises(UnsupportedTypeError, match="Unsupported contents type: int"):
            build_generate_content_request(GEMINI, "m", 1)


class TestBuildEmbedContentRequest:
    def test_gemini_batch_request(self) -> None:
        path, payload = build_embed_content_request(
            GEMINI, "text-embedding-004", "a", EmbedContentConfig(task_type="RETRIEVAL_QUERY")
        )
        assert path == "models/text-embedding-004:batchEmbedContents"
        assert payload == {
            "requests": [
                {
                    "model": "models/text-embedding-004",
                    "content": {"role": "user", "parts": [{"text": "a"}]},
                    "taskType": "RETRIEVAL_QUERY",
                }
            ]
        }

    def test_vertex_predict_request(self) -> None:
        contents = [
            Content(parts=[Part(text="first")]),
            Content(parts=[Part(text="second")]),
        ]
        path, payload = build_embed_content_request(
            VERTEX, "text-embedding-004", contents, EmbedContentConfig(output_dimensionality=256, auto_truncate=False)
        )
        assert path == "publishers/google/models/text-embedding-004:predict"
        assert payload == {
            "instances": [{"content": "first"}, {"content": "second"}],
            "parameters": {"outputDimensionality": 256, "autoTruncate": False},
        }


class TestParseEmbedContentResponse:
    def test_gemini(self) -> None:
        response = parse_embed_content_response(GEMINI, {"embeddings": [{"values": [0.1, 0.2]}]})
        assert response.embeddings[0].values == [0.1, 0.2]  # type: ignore[index]

    def test_vertex_predictions(self) -> None:
        body = {
            "predictions": [
                {"embeddings": {"values": [1.0], "statistics": {"truncated": False, "token_count": 2}}},
                {"embeddings": {"values": [2.0]}},
            ],
            "metadata": {"billableCharacterCount": 5},
        }
        response = parse_embed_content_response(VERTEX, body)
        assert [e.values for e in response.embeddings] == [[1.0], [2.0]]  # type: ignore[union-attr]
        assert response.embeddings[0].statistics.token_count == 2  # type: ignore[index,union-attr]
        assert response.metadata == {"billableCharacterCount": 5}


def _models(ctx: BackendContext, handler: Any) -> Models:
    api_client = ApiClient(
        ctx,
        api_key="k",
        http_options=HttpOptions(base_url="https://api.test"),
        transport=httpx.MockTransport(handler),
    )
    return Models(api_client)


class TestModelsService:
    @pytest.mark.asyncio
    async def test_generate_content(self) -> None:
        seen: List[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200,
                json={"candidates": [{"content": {"role": "model", "parts": [{"text": "blue"}]}}]},
            )

        models = _models(VERTEX, handler)
        response = await models.generate_content(model="gemini-2.0-flash", contents="Why is the sky blue?")

        assert response.text == "blue"
        assert str(seen[0].url) == (
            f"https://api.test/v1beta1/{ROOT}/publishers/google/models/gemini-2.0-flash:generateContent"
        )
        assert json.loads(seen[0].content)["contents"][0]["parts"][0]["text"] == "Why is the sky blue?"

    @pytest.mark.asyncio
    async def test_gate_fails_before_network(self) -> None:
        seen: List[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={})

        models = _models(GEMINI, handler)
        with pytest.raises(CapabilityNotSupportedError):
            await models.generate_content(
                model="m", contents="q", config=GenerateContentConfig(labels={"a": "b"})
            )
        assert seen == []

    @pytest.mark.asyncio
    async def test_embed_content_vertex(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path.endswith("text-embedding-004:predict")
            return httpx.Response(200, json={"predictions": [{"embeddings": {"values": [0.5]}}]})

        models = _models(VERTEX, handler)
        response = await models.embed_content(
            model="text-embedding-004", contents=[Content(parts=[Part(text="x")])]
        )
        assert response.embeddings[0].values == [0.5]  # type: ignore[index]

    @pytest.mark.asyncio
    async def test_get_vertex_publisher_model_is_global(self) -> None:
        seen: List[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"name": "publishers/google/models/gemini-2.0-flash"})

        models = _models(VERTEX, handler)
        model = await models.get(model="gemini-2.0-flash")

        assert model.name == "publishers/google/models/gemini-2.0-flash"
        assert seen[0].url.path == "/v1beta1/publishers/google/models/gemini-2.0-flash"

    @pytest.mark.asyncio
    async def test_list_paginates(self) -> None:
        pages: Dict[str, Dict[str, Any]] = {
            "": {"models": [{"name": "models/a"}], "nextPageToken": "t2"},
            "t2": {"models": [{"name": "models/b"}]},
        }
        seen: List[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=pages[request.url.params.get("pageToken", "")])

        models = _models(GEMINI, handler)
        result = await models.list(page_size=1)

        assert [m.name for m in result] == ["models/a", "models/b"]
        assert seen[0].url.path == "/v1beta/models"
        assert seen[1].url.params["pageToken"] == "t2"
        assert seen[1].url.params["pageSize"] == "1"

    @pytest.mark.asyncio
    async def test_list_tuned_models_gemini(self) -> None:
        seen: List[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"tunedModels": []})

        models = _models(GEMINI, handler)
        assert await models.list(base_models=False) == []
        assert seen[0].url.path == "/v1beta/tunedModels"


def test_speech_config_string_is_rejected() -> None:
    with pytest.raises(UnsupportedTypeError, match="Unsupported speechConfig type: str"):
        build_generate_content_request(GEMINI, "m", "q", GenerateContentConfig(speech_config="Kore"))
