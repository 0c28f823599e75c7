"""
API 数据类型测试
"""

from genai_bridge.models.types import (
    Blob,
    CitationMetadata,
    Content,
    GenerateContentConfig,
    GenerateContentResponse,
    Part,
)


class TestWireFormat:
    def test_camel_case_aliases_and_none_dropped(self) -> None:
        content = Content(role="user", parts=[Part(inline_data=Blob(mime_type="image/png", data=b"hi"))])
        assert content.to_json_dict() == {
            "role": "user",
            "parts": [{"inlineData": {"mimeType": "image/png", "data": "aGk="}}],
        }

    def test_snake_and_camel_input_both_accepted(self) -> None:
        assert Blob(mime_type="a/b") == Blob.model_validate({"mimeType": "a/b"})

    def test_unknown_fields_are_kept(self) -> None:
        part = Part.model_validate({"text": "x", "videoMetadata": {"fps": 1}})
        assert part.to_json_dict() == {"text": "x", "videoMetadata": {"fps": 1}}

    def test_python_dump_keeps_bytes(self) -> None:
        blob = Blob(data=b"\x00")
        assert blob.model_dump(exclude_none=True) == {"data": b"\x00"}

    def test_config_accepts_loose_fields(self) -> None:
        config = GenerateContentConfig(system_instruction="be brief", tools=[{"googleSearch": {}}])
        assert config.system_instruction == "be brief"


class TestGenerateContentResponse:
    def test_text_joins_non_thought_parts(self) -> None:
        response = GenerateContentResponse.model_validate(
            {
                "candidates": [
                    {
                        "content": {
                            "role": "model",
                            "parts": [
                                {"text": "thinking...", "thought": True},
                                {"text": "Hello, "},
                                {"text": "world"},
                            ],
                        },
                        "finishReason": "STOP",
                    }
                ],
                "usageMetadata": {"promptTokenCount": 3, "totalTokenCount": 7},
                "modelVersion": "gemini-2.0-flash",
            }
        )
        assert response.text == "Hello, world"
        assert response.candidates[0].finish_reason == "STOP"  # type: ignore[index]
        assert response.usage_metadata.total_token_count == 7  # type: ignore[union-attr]
        assert response.model_version == "gemini-2.0-flash"

    def test_text_is_none_without_candidates(self) -> None:
        assert GenerateContentResponse().text is None

    def test_text_is_none_for_function_call_only(self) -> None:
        response = GenerateContentResponse.model_validate(
            {"candidates": [{"content": {"parts": [{"functionCall": {"name": "f", "args": {}}}]}}]}
        )
        assert response.text is None


def test_citation_metadata_merges_both_spellings() -> None:
    metadata = CitationMetadata.model_validate(
        {"citations": [{"uri": "a"}], "citationSources": [{"uri": "b"}]}
    )
    assert [c.uri for c in metadata.all_citations()] == ["a", "b"]
