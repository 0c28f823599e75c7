"""
媒体数据规范化测试
"""

import json

import pytest

from genai_bridge.core.exceptions import MimeTypeError, UnsupportedTypeError
from genai_bridge.core.transformers import t_audio_blob, t_blob, t_blobs, t_image_blob
from genai_bridge.models.types import Blob


class TestBlob:
    def test_typed(self) -> None:
        blob = Blob(mime_type="image/png", data=b"\x89PNG")
        assert t_blob(blob) is blob

    def test_raw_base64(self) -> None:
        blob = t_blob({"mimeType": "audio/pcm", "data": "AAEC"})
        assert blob.mime_type == "audio/pcm"
        assert blob.data == b"\x00\x01\x02"

    @pytest.mark.parametrize("origin,type_name", [("data", "str"), (None, "NoneType"), ([{}], "list")])
    def test_unsupported(self, origin: object, type_name: str) -> None:
        with pytest.raises(UnsupportedTypeError, match=f"Unsupported blob type: {type_name}"):
            t_blob(origin)


class TestImageBlob:
    def test_accepts_image(self) -> None:
        blob = t_image_blob({"mimeType": "image/jpeg", "data": "AA=="})
        assert blob.mime_type == "image/jpeg"

    def test_rejects_audio_and_names_mime(self) -> None:
        with pytest.raises(MimeTypeError) as exc_info:
            t_image_blob({"mimeType": "audio/mpeg", "data": "AA=="})
        assert str(exc_info.value) == "Unsupported mime type for image blob: audio/mpeg"
        assert "audio/mpeg" in str(exc_info.value)

    def test_missing_mime_reports_null(self) -> None:
        with pytest.raises(MimeTypeError) as exc_info:
            t_image_blob(Blob(data=b"x"))
        assert str(exc_info.value) == "Unsupported mime type for image blob: null"


class TestAudioBlob:
    def test_accepts_audio(self) -> None:
        blob = Blob(mime_type="audio/pcm;rate=16000", data=b"\x00")
        assert t_audio_blob(blob) is blob

    def test_rejects_image(self) -> None:
        with pytest.raises(MimeTypeError, match="Unsupported mime type for audio blob: image/png"):
            t_audio_blob(Blob(mime_type="image/png"))


class TestBlobs:
    def test_raw_list_is_normalized(self) -> None:
        raw = [{"mimeType": "audio/pcm", "data": "AA=="}, {"mime_type": "audio/pcm"}]
        assert t_blobs(raw) == [{"mimeType": "audio/pcm", "data": "AA=="}, {"mimeType": "audio/pcm"}]

    def test_mixed_list_is_json_serializable(self) -> None:
        result = t_blobs([Blob(mime_type="image/png", data=b"x"), {"mimeType": "image/png", "data": "eA=="}])
        assert result == [{"mimeType": "image/png", "data": "eA=="}] * 2
        assert json.loads(json.dumps(result)) == result

    def test_invalid_list_item(self) -> None:
        with pytest.raises(UnsupportedTypeError, match="Unsupported blob type: int"):
            t_blobs([{"mimeType": "audio/pcm"}, 1])

    def test_typed_blob_is_wrapped_as_json(self) -> None:
        assert t_blobs(Blob(mime_type="audio/pcm", data=b"hi")) == [
            {"mimeType": "audio/pcm", "data": "aGk="}
        ]

    def test_raw_dict_is_wrapped(self) -> None:
        assert t_blobs({"mimeType": "image/png", "data": "aGk="}) == [
            {"mimeType": "image/png", "data": "aGk="}
        ]

    def test_typed_list(self) -> None:
        blobs = [Blob(mime_type="audio/pcm", data=b"a"), Blob(mime_type="audio/pcm", data=b"b")]
        assert [item["data"] for item in t_blobs(blobs)] == ["YQ==", "Yg=="]

    def test_unsupported(self) -> None:
        with pytest.raises(UnsupportedTypeError):
            t_blobs(1)
