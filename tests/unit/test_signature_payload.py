"""Unit tests for signature image payload decoding."""

import base64

import pytest

from signdesk.application.services.signature_payload import decode_signature_payload
from signdesk.domain.exceptions import InvalidSignaturePayload

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16
JPEG = b"\xff\xd8\xff\xe0" + b"\x00" * 16


def _b64(content: bytes) -> str:
    return base64.b64encode(content).decode()


class TestDecodeSignaturePayload:
    def test_png_data_url(self) -> None:
        image = decode_signature_payload(f"data:image/png;base64,{_b64(PNG)}", 1024)
        assert image.content == PNG
        assert image.content_type == "image/png"
        assert image.extension == "png"
        assert image.size == len(PNG)

    def test_jpeg_with_jpg_alias(self) -> None:
        image = decode_signature_payload(f"data:image/jpg;base64,{_b64(JPEG)}", 1024)
        assert image.content_type == "image/jpeg"
        assert image.extension == "jpg"

    def test_bare_base64_is_sniffed(self) -> None:
        assert decode_signature_payload(_b64(PNG), 1024).extension == "png"

    def test_whitespace_in_base64_is_ignored(self) -> None:
        encoded = _b64(PNG)
        wrapped = encoded[:8] + "\n" + encoded[8:]
        assert decode_signature_payload(f"data:image/png;base64,{wrapped}", 1024).content == PNG

    @pytest.mark.parametrize("payload", [None, "", "   ", "data:image/png;base64,"])
    def test_empty(self, payload) -> None:
        with pytest.raises(InvalidSignaturePayload) as exc_info:
            decode_signature_payload(payload, 1024)
        assert exc_info.value.details["reason"] == "signature is empty"

    def test_malformed_data_url(self) -> None:
        with pytest.raises(InvalidSignaturePayload):
            decode_signature_payload("data:image/png," + _b64(PNG), 1024)

    def test_non_image_media_type(self) -> None:
        with pytest.raises(InvalidSignaturePayload) as exc_info:
            decode_signature_payload(f"data:text/plain;base64,{_b64(PNG)}", 1024)
        assert "text/plain" in exc_info.value.details["reason"]

    def test_invalid_base64(self) -> None:
        with pytest.raises(InvalidSignaturePayload) as exc_info:
            decode_signature_payload("data:image/png;base64,@@@", 1024)
        assert exc_info.value.details["reason"] == "not valid base64"

    def test_content_is_not_an_image(self) -> None:
        with pytest.raises(InvalidSignaturePayload):
            decode_signature_payload(_b64(b"GIF89a-not-supported"), 1024)

    def test_declared_type_must_match_content(self) -> None:
        with pytest.raises(InvalidSignaturePayload) as exc_info:
            decode_signature_payload(f"data:image/jpeg;base64,{_b64(PNG)}", 1024)
        assert "image/png" in exc_info.value.details["reason"]

    def test_size_limit(self) -> None:
        with pytest.raises(InvalidSignaturePayload):
            decode_signature_payload(_b64(PNG), len(PNG) - 1)

    def test_error_code(self) -> None:
        with pytest.raises(InvalidSignaturePayload) as exc_info:
            decode_signature_payload("", 1024)
        assert exc_info.value.error_code == "INVALID_SIGNATURE_PAYLOAD"
