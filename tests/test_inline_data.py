"""Tests for the inline image codec."""

import pytest

from mama_chef.domain.errors import InvalidImage
from mama_chef.services.inline_data import (
    decode_data_url,
    encode_image,
    to_data_url,
    to_request_part,
)
from tests.conftest import PNG_BYTES, PNG_DATA_URL


def test_encode_image_detects_png() -> None:
    image = encode_image(PNG_BYTES)

    assert image.mime_type == "image/png"
    assert to_data_url(image) == PNG_DATA_URL


def test_encode_image_defaults_to_jpeg() -> None:
    assert encode_image(b"unknown").mime_type == "image/jpeg"


def test_encode_image_rejects_empty_bytes() -> None:
    with pytest.raises(InvalidImage):
        encode_image(b"")


def test_decode_data_url_splits_mime_and_payload() -> None:
    image = decode_data_url(PNG_DATA_URL)

    assert image.mime_type == "image/png"
    assert to_request_part(image) == {
        "inlineData": {"mimeType": "image/png", "data": image.data}
    }


@pytest.mark.parametrize(
    "value",
    [
        "not a data url",
        "data:text/plain;base64,aGVsbG8=",
        "data:image/png;base64,@@@",
    ],
)
def test_decode_data_url_rejects_invalid_input(value: str) -> None:
    with pytest.raises(InvalidImage):
        decode_data_url(value)
