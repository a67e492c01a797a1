import base64
import os

import pytest

from ui_pilot.services.capture.encoder import CHUNK_SIZE, to_data_url, uint8_to_base64


@pytest.mark.parametrize("size", [0, 1, CHUNK_SIZE, CHUNK_SIZE + 1, 5 * 1024 * 1024])
def test_chunked_encoding_round_trips(size):
    data = os.urandom(size)
    encoded = uint8_to_base64(data)

    assert encoded == base64.b64encode(data).decode("ascii")
    assert base64.b64decode(encoded) == data


def test_all_byte_values_survive():
    data = bytes(range(256)) * 300
    assert base64.b64decode(uint8_to_base64(data)) == data


def test_data_url_embeds_mime_type():
    url = to_data_url("image/png", b"\x89PNG")
    assert url == "data:image/png;base64,iVBORw=="
