"""
Binary-to-text encoding for inline images
"""

import base64

from starlette.datastructures import UploadFile

# 32KB chunks
CHUNK_SIZE = 0x8000


def uint8_to_base64(data: bytes) -> str:
    """
    Base64-encode a byte buffer.

    Bytes are mapped to characters one chunk at a time, joined, and encoded in
    a single pass, so the output equals `base64.b64encode(data)`.
    """
    view = memoryview(data)
    binary = "".join(
        bytes(view[i : i + CHUNK_SIZE]).decode("latin-1")
        for i in range(0, len(view), CHUNK_SIZE)
    )
    return base64.b64encode(binary.encode("latin-1")).decode("ascii")


def to_data_url(mime_type: str, data: bytes) -> str:
    return f"data:{mime_type};base64,{uint8_to_base64(data)}"


async def upload_to_data_url(upload: UploadFile) -> str:
    """Read an uploaded file and build its data URL."""
    data = await upload.read()
    return to_data_url(upload.content_type or "application/octet-stream", data)
