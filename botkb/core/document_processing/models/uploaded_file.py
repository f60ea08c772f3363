"""
Uploaded file handle passed into the pipeline.

Dependencies: dataclasses (stdlib)
System role: Transport-neutral view of one file in an upload request
"""

from dataclasses import dataclass
from typing import BinaryIO


@dataclass
class UploadedFile:
    """
    One file from an upload request.

    The stream is read once, front to back. Callers keep ownership and
    close it after the upload returns.
    """

    filename: str
    content_type: str
    size: int
    stream: BinaryIO
