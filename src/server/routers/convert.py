"""Conversion endpoints for the API."""

from fastapi import APIRouter

from chapterpress.markdown import convert_markdown_to_document
from chapterpress.plain_text import convert_text_to_document
from chapterpress.schemas import dump_document
from server.models import ConvertRequest, ConvertResponse

router = APIRouter(prefix="/api/convert")


@router.post("/markdown", response_model=ConvertResponse)
async def convert_markdown(convert_request: ConvertRequest) -> ConvertResponse:
    """Convert Markdown to a document tree.

    **Parameters**

    - **convert_request** (`ConvertRequest`): Markdown source

    **Returns**

    - **ConvertResponse**: The tree in its persisted JSON shape

    """
    document = convert_markdown_to_document(convert_request.text)
    return ConvertResponse(document=dump_document(document))


@router.post("/text", response_model=ConvertResponse)
async def convert_text(convert_request: ConvertRequest) -> ConvertResponse:
    """Convert plain text to a document tree, one paragraph per blank-line block."""
    document = convert_text_to_document(convert_request.text)
    return ConvertResponse(document=dump_document(document))
