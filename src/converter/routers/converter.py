from typing import Annotated

from fastapi import APIRouter, File, Form, HTTPException, UploadFile
from fastapi.responses import Response
from starlette.concurrency import run_in_threadpool

from converter.core import generate_json, generate_xml, json_to_text, xml_to_text
from converter.core.errors import UnsupportedFileType
from converter.shared import Logger, load_config
from converter.shared.http import conversion_error_handler

logger = Logger(__name__).get_logger()

router = APIRouter(prefix="/converter", tags=["converter"])

config = load_config()

JSON_CONTENT_TYPES = {"application/json"}
XML_CONTENT_TYPES = {"application/xml", "text/xml"}

UploadField = Annotated[UploadFile | None, File()]
FormField = Annotated[str | None, Form()]


def require_inputs(file: UploadFile | None, delimiter: str | None, key: str | None):
    if file is None or not delimiter or not key:
        raise HTTPException(status_code=400, detail="Missing file, delimiter, or key")


async def read_upload(file: UploadFile) -> str:
    data = await file.read()
    if len(data) > config.files.max_file_size:
        logger.warning(
            "Upload %s is %d bytes, limit is %d",
            file.filename,
            len(data),
            config.files.max_file_size,
        )
        raise HTTPException(
            status_code=413,
            detail=f"File exceeds the maximum size of {config.files.max_file_size} bytes",
        )

    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        logger.warning("Upload %s is not valid UTF-8: %s", file.filename, e)
        raise HTTPException(status_code=400, detail="File must be UTF-8 encoded text") from e


@router.post("/txt-to-json")
async def txt_to_json(
    file: UploadField = None,
    delimiter: FormField = None,
    key: FormField = None,
):
    """
    Convert a delimited text file to JSON.

    Form fields:
    - file: the text file, one client per line
    - delimiter: field separator used in the file
    - key: passphrase the card numbers are encrypted with
    """
    require_inputs(file, delimiter, key)
    logger.debug("txt-to-json request for %s", file.filename)

    with conversion_error_handler():
        content = await read_upload(file)
        document = await run_in_threadpool(generate_json, content, delimiter, key)

    return Response(content=document, media_type="application/json")


@router.post("/txt-to-xml")
async def txt_to_xml(
    file: UploadField = None,
    delimiter: FormField = None,
    key: FormField = None,
):
    """Convert a delimited text file to XML, same form fields as txt-to-json."""
    require_inputs(file, delimiter, key)
    logger.debug("txt-to-xml request for %s", file.filename)

    with conversion_error_handler():
        content = await read_upload(file)
        document = await run_in_threadpool(generate_xml, content, delimiter, key)

    return Response(content=document, media_type="application/xml")


@router.post("/json-xml-to-txt")
async def json_xml_to_txt(
    file: UploadField = None,
    key: FormField = None,
    delimiter: FormField = None,
):
    """
    Convert a JSON or XML document back to delimited text, decrypting the
    card numbers with ``key``. The format is picked from the upload's content
    type, falling back to its file extension.
    """
    require_inputs(file, delimiter, key)

    content_type = file.content_type
    filename = file.filename or ""
    logger.debug("json-xml-to-txt request for %s (%s)", filename, content_type)

    with conversion_error_handler():
        content = await read_upload(file)

        if content_type in JSON_CONTENT_TYPES or filename.endswith(".json"):
            text = await run_in_threadpool(json_to_text, content, key, delimiter)
        elif content_type in XML_CONTENT_TYPES or filename.endswith(".xml"):
            text = await xml_to_text(content, key, delimiter)
        else:
            raise UnsupportedFileType(content_type)

    return Response(content=text, media_type="text/plain")
