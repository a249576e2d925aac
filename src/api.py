import logging
from typing import Optional, Union
from fastapi import FastAPI, File, Form, UploadFile, Body, HTTPException
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel
from engine import convert_xml
from errors import ConversionError, DecodeFailure, StructureNotFound, UnexpectedShape
from config import get_config

logger = logging.getLogger(__name__)
cfg = get_config()

app = FastAPI(title="ISO 20022 to MT103 Converter", version="0.1.0", debug=cfg.api.debug)

STATUS_CODES = {
    DecodeFailure: 400,
    StructureNotFound: 422,
    UnexpectedShape: 500,
}

class ConvertRequest(BaseModel):
    xml: str = ""

class ConvertResponse(BaseModel):
    success: bool
    mt103: Optional[str] = None
    message: Optional[str] = None
    code: Optional[str] = None

def _status_code(error: ConversionError) -> int:
    return STATUS_CODES.get(type(error), 500)

def _error_message(error: ConversionError) -> str:
    if isinstance(error, DecodeFailure):
        return f"Error parsing XML: {error.message}"
    if isinstance(error, StructureNotFound):
        return error.message
    return f"Error converting to MT103: {error.message}"

def _check_payload(data: Union[bytes, str]) -> None:
    if not data or not data.strip():
        raise HTTPException(status_code=400, detail="No XML provided")
    size = len(data.encode("utf-8")) if isinstance(data, str) else len(data)
    if size > cfg.api.max_request_mb * 1048576:
        raise HTTPException(status_code=413, detail="payload too large")

def _convert_text(data: Union[bytes, str]) -> PlainTextResponse:
    _check_payload(data)
    try:
        return PlainTextResponse(convert_xml(data))
    except ConversionError as e:
        return PlainTextResponse(_error_message(e), status_code=_status_code(e))

@app.get("/health")
def health():
    return {"status": "ok"}

@app.post("/convert-text", response_class=PlainTextResponse)
def convert_text(xml: str = Form("")):
    return _convert_text(xml)

@app.post("/convert/file", response_class=PlainTextResponse)
async def convert_file(file: UploadFile = File(...)):
    return _convert_text(await file.read())

@app.post("/api/convert", response_model=ConvertResponse)
def convert_json(req: ConvertRequest = Body(...)):
    data = req.xml
    try:
        _check_payload(data)
        result = ConvertResponse(success=True, mt103=convert_xml(data))
        return JSONResponse(content=result.model_dump())
    except HTTPException as e:
        result = ConvertResponse(success=False, message=e.detail)
        return JSONResponse(content=result.model_dump(), status_code=e.status_code)
    except ConversionError as e:
        result = ConvertResponse(success=False, message=_error_message(e), code=e.code)
        return JSONResponse(content=result.model_dump(), status_code=_status_code(e))

if cfg.paths.STATIC_DIR.is_dir():
    app.mount("/", StaticFiles(directory=str(cfg.paths.STATIC_DIR), html=True), name="static")
