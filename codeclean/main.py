import hashlib
from pathlib import PurePath

from fastapi import FastAPI, UploadFile, File, HTTPException
from .encoding import UndecodableError, decode_text
from .models import CleanResponse, HealthResponse, StageConfig
from .rules import DEFAULT_EXTENSIONS
from .transform import clean_text_with_report

app = FastAPI(
    title="codeclean",
    description="Comment stripping and whitespace cleanup for source files",
    version="0.1.0",
)

@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}

@app.post("/clean", response_model=CleanResponse)
async def clean_file(
    file: UploadFile = File(...),
    remove_markup_comments: bool = True,
    remove_line_comments: bool = True,
    remove_style_comments: bool = True,
    remove_empty_lines: bool = True,
    trim_trailing_whitespace: bool = True,
    trim_file_ends: bool = True,
):
    filename = file.filename or ""
    if PurePath(filename).suffix.lower() not in DEFAULT_EXTENSIONS:
        raise HTTPException(
            status_code=422,
            detail=f"Only {', '.join(DEFAULT_EXTENSIONS)} files are supported",
        )

    raw = await file.read()
    try:
        text, encoding = decode_text(raw)
    except UndecodableError as e:
        raise HTTPException(status_code=422, detail=str(e))

    config = StageConfig(
        remove_markup_comments=remove_markup_comments,
        remove_line_comments=remove_line_comments,
        remove_style_comments=remove_style_comments,
        remove_empty_lines=remove_empty_lines,
        trim_trailing_whitespace=trim_trailing_whitespace,
        trim_file_ends=trim_file_ends,
    )
    cleaned, report = clean_text_with_report(text, config)

    return {
        "filename": filename,
        "sha256": hashlib.sha256(cleaned.encode("utf-8")).hexdigest(),
        "encoding": encoding,
        "content": cleaned,
        "report": report,
    }
