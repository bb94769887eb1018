# server.py
from fastapi import FastAPI, UploadFile, File, Form, HTTPException
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from PIL import UnidentifiedImageError

from pathlib import Path
from datetime import datetime
from typing import Optional
import logging
import os
import time

from bitmap_config import Config, OutputMode
from bitmap_errors import CodecError
from codec import encode
from hex_output import DEFAULT_LINE_BREAK, format_output
from pixel_source import ImagePixelSource

log = logging.getLogger(__name__)

app = FastAPI()

BASE_DIR = Path(__file__).resolve().parent
OUT_DIR = Path(os.environ.get("IMG2HEX_OUT_DIR", BASE_DIR / "server_files"))

OUT_DIR.mkdir(parents=True, exist_ok=True)

BIN_NAME = "image.bin"
BIN_PATH = OUT_DIR / BIN_NAME

DEFAULT_THRESHOLD = 128


async def _encode_upload(
    file: UploadFile,
    threshold: float,
    config: Config,
    width: Optional[int],
    height: Optional[int],
):
    if not file.content_type or not file.content_type.startswith("image/"):
        raise HTTPException(status_code=400, detail="image file only")

    if (width is None) != (height is None):
        raise HTTPException(status_code=400, detail="width and height must be given together")
    size = (width, height) if width is not None else None

    raw = await file.read()
    try:
        buffer = ImagePixelSource(raw, size=size).read()
        return encode(buffer, threshold, config)
    except UnidentifiedImageError:
        raise HTTPException(status_code=400, detail="could not decode image")
    except CodecError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _config(invert_polarity, sampling_mode, reverse_bit_order, output_mode, color_mode) -> Config:
    try:
        return Config(
            invert_polarity=invert_polarity,
            sampling_mode=sampling_mode,
            reverse_bit_order=reverse_bit_order,
            output_mode=output_mode,
            color_mode=color_mode,
        )
    except CodecError as e:
        raise HTTPException(status_code=400, detail=str(e))


# =========================
# Image upload -> encoded output
# =========================
@app.post("/generate")
async def generate_image(
    file: UploadFile = File(...),
    threshold: float = Form(DEFAULT_THRESHOLD),
    invert_polarity: str = Form("0"),
    sampling_mode: str = Form("row"),
    reverse_bit_order: str = Form("0"),
    output_mode: str = Form("hex"),
    color_mode: str = Form("mono"),
    width: Optional[int] = Form(None),
    height: Optional[int] = Form(None),
    line_break_every: int = Form(DEFAULT_LINE_BREAK),
):
    config = _config(invert_polarity, sampling_mode, reverse_bit_order, output_mode, color_mode)
    bitmap = await _encode_upload(file, threshold, config, width, height)

    try:
        out = format_output(bitmap, config.output_mode, line_break_every)
        text = out.display(line_break_every)
    except CodecError as e:
        raise HTTPException(status_code=400, detail=str(e))

    body = {
        "width": bitmap.width,
        "height": bitmap.height,
        "sampling_mode": bitmap.sampling_mode.description if bitmap.sampling_mode else None,
        "bytes": out.size.bytes,
        "kilobytes": out.size.kilobytes,
        "size": out.size.formatted,
        "text": text,
    }
    if config.output_mode is OutputMode.HEX_PREFIXED:
        body["tokens"] = out.tokens
    else:
        body["hex"] = out.data.hex()

    return JSONResponse(body)


# =========================
# Image upload -> publish image.bin
# =========================
@app.post("/upload")
async def upload_image(
    file: UploadFile = File(...),
    threshold: float = Form(DEFAULT_THRESHOLD),
    invert_polarity: str = Form("0"),
    sampling_mode: str = Form("row"),
    reverse_bit_order: str = Form("0"),
    color_mode: str = Form("mono"),
    width: Optional[int] = Form(None),
    height: Optional[int] = Form(None),
):
    config = _config(invert_polarity, sampling_mode, reverse_bit_order, OutputMode.RAW_BYTES, color_mode)
    bitmap = await _encode_upload(file, threshold, config, width, height)

    ts = datetime.now().strftime("%Y%m%d_%H%M%S_%f")

    # write to a temp file first, then swap it in
    tmp_bin = OUT_DIR / f".{BIN_NAME}.{ts}.tmp"
    try:
        tmp_bin.write_bytes(bitmap.data)
        os.replace(tmp_bin, BIN_PATH)  # atomic update
    except OSError as e:
        if tmp_bin.exists():
            tmp_bin.unlink()
        raise HTTPException(status_code=500, detail=f"write failed: {e}")

    log.info("published %s: %dx%d, %d bytes", BIN_NAME, bitmap.width, bitmap.height, len(bitmap))
    return JSONResponse({"ok": True, "bin": BIN_NAME, "bytes": len(bitmap)})


# =========================
# Health check
# =========================
@app.get("/health")
def health():
    return {"ok": True, "status": "running"}


# =========================
# Last published bitmap (debug)
# =========================
@app.get("/meta")
def meta():
    if not BIN_PATH.exists():
        return {
            "exists": False,
            "message": f"{BIN_NAME} not generated yet"
        }

    stat = BIN_PATH.stat()
    return {
        "exists": True,
        "filename": BIN_NAME,
        "size_bytes": stat.st_size,
        "last_updated_unix": stat.st_mtime,
        "last_updated_readable": time.ctime(stat.st_mtime)
    }


# =========================
# Devices fetch image.bin straight from here
# =========================
app.mount(
    "/",
    StaticFiles(directory=OUT_DIR, html=False),
    name="static"
)
