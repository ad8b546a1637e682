"""
Correction Router - Sprite correction endpoints for the true-iso API

Contains endpoints for:
- Sprite correction (returns the corrected PNG)
- Detection only (returns diagnostics JSON)
"""

import io

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from fastapi.responses import StreamingResponse

from ..config import get_correction_config
from ..image_processing import ImageDecodeError, image_to_bytes, load_image_from_bytes
from ..models import DetectionDiagnostics
from ..services import CorrectionService, NoVisibleContentError
from ..utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["correction"])

DIAGNOSTICS_HEADER = "X-Correction-Diagnostics"


def get_service() -> CorrectionService:
    """Build the service from the loaded configuration."""
    return CorrectionService(get_correction_config())


@router.post("/correct")
async def correct_sprite(
    file: UploadFile = File(...),
    ratio: str = Form(None),
    size: int = Form(None, ge=1),
    verbose: bool = Form(False),
    service: CorrectionService = Depends(get_service)
):
    """
    Correct an uploaded isometric sprite.

    Args:
        file: Sprite image (PNG with alpha)
        ratio: Target ratio "N:M" (configured default if omitted)
        size: Longest side of the output (configured default if omitted)
        verbose: Log pipeline details at INFO

    Returns:
        Corrected PNG; diagnostics JSON in the X-Correction-Diagnostics header
    """
    content = await file.read()

    try:
        image = load_image_from_bytes(content)
        corrected, diagnostics = service.correct_sprite(
            image,
            ratio=ratio,
            output_size=size,
            verbose=verbose,
            sprite_name=file.filename
        )
    except (ImageDecodeError, NoVisibleContentError, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Correction failed for {file.filename}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Correction failed: {str(e)}")

    return StreamingResponse(
        io.BytesIO(image_to_bytes(corrected)),
        media_type="image/png",
        headers={DIAGNOSTICS_HEADER: diagnostics.model_dump_json()}
    )


@router.post("/detect", response_model=DetectionDiagnostics)
async def detect_angles(
    file: UploadFile = File(...),
    ratio: str = Form(None),
    verbose: bool = Form(False),
    service: CorrectionService = Depends(get_service)
):
    """
    Detect the isometric diagonal angles of an uploaded sprite.

    Returns:
        Detection diagnostics (bounds, angles, confidences, line counts)
    """
    content = await file.read()

    try:
        image = load_image_from_bytes(content)
        return service.detect(image, ratio=ratio, verbose=verbose, sprite_name=file.filename)
    except (ImageDecodeError, NoVisibleContentError, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Detection failed for {file.filename}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Detection failed: {str(e)}")
