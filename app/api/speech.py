"""Speech endpoints for the voice widget.

- /api/transcribe: recorded audio in, transcript out (Deepgram)
- /api/speak: reply text in, MP3 audio out (ElevenLabs)
"""

import logging

from fastapi import APIRouter, File, Request, UploadFile
from fastapi.responses import JSONResponse, Response

from app.api.deps import RATE_LIMIT, DeepgramDep, ElevenLabsDep, limiter
from app.schemas.storefront import ErrorResponse, SpeakRequest, TranscriptResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["Speech"])

TRANSCRIPTION_FAILED = "Transcription failed"
TTS_FAILED = "Text-to-speech failed"


@router.post(
    "/transcribe",
    response_model=TranscriptResponse,
    responses={500: {"model": ErrorResponse}},
)
@limiter.limit(RATE_LIMIT)
async def transcribe(
    request: Request,
    deepgram: DeepgramDep,
    audio: UploadFile | None = File(None),
):
    """Transcribe one recorded utterance.

    Expects a multipart upload with the recording in the `audio` field. The
    file is read fully into memory and forwarded unchanged.
    """
    try:
        if audio is None:
            raise ValueError("No audio file in request")

        audio_bytes = await audio.read()
        transcript = await deepgram.transcribe(audio_bytes)
        return TranscriptResponse(transcript=transcript)

    except Exception as e:
        logger.exception(f"Transcription error: {e}")
        return JSONResponse(status_code=500, content={"error": TRANSCRIPTION_FAILED})


@router.post(
    "/speak",
    response_class=Response,
    responses={
        200: {"content": {"audio/mpeg": {}}},
        500: {"model": ErrorResponse},
    },
)
@limiter.limit(RATE_LIMIT)
async def speak(
    request: Request,
    payload: SpeakRequest,
    elevenlabs: ElevenLabsDep,
) -> Response:
    """Convert reply text to speech and return the MP3 bytes."""
    try:
        audio = await elevenlabs.synthesize(payload.text)
        return Response(content=audio, media_type="audio/mpeg")

    except Exception as e:
        logger.exception(f"TTS error: {e}")
        return JSONResponse(status_code=500, content={"error": TTS_FAILED})
