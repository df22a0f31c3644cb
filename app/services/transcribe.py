"""Amazon Transcribe integration helpers using Streaming API."""

from __future__ import annotations

import asyncio
import logging
import os
import subprocess
import tempfile
from dataclasses import dataclass

from amazon_transcribe.client import TranscribeStreamingClient
from amazon_transcribe.handlers import TranscriptResultStreamHandler
from amazon_transcribe.model import TranscriptEvent
from fastapi.concurrency import run_in_threadpool

from app.config.settings import settings

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 8192


@dataclass(frozen=True)
class TranscriptionResult:
    """Structured transcription outcome returned to the scoring pipeline."""

    transcript: str
    language_code: str | None = None


class TranscriptionError(RuntimeError):
    """Raised when Amazon Transcribe fails to process audio successfully."""


class TranscribeService:
    """High-level facade for streaming recorded answers to Amazon Transcribe."""

    def __init__(
        self,
        region: str,
        language_code: str = "en-US",
        media_sample_rate_hz: int = 16000,
        media_encoding: str = "pcm",
    ) -> None:
        self._region = region
        self._language_code = language_code
        self._media_sample_rate_hz = media_sample_rate_hz
        self._media_encoding = media_encoding

        # The streaming SDK resolves credentials from the environment only.
        if settings.s3.access_key:
            os.environ.setdefault("AWS_ACCESS_KEY_ID", settings.s3.access_key)
        if settings.s3.secret_key:
            os.environ.setdefault("AWS_SECRET_ACCESS_KEY", settings.s3.secret_key)

        self._client = TranscribeStreamingClient(region=region)

    async def transcribe(self, audio_bytes: bytes, audio_format: str) -> TranscriptionResult:
        """Stream audio to Transcribe and return the full transcript."""

        if not audio_bytes:
            raise TranscriptionError("The uploaded audio file is empty.")

        try:
            pcm_data = await run_in_threadpool(self._convert_to_pcm, audio_bytes, audio_format)
        except TranscriptionError:
            raise
        except Exception as exc:
            raise TranscriptionError(f"Audio conversion failed: {exc}") from exc

        if not pcm_data:
            raise TranscriptionError("Audio conversion produced no samples.")

        stream = await self._client.start_stream_transcription(
            language_code=self._language_code,
            media_sample_rate_hz=self._media_sample_rate_hz,
            media_encoding=self._media_encoding,
        )
        handler = _SimpleTranscriptHandler(stream.output_stream)

        async def write_chunks() -> None:
            # 16-bit mono, so two bytes per sample.
            sleep_time = _CHUNK_SIZE / (self._media_sample_rate_hz * 2)
            logger.info(
                "Starting stream. Total bytes: %s. Chunk size: %s. Sleep: %.4fs",
                len(pcm_data),
                _CHUNK_SIZE,
                sleep_time,
            )
            for offset in range(0, len(pcm_data), _CHUNK_SIZE):
                await stream.input_stream.send_audio_event(
                    audio_chunk=pcm_data[offset : offset + _CHUNK_SIZE]
                )
                await asyncio.sleep(sleep_time)
            await stream.input_stream.end_stream()

        try:
            await asyncio.gather(write_chunks(), handler.handle_events())
        except Exception as exc:
            logger.error("Streaming loop failed: %s", exc)
            raise TranscriptionError(f"Streaming transcription failed: {exc}") from exc

        transcript = handler.transcript.strip()
        if not transcript:
            raise TranscriptionError("Transcription returned no speech.")

        logger.info("Transcription complete. Length: %s", len(transcript))
        return TranscriptionResult(transcript=transcript, language_code=self._language_code)

    def _convert_to_pcm(self, audio_bytes: bytes, audio_format: str) -> bytes:
        """Convert input audio to raw PCM s16le via ffmpeg using a temporary file."""

        with tempfile.NamedTemporaryFile(delete=False, suffix=f".{audio_format}") as tmp_file:
            tmp_file.write(audio_bytes)
            tmp_path = tmp_file.name

        try:
            process = subprocess.run(
                [
                    "ffmpeg",
                    "-y",
                    "-i", tmp_path,
                    "-f", "s16le",
                    "-ac", "1",
                    "-ar", str(self._media_sample_rate_hz),
                    "pipe:1",
                ],
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                check=True,
            )
            return process.stdout
        except subprocess.CalledProcessError as exc:
            error_msg = exc.stderr.decode("utf-8", errors="replace") if exc.stderr else "No stderr"
            logger.error("ffmpeg failed. stderr: %s", error_msg)
            raise TranscriptionError(f"ffmpeg failed to convert audio to PCM: {error_msg}") from exc
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)


class _SimpleTranscriptHandler(TranscriptResultStreamHandler):
    def __init__(self, transcript_result_stream):
        super().__init__(transcript_result_stream)
        self.transcript = ""

    async def handle_transcript_event(self, transcript_event: TranscriptEvent):
        for result in transcript_event.transcript.results:
            if result.is_partial or not result.alternatives:
                continue
            self.transcript += result.alternatives[0].transcript + " "


def build_transcribe_service() -> TranscribeService:
    """Construct the service from the configured Transcribe settings."""

    return TranscribeService(
        region=settings.transcribe.region,
        language_code=settings.transcribe.language_code,
        media_sample_rate_hz=settings.transcribe.media_sample_rate_hz,
        media_encoding=settings.transcribe.media_encoding,
    )


__all__ = [
    "TranscribeService",
    "TranscriptionError",
    "TranscriptionResult",
    "build_transcribe_service",
]
