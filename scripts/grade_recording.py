"""Transcribe and grade a local recording without touching the database or S3.

Usage: python scripts/grade_recording.py path/to/answer.m4a
"""

import asyncio
import os
import sys
from pathlib import Path

# Add project root to path so we can import app
sys.path.append(os.getcwd())

from app.domain.models import clamp_score, is_prize_eligible
from app.pipelines.scoring import RetryPolicy, grade_transcript, transcribe_audio
from app.services import BedrockLlmClient, build_transcribe_service
from app.errors import ServiceError


async def main() -> int:
    if len(sys.argv) < 2:
        print("Usage: python scripts/grade_recording.py path/to/audio.{mp4,webm,wav,m4a,aac}")
        return 2

    path = Path(sys.argv[1])
    if not path.exists():
        print(f"File '{path}' not found.")
        return 2

    audio_bytes = path.read_bytes()
    audio_format = path.suffix.lstrip(".").lower()
    policy = RetryPolicy()

    print(f"Transcribing {len(audio_bytes)} bytes using Amazon Transcribe Streaming...")
    try:
        transcript = await transcribe_audio(build_transcribe_service(), audio_bytes, audio_format, policy)
        print("\n--- Transcript ---")
        print(transcript)

        grading = await grade_transcript(BedrockLlmClient(), transcript, policy)
    except ServiceError as exc:
        print(f"\n{exc.error}: {exc.message}")
        return 1

    score = clamp_score(grading.raw_score)
    print("\n--- Grade ---")
    print(f"score={score} prize_eligible={is_prize_eligible(score)}")
    print(f"roast={grading.roast}")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
