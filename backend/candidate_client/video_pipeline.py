# backend/candidate_client/video_pipeline.py
"""
One-take video answers: think-time countdown, capture, then the two-phase
upload (signed PUT, then commit). A failed upload keeps the captured bytes
so the candidate can retry without re-recording.
"""
import enum
import logging
import math
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Set

import httpx

from candidate_client.api_client import AssessmentClient, ClientError
from core.catalog import VIDEO_MAX_SECONDS, VIDEO_QUESTION_COUNT, VIDEO_THINK_SECONDS

logger = logging.getLogger(__name__)


class SlotStatus(str, enum.Enum):
    idle = "idle"
    recording = "recording"
    uploading = "uploading"
    uploaded = "uploaded"
    error = "error"


class RecordingRefused(Exception):
    pass


@dataclass
class VideoSlot:
    question_index: int
    status: SlotStatus = SlotStatus.idle
    data: Optional[bytes] = None
    duration_sec: int = 0
    storage_path: Optional[str] = None
    last_error: Optional[str] = None


# capture(question_index, max_seconds) -> recorded bytes; stops on its own at max_seconds
Capture = Callable[[int, int], bytes]


class VideoPipeline:
    def __init__(
        self,
        client: AssessmentClient,
        capture: Capture,
        video_answers: Optional[Dict[str, Any]] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
        on_countdown: Optional[Callable[[int], None]] = None,
    ):
        video_answers = video_answers or {}
        self.client = client
        self.capture = capture
        self._sleep = sleep
        self._clock = clock
        self._on_countdown = on_countdown
        self.attempted: Set[int] = set(video_answers.get("attemptedQuestionIndices") or [])
        self.recordings: List[Dict[str, Any]] = list(video_answers.get("recordings") or [])
        self.slots = {i: VideoSlot(i) for i in range(VIDEO_QUESTION_COUNT)}
        for r in self.recordings:
            slot = self.slots.get(r.get("questionIndex"))
            if slot is not None:
                slot.status = SlotStatus.uploaded
                slot.storage_path = r.get("storagePath")

    def is_uploaded(self, index: int) -> bool:
        return self.slots[index].status == SlotStatus.uploaded

    def can_start(self, index: int) -> bool:
        return index in self.slots and index not in self.attempted and not self.is_uploaded(index)

    def _mark_attempted(self, index: int) -> None:
        self.attempted.add(index)
        try:
            self.client.save({"video": {"attemptedQuestionIndices": sorted(self.attempted)}})
        except (ClientError, httpx.HTTPError) as e:
            # local state still blocks a second take in this session
            logger.warning("could not persist attempted question %d: %s", index, e)

    def record(self, index: int) -> VideoSlot:
        if not self.can_start(index):
            raise RecordingRefused(f"Question {index + 1} was already attempted")

        self._mark_attempted(index)
        for remaining in range(VIDEO_THINK_SECONDS, 0, -1):
            if self._on_countdown:
                self._on_countdown(remaining)
            self._sleep(1)

        slot = self.slots[index]
        slot.status = SlotStatus.recording
        slot.last_error = None
        started = self._clock()
        try:
            slot.data = self.capture(index, VIDEO_MAX_SECONDS)
        except Exception as e:
            # the take is spent either way; surface the failure on the slot
            logger.exception("capture failed for question %d", index)
            slot.status = SlotStatus.error
            slot.data = None
            slot.last_error = str(e) or "Recording failed"
            return slot
        slot.duration_sec = min(VIDEO_MAX_SECONDS, math.ceil(self._clock() - started))
        return self.upload(index)

    def upload(self, index: int) -> VideoSlot:
        slot = self.slots[index]
        if slot.status == SlotStatus.uploaded or not slot.data:
            return slot

        slot.status = SlotStatus.uploading
        try:
            dest = self.client.upload_url(index)
            self.client.put_video(dest["signedUrl"], slot.data)
            recording = {
                "questionIndex": index,
                "storagePath": dest["storagePath"],
                "durationSec": slot.duration_sec,
                "sizeBytes": len(slot.data),
                "createdAtIso": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            }
            self.client.commit(recording)
        except (ClientError, httpx.HTTPError) as e:
            slot.status = SlotStatus.error
            slot.last_error = str(e) or "Upload failed"
            return slot

        self.recordings = [r for r in self.recordings if r.get("questionIndex") != index]
        self.recordings.append(recording)
        slot.status = SlotStatus.uploaded
        slot.storage_path = recording["storagePath"]
        slot.data = None
        return slot

    def retry_upload(self, index: int) -> VideoSlot:
        slot = self.slots[index]
        if slot.status != SlotStatus.error:
            return slot
        return self.upload(index)
