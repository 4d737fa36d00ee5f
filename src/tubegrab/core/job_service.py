"""Core job service — orchestrates one download job end to end.

The service sequences stream selection, transfer, transcoding and
export for each output mode.  Every collaborator (manifest resolver,
byte source, transcoder, storage sink) is injected at construction
time; there is no process-wide instance.

Status flow
-----------
``downloading`` → (``converting``) → ``exporting`` → ``done``, with
``error`` reachable from every non-terminal stage.  ``muxed`` jobs never
enter ``converting``.  Input validation happens before the first status
is emitted, so a bad URL or mode never produces ``error``.

Files
-----
All files live in a scratch directory owned by the service.  Each write
target is cleared first; intermediate tracks are removed best-effort
once the job is over, whatever its outcome.
"""

from __future__ import annotations

import logging
import shutil
import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import Any

from tubegrab.core.fetcher import discard, fetch, remove_stale
from tubegrab.core.models import (
    JobMode,
    JobRequest,
    JobStatus,
    StreamDescriptor,
    StreamManifest,
)
from tubegrab.core.protocols import (
    ByteSource,
    LogCallback,
    ManifestResolver,
    ProgressCallback,
    StatusCallback,
    StorageSink,
    Transcoder,
)
from tubegrab.core.stream_selector import select_streams
from tubegrab.core.transcode import build_merge_args, build_mp3_encode_args
from tubegrab.core.urls import normalize_video_url
from tubegrab.exceptions import (
    ExportError,
    TranscodeError,
    TransferError,
    TubegrabError,
)
from tubegrab.utils.filenames import sanitize_file_name
from tubegrab.utils.formatting import format_bitrate, format_bytes

log = logging.getLogger(__name__)

SCRATCH_PREFIX: str = "tubegrab-"


class _JobEvents:
    """Fans job events out to the caller's callbacks and to :mod:`logging`.

    Callbacks are fire-and-forget: an exception raised by one is logged
    at debug level and never interrupts the job.
    """

    def __init__(
        self,
        on_log: LogCallback | None,
        on_progress: ProgressCallback | None,
        on_status: StatusCallback | None,
    ) -> None:
        self._on_log = on_log
        self._on_progress = on_progress
        self._on_status = on_status

    def log(self, message: str) -> None:
        log.debug(message)
        self._dispatch(self._on_log, message)

    def progress(self, fraction: float) -> None:
        self._dispatch(self._on_progress, fraction)

    def status(self, status: JobStatus) -> None:
        log.debug("Job status: %s", status.value)
        self._dispatch(self._on_status, status)

    @staticmethod
    def _dispatch(callback: Callable[[Any], None] | None, value: Any) -> None:
        if callback is None:
            return
        try:
            callback(value)
        except Exception as exc:  # noqa: BLE001
            log.debug("Job callback %r failed: %s", callback, exc)


class JobService:
    """Runs download jobs, one at a time.

    Parameters
    ----------
    resolver:
        Resolves a URL into metadata and a stream manifest.
    byte_source:
        Opens the byte stream behind a stream locator.
    transcoder:
        Runs the external media tool (ffmpeg).
    sink:
        Persists the finished artifact.
    scratch_dir:
        Directory for temporary files.  When ``None`` a private
        directory is created on first use and removed by :meth:`close`.
    """

    def __init__(
        self,
        resolver: ManifestResolver,
        byte_source: ByteSource,
        transcoder: Transcoder,
        sink: StorageSink,
        *,
        scratch_dir: Path | None = None,
    ) -> None:
        self._resolver: ManifestResolver = resolver
        self._byte_source: ByteSource = byte_source
        self._transcoder: Transcoder = transcoder
        self._sink: StorageSink = sink
        self._scratch_dir: Path | None = scratch_dir
        self._owns_scratch_dir: bool = scratch_dir is None
        self._procedures: dict[
            JobMode,
            Callable[[JobRequest, StreamManifest, _JobEvents], Path],
        ] = {
            JobMode.AUDIO: self._run_audio,
            JobMode.MERGE: self._run_merge,
            JobMode.MUXED: self._run_muxed,
        }

    # ------------------------------------------------------------------
    # Context manager
    # ------------------------------------------------------------------

    def __enter__(self) -> JobService:
        return self

    def __exit__(self, *_args: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def scratch_dir(self) -> Path:
        """The scratch directory, created on first access."""
        if self._scratch_dir is None:
            self._scratch_dir = Path(tempfile.mkdtemp(prefix=SCRATCH_PREFIX))
            log.debug("Created scratch directory %s", self._scratch_dir)
        else:
            self._scratch_dir.mkdir(parents=True, exist_ok=True)
        return self._scratch_dir

    def request_storage_access(self) -> None:
        """Ask the sink for write access once; failures are only logged.

        A refused request surfaces later, when an export actually fails.
        """
        try:
            self._sink.request_access()
        except Exception as exc:  # noqa: BLE001
            log.warning("Storage access request failed: %s", exc)

    def close(self) -> None:
        """Remove the private scratch directory (idempotent)."""
        if self._owns_scratch_dir and self._scratch_dir is not None:
            shutil.rmtree(self._scratch_dir, ignore_errors=True)
            self._scratch_dir = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def download_video(
        self,
        url: str,
        mode: JobMode | str,
        *,
        on_log: LogCallback | None = None,
        on_progress: ProgressCallback | None = None,
        on_status: StatusCallback | None = None,
    ) -> Path:
        """Download *url* in *mode* and export the result.

        Returns
        -------
        Path
            The local artifact handed to the storage sink.

        Raises
        ------
        ValidationError
            For an empty/unparseable URL or an unknown mode; raised
            before any status is emitted.
        ResolutionError, SelectionError, TransferError, TranscodeError, ExportError
            After the job has moved to ``error``.
        """
        job_mode = JobMode.parse(mode)
        normalized_url = normalize_video_url(url)

        events = _JobEvents(on_log, on_progress, on_status)
        events.status(JobStatus.DOWNLOADING)

        try:
            events.log(f"Fetching video details for {normalized_url}...")
            media, manifest = self._resolver.resolve(normalized_url)
            request = JobRequest(
                url=normalized_url,
                mode=job_mode,
                base_name=sanitize_file_name(media.title),
            )
            events.log(f'Resolved video: "{media.title}"')
            events.log(f"Using temporary directory: {self._ensure_scratch_dir()}")

            artifact = self._procedures[job_mode](request, manifest, events)
        except Exception as exc:
            events.status(JobStatus.ERROR)
            events.log(f"Error: {exc}")
            if isinstance(exc, TranscodeError) and exc.output:
                events.log(f"ffmpeg output:\n{exc.output}")
            log.debug("Job for %s failed", normalized_url, exc_info=True)
            raise

        events.status(JobStatus.DONE)
        events.log("Done.")
        return artifact

    # ------------------------------------------------------------------
    # Mode procedures
    # ------------------------------------------------------------------

    def _run_audio(
        self,
        request: JobRequest,
        manifest: StreamManifest,
        events: _JobEvents,
    ) -> Path:
        """Best audio-only stream, re-encoded to MP3."""
        (audio,) = select_streams(manifest, JobMode.AUDIO)
        events.log(
            f"Selected audio stream: {audio.codec} @ "
            f"{format_bitrate(audio.bitrate)} ({audio.container})"
        )

        audio_path = self._scratch_path(request, f"audio.{audio.container}")
        mp3_path = self._scratch_path(request, "mp3")
        try:
            self._fetch_stream(audio, audio_path, events)

            events.status(JobStatus.CONVERTING)
            events.log("Converting audio to MP3 via ffmpeg...")
            self._transcode(build_mp3_encode_args(audio_path, mp3_path), mp3_path)
            events.log(f"MP3 created: {mp3_path}")

            self._export(mp3_path, "MP3", events)
        finally:
            discard(audio_path)
        return mp3_path

    def _run_merge(
        self,
        request: JobRequest,
        manifest: StreamManifest,
        events: _JobEvents,
    ) -> Path:
        """Best video-only and audio-only streams, muxed into one MP4."""
        video, audio = select_streams(manifest, JobMode.MERGE)
        events.log(
            f"Selected video: {video.resolution_label} @ "
            f"{format_bitrate(video.bitrate)} ({video.container})"
        )
        events.log(
            f"Selected audio: {audio.codec} @ "
            f"{format_bitrate(audio.bitrate)} ({audio.container})"
        )

        video_path = self._scratch_path(request, f"video.{video.container}")
        audio_path = self._scratch_path(request, f"audio.{audio.container}")
        merged_path = self._scratch_path(request, "merged.mp4")
        try:
            self._fetch_stream(video, video_path, events)
            self._fetch_stream(audio, audio_path, events)

            events.status(JobStatus.CONVERTING)
            events.log("Merging video and audio via ffmpeg...")
            self._transcode(
                build_merge_args(video_path, audio_path, merged_path),
                merged_path,
            )
            events.log(f"Merged file created: {merged_path}")

            self._export(merged_path, "Merged video", events)
        finally:
            discard(video_path)
            discard(audio_path)
        return merged_path

    def _run_muxed(
        self,
        request: JobRequest,
        manifest: StreamManifest,
        events: _JobEvents,
    ) -> Path:
        """Best pre-muxed stream, exported as downloaded."""
        (muxed,) = select_streams(manifest, JobMode.MUXED)
        events.log(
            f"Selected muxed: {muxed.resolution_label} @ "
            f"{format_bitrate(muxed.bitrate)} ({muxed.container})"
        )

        muxed_path = self._scratch_path(request, f"muxed.{muxed.container}")
        self._fetch_stream(muxed, muxed_path, events)
        self._export(muxed_path, "Muxed video", events)
        return muxed_path

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def _ensure_scratch_dir(self) -> Path:
        try:
            return self.scratch_dir
        except OSError as exc:
            raise TransferError(
                f"Cannot create temporary directory: {exc}",
            ) from exc

    def _scratch_path(self, request: JobRequest, suffix: str) -> Path:
        return self._ensure_scratch_dir() / f"{request.base_name}.{suffix}"

    def _fetch_stream(
        self,
        stream: StreamDescriptor,
        destination: Path,
        events: _JobEvents,
    ) -> None:
        size = format_bytes(stream.total_size) if stream.total_size else "unknown size"
        events.log(f"Downloading to {destination} ({size})...")
        try:
            chunks = self._byte_source.iter_bytes(stream.locator)
        except TubegrabError:
            raise
        except Exception as exc:
            raise TransferError(f"Cannot open stream: {exc}") from exc
        fetch(chunks, stream.total_size, destination, events.progress)
        events.log(f"Download finished: {destination}")

    def _transcode(self, arguments: list[str], target: Path) -> None:
        try:
            remove_stale(target)
        except OSError as exc:
            raise TranscodeError(
                f"Cannot replace existing output {target.name}: {exc}",
            ) from exc
        try:
            self._transcoder.run(arguments)
        except TubegrabError:
            raise
        except Exception as exc:
            raise TranscodeError(f"Transcoder failed unexpectedly: {exc}") from exc

    def _export(self, path: Path, label: str, events: _JobEvents) -> None:
        events.status(JobStatus.EXPORTING)
        events.log(f"Saving {label} to storage...")
        try:
            self._sink.export(path)
        except ExportError:
            raise
        except Exception as exc:
            raise ExportError(f"Export of {path.name} failed: {exc}") from exc
        events.log(f"{label} exported.")
