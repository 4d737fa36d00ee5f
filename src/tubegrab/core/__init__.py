"""Core / service layer — the acquisition-and-transcode pipeline.

Rules
-----
* No ``print()`` calls.
* No network access and no third-party imports: remote bytes, the
  extractor and ffmpeg are reached only through :mod:`tubegrab.core.protocols`.
* Filesystem access is limited to the job service's scratch directory.
* No imports from ``cli`` or ``infra``.
"""

from tubegrab.core.analysis_service import AnalysisService
from tubegrab.core.job_service import JobService
from tubegrab.core.job_state import JobState
from tubegrab.core.manifest_service import ManifestService
from tubegrab.core.models import (
    JobMode,
    JobRequest,
    JobStatus,
    MediaDescriptor,
    StreamDescriptor,
    StreamKind,
    StreamLocator,
    StreamManifest,
)
from tubegrab.core.protocols import (
    ByteSource,
    ManifestResolver,
    MetadataProvider,
    StorageSink,
    Transcoder,
)

__all__: list[str] = [
    "AnalysisService",
    "ByteSource",
    "JobMode",
    "JobRequest",
    "JobService",
    "JobState",
    "JobStatus",
    "ManifestResolver",
    "ManifestService",
    "MediaDescriptor",
    "MetadataProvider",
    "StorageSink",
    "StreamDescriptor",
    "StreamKind",
    "StreamLocator",
    "StreamManifest",
    "Transcoder",
]
