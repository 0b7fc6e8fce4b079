"""
Format filtering and ranking.

Pipeline order (enforced by :func:`select_format`):

1. **Filter** by capability. Live formats always pass; when any HLS format
   survives, everything that is neither HLS nor live is dropped.
2. **Rank** with a stable, descending, multi-key ordering.
3. **Pick** the first ("highest") or last ("lowest") ranked format.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from functools import cmp_to_key

from ..exceptions import FormatNotFound
from ..models.enums import Capability, Quality
from ..models.format import ResolvedFormat
from ..utils.helpers import leading_int

# Later entries are preferred
VIDEO_ENCODING_RANKS = ["mp4v", "avc1", "Sorenson H.283", "MPEG-4 Visual", "VP8", "VP9", "H.264"]
AUDIO_ENCODING_RANKS = ["mp4a", "mp3", "vorbis", "aac", "opus", "flac"]


@dataclass(frozen=True)
class CustomFilter:
    """Caller-supplied capability predicate."""

    predicate: Callable[[ResolvedFormat], bool]


@dataclass(frozen=True)
class CustomQuality:
    """Caller-supplied filter and comparator replacing the built-in ranking.

    `comparator(a, b)` returns a negative number when `a` should be picked
    before `b`, as for functools.cmp_to_key.
    """

    filter: "CapabilityFilter"
    comparator: Callable[[ResolvedFormat, ResolvedFormat], int]


CapabilityFilter = Capability | CustomFilter
QualityPolicy = Quality | CustomQuality

SortKey = Callable[[ResolvedFormat], int]


# ---------------------------------------------------------------------------
# Filter
# ---------------------------------------------------------------------------

def _matches(fmt: ResolvedFormat, capability: CapabilityFilter) -> bool:
    if isinstance(capability, CustomFilter):
        return bool(capability.predicate(fmt))
    if capability == Capability.AUDIO:
        return fmt.has_audio and not fmt.has_video
    if capability == Capability.VIDEO:
        return fmt.has_video and not fmt.has_audio
    return fmt.has_video and fmt.has_audio


def filter_formats(
    formats: Sequence[ResolvedFormat],
    capability: CapabilityFilter,
) -> list[ResolvedFormat]:
    """Keep formats matching `capability`, plus every live format."""
    return [fmt for fmt in formats if _matches(fmt, capability) or fmt.is_live]


# ---------------------------------------------------------------------------
# Rank
# ---------------------------------------------------------------------------

def _encoding_rank(fmt: ResolvedFormat, ranks: list[str]) -> int:
    codecs = fmt.mime_type.joined_codecs()
    for index, encoding in enumerate(ranks):
        if encoding in codecs:
            return index
    return -1


def video_encoding_rank(fmt: ResolvedFormat) -> int:
    return _encoding_rank(fmt, VIDEO_ENCODING_RANKS)


def audio_encoding_rank(fmt: ResolvedFormat) -> int:
    return _encoding_rank(fmt, AUDIO_ENCODING_RANKS)


def _quality_label(fmt: ResolvedFormat) -> int:
    return leading_int(fmt.quality_label)


def _bitrate(fmt: ResolvedFormat) -> int:
    return fmt.bitrate


def _audio_bitrate(fmt: ResolvedFormat) -> int:
    return fmt.audio_bitrate or 0


_FORMAT_KEYS: list[SortKey] = [
    lambda fmt: int(fmt.is_hls),
    lambda fmt: int(fmt.is_dash_mpd),
    lambda fmt: int(fmt.has_video and fmt.has_audio),
    lambda fmt: int(fmt.has_video),
    lambda fmt: int((fmt.content_length or 0) > 0),
    _quality_label,
    _bitrate,
    _audio_bitrate,
    video_encoding_rank,
    audio_encoding_rank,
]

_VIDEO_KEYS: list[SortKey] = [_quality_label, _bitrate, video_encoding_rank]

_AUDIO_KEYS: list[SortKey] = [_audio_bitrate, audio_encoding_rank]


def sort_formats_by(formats: Sequence[ResolvedFormat], keys: list[SortKey]) -> list[ResolvedFormat]:
    """Stable sort, best first: the first key that differs decides."""
    return sorted(formats, key=lambda fmt: tuple(key(fmt) for key in keys), reverse=True)


def sort_formats(formats: Sequence[ResolvedFormat]) -> list[ResolvedFormat]:
    return sort_formats_by(formats, _FORMAT_KEYS)


def sort_formats_by_video(formats: Sequence[ResolvedFormat]) -> list[ResolvedFormat]:
    return sort_formats_by(formats, _VIDEO_KEYS)


def sort_formats_by_audio(formats: Sequence[ResolvedFormat]) -> list[ResolvedFormat]:
    return sort_formats_by(formats, _AUDIO_KEYS)


# ---------------------------------------------------------------------------
# Select
# ---------------------------------------------------------------------------

def _pick(formats: list[ResolvedFormat], first: bool) -> ResolvedFormat:
    if not formats:
        raise FormatNotFound()
    return formats[0] if first else formats[-1]


def select_format(
    formats: Sequence[ResolvedFormat],
    capability: CapabilityFilter = Capability.DEFAULT,
    quality: QualityPolicy = Quality.HIGHEST,
) -> ResolvedFormat:
    """
    Choose one format according to `capability` and `quality`.

    Raises FormatNotFound when nothing survives filtering.
    """
    candidates = filter_formats(formats, capability)
    if any(fmt.is_hls for fmt in candidates):
        candidates = [fmt for fmt in candidates if fmt.is_hls or fmt.is_live]
    candidates = sort_formats(candidates)

    if isinstance(quality, CustomQuality):
        candidates = filter_formats(candidates, quality.filter)
        candidates = sorted(candidates, key=cmp_to_key(quality.comparator))
        return _pick(candidates, first=True)

    if quality in (Quality.HIGHEST, Quality.LOWEST):
        return _pick(candidates, first=quality == Quality.HIGHEST)

    if quality in (Quality.HIGHEST_AUDIO, Quality.LOWEST_AUDIO):
        candidates = sort_formats_by_audio(filter_formats(candidates, Capability.AUDIO))
        return _pick(candidates, first=quality == Quality.HIGHEST_AUDIO)

    candidates = sort_formats_by_video(filter_formats(candidates, Capability.VIDEO))
    return _pick(candidates, first=quality == Quality.HIGHEST_VIDEO)
