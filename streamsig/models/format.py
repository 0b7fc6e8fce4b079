import re

from pydantic import BaseModel, ConfigDict, Field, field_validator

_MIME_TYPE_RE = re.compile(
    r'^(?P<mime>(?P<kind>[\w-]+)/(?P<container>[\w.+-]+))(?:\s*;\s*codecs="(?P<codecs>[^"]*)")?'
)


class MimeType(BaseModel):
    """A parsed `mimeType` value such as `video/mp4; codecs="avc1.4d401f, mp4a.40.2"`."""

    mime: str = Field(..., description="Media type without parameters (video/mp4)")
    container: str = Field(..., description="Container subtype (mp4, webm)")
    codecs: list[str] = Field(default_factory=list, description="Codec strings in declared order")
    video_codec: str | None = Field(None, description="Video codec, for video mime types")
    audio_codec: str | None = Field(None, description="Audio codec, if any")

    @classmethod
    def parse(cls, value: str) -> "MimeType":
        match = _MIME_TYPE_RE.match(value.strip())
        if not match:
            raise ValueError(f"Unrecognised mime type: {value!r}")

        codecs = [c.strip() for c in (match.group("codecs") or "").split(",") if c.strip()]
        video_codec = None
        audio_codec = None
        if match.group("kind") == "video":
            video_codec = codecs[0] if codecs else None
            audio_codec = codecs[1] if len(codecs) > 1 else None
        elif match.group("kind") == "audio":
            audio_codec = codecs[0] if codecs else None

        return cls(
            mime=match.group("mime"),
            container=match.group("container"),
            codecs=codecs,
            video_codec=video_codec,
            audio_codec=audio_codec,
        )

    def joined_codecs(self) -> str:
        return ", ".join(self.codecs)


class RangeObject(BaseModel):
    start: int
    end: int


class ResolvedFormat(BaseModel):
    """A playable format record after URL repair and capability tagging."""

    model_config = ConfigDict(populate_by_name=True)

    itag: int = Field(..., description="Platform format identifier")
    mime_type: MimeType = Field(..., alias="mimeType")
    bitrate: int = Field(..., description="Peak bitrate in bits per second")
    url: str = Field(..., description="Playable URL with signature and n parameter repaired")

    width: int | None = None
    height: int | None = None
    fps: int | None = None
    quality: str | None = None
    quality_label: str | None = Field(None, alias="qualityLabel")
    projection_type: str | None = Field(None, alias="projectionType")
    average_bitrate: int | None = Field(None, alias="averageBitrate")
    audio_bitrate: int | None = Field(None, alias="audioBitrate")
    audio_quality: str | None = Field(None, alias="audioQuality")
    audio_sample_rate: int | None = Field(None, alias="audioSampleRate")
    audio_channels: int | None = Field(None, alias="audioChannels")
    loudness_db: float | None = Field(None, alias="loudnessDb")
    content_length: int | None = Field(None, alias="contentLength")
    approx_duration_ms: int | None = Field(None, alias="approxDurationMs")
    last_modified: int | None = Field(None, alias="lastModified")
    init_range: RangeObject | None = Field(None, alias="initRange")
    index_range: RangeObject | None = Field(None, alias="indexRange")

    has_video: bool = Field(False, alias="hasVideo")
    has_audio: bool = Field(False, alias="hasAudio")
    is_live: bool = Field(False, alias="isLive")
    is_hls: bool = Field(False, alias="isHLS")
    is_dash_mpd: bool = Field(False, alias="isDashMPD")

    @field_validator("mime_type", mode="before")
    @classmethod
    def _parse_mime_type(cls, value):
        if isinstance(value, str):
            return MimeType.parse(value)
        return value
