import json
import re
from datetime import datetime
from typing import Any

import httpx
import yt_dlp

from curator.core.logging import get_logger
from curator.errors import ExtractionError
from curator.extractors.html_helpers import absolute_thumbnail, format_seconds
from curator.http_client.robust_http_client import RobustHttpClient
from curator.models.content import ContentEnvelope, ContentMetadata
from curator.models.contracts import ContentCategory
from curator.utils.url_utils import extract_youtube_video_id

logger = get_logger(__name__)

SUBTITLE_FORMATS = ("vtt", "json3", "srv3")
SUBTITLE_LANGS = ("en", "en-US", "en-GB")


class _YtDlpLogger:
    def __init__(self, base_logger):
        self._logger = base_logger

    def debug(self, msg: str) -> None:
        self._logger.debug(msg)

    def warning(self, msg: str) -> None:
        self._logger.warning(msg)

    def error(self, msg: str) -> None:
        self._logger.warning(msg)


class VideoExtractor:
    """YouTube metadata and transcript through yt-dlp."""

    def __init__(self, http_client: RobustHttpClient):
        self.http_client = http_client
        self.ydl_opts: dict[str, Any] = {
            "quiet": True,
            "no_warnings": True,
            "extract_flat": False,
            "ignoreerrors": False,
            "logger": _YtDlpLogger(logger),
            "writesubtitles": True,
            "writeautomaticsub": True,
            "subtitleslangs": list(SUBTITLE_LANGS),
            "skip_download": True,
        }

    def extract(self, url: str) -> ContentEnvelope:
        video_id = extract_youtube_video_id(url)
        if not video_id:
            raise ExtractionError(url, "Not a recognizable YouTube video URL")
        canonical_url = f"https://www.youtube.com/watch?v={video_id}"

        logger.info(f"Extracting YouTube data from: {canonical_url}")
        with yt_dlp.YoutubeDL(self.ydl_opts) as ydl:
            try:
                info = ydl.extract_info(canonical_url, download=False)
            except yt_dlp.utils.DownloadError as e:
                raise ExtractionError(canonical_url, e) from e

        # yt-dlp returns None for unavailable/private/restricted videos
        if not info:
            raise ExtractionError(canonical_url, "Video unavailable")

        title = info.get("title") or f"YouTube video {video_id}"
        channel = info.get("channel") or info.get("uploader")
        description = info.get("description") or ""

        transcript = self._extract_transcript(info)
        if transcript:
            content = transcript
        elif description:
            content = description
        else:
            content = f"{title} by {channel}" if channel else title

        metadata = ContentMetadata(
            author=channel,
            channel_name=channel,
            duration=format_seconds(info.get("duration")) if info.get("duration") else None,
            thumbnail=absolute_thumbnail(info.get("thumbnail"), canonical_url),
            published_time=self._parse_upload_date(info.get("upload_date")),
            description=description[:1000] or None,
            view_count=info.get("view_count"),
            extra={"video_id": video_id, "like_count": info.get("like_count")},
        )

        logger.info(
            "Extracted YouTube video",
            extra={
                "component": "video_extractor",
                "operation": "extract",
                "context_data": {
                    "video_id": video_id,
                    "transcribed": bool(transcript),
                    "content_length": len(content),
                },
            },
        )
        return ContentEnvelope(
            category=ContentCategory.VIDEO,
            url=canonical_url,
            title=title,
            content=content,
            metadata=metadata,
            transcribed=bool(transcript),
        )

    @staticmethod
    def _parse_upload_date(upload_date: str | None) -> str | None:
        if not upload_date:
            return None
        try:
            return datetime.strptime(upload_date, "%Y%m%d").date().isoformat()
        except ValueError:
            return None

    @staticmethod
    def _select_tracks(video_info: dict[str, Any]) -> list[dict[str, Any]]:
        """English tracks, manual subtitles before automatic captions."""
        subtitles = video_info.get("subtitles") or {}
        automatic = video_info.get("automatic_captions") or {}
        for source in (subtitles, automatic):
            for lang in SUBTITLE_LANGS:
                tracks = [t for t in source.get(lang) or [] if t.get("ext") in SUBTITLE_FORMATS]
                if tracks:
                    return tracks
        return []

    def _extract_transcript(self, video_info: dict[str, Any]) -> str | None:
        """Transcript text, or None when no usable track could be fetched."""
        tracks = self._select_tracks(video_info)
        if not tracks:
            logger.warning(f"No English subtitles found for video {video_info.get('id')}")
            return None

        for track in tracks:
            subtitle_url = track.get("url")
            if not subtitle_url:
                continue
            try:
                response = self.http_client.get(subtitle_url)
            except httpx.HTTPError as e:
                logger.warning(f"Subtitle download failed for {video_info.get('id')}: {e}")
                continue
            text = self.parse_subtitle(response.text, track.get("ext"))
            if text:
                return text
        return None

    @classmethod
    def parse_subtitle(cls, data: str, ext: str | None) -> str:
        if ext == "vtt" or data.lstrip().startswith("WEBVTT"):
            return cls._parse_vtt(data)
        return cls._parse_json_subtitle(data)

    @staticmethod
    def _parse_vtt(vtt_content: str) -> str:
        """Parse VTT subtitle format to plain text."""
        transcript_lines: list[str] = []
        in_cue = False
        for raw_line in vtt_content.splitlines():
            line = raw_line.strip()
            if "-->" in line:
                in_cue = True
                continue
            if not line:
                in_cue = False
                continue
            if not in_cue:
                continue
            line = re.sub(r"<[^>]+>", "", line).strip()
            # Auto captions repeat the previous line at the start of each cue
            if line and (not transcript_lines or transcript_lines[-1] != line):
                transcript_lines.append(line)
        return " ".join(transcript_lines)

    @staticmethod
    def _parse_json_subtitle(json_content: str) -> str:
        """Parse json3/srv3 subtitle events to plain text."""
        try:
            data = json.loads(json_content)
        except json.JSONDecodeError:
            logger.warning("Failed to parse JSON subtitle")
            return ""

        if isinstance(data, dict) and "events" in data:
            parts = []
            for event in data.get("events") or []:
                for seg in event.get("segs") or []:
                    text = (seg.get("utf8") or "").strip()
                    if text:
                        parts.append(text)
            return " ".join(parts)

        if isinstance(data, list):
            return " ".join(item.get("text", "") for item in data if isinstance(item, dict) and item.get("text"))

        return ""
