"""Google Gemini analyzer."""

import dataclasses
import logging
from dataclasses import dataclass

from bs4 import BeautifulSoup

from analyzers.base import (
    BaseAnalyzer,
    Platform,
    PlatformScore,
    Priority,
    Recommendation,
    ScoreFactor,
)
from analyzers.content import ContentInput, Rating, StructuralFeatures
from analyzers.extractor import has_direct_answer, rate_heading_count
from analyzers import factors as f

logger = logging.getLogger(__name__)

VIDEO_HOSTS = ("youtube.com", "vimeo.com", "wistia.com")
YOUTUBE_EMBED_MARKERS = ("youtube.com/embed", "youtu.be")
MAPS_MARKERS = ("google.com/maps", "maps.google")
DOCS_MARKERS = ("docs.google.com", "drive.google.com")

DESCRIPTIVE_ALT_CHARS = 10


@dataclass(frozen=True)
class MediaSignals:
    image_count: int = 0
    has_alt_text: bool = False
    has_descriptive_alts: bool = False
    has_video: bool = False
    has_youtube: bool = False

    @property
    def has_images(self) -> bool:
        return self.image_count > 0


def detect_media(html: str) -> MediaSignals:
    """Images, alt text and embedded video in the page HTML."""
    if not html:
        return MediaSignals()

    soup = BeautifulSoup(html, "lxml")
    lower = html.lower()

    alts = [img.get("alt", "").strip() for img in soup.find_all("img")]
    written = [alt for alt in alts if alt]

    return MediaSignals(
        image_count=len(alts),
        has_alt_text=bool(written),
        has_descriptive_alts=any(len(alt) >= DESCRIPTIVE_ALT_CHARS for alt in written),
        has_video=soup.find("video") is not None or any(h in lower for h in VIDEO_HOSTS),
        has_youtube=any(m in lower for m in YOUTUBE_EMBED_MARKERS),
    )


class GeminiAnalyzer(BaseAnalyzer):
    """
    Scores content for Google Gemini.

    Close to the AI Overviews model, plus multimodal signals (images,
    alt text, video) and links into the Google ecosystem.
    """

    WEIGHTS = {
        "entity_density": 0.15,
        "answer_structure": 0.20,
        "schema": 0.15,
        "multimodal": 0.20,
        "freshness": 0.15,
        "google_ecosystem": 0.15,
    }

    @property
    def platform(self) -> Platform:
        return Platform.GEMINI

    def analyze(self, content: ContentInput, features: StructuralFeatures) -> PlatformScore:
        html = content.raw_html or ""
        structure = dataclasses.replace(
            features.content_structure,
            has_direct_answer=has_direct_answer(content.raw_text, 80),
            heading_hierarchy=rate_heading_count(content.headings, good=4, fair=2),
            paragraph_structure=Rating.FAIR,
        )
        media = detect_media(html)

        factors = [
            f.entity_density_factor(
                len(features.entities), features.word_count, self.WEIGHTS["entity_density"]
            ),
            f.answer_structure_factor(structure, self.WEIGHTS["answer_structure"]),
            f.schema_factor(features.schema_presence, self.WEIGHTS["schema"]),
            self._multimodal_factor(media),
            f.freshness_factor(
                content.published_at, content.last_modified, self.WEIGHTS["freshness"]
            ),
            self._ecosystem_factor(html.lower()),
        ]

        extras = []
        if not media.has_images:
            extras.append(
                Recommendation(
                    priority=Priority.MEDIUM,
                    title="Add quality images",
                    description=(
                        "Gemini is multimodal and considers images. Add relevant "
                        "images with descriptive alt text."
                    ),
                    impact_estimate="+10-15 points",
                )
            )
        if not media.has_video:
            extras.append(
                Recommendation(
                    priority=Priority.LOW,
                    title="Consider adding video content",
                    description=(
                        "Gemini values multimodal content. Embedding YouTube videos "
                        "can improve visibility."
                    ),
                    impact_estimate="+5-10 points",
                )
            )

        result = f.platform_score(self.platform, factors, extras)
        logger.debug(f"Gemini score for {content.url}: {result.score}")
        return result

    def _multimodal_factor(self, media: MediaSignals) -> ScoreFactor:
        score = 0

        if media.has_images:
            score += 25
            score += min(15, media.image_count * 5)
        if media.has_alt_text:
            score += 10
            if media.has_descriptive_alts:
                score += 10
        if media.has_video:
            score += 20
        if media.has_youtube:
            score += 20

        return f.additive_factor(
            "Multimodal Content",
            score,
            self.WEIGHTS["multimodal"],
            "Images, videos, and multimedia that Gemini can understand",
        )

    def _ecosystem_factor(self, lowered_html: str) -> ScoreFactor:
        score = 50

        if "youtube.com" in lowered_html:
            score += 20
        if any(m in lowered_html for m in MAPS_MARKERS):
            score += 10
        if any(m in lowered_html for m in DOCS_MARKERS):
            score += 5
        # Google-recommended structured data vocabulary
        if "schema.org" in lowered_html:
            score += 15

        return f.additive_factor(
            "Google Ecosystem",
            score,
            self.WEIGHTS["google_ecosystem"],
            "Integration with Google products and structured data standards",
        )
