"""Citation sources backed by third-party AI and search APIs."""

import httpx
from pydantic import BaseModel, ConfigDict, Field

from analyzers.base import Platform
from citations.base import CitationCheckResult, CitationSource


# =============================================================================
# Response schemas
# =============================================================================


class ChatMessage(BaseModel):
    content: str | None = None


class ChatChoice(BaseModel):
    message: ChatMessage


class ChatCompletionResponse(BaseModel):
    """OpenAI-compatible chat completion; Perplexity adds `citations`."""

    choices: list[ChatChoice] = []
    citations: list[str] = []

    @property
    def text(self) -> str:
        if not self.choices:
            return ""
        return self.choices[0].message.content or ""


class GeminiPart(BaseModel):
    text: str | None = None


class GeminiContent(BaseModel):
    parts: list[GeminiPart] = []


class GroundingWeb(BaseModel):
    uri: str | None = None
    title: str | None = None


class GroundingChunk(BaseModel):
    web: GroundingWeb | None = None


class GroundingMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    grounding_chunks: list[GroundingChunk] = Field(default=[], alias="groundingChunks")


class GeminiCandidate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    content: GeminiContent | None = None
    grounding_metadata: GroundingMetadata | None = Field(default=None, alias="groundingMetadata")


class GeminiResponse(BaseModel):
    candidates: list[GeminiCandidate] = []

    @property
    def text(self) -> str:
        if not self.candidates or self.candidates[0].content is None:
            return ""
        parts = self.candidates[0].content.parts
        return (parts[0].text or "") if parts else ""

    @property
    def grounding_sources(self) -> list[str]:
        """Grounding URIs and titles; titles usually carry the source domain."""
        if not self.candidates or self.candidates[0].grounding_metadata is None:
            return []
        sources = []
        for chunk in self.candidates[0].grounding_metadata.grounding_chunks:
            if chunk.web is None:
                continue
            if chunk.web.uri:
                sources.append(chunk.web.uri)
            if chunk.web.title:
                sources.append(chunk.web.title)
        return sources


class SearchItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    link: str
    display_link: str | None = Field(default=None, alias="displayLink")


class CustomSearchResponse(BaseModel):
    items: list[SearchItem] = []


# =============================================================================
# Sources
# =============================================================================


class PerplexitySource(CitationSource):
    """Perplexity chat completions; answers carry a structured citation list."""

    platform = Platform.PERPLEXITY
    query_template = "What is {keyword}? Provide detailed information with sources."
    base_url = "https://api.perplexity.ai"

    def __init__(
        self,
        api_key: str,
        model: str = "sonar",
        client: httpx.Client | None = None,
        timeout: float | None = None,
    ):
        super().__init__(client, timeout)
        self.api_key = api_key
        self.model = model

    def is_configured(self) -> bool:
        return bool(self.api_key)

    def query(self, domain: str, query_text: str) -> CitationCheckResult:
        data = self._request(
            "POST",
            f"{self.base_url}/chat/completions",
            ChatCompletionResponse,
            headers={"Authorization": f"Bearer {self.api_key}"},
            json={
                "model": self.model,
                "messages": [
                    {
                        "role": "system",
                        "content": "You are a helpful search assistant. Always cite your sources with URLs.",
                    },
                    {"role": "user", "content": query_text},
                ],
            },
        )
        return self._result(domain, data.citations, data.text)


class GeminiGroundingSource(CitationSource):
    """Gemini generateContent with Google Search grounding."""

    platform = Platform.GOOGLE_AIO
    query_template = "What is {keyword}? Provide detailed information."
    base_url = "https://generativelanguage.googleapis.com/v1beta"

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.0-flash",
        client: httpx.Client | None = None,
        timeout: float | None = None,
    ):
        super().__init__(client, timeout)
        self.api_key = api_key
        self.model = model

    def is_configured(self) -> bool:
        return bool(self.api_key)

    def query(self, domain: str, query_text: str) -> CitationCheckResult:
        data = self._request(
            "POST",
            f"{self.base_url}/models/{self.model}:generateContent",
            GeminiResponse,
            params={"key": self.api_key},
            json={
                "contents": [{"parts": [{"text": query_text}]}],
                "tools": [{"google_search": {}}],
            },
        )
        return self._result(domain, data.grounding_sources, data.text)


class OpenAIChatSource(CitationSource):
    """
    OpenAI chat completions standing in for ChatGPT search.

    The API returns no structured citations, so only free-text mentions
    count and confidence never exceeds medium.
    """

    platform = Platform.CHATGPT
    query_template = "What are the best tools or resources for {keyword}?"
    fallback_template = "What do you know about {domain}?"
    base_url = "https://api.openai.com/v1"

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        client: httpx.Client | None = None,
        timeout: float | None = None,
    ):
        super().__init__(client, timeout)
        self.api_key = api_key
        self.model = model

    def is_configured(self) -> bool:
        return bool(self.api_key)

    def query(self, domain: str, query_text: str) -> CitationCheckResult:
        data = self._request(
            "POST",
            f"{self.base_url}/chat/completions",
            ChatCompletionResponse,
            headers={"Authorization": f"Bearer {self.api_key}"},
            json={
                "model": self.model,
                "messages": [
                    {
                        "role": "system",
                        "content": (
                            "You are a helpful assistant. When answering, recommend specific "
                            "websites or sources you know are authoritative on the topic."
                        ),
                    },
                    {
                        "role": "user",
                        "content": f"{query_text} Please mention any specific websites or companies you'd recommend.",
                    },
                ],
                "max_tokens": 500,
            },
        )
        return self._result(domain, [], data.text)


class GoogleCustomSearchSource(CitationSource):
    """Organic Google results, used for the AI Overviews slot when Gemini is not configured."""

    platform = Platform.GOOGLE_AIO
    query_template = "{keyword}"
    fallback_template = "{domain}"
    base_url = "https://www.googleapis.com/customsearch/v1"

    def __init__(
        self,
        api_key: str,
        cx: str,
        client: httpx.Client | None = None,
        timeout: float | None = None,
    ):
        super().__init__(client, timeout)
        self.api_key = api_key
        self.cx = cx

    def is_configured(self) -> bool:
        return bool(self.api_key and self.cx)

    def query(self, domain: str, query_text: str) -> CitationCheckResult:
        data = self._request(
            "GET",
            self.base_url,
            CustomSearchResponse,
            params={"key": self.api_key, "cx": self.cx, "q": query_text},
        )
        return self._result(domain, [item.link for item in data.items])
