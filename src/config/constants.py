"""Default tables and endpoints for the digest pipeline."""

from typing import Final


# Log component names
COMPONENT_CONFIG = "config"
COMPONENT_CLI = "cli"

# Supported URL schemes
VALID_URL_SCHEMES = ("http://", "https://")

# Request identity
RSS_USER_AGENT: Final[str] = "AI-Digest-Bot/1.0 (+https://vidyagam.com)"
API_USER_AGENT: Final[str] = "AI-Digest-Bot/1.0"
BROWSER_USER_AGENT: Final[str] = "Mozilla/5.0 (compatible; AI-Digest/1.0)"
RSS_ACCEPT: Final[str] = "application/rss+xml, application/xml, text/xml"

# Per-call timeouts (seconds)
RSS_TIMEOUT_SECONDS: Final[float] = 15.0
API_TIMEOUT_SECONDS: Final[float] = 10.0
PROXY_TIMEOUT_SECONDS: Final[float] = 20.0
DIRECT_TIMEOUT_SECONDS: Final[float] = 15.0
SUMMARY_TIMEOUT_SECONDS: Final[float] = 30.0

ALLORIGINS_URL_TEMPLATE: Final[str] = "https://api.allorigins.win/get?url={url}"
HACKERNEWS_ITEM_URL_TEMPLATE: Final[str] = (
    "https://hacker-news.firebaseio.com/v0/item/{id}.json"
)

# Hostname (without www.) -> display name
SOURCE_DISPLAY_NAMES: Final[dict[str, str]] = {
    "openai.com": "OpenAI",
    "ai.googleblog.com": "Google AI",
    "blog.anthropic.com": "Anthropic",
    "deepmind.com": "DeepMind",
    "blogs.microsoft.com": "Microsoft",
    "arxiv.org": "arXiv",
}

# Case-insensitive substrings marking a title as AI/ML related
AI_VOCABULARY: Final[tuple[str, ...]] = (
    "ai",
    "artificial intelligence",
    "machine learning",
    "deep learning",
    "neural network",
    "chatgpt",
    "openai",
    "claude",
    "gemini",
    "llm",
    "gpt",
    "transformer",
    "nlp",
    "computer vision",
    "robotics",
    "anthropic",
    "midjourney",
    "stable diffusion",
)

KEYWORD_WEIGHTS: Final[dict[str, float]] = {
    # Announcements
    "breakthrough": 10,
    "revolutionary": 10,
    "first": 9,
    "launch": 9,
    "release": 9,
    "unveil": 8,
    "announce": 8,
    # Products and labs
    "gpt-5": 10,
    "gpt-4": 8,
    "claude": 8,
    "gemini": 8,
    "chatgpt": 7,
    "openai": 7,
    "anthropic": 7,
    "google ai": 7,
    "microsoft": 6,
    "meta ai": 6,
    # Technical
    "artificial general intelligence": 10,
    "agi": 10,
    "neural network": 6,
    "transformer": 6,
    "machine learning": 5,
    "deep learning": 5,
    "llm": 6,
    "multimodal": 7,
    # Business
    "billion": 8,
    "investment": 6,
    "funding": 6,
    "partnership": 5,
    "acquisition": 7,
    "ipo": 8,
    # Research
    "paper": 4,
    "research": 4,
    "study": 4,
    "benchmark": 5,
    "dataset": 4,
    # Applications
    "autonomous": 6,
    "robotics": 6,
    "healthcare": 5,
    "finance": 5,
    "education": 4,
    "climate": 5,
    # Regulatory
    "regulation": 6,
    "safety": 6,
    "ethics": 5,
    "alignment": 7,
    "copyright": 5,
    "lawsuit": 6,
}

SOURCE_TRUST: Final[dict[str, float]] = {
    "openai.com": 10,
    "blog.anthropic.com": 10,
    "ai.googleblog.com": 10,
    "deepmind.com": 10,
    "research.microsoft.com": 9,
    "ai.facebook.com": 9,
    "blogs.nvidia.com": 8,
    "techcrunch.com": 7,
    "reuters.com": 8,
    "bloomberg.com": 8,
    "theverge.com": 6,
    "wired.com": 7,
    "mit.edu": 9,
    "stanford.edu": 9,
    "arxiv.org": 8,
    "nature.com": 9,
    "science.org": 9,
}

# Hostname fragments of flagship AI labs
FLAGSHIP_MARKERS: Final[tuple[str, ...]] = ("openai", "anthropic", "google", "microsoft")

ENGAGEMENT_HOOKS: Final[tuple[str, ...]] = (
    "first",
    "new",
    "breakthrough",
    "revolutionary",
)

NOVELTY_PHRASES: Final[tuple[str, ...]] = (
    "first time",
    "never before",
    "unprecedented",
    "novel",
    "innovative",
    "unique",
    "original",
    "pioneering",
)

ROUTINE_TERMS: Final[tuple[str, ...]] = (
    "update",
    "improve",
    "enhance",
    "minor",
    "patch",
)

# Durations assigned to audio/video items that carry none
VIDEO_DURATIONS: Final[tuple[str, ...]] = (
    "3 min",
    "8 min",
    "12 min",
    "18 min",
    "25 min",
)
AUDIO_DURATIONS: Final[tuple[str, ...]] = (
    "15 min",
    "25 min",
    "35 min",
    "45 min",
    "60 min",
)
