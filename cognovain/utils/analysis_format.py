"""
Post-processing for the analysis text returned by Gemini.
Keeps the bullet/emoji layout consistent and pulls out the biases it names.
"""
import re
from typing import Iterable, List
from urllib.parse import urlparse

from cognovain.config import settings


HEADING_PATTERN = re.compile(r"^(Analysis|Reframed Statement):$", re.IGNORECASE)
BULLET_PATTERN = re.compile(r"^[•\-*]\s+.+")

# keyword groups -> emoji, first match wins
EMOJI_RULES = (
    (("bias", "distortion", "error", "fallacy"), "🧠"),
    (("reframed", "alternative", "instead"), "✅"),
    (("emotion", "feel"), "😊"),
)
DEFAULT_EMOJI = "💡"

BIAS_PATTERNS = [
    re.compile(pattern, re.IGNORECASE) for pattern in (
        r"cognitive bias",
        r"logical fallacy",
        r"thinking error",
        r"cognitive distortion",
        r"black and white thinking",
        r"catastrophizing",
        r"overgeneralization",
        r"personalization",
        r"emotional reasoning",
        r"mental filter",
        r"jumping to conclusions",
        r"should statements",
        r"labeling",
        r"magnification",
        r"minimization",
        r"fortune telling",
        r"mind reading",
        r"disqualifying the positive",
        r"all-or-nothing thinking",
        r"filtering",
        r"polarized thinking",
    )
]


def _pick_emoji(line: str) -> str:
    lowered = line.lower()
    for keywords, emoji in EMOJI_RULES:
        if any(keyword in lowered for keyword in keywords):
            return emoji
    return DEFAULT_EMOJI


def format_analysis_result(raw_text: str) -> str:
    """Makes every content line a `• <emoji> ...` bullet, leaving headings alone."""
    lines = raw_text.strip().split("\n")
    formatted = []
    for line in lines:
        stripped = line.strip()
        if not stripped or HEADING_PATTERN.match(stripped) or BULLET_PATTERN.match(stripped):
            formatted.append(line)
            continue
        formatted.append(f"• {_pick_emoji(stripped)} {stripped}")
    return "\n".join(formatted)


def extract_cognitive_biases(analysis_text: str) -> List[str]:
    """Lowercased names of the known biases mentioned in the text, in pattern order."""
    biases = []
    for pattern in BIAS_PATTERNS:
        for match in pattern.findall(analysis_text):
            name = match.lower()
            if name not in biases:
                biases.append(name)
    return biases


def _app_host() -> str:
    parsed = urlparse(settings.APP_URL)
    return parsed.netloc or parsed.path or settings.APP_URL


def generate_shareable_summary(biases: Iterable[str]) -> str:
    biases = list(biases)
    host = _app_host()
    if not biases:
        return f"I used Cognovain to analyze my thinking patterns! Check it out at {host}"

    if len(biases) == 1:
        bias_text = f"identified the {biases[0]} in my thinking"
    else:
        bias_text = f"identified cognitive patterns like {' and '.join(biases[:2])} in my thinking"

    return f"I used Cognovain and {bias_text}! Improve your thinking at {host}"
