"""Selectable language and aspect-ratio presets. Both remain open sets."""

LANGUAGES = [
    {"value": "English", "label": "English (International)"},
    {"value": "Bahasa Indonesia", "label": "Bahasa Indonesia"},
    {"value": "Japanese", "label": "Japanese (日本語)"},
    {"value": "Spanish", "label": "Spanish (Español)"},
]

ASPECT_RATIOS = [
    {"value": "16:9", "label": "16:9 (Cinematic/YouTube)"},
    {"value": "9:16", "label": "9:16 (TikTok/Reels/Shorts)"},
    {"value": "1:1", "label": "1:1 (Square/Instagram)"},
    {"value": "4:3", "label": "4:3 (Classic TV)"},
    {"value": "21:9", "label": "21:9 (Ultra Widescreen)"},
]

DEFAULT_LANGUAGE = LANGUAGES[0]["value"]
DEFAULT_ASPECT_RATIO = ASPECT_RATIOS[0]["value"]


def preset_label(presets, value: str) -> str:
    for preset in presets:
        if preset["value"] == value:
            return preset["label"]
    return value
