"""
Configuration file for the AR Makeup Try-On
Contains skin tone palettes, landmark constants, and effect settings
"""

from PIL import ImageColor


APP_TITLE = "💄 AR Makeup Try-On"
APP_ICON = "💄"
VERSION = "1.0.0"


MAX_IMAGE_SIZE = (1920, 1920)
MIN_IMAGE_SIZE = (200, 200)


LANDMARK_COUNT = 68

# Skin sampling offsets, in landmark coordinate units
FOREHEAD_LIFT = 30
CHEEK_OFFSET = (20, 30)

BLUSH_RADIUS = 22


MIN_INTENSITY = 0
MAX_INTENSITY = 100

DEFAULT_INTENSITIES = {
    "lipstick": 70,
    "eyeshadow": 40,
    "blush": 30,
}


EFFECTS = ["lipstick", "eyeshadow", "blush"]

# Paint order; later effects are composited over earlier ones
EFFECT_ORDER = ("lipstick", "eyeshadow", "blush")

EFFECT_LABELS = {
    "lipstick": "💋 Lipstick",
    "eyeshadow": "👁️ Eyeshadow",
    "blush": "🌸 Blush",
}


SKIN_TONE_CATEGORIES = (
    "Light/Cool",
    "Light/Warm",
    "Medium/Cool",
    "Medium/Warm",
    "Dark/Cool",
    "Dark/Warm",
)

SKIN_TONE_PALETTES = {
    "Light/Cool": {
        "lipstick": ("#e57373", "#f06292", "#ba68c8", "#7986cb"),
        "eyeshadow": ("#b3c6f7", "#e1bee7", "#c5cae9", "#b2dfdb"),
        "blush": ("#f8bbd0", "#f48fb1", "#ce93d8"),
    },
    "Light/Warm": {
        "lipstick": ("#ff8a65", "#ffd54f", "#ffb74d", "#d4e157"),
        "eyeshadow": ("#ffe082", "#fff9c4", "#ffe0b2", "#fff59d"),
        "blush": ("#ffe0b2", "#ffd180", "#ffccbc"),
    },
    "Medium/Cool": {
        "lipstick": ("#ad1457", "#6a1b9a", "#283593", "#00838f"),
        "eyeshadow": ("#b39ddb", "#90caf9", "#80cbc4", "#b0bec5"),
        "blush": ("#f06292", "#ba68c8", "#b2ebf2"),
    },
    "Medium/Warm": {
        "lipstick": ("#d84315", "#ffb300", "#fbc02d", "#afb42b"),
        "eyeshadow": ("#ffe082", "#ffcc80", "#dcedc8", "#fff176"),
        "blush": ("#ffab91", "#ffd54f", "#dce775"),
    },
    "Dark/Cool": {
        "lipstick": ("#4a148c", "#1a237e", "#006064", "#263238"),
        "eyeshadow": ("#9575cd", "#7986cb", "#4dd0e1", "#90a4ae"),
        "blush": ("#ce93d8", "#80cbc4", "#b0bec5"),
    },
    "Dark/Warm": {
        "lipstick": ("#bf360c", "#ff6f00", "#fbc02d", "#827717"),
        "eyeshadow": ("#ffb300", "#ff8a65", "#d4e157", "#ffd54f"),
        "blush": ("#ff8a65", "#ffd180", "#dce775"),
    },
}


def empty_palette():
    return {effect: [] for effect in EFFECTS}


def get_palette_for_tone(category):
    palette = SKIN_TONE_PALETTES.get(category)
    if palette is None:
        return empty_palette()
    return {effect: list(colors) for effect, colors in palette.items()}


def to_rgb(color):
    """
    Normalize a color to an (R, G, B) tuple

    Args:
        color: Hex string ("#e57373", "#fff") or (R, G, B) sequence

    Returns:
        (R, G, B) tuple of ints 0-255
    """
    if isinstance(color, str):
        return ImageColor.getrgb(color)[:3]

    if len(color) != 3:
        raise ValueError(f"Expected an (R, G, B) triple, got {color!r}")

    rgb = tuple(int(c) for c in color)
    if any(c < 0 or c > 255 for c in rgb):
        raise ValueError(f"RGB channels must be within 0-255, got {color!r}")
    return rgb


def rgb_to_hex(rgb_tuple):
    r, g, b = to_rgb(rgb_tuple)
    return f"#{r:02x}{g:02x}{b:02x}"


def rgb_to_bgr(rgb_tuple):
    return (rgb_tuple[2], rgb_tuple[1], rgb_tuple[0])


def clamp_intensity(value):
    return max(MIN_INTENSITY, min(MAX_INTENSITY, int(value)))


def validate_effect(effect_name):
    return effect_name in EFFECTS


def validate_tone(category):
    return category in SKIN_TONE_PALETTES


def get_total_shades():
    return sum(
        len(colors)
        for palette in SKIN_TONE_PALETTES.values()
        for colors in palette.values()
    )


if __name__ == "__main__":
    print("=" * 70)
    print("CONFIG MODULE - STANDALONE TEST")
    print("=" * 70)

    print(f"\n📦 Application: {APP_TITLE}")
    print(f"   Version: {VERSION}")

    print(f"\n🎨 Skin Tone Categories: {len(SKIN_TONE_CATEGORIES)}")
    for category in SKIN_TONE_CATEGORIES:
        palette = SKIN_TONE_PALETTES[category]
        counts = ", ".join(f"{effect}={len(palette[effect])}" for effect in EFFECTS)
        print(f"   • {category}: {counts}")

    print(f"\n📊 Total Shades: {get_total_shades()}")

    print(f"\n⚙️  Settings:")
    print(f"   Landmarks: {LANDMARK_COUNT}")
    print(f"   Blush radius: {BLUSH_RADIUS}")
    print(f"   Paint order: {' → '.join(EFFECT_ORDER)}")
    for effect in EFFECTS:
        print(f"   Default {effect} intensity: {DEFAULT_INTENSITIES[effect]}%")

    print("\n🧪 Testing helper functions...")

    print(f"   Effect 'blush' valid: {validate_effect('blush')}")
    print(f"   Tone 'Medium/Warm' valid: {validate_tone('Medium/Warm')}")

    rgb = to_rgb("#e57373")
    print(f"   #e57373 → RGB{rgb} → BGR{rgb_to_bgr(rgb)} → {rgb_to_hex(rgb)}")

    print("\n" + "=" * 70)
    print("TEST COMPLETE")
    print("=" * 70)
