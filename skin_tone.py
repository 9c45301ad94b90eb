"""
Skin Tone Analysis Module
Samples forehead and cheek pixels to classify skin tone and pick palettes
"""

import colorsys
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from config import (
    LANDMARK_COUNT, FOREHEAD_LIFT, CHEEK_OFFSET,
    SKIN_TONE_PALETTES, get_palette_for_tone
)


@dataclass
class ToneResult:
    category: str
    palette: Dict[str, List[str]] = field(default_factory=dict)
    avg_rgb: Tuple[int, int, int] = (0, 0, 0)
    avg_hsv: Tuple[float, float, float] = (0.0, 0.0, 0.0)

    def as_report(self) -> Dict:
        return {'category': self.category, 'palette': self.palette}


def rgb_to_hsv(r: int, g: int, b: int) -> Tuple[float, float, float]:
    """
    Convert RGB (0-255) to HSV

    Returns:
        (hue in degrees [0, 360), saturation %, value %)
    """
    h, s, v = colorsys.rgb_to_hsv(r / 255.0, g / 255.0, b / 255.0)
    return (h * 360.0, s * 100.0, v * 100.0)


def _round_half_up(value: float) -> int:
    # round() rounds halves to even
    return int(np.floor(value + 0.5))


def classify_hsv(h: float, s: float, v: float) -> str:
    if v > 75:
        tone = "Light"
    elif v > 40:
        tone = "Medium"
    else:
        tone = "Dark"

    # Reds, oranges and yellows read as warm
    if 20 <= h <= 60 or h >= 330 or h <= 20:
        undertone = "Warm"
    else:
        undertone = "Cool"

    return f"{tone}/{undertone}"


class SkinToneAnalyzer:

    def __init__(self):
        self.palettes = SKIN_TONE_PALETTES

    def get_sample_points(self, landmarks: np.ndarray) -> List[Tuple[float, float]]:
        brow_left = landmarks[19]
        brow_right = landmarks[24]
        left_eye_corner = landmarks[36]
        right_eye_corner = landmarks[45]

        dx, dy = CHEEK_OFFSET

        forehead = (
            (brow_left[0] + brow_right[0]) / 2.0,
            (brow_left[1] + brow_right[1]) / 2.0 - FOREHEAD_LIFT,
        )
        left_cheek = (left_eye_corner[0] - dx, left_eye_corner[1] + dy)
        right_cheek = (right_eye_corner[0] + dx, right_eye_corner[1] + dy)

        return [forehead, left_cheek, right_cheek]

    def sample_rgb(self, frame: np.ndarray, point: Sequence[float]) -> Tuple[int, int, int]:
        h, w = frame.shape[:2]

        # Faces near the border put sample points outside the frame
        x = min(max(_round_half_up(point[0]), 0), w - 1)
        y = min(max(_round_half_up(point[1]), 0), h - 1)

        b, g, r = frame[y, x][:3]
        return (int(r), int(g), int(b))

    def average_rgb(self, samples: List[Tuple[int, int, int]]) -> Tuple[int, int, int]:
        mean = np.mean(np.array(samples, dtype=np.float64), axis=0)
        return tuple(_round_half_up(c) for c in mean)

    def classify(self, frame: np.ndarray, landmarks) -> Optional[ToneResult]:
        if frame is None or landmarks is None or len(landmarks) != LANDMARK_COUNT:
            return None

        if not isinstance(frame, np.ndarray) or frame.ndim != 3 or frame.size == 0:
            return None

        points = np.asarray(landmarks, dtype=np.float64)
        if points.ndim != 2 or points.shape[1] < 2:
            return None

        samples = [self.sample_rgb(frame, pt) for pt in self.get_sample_points(points)]
        avg_rgb = self.average_rgb(samples)
        avg_hsv = rgb_to_hsv(*avg_rgb)

        category = classify_hsv(*avg_hsv)

        return ToneResult(
            category=category,
            palette=get_palette_for_tone(category),
            avg_rgb=avg_rgb,
            avg_hsv=avg_hsv,
        )


if __name__ == "__main__":
    print("=" * 70)
    print("SKIN TONE MODULE - STANDALONE TEST")
    print("=" * 70)

    analyzer = SkinToneAnalyzer()

    test_colors = {
        "Fair": (235, 205, 185),
        "Olive": (150, 140, 90),
        "Deep": (80, 50, 35),
        "Cool pink": (180, 150, 200),
    }

    print("\n🎨 Classifying solid-color frames...")
    for name, rgb in test_colors.items():
        frame = np.zeros((240, 200, 3), dtype=np.uint8)
        frame[:, :] = (rgb[2], rgb[1], rgb[0])

        landmarks = np.tile([100.0, 120.0], (LANDMARK_COUNT, 1))
        result = analyzer.classify(frame, landmarks)

        h, s, v = result.avg_hsv
        print(f"   • {name}: RGB{result.avg_rgb} → HSV({h:.1f}, {s:.1f}, {v:.1f}) → {result.category}")

    print(f"\n🚫 No landmarks → {analyzer.classify(frame, None)}")

    print("\n" + "=" * 70)
    print("TEST COMPLETE")
    print("=" * 70)
