"""
Makeup Overlay Rendering Module
Paints lipstick, eyeshadow, and blush onto a transparent BGRA overlay
using 68-point face landmarks
"""

import numpy as np
from typing import List, Optional, Tuple

from config import LANDMARK_COUNT, BLUSH_RADIUS, to_rgb, rgb_to_bgr


OUTER_LIP = list(range(48, 60))
INNER_LIP = list(range(60, 68))
LEFT_EYE = list(range(36, 42))
RIGHT_EYE = list(range(42, 48))

LEFT_CHEEK_PAIR = (2, 31)
RIGHT_CHEEK_PAIR = (14, 35)


class OverlaySurface:
    """
    Transparent drawing target composited over the video frame

    Pixels are stored as straight (non-premultiplied) BGRA uint8.
    """

    def __init__(self, width: int, height: int):
        self.pixels = np.zeros((height, width, 4), dtype=np.uint8)

    @classmethod
    def for_frame(cls, frame: np.ndarray) -> "OverlaySurface":
        h, w = frame.shape[:2]
        return cls(w, h)

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def shape(self) -> Tuple[int, int]:
        return self.pixels.shape[:2]

    def clear(self):
        self.pixels[:] = 0

    def resize(self, width: int, height: int):
        if (height, width) != self.shape:
            self.pixels = np.zeros((height, width, 4), dtype=np.uint8)
        else:
            self.clear()

    def is_transparent(self) -> bool:
        return not np.any(self.pixels[:, :, 3])

    def coverage_mask(self) -> np.ndarray:
        return self.pixels[:, :, 3] > 0


def _as_pixels(surface) -> np.ndarray:
    if isinstance(surface, OverlaySurface):
        return surface.pixels
    return surface


def _as_landmarks(landmarks) -> Optional[np.ndarray]:
    if landmarks is None or len(landmarks) != LANDMARK_COUNT:
        return None

    points = np.asarray(landmarks, dtype=np.float64)
    if points.ndim != 2 or points.shape[1] < 2:
        return None

    return points[:, :2]


def _pixel_window(shape, x_min, x_max, y_min, y_max):
    """Clip a float bounding box to whole pixel rows/columns of the surface"""
    h, w = shape
    x0 = max(int(np.floor(x_min)), 0)
    x1 = min(int(np.ceil(x_max)), w)
    y0 = max(int(np.floor(y_min)), 0)
    y1 = min(int(np.ceil(y_max)), h)
    return x0, x1, y0, y1


def polygon_mask(shape, contours: List[np.ndarray]) -> np.ndarray:
    """
    Rasterize closed contours with the even-odd rule

    A pixel is covered when its center (x + 0.5, y + 0.5) lies inside an
    odd number of contours, so a contour nested in another cuts a hole.

    Args:
        shape: (height, width) of the target surface
        contours: List of (N, 2) float arrays of x, y vertices

    Returns:
        uint8 mask, 255 where covered
    """
    mask = np.zeros(shape, dtype=np.uint8)
    if not contours:
        return mask

    vertices = np.vstack(contours)
    x0, x1, y0, y1 = _pixel_window(
        shape,
        vertices[:, 0].min(), vertices[:, 0].max(),
        vertices[:, 1].min(), vertices[:, 1].max()
    )
    if x0 >= x1 or y0 >= y1:
        return mask

    y, x = np.ogrid[y0:y1, x0:x1]
    cy = y + 0.5
    cx = x + 0.5
    inside = np.zeros((y1 - y0, x1 - x0), dtype=bool)

    for contour in contours:
        for (ax, ay), (bx, by) in zip(contour, np.roll(contour, -1, axis=0)):
            if ay == by:
                continue
            # Count crossings of a ray cast from each pixel center towards +x
            spans = (ay > cy) != (by > cy)
            cross_x = ax + (cy - ay) * (bx - ax) / (by - ay)
            inside ^= spans & (cx < cross_x)

    mask[y0:y1, x0:x1][inside] = 255
    return mask


def circle_mask(shape, center: Tuple[float, float], radius: float) -> np.ndarray:
    mask = np.zeros(shape, dtype=np.uint8)
    cx, cy = center
    x0, x1, y0, y1 = _pixel_window(shape, cx - radius, cx + radius, cy - radius, cy + radius)
    if x0 >= x1 or y0 >= y1:
        return mask

    y, x = np.ogrid[y0:y1, x0:x1]
    dist_sq = (x + 0.5 - cx) ** 2 + (y + 0.5 - cy) ** 2
    mask[y0:y1, x0:x1][dist_sq <= radius ** 2] = 255
    return mask


def _midpoint(a: np.ndarray, b: np.ndarray) -> Tuple[float, float]:
    return ((a[0] + b[0]) / 2.0, (a[1] + b[1]) / 2.0)


def composite_mask(pixels: np.ndarray, mask: np.ndarray, color_bgr, opacity: float):
    """
    Source-over composite a flat color onto BGRA pixels

    Args:
        pixels: BGRA uint8 surface, modified in place
        mask: Coverage mask (non-zero = covered)
        color_bgr: (B, G, R) tuple 0-255
        opacity: Global alpha 0-1
    """
    src_alpha = min(float(opacity), 1.0)
    if src_alpha <= 0:
        return

    covered = mask > 0
    if not np.any(covered):
        return

    dst = pixels[covered].astype(np.float32)
    dst_alpha = dst[:, 3] / 255.0

    out_alpha = src_alpha + dst_alpha * (1.0 - src_alpha)

    src = np.array(color_bgr, dtype=np.float32)
    weight = (dst_alpha * (1.0 - src_alpha))[:, None]
    out_color = (src * src_alpha + dst[:, :3] * weight) / out_alpha[:, None]

    dst[:, :3] = np.rint(out_color)
    dst[:, 3] = np.rint(out_alpha * 255.0)

    pixels[covered] = np.clip(dst, 0, 255).astype(np.uint8)


class MakeupRenderer:

    def __init__(self, blush_radius: int = BLUSH_RADIUS):
        self.blush_radius = blush_radius

    def _fill(self, pixels, mask, color, opacity):
        composite_mask(pixels, mask, rgb_to_bgr(to_rgb(color)), opacity)

    def lip_mask(self, shape, landmarks: np.ndarray) -> np.ndarray:
        # Even-odd fill: the inner lip contour is a hole
        return polygon_mask(shape, [landmarks[OUTER_LIP], landmarks[INNER_LIP]])

    def cheek_centers(self, landmarks: np.ndarray):
        left = _midpoint(landmarks[LEFT_CHEEK_PAIR[0]], landmarks[LEFT_CHEEK_PAIR[1]])
        right = _midpoint(landmarks[RIGHT_CHEEK_PAIR[0]], landmarks[RIGHT_CHEEK_PAIR[1]])
        return left, right

    def draw_lips(self, surface, landmarks, color, opacity=0.7):
        points = _as_landmarks(landmarks)
        if points is None:
            return

        pixels = _as_pixels(surface)
        mask = self.lip_mask(pixels.shape[:2], points)
        self._fill(pixels, mask, color, opacity)

    def draw_eyeshadow(self, surface, landmarks, color, opacity=0.4):
        points = _as_landmarks(landmarks)
        if points is None:
            return

        pixels = _as_pixels(surface)

        # Each eye is its own fill, so overlapping eyes stack like two strokes
        for indices in (LEFT_EYE, RIGHT_EYE):
            mask = polygon_mask(pixels.shape[:2], [points[indices]])
            self._fill(pixels, mask, color, opacity)

    def draw_blush(self, surface, landmarks, color, opacity=0.3):
        points = _as_landmarks(landmarks)
        if points is None:
            return

        pixels = _as_pixels(surface)

        for center in self.cheek_centers(points):
            mask = circle_mask(pixels.shape[:2], center, self.blush_radius)
            self._fill(pixels, mask, color, opacity)

    def draw_effect(self, effect, surface, landmarks, color, opacity):
        draw = {
            'lipstick': self.draw_lips,
            'eyeshadow': self.draw_eyeshadow,
            'blush': self.draw_blush,
        }.get(effect)

        if draw is None:
            raise ValueError(f"Unknown effect: {effect}")

        draw(surface, landmarks, color, opacity)


if __name__ == "__main__":
    print("=" * 70)
    print("MAKEUP RENDERER MODULE - STANDALONE TEST")
    print("=" * 70)

    surface = OverlaySurface(200, 240)
    renderer = MakeupRenderer()

    landmarks = np.zeros((LANDMARK_COUNT, 2), dtype=np.float64)
    outer = [(80, 180), (90, 180), (100, 180), (110, 180), (120, 180), (120, 190),
             (120, 200), (110, 200), (100, 200), (90, 200), (80, 200), (80, 190)]
    inner = [(95, 188), (100, 188), (105, 188), (105, 190),
             (105, 193), (100, 193), (95, 193), (95, 190)]
    landmarks[48:60] = outer
    landmarks[60:68] = inner

    renderer.draw_lips(surface, landmarks, "#e57373", 0.5)
    print(f"\n💋 Lip pixels painted: {int(surface.coverage_mask().sum())}")
    print(f"   Hole pixel alpha: {surface.pixels[190, 100, 3]}")
    print(f"   Lip pixel BGRA: {tuple(surface.pixels[184, 85])}")

    surface.clear()
    print(f"\n🧽 Cleared surface transparent: {surface.is_transparent()}")

    print("\n" + "=" * 70)
    print("TEST COMPLETE")
    print("=" * 70)
