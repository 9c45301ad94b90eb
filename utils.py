"""
Utility Functions
Helper functions for frame conversion, overlay compositing, and capture
"""

import cv2
import numpy as np
from PIL import Image
import io

from config import MIN_IMAGE_SIZE, to_rgb, rgb_to_bgr


def resize_image(image, max_size=(1920, 1920)):
    h, w = image.shape[:2]
    max_w, max_h = max_size

    scale = min(max_w / w, max_h / h, 1.0)

    if scale < 1.0:
        new_w = int(w * scale)
        new_h = int(h * scale)
        return cv2.resize(image, (new_w, new_h), interpolation=cv2.INTER_AREA)

    return image


def pil_to_cv(pil_image):
    rgb_array = np.array(pil_image.convert('RGB'))
    bgr_array = cv2.cvtColor(rgb_array, cv2.COLOR_RGB2BGR)
    return bgr_array


def cv_to_pil(cv_image):
    rgb_array = cv2.cvtColor(cv_image, cv2.COLOR_BGR2RGB)
    pil_image = Image.fromarray(rgb_array)
    return pil_image


def composite_overlay(frame, overlay_pixels):
    """
    Composite a straight-alpha BGRA overlay over a BGR frame

    Args:
        frame: BGR frame
        overlay_pixels: BGRA overlay of the same size

    Returns:
        New BGR frame with the overlay applied
    """
    if overlay_pixels.shape[:2] != frame.shape[:2]:
        overlay_pixels = cv2.resize(
            overlay_pixels, (frame.shape[1], frame.shape[0]),
            interpolation=cv2.INTER_NEAREST
        )

    alpha = overlay_pixels[:, :, 3:4].astype(np.float32) / 255.0
    color = overlay_pixels[:, :, :3].astype(np.float32)

    blended = frame.astype(np.float32) * (1 - alpha) + color * alpha

    return np.clip(np.rint(blended), 0, 255).astype(np.uint8)


def capture_photo(frame, overlay_pixels, fmt='PNG'):
    """Flatten frame + overlay and encode it, returning the image bytes."""
    combined = composite_overlay(frame, overlay_pixels)

    buffer = io.BytesIO()
    cv_to_pil(combined).save(buffer, format=fmt)
    return buffer.getvalue()


def draw_status(frame, face_detected, skin_tone=None, tone_locked=False):
    result = frame.copy()
    font = cv2.FONT_HERSHEY_SIMPLEX

    status = "Face detected!" if face_detected else "No face detected"
    color = (96, 174, 39) if face_detected else (96, 38, 215)

    cv2.rectangle(result, (8, 8), (220, 36), (0, 0, 0), -1)
    cv2.rectangle(result, (8, 8), (220, 36), color, 2)
    cv2.putText(result, status, (16, 28), font, 0.55, (255, 255, 255), 1)

    if skin_tone:
        label = f"Skin Tone: {skin_tone}"
        if tone_locked:
            label += " (locked)"
        cv2.putText(result, label, (16, 60), font, 0.55, (96, 38, 215), 2)

    return result


def create_color_swatch(color, size=(50, 50)):
    swatch = np.ones((size[1], size[0], 3), dtype=np.uint8)
    swatch[:, :] = rgb_to_bgr(to_rgb(color))
    return swatch


def create_palette_strip(colors, size=(40, 40)):
    if not colors:
        return np.zeros((size[1], size[0], 3), dtype=np.uint8)
    return np.hstack([create_color_swatch(c, size) for c in colors])


def draw_palette(frame, colors, selected=None, size=(28, 28)):
    """
    Paint a row of shade swatches in the bottom-left corner

    The selected shade gets a white outline. Strips wider than the frame
    are cut off at the right edge.
    """
    result = frame.copy()
    if not colors:
        return result

    strip = create_palette_strip(colors, size)
    h, w = result.shape[:2]
    x0, y0 = 8, h - size[1] - 8
    if y0 < 0:
        return result

    visible = strip[:, :max(0, w - x0)]
    result[y0:y0 + size[1], x0:x0 + visible.shape[1]] = visible

    if selected in colors:
        left = x0 + colors.index(selected) * size[0]
        cv2.rectangle(result, (left, y0), (left + size[0] - 1, y0 + size[1] - 1),
                      (255, 255, 255), 2)

    return result


def validate_image(image):
    if image is None:
        return False, "No image provided"

    if len(image.shape) != 3:
        return False, "Image must be color (3 channels)"

    h, w = image.shape[:2]

    min_w, min_h = MIN_IMAGE_SIZE
    if w < min_w or h < min_h:
        return False, f"Image too small (minimum {min_w}x{min_h} pixels)"

    if w > 4000 or h > 4000:
        return False, "Image too large (maximum 4000x4000 pixels)"

    return True, "Valid image"


def get_image_info(image):
    if image is None:
        return {}

    h, w = image.shape[:2]
    channels = image.shape[2] if len(image.shape) == 3 else 1

    return {
        'width': w,
        'height': h,
        'channels': channels,
        'dtype': str(image.dtype),
        'size_mb': image.nbytes / (1024 * 1024)
    }


if __name__ == "__main__":
    print("=" * 70)
    print("UTILS MODULE - STANDALONE TEST")
    print("=" * 70)

    test_image = np.random.randint(0, 255, (480, 640, 3), dtype=np.uint8)

    print("\n📐 Testing image operations...")

    resized = resize_image(test_image, (320, 240))
    print(f"✅ Resize: {test_image.shape} → {resized.shape}")

    is_valid, msg = validate_image(test_image)
    print(f"✅ Validation: {is_valid} - {msg}")

    info = get_image_info(test_image)
    print(f"✅ Image info: {info['width']}x{info['height']}, {info['size_mb']:.2f} MB")

    print("\n🖼️  Testing overlay composition...")

    overlay = np.zeros((480, 640, 4), dtype=np.uint8)
    overlay[100:200, 100:200] = (60, 20, 220, 128)

    combined = composite_overlay(test_image, overlay)
    print(f"✅ Composited: {combined.shape}")

    png_bytes = capture_photo(test_image, overlay)
    print(f"✅ Captured PNG: {len(png_bytes)} bytes")

    status = draw_status(test_image, True, "Medium/Warm")
    print(f"✅ Status drawn: {status.shape}")

    print("\n" + "=" * 70)
    print("TEST COMPLETE")
    print("=" * 70)
