"""
System Test Script
Verifies all components are working correctly
"""

import sys
import traceback

import numpy as np


FRAME_SIZE = (200, 240)  # width, height
SKIN_RGB = (230, 190, 160)


def make_face_landmarks():
    """
    Synthetic 68-point face on a 200x240 frame

    Eyes and lips are axis-aligned rectangles so expected coverage is exact:
        left eye   x 55..85,   y 75..85
        right eye  x 115..145, y 75..85
        outer lip  x 80..120,  y 180..200
        inner lip  x 95..105,  y 188..193
        cheeks     circles r=22 at (60, 145) and (140, 145)
    """
    points = np.zeros((68, 2), dtype=np.float64)

    for i in range(17):
        points[i] = (20 + 10 * i, 200 - abs(i - 8) * 5)

    points[17:22] = [(50 + 10 * i, 60) for i in range(5)]
    points[22:27] = [(110 + 10 * i, 60) for i in range(5)]

    points[27:31] = [(100, 80 + 10 * i) for i in range(4)]
    points[31:36] = [(80 + 10 * i, 120) for i in range(5)]

    points[36:42] = [(55, 75), (70, 75), (85, 75), (85, 85), (70, 85), (55, 85)]
    points[42:48] = [(115, 75), (130, 75), (145, 75), (145, 85), (130, 85), (115, 85)]

    points[48:60] = [(80, 180), (90, 180), (100, 180), (110, 180), (120, 180), (120, 190),
                     (120, 200), (110, 200), (100, 200), (90, 200), (80, 200), (80, 190)]
    points[60:68] = [(95, 188), (100, 188), (105, 188), (105, 190),
                     (105, 193), (100, 193), (95, 193), (95, 190)]

    return points


def make_frame(rgb=SKIN_RGB, size=FRAME_SIZE):
    w, h = size
    frame = np.zeros((h, w, 3), dtype=np.uint8)
    frame[:, :] = (rgb[2], rgb[1], rgb[0])
    return frame


def run_tests(title, tests):
    """Run (name, func) pairs, print a summary, and return an exit code"""
    print("=" * 60)
    print(f"🧪 {title}")
    print("=" * 60)

    results = []

    for test_name, test_func in tests:
        try:
            test_func()
            results.append((test_name, True))
        except Exception as e:
            print(f"\n❌ Test '{test_name}' failed: {e}")
            traceback.print_exc()
            results.append((test_name, False))

    print("\n" + "=" * 60)
    print("📊 TEST SUMMARY")
    print("=" * 60)

    passed = sum(1 for _, result in results if result)
    total = len(results)

    for test_name, result in results:
        status = "✓ PASS" if result else "✗ FAIL"
        print(f"{status}: {test_name}")

    print("=" * 60)
    print(f"Total: {passed}/{total} tests passed")
    print("=" * 60)

    return 0 if passed == total else 1


def test_package_imports():
    """Test if all required packages can be imported"""
    print("Testing package imports...")

    import cv2
    print("  ✓ opencv-python imported successfully")

    import numpy
    print("  ✓ numpy imported successfully")

    from PIL import Image
    print("  ✓ Pillow imported successfully")


def test_custom_modules():
    """Test if custom modules can be imported"""
    print("\nTesting custom modules...")

    import config
    print("  ✓ config.py imported")

    from skin_tone import SkinToneAnalyzer
    print("  ✓ skin_tone.py imported")

    from makeup_renderer import MakeupRenderer, OverlaySurface
    print("  ✓ makeup_renderer.py imported")

    from pipeline import MakeupSession
    print("  ✓ pipeline.py imported")

    import utils
    print("  ✓ utils.py imported")


def test_config_helpers():
    """Test color and palette helpers"""
    print("\nTesting config helpers...")
    from config import (
        to_rgb, rgb_to_hex, rgb_to_bgr, clamp_intensity,
        get_palette_for_tone, validate_effect, validate_tone, EFFECTS
    )

    assert to_rgb("#e57373") == (229, 115, 115)
    assert to_rgb("#fff") == (255, 255, 255)
    assert to_rgb([1, 2, 3]) == (1, 2, 3)
    assert rgb_to_hex((229, 115, 115)) == "#e57373"
    assert rgb_to_bgr((1, 2, 3)) == (3, 2, 1)
    print("  ✓ Color conversion")

    for bad in ("not-a-color", (1, 2), (0, 0, 256)):
        try:
            to_rgb(bad)
        except ValueError:
            continue
        raise AssertionError(f"{bad!r} should be rejected")
    print("  ✓ Invalid colors rejected")

    assert clamp_intensity(-5) == 0
    assert clamp_intensity(150) == 100
    assert clamp_intensity(42) == 42
    print("  ✓ Intensity clamping")

    assert get_palette_for_tone("Unknown") == {effect: [] for effect in EFFECTS}
    assert validate_effect("blush") and not validate_effect("foundation")
    assert validate_tone("Dark/Cool") and not validate_tone("Dark")
    print("  ✓ Palette lookup and validation")


def test_end_to_end():
    """Classify a synthetic face and paint every effect at 50% opacity"""
    print("\nTesting end-to-end frame...")
    from pipeline import MakeupSession

    landmarks = make_face_landmarks()
    frame = make_frame()

    session = MakeupSession()
    session.start()
    for effect in session.effects:
        session.set_intensity(effect, 50)

    report = session.tick(frame, landmarks)
    assert report['category'] == "Light/Warm", report['category']
    print(f"  ✓ Classified as {report['category']}")

    palette = report['palette']
    for effect in ('lipstick', 'eyeshadow', 'blush'):
        assert session.effects[effect].color == palette[effect][0]
    print("  ✓ First palette colors selected")

    pixels = session.surface.pixels
    h, w = pixels.shape[:2]
    ys, xs = np.mgrid[0:h, 0:w]

    def rect(x0, x1, y0, y1, grow=0):
        return (xs >= x0 - grow) & (xs <= x1 + grow) & (ys >= y0 - grow) & (ys <= y1 + grow)

    def disk(cx, cy, r):
        return (xs - cx) ** 2 + (ys - cy) ** 2 <= r ** 2

    lips_core = rect(81, 119, 181, 199) & ~rect(94, 106, 187, 194)
    lips_bound = rect(80, 120, 180, 200, grow=1) & ~rect(96, 104, 189, 192)
    eyes_core = rect(56, 84, 76, 84) | rect(116, 144, 76, 84)
    eyes_bound = rect(55, 85, 75, 85, grow=1) | rect(115, 145, 75, 85, grow=1)
    cheeks_core = disk(60, 145, 21) | disk(140, 145, 21)
    cheeks_bound = disk(60, 145, 23) | disk(140, 145, 23)

    painted = pixels[:, :, 3] > 0

    assert painted[lips_core].all() and painted[eyes_core].all() and painted[cheeks_core].all()
    assert not painted[~(lips_bound | eyes_bound | cheeks_bound)].any()
    assert not painted[190, 100]
    print("  ✓ Coverage matches lips, eyelids and cheeks")

    assert set(np.unique(pixels[painted, 3])) == {128}
    assert tuple(pixels[184, 85]) == (101, 138, 255, 128)
    assert tuple(pixels[80, 70]) == (130, 224, 255, 128)
    assert tuple(pixels[145, 60]) == (178, 224, 255, 128)
    assert not pixels[~painted].any()
    print("  ✓ Colors and opacity correct, transparent elsewhere")


def test_landmark_helpers():
    """Test landmark region and visualization helpers"""
    print("\nTesting landmark helpers...")
    from face_detection_dl import get_landmark_regions, visualize_landmarks

    landmarks = make_face_landmarks()
    regions = get_landmark_regions(landmarks)

    assert len(regions['outer_lip']) == 12
    assert len(regions['inner_lip']) == 8
    assert len(regions['left_eye']) == 6
    assert sum(len(points) for points in regions.values()) == 68
    print("  ✓ Landmark regions")

    frame = make_frame()
    viz = visualize_landmarks(frame, landmarks, show_indices=True)
    assert viz.shape == frame.shape
    assert not np.array_equal(viz, frame)
    assert np.array_equal(frame, make_frame())
    print("  ✓ Landmark visualization")


def test_utility_functions():
    """Test utility functions"""
    print("\nTesting utility functions...")
    from PIL import Image
    from utils import (
        pil_to_cv, cv_to_pil, resize_image, validate_image,
        composite_overlay, capture_photo, draw_status, create_palette_strip,
        draw_palette
    )

    test_array = np.random.randint(0, 255, (100, 100, 3), dtype=np.uint8)
    pil_img = Image.fromarray(test_array)

    cv_img = pil_to_cv(pil_img)
    assert np.array_equal(pil_to_cv(cv_to_pil(cv_img)), cv_img)
    print("  ✓ PIL / CV conversion")

    assert resize_image(test_array, (50, 50)).shape == (50, 50, 3)
    print("  ✓ Image resize")

    assert validate_image(test_array)[0] is False
    assert validate_image(make_frame())[0] is True
    print("  ✓ Image validation")

    overlay = np.zeros((100, 100, 4), dtype=np.uint8)
    assert np.array_equal(composite_overlay(test_array, overlay), test_array)

    overlay[10:20, 10:20] = (0, 0, 255, 255)
    combined = composite_overlay(test_array, overlay)
    assert tuple(combined[15, 15]) == (0, 0, 255)
    assert np.array_equal(combined[50:, 50:], test_array[50:, 50:])
    print("  ✓ Overlay compositing")

    png = capture_photo(test_array, overlay)
    assert png.startswith(b'\x89PNG')
    print("  ✓ Photo capture")

    status = draw_status(make_frame(), True, "Light/Warm", tone_locked=True)
    assert status.shape == make_frame().shape
    assert create_palette_strip(["#ff0000", "#00ff00"], (10, 10)).shape == (10, 20, 3)

    frame = make_frame()
    with_palette = draw_palette(frame, ["#ff0000", "#00ff00"], "#00ff00", size=(10, 10))
    assert tuple(with_palette[227, 12]) == (0, 0, 255)
    assert tuple(with_palette[227, 22]) == (0, 255, 0)
    assert tuple(with_palette[222, 18]) == (255, 255, 255)
    assert np.array_equal(draw_palette(frame, [], None), frame)
    print("  ✓ Status and palette drawing")


def main():
    """Run all tests"""
    tests = [
        ("Package Imports", test_package_imports),
        ("Custom Modules", test_custom_modules),
        ("Config Helpers", test_config_helpers),
        ("End-to-End Frame", test_end_to_end),
        ("Landmark Helpers", test_landmark_helpers),
        ("Utility Functions", test_utility_functions),
    ]

    exit_code = run_tests("AR MAKEUP SYSTEM TEST", tests)

    if exit_code == 0:
        print("\n🎉 All tests passed! System is ready.")
        print("\nRun the app with: streamlit run app.py")
        print("Or the live camera with: python live_camera.py")
    else:
        print("\n⚠️  Some tests failed. Please fix issues before running the app.")

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
