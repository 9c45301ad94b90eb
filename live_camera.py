"""
Live Camera Try-On
Real-time OpenCV webcam loop that drives the makeup pipeline once per frame

Keys:
    1 / 2 / 3   toggle lipstick / eyeshadow / blush
    [ / ]       previous / next palette color for the active effect
    - / +       lower / raise intensity of the active effect
    l           lock / unlock skin tone
    c           capture photo
    q / ESC     quit
"""

import argparse
import sys
import time

import cv2

from config import APP_TITLE, EFFECTS
from face_detection_dl import LandmarkDetector
from pipeline import MakeupSession
from utils import composite_overlay, draw_status, draw_palette, capture_photo


EFFECT_KEYS = {ord('1'): 'lipstick', ord('2'): 'eyeshadow', ord('3'): 'blush'}


class LiveTryOn:

    def __init__(self, camera_index=0, device='cpu', detect_every=1, detector=None):
        self.camera_index = camera_index
        self.detect_every = max(1, detect_every)

        self.detector = detector or LandmarkDetector(device=device)
        self.session = MakeupSession()

        self.active_effect = EFFECTS[0]
        self.capture = None
        self.window_open = False
        self.landmarks = None
        self.frame_count = 0

    def open(self):
        self.capture = cv2.VideoCapture(self.camera_index)
        if not self.capture.isOpened():
            self.capture.release()
            self.capture = None
            raise RuntimeError(f"Unable to access camera {self.camera_index}")
        print(f"📷 Camera {self.camera_index} opened")
        self.session.start()

    def close(self):
        self.session.stop()
        if self.capture is not None:
            self.capture.release()
            self.capture = None
        if self.window_open:
            cv2.destroyAllWindows()
            self.window_open = False

    def cycle_color(self, step):
        palette = self.session.last_report['palette'].get(self.active_effect) or []
        if not palette:
            return

        current = self.session.effects[self.active_effect].color
        index = palette.index(current) if current in palette else -step
        self.session.set_color(self.active_effect, palette[(index + step) % len(palette)])

    def adjust_intensity(self, delta):
        config = self.session.effects[self.active_effect]
        self.session.set_intensity(self.active_effect, config.intensity + delta)
        print(f"   {self.active_effect} intensity: {self.session.effects[self.active_effect].intensity}%")

    def save_capture(self, frame):
        filename = f"ar-makeup-photo-{int(time.time())}.png"
        with open(filename, 'wb') as f:
            f.write(capture_photo(frame, self.session.surface.pixels))
        print(f"💾 Photo saved to '{filename}'")

    def handle_key(self, key, frame):
        if key in EFFECT_KEYS:
            self.active_effect = EFFECT_KEYS[key]
            enabled = self.session.toggle(self.active_effect)
            print(f"   {self.active_effect}: {'on' if enabled else 'off'}")
        elif key == ord('['):
            self.cycle_color(-1)
        elif key == ord(']'):
            self.cycle_color(1)
        elif key == ord('-'):
            self.adjust_intensity(-10)
        elif key in (ord('+'), ord('=')):
            self.adjust_intensity(10)
        elif key == ord('l'):
            self.session.lock_tone(not self.session.tone_locked)
            print(f"🔒 Tone locked: {self.session.tone_locked}")
        elif key == ord('c'):
            self.save_capture(frame)
        elif key in (ord('q'), 27):
            return False
        return True

    def step(self, frame):
        if self.frame_count % self.detect_every == 0:
            self.landmarks = self.detector.detect_landmarks(frame)
        self.frame_count += 1

        report = self.session.tick(frame, self.landmarks)

        preview = composite_overlay(frame, self.session.surface.pixels)
        preview = draw_status(
            preview,
            self.session.face_detected,
            report['category'] if report else None,
            self.session.tone_locked
        )

        colors = report['palette'].get(self.active_effect) if report else None
        return draw_palette(preview, colors, self.session.effects[self.active_effect].color)

    def run(self):
        try:
            self.open()
            while self.session.running:
                ok, frame = self.capture.read()
                if not ok:
                    print("⚠️  Camera frame could not be read")
                    break

                cv2.imshow(APP_TITLE, self.step(frame))
                self.window_open = True

                key = cv2.waitKey(1) & 0xFF
                if key != 0xFF and not self.handle_key(key, frame):
                    break
        finally:
            self.close()


def main(argv=None):
    parser = argparse.ArgumentParser(description="Real-time AR makeup try-on")
    parser.add_argument('--camera', type=int, default=0, help="Camera index")
    parser.add_argument('--device', default='cpu', choices=['cpu', 'cuda'])
    parser.add_argument('--detect-every', type=int, default=1,
                        help="Run landmark detection every N frames")
    args = parser.parse_args(argv)

    try:
        app = LiveTryOn(args.camera, args.device, args.detect_every)
    except Exception as e:
        print(f"❌ Could not start the landmark detector: {e}")
        return 1

    try:
        app.run()
    except RuntimeError as e:
        print(f"❌ {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
