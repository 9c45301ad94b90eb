"""
Deep Learning Landmark Detection Module
Uses Face-Alignment (PyTorch) to find the 68 iBUG face landmarks per frame
"""

import cv2
import numpy as np
import torch
import face_alignment
from typing import Optional, Dict
import warnings

from config import LANDMARK_COUNT

warnings.filterwarnings('ignore')


LANDMARK_REGIONS = {
    'jawline': list(range(0, 17)),
    'left_eyebrow': list(range(17, 22)),
    'right_eyebrow': list(range(22, 27)),
    'nose_bridge': list(range(27, 31)),
    'nose_tip': list(range(31, 36)),
    'left_eye': list(range(36, 42)),
    'right_eye': list(range(42, 48)),
    'outer_lip': list(range(48, 60)),
    'inner_lip': list(range(60, 68)),
}

CLOSED_REGIONS = ('left_eye', 'right_eye', 'outer_lip', 'inner_lip')

REGION_COLORS = {
    'jawline': (0, 255, 255),
    'left_eyebrow': (255, 0, 255),
    'right_eyebrow': (255, 0, 255),
    'nose_bridge': (255, 255, 0),
    'nose_tip': (255, 255, 0),
    'left_eye': (0, 255, 0),
    'right_eye': (0, 255, 0),
    'outer_lip': (0, 0, 255),
    'inner_lip': (0, 0, 255),
}


class LandmarkDetector:

    def __init__(self, device: str = 'cpu', flip_input: bool = False):
        print(f"🔮 Initializing Landmark Detector...")
        print(f"   Device: {device.upper()}")

        if device == 'cuda' and not torch.cuda.is_available():
            print("⚠️  CUDA not available, falling back to CPU")
            device = 'cpu'

        self.device = device
        self.flip_input = flip_input

        try:
            print("   Loading Face-Alignment model...")
            self.fa = face_alignment.FaceAlignment(
                face_alignment.LandmarksType.TWO_D,
                device=device,
                flip_input=flip_input
            )
            print("✅ Face-Alignment model loaded successfully")
        except Exception as e:
            print(f"❌ Error loading Face-Alignment: {e}")
            raise

        print("🎯 Detector ready!")

    def detect_landmarks(self, frame: np.ndarray) -> Optional[np.ndarray]:
        """
        Detect landmarks for the largest face in a BGR frame

        Returns:
            (68, 2) float array of (x, y) points, or None when no face is found
        """
        try:
            rgb_frame = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
            landmarks_list = self.fa.get_landmarks_from_image(rgb_frame)

            if landmarks_list is None or len(landmarks_list) == 0:
                return None

            landmarks = max(landmarks_list, key=_landmark_area)

            if len(landmarks) != LANDMARK_COUNT:
                return None

            return np.asarray(landmarks[:, :2], dtype=np.float64)

        except Exception as e:
            print(f"⚠️  Error detecting landmarks: {e}")
            return None


def _landmark_area(landmarks: np.ndarray) -> float:
    span = np.ptp(landmarks[:, :2], axis=0)
    return float(span[0] * span[1])


def get_landmark_regions(landmarks: np.ndarray) -> Dict[str, np.ndarray]:
    return {name: landmarks[indices] for name, indices in LANDMARK_REGIONS.items()}


def visualize_landmarks(
    frame: np.ndarray,
    landmarks: np.ndarray,
    show_indices: bool = False
) -> np.ndarray:
    viz_frame = frame.copy()

    for name, points in get_landmark_regions(landmarks).items():
        color = REGION_COLORS[name]
        contour = np.rint(points).astype(np.int32)

        cv2.polylines(viz_frame, [contour], name in CLOSED_REGIONS, color, 1)

        for (x, y) in contour:
            cv2.circle(viz_frame, (int(x), int(y)), 2, color, -1)

    if show_indices:
        for i, (x, y) in enumerate(landmarks):
            cv2.putText(
                viz_frame,
                str(i),
                (int(x) + 4, int(y) - 4),
                cv2.FONT_HERSHEY_SIMPLEX,
                0.3,
                (255, 255, 255),
                1
            )

    return viz_frame


if __name__ == "__main__":
    print("=" * 70)
    print("LANDMARK DETECTION MODULE - STANDALONE TEST")
    print("=" * 70)

    detector = LandmarkDetector(device='cpu')

    test_image_path = "test_image.jpg"
    image = cv2.imread(test_image_path)

    if image is None:
        print(f"\n⚠️  No test image found at '{test_image_path}'")
        print("To test, place a test image and update the path above.")
    else:
        print(f"\n📸 Testing with image: {test_image_path}")
        print(f"   Size: {image.shape[1]}x{image.shape[0]}")

        landmarks = detector.detect_landmarks(image)

        if landmarks is None:
            print("❌ No face detected in image")
        else:
            print(f"\n✅ Face detected: {len(landmarks)} landmarks")
            viz = visualize_landmarks(image, landmarks, show_indices=True)
            cv2.imwrite('landmarks_visualization.jpg', viz)
            print(f"💾 Visualization saved to 'landmarks_visualization.jpg'")

    print("\n" + "=" * 70)
    print("TEST COMPLETE")
    print("=" * 70)
