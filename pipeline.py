"""
Per-Frame Makeup Pipeline
Runs skin tone analysis and overlay rendering once per host tick
"""

from dataclasses import dataclass
from typing import Dict, Optional

import numpy as np

from config import (
    EFFECTS, EFFECT_ORDER, DEFAULT_INTENSITIES, LANDMARK_COUNT,
    clamp_intensity, empty_palette, validate_effect
)
from makeup_renderer import MakeupRenderer, OverlaySurface
from skin_tone import SkinToneAnalyzer


@dataclass
class EffectConfig:
    enabled: bool = True
    color: Optional[object] = None
    intensity: int = 50

    @property
    def opacity(self) -> float:
        return clamp_intensity(self.intensity) / 100.0

    @property
    def active(self) -> bool:
        return self.enabled and self.color is not None


def default_effects() -> Dict[str, EffectConfig]:
    return {
        effect: EffectConfig(intensity=DEFAULT_INTENSITIES[effect])
        for effect in EFFECTS
    }


def empty_report() -> Dict:
    return {'category': None, 'palette': empty_palette()}


class MakeupSession:
    """
    Owns the overlay and effect state for one camera session.

    The host calls tick() once per frame from its own scheduler
    (an OpenCV capture loop, a Streamlit rerun, ...). tick() is a
    no-op until start() and after stop().
    """

    def __init__(self, analyzer: Optional[SkinToneAnalyzer] = None,
                 renderer: Optional[MakeupRenderer] = None):
        self.analyzer = analyzer or SkinToneAnalyzer()
        self.renderer = renderer or MakeupRenderer()

        self.effects = default_effects()
        self.tone_locked = False
        self.auto_select_colors = True

        self.surface: Optional[OverlaySurface] = None
        self.last_report = empty_report()
        self.last_result = None
        self.face_detected = False
        self.running = False

    def start(self):
        if not self.running:
            print("🎬 Makeup session started")
        self.running = True

    def stop(self):
        if self.running:
            print("⏹️  Makeup session stopped")
        self.running = False
        self.face_detected = False

    def set_enabled(self, effect: str, enabled: bool):
        self._effect(effect).enabled = bool(enabled)

    def toggle(self, effect: str) -> bool:
        config = self._effect(effect)
        config.enabled = not config.enabled
        return config.enabled

    def set_color(self, effect: str, color):
        self._effect(effect).color = color

    def set_intensity(self, effect: str, intensity):
        self._effect(effect).intensity = clamp_intensity(intensity)

    def lock_tone(self, locked: bool = True):
        self.tone_locked = bool(locked)

    def _effect(self, effect: str) -> EffectConfig:
        if not validate_effect(effect):
            raise ValueError(f"Unknown effect: {effect}")
        return self.effects[effect]

    def apply_palette_defaults(self, palette: Dict):
        """Pick the first palette color for every effect that has none yet."""
        for effect in EFFECTS:
            config = self.effects[effect]
            colors = palette.get(effect) or []
            if config.color is None and colors:
                config.color = colors[0]

    def _prepare_surface(self, frame: np.ndarray) -> OverlaySurface:
        h, w = frame.shape[:2]
        if self.surface is None:
            self.surface = OverlaySurface(w, h)
        else:
            self.surface.resize(w, h)
        return self.surface

    def _report_tone(self, frame: np.ndarray, landmarks) -> Dict:
        if self.tone_locked and self.last_result is not None:
            return self.last_result.as_report()

        result = self.analyzer.classify(frame, landmarks)
        if result is None:
            return empty_report()

        self.last_result = result
        if self.auto_select_colors:
            self.apply_palette_defaults(result.palette)
        return result.as_report()

    def tick(self, frame: np.ndarray, landmarks) -> Optional[Dict]:
        """
        Process one frame

        Args:
            frame: BGR frame
            landmarks: (68, 2) landmark array, or None when no face was found

        Returns:
            {'category', 'palette'} report, or None if the session is stopped
        """
        if not self.running:
            return None

        surface = self._prepare_surface(frame)

        self.face_detected = landmarks is not None and len(landmarks) == LANDMARK_COUNT
        if not self.face_detected:
            self.last_report = empty_report()
            return self.last_report

        report = self._report_tone(frame, landmarks)

        for effect in EFFECT_ORDER:
            config = self.effects[effect]
            if config.active:
                self.renderer.draw_effect(
                    effect, surface, landmarks, config.color, config.opacity
                )

        self.last_report = report
        return report
