# posture_capture/pose_engine/visualization/visualizer.py
import cv2
import numpy as np
from typing import List, Optional, Tuple
from ..common.enums import LandmarkType as L, PoseStage
from ..common.models import FrontAccuracy, OverlayState, SideAccuracy

SKELETON = (
    (L.LEFT_SHOULDER, L.RIGHT_SHOULDER, "shoulder_level"),
    (L.LEFT_SHOULDER, L.LEFT_ELBOW, "left_arm"),
    (L.LEFT_ELBOW, L.LEFT_WRIST, "left_arm"),
    (L.RIGHT_SHOULDER, L.RIGHT_ELBOW, "right_arm"),
    (L.RIGHT_ELBOW, L.RIGHT_WRIST, "right_arm"),
    (L.LEFT_SHOULDER, L.LEFT_HIP, "torso"),
    (L.RIGHT_SHOULDER, L.RIGHT_HIP, "torso"),
    (L.LEFT_HIP, L.RIGHT_HIP, "hips"),
    (L.LEFT_HIP, L.LEFT_KNEE, "left_leg"),
    (L.LEFT_KNEE, L.LEFT_ANKLE, "left_leg"),
    (L.RIGHT_HIP, L.RIGHT_KNEE, "right_leg"),
    (L.RIGHT_KNEE, L.RIGHT_ANKLE, "right_leg"),
)

def _front_part_ok(part: str, accuracy: FrontAccuracy) -> bool:
    if part == "left_arm":
        return accuracy.shoulder_left.passed and accuracy.elbow_left.passed
    if part == "right_arm":
        return accuracy.shoulder_right.passed and accuracy.elbow_right.passed
    if part == "torso":
        return accuracy.spine.passed
    if part == "left_leg":
        return accuracy.hip_left.passed
    if part == "right_leg":
        return accuracy.hip_right.passed
    if part == "shoulder_level":
        return accuracy.shoulder_level.passed
    return True

def _side_part_ok(part: str, accuracy: SideAccuracy) -> bool:
    if part == "left_arm":
        return accuracy.arm_left.passed
    if part == "right_arm":
        return accuracy.arm_right.passed
    if part == "torso":
        return accuracy.spine.passed
    if part == "left_leg":
        return accuracy.leg_left.passed
    if part == "right_leg":
        return accuracy.leg_right.passed
    return True

def skeleton_segments(overlay: OverlayState) -> List[Tuple[Tuple[int, int], Tuple[int, int], bool]]:
    """Visible skeleton segments as (start_px, end_px, accurate)."""
    if overlay.frame is None:
        return []
    segments = []
    for start_type, end_type, part in SKELETON:
        start, end = overlay.frame.get(start_type), overlay.frame.get(end_type)
        if start is None or end is None:
            continue
        if overlay.front_accuracy is not None:
            ok = _front_part_ok(part, overlay.front_accuracy)
        elif overlay.side_accuracy is not None:
            ok = _side_part_ok(part, overlay.side_accuracy)
        else:
            ok = True
        segments.append(((int(start.x), int(start.y)), (int(end.x), int(end.y)), ok))
    return segments

class Visualizer:
    """Draws the capture overlay: target box, per-limb skeleton, countdown and stage hint."""

    def __init__(self, config: dict, box_margin: float = 0.05):
        self.config = config
        self.box_margin = box_margin
        self.font = cv2.FONT_HERSHEY_SIMPLEX
        self.good_color = tuple(config.get('good_color', (0, 255, 0)))
        self.bad_color = tuple(config.get('bad_color', (0, 0, 255)))
        self.box_color = tuple(config.get('box_color', (0, 255, 255)))

    def render(self, frame: np.ndarray, overlay: Optional[OverlayState], current_fps: float) -> np.ndarray:
        output_frame = frame.copy()
        self._draw_target_box(output_frame)
        if overlay is not None:
            if self.config['draw_landmarks']:
                self._draw_skeleton(output_frame, overlay)
            self._draw_status(output_frame, overlay)
        if self.config['draw_hud']:
            self._draw_hud(output_frame, overlay, current_fps)
        return output_frame

    def _draw_target_box(self, frame: np.ndarray):
        h, w = frame.shape[:2]
        m = self.box_margin
        tl = (int(m * w), int(m * h))
        br = (int((1 - m) * w), int((1 - m) * h))
        fill = frame.copy()
        cv2.rectangle(fill, tl, br, self.box_color, -1)
        cv2.addWeighted(fill, 0.12, frame, 0.88, 0, frame)
        cv2.rectangle(frame, tl, br, self.box_color, 2, cv2.LINE_AA)

    def _draw_skeleton(self, frame: np.ndarray, overlay: OverlayState):
        for start, end, ok in skeleton_segments(overlay):
            cv2.line(frame, start, end, self.good_color if ok else self.bad_color, 4, cv2.LINE_AA)
        for landmark in overlay.frame.landmarks.values():
            cv2.circle(frame, (int(landmark.x), int(landmark.y)), 6, self.good_color, -1, cv2.LINE_AA)

    def _draw_status(self, frame: np.ndarray, overlay: OverlayState):
        h, w = frame.shape[:2]
        if overlay.counting and overlay.countdown_value > 0:
            self._centered_text(frame, str(overlay.countdown_value), h // 2, 4.0, (255, 255, 255), 8)
        elif overlay.perfect:
            self._centered_text(frame, "PERFECT POSE!", 80, 1.4, self.good_color, 3)

        if overlay.stage == PoseStage.FRONT_POSE:
            hint, color = "Front Pose: Stand facing camera", self.good_color
        else:
            hint, color = "Side Pose: Turn sideways to camera", (255, 255, 0)
        self._centered_text(frame, hint, h - 60, 1.0, color, 2)

    def _centered_text(self, frame, text, y, scale, color, thickness):
        (tw, _), _ = cv2.getTextSize(text, self.font, scale, thickness)
        x = (frame.shape[1] - tw) // 2
        cv2.putText(frame, text, (x, y), self.font, scale, color, thickness, cv2.LINE_AA)

    def _draw_hud(self, frame: np.ndarray, overlay: Optional[OverlayState], fps: float):
        hud_elements = [f"FPS: {fps:.1f}"]
        if overlay is not None:
            hud_elements.append(f"Stage: {overlay.stage.value}")
            hud_elements.append(f"State: {overlay.phase.value}")
        for i, text in enumerate(hud_elements):
            cv2.putText(frame, text, (10, 30 + i * 30), self.font, 0.7, (240, 240, 240), 2, cv2.LINE_AA)
