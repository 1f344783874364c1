# posture_capture/pose_engine/feedback/phrases.py
# User-facing wording, spoken by the speech collaborator.

# Framing
STAND_IN_FRAME = "Please stand in front of camera"
MOVE_BACK_FEET_VISIBLE = "Move back so your feet are visible"
MOVE_FORWARD_HEAD_VISIBLE = "Move forward so your head is visible"
MOVE_BACK_FIT_FRAME = "Move back to fit in frame"
MOVE_BACK_FEET_IN_FRAME = "Move back so your feet are in frame"
MOVE_FORWARD_HEAD_IN_FRAME = "Move forward so your head is in frame"
STEP_BACK_FIT_FRAME = "Step back to fit in frame"
MOVE_RIGHT = "Move to your right"
MOVE_LEFT = "Move to your left"

# Front pose corrections (the preview is mirrored, so sides are swapped)
RAISE_RIGHT_ARM = "Raise your right arm higher"
RAISE_LEFT_ARM = "Raise your left arm higher"
STRAIGHTEN_RIGHT_ARM = "Straighten your right arm"
STRAIGHTEN_LEFT_ARM = "Straighten your left arm"
STAND_STRAIGHT = "Stand up straight"
LEVEL_SHOULDERS = "Level your shoulders"
SPREAD_LEGS = "Spread your legs apart"
KEEP_LEGS_STRAIGHT = "Keep your legs straight"

# Side pose corrections
TURN_SIDEWAYS_CHECK = "Please turn to your side, stand sideways to the camera"
KEEP_HEAD_STRAIGHT = "Keep your head straight, align with your spine"
KEEP_SPINE_VERTICAL = "Stand up straight, keep your spine vertical"
RELAX_ARMS = "Relax your arms by your sides"

# Capture flow announcements
FRONT_POSE_LOCKED = "Perfect posture! Hold still"
SIDE_POSE_LOCKED = "Perfect! Hold still"
HOLD_POSITION = "Hold your position"
SMILE = "Smile!"
TURN_SIDEWAYS = "Great! Now turn sideways. Face left and show your side to the camera"
BOTH_CAPTURED = "Perfect! Both poses captured!"

# Status event messages
STATUS_CAMERA_STARTED = "Camera started and ready for detection"
STATUS_READY_FRONT = "Front pose ready, countdown started"
STATUS_FRONT_CAPTURED = "Front pose captured successfully"
STATUS_READY_SIDE = "Side pose ready, countdown started"
STATUS_BOTH_CAPTURED = "Both front and side poses captured successfully"
