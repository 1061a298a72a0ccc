import logging
import threading
import time

from constants import COOLDOWN_DURATION

logger = logging.getLogger(__name__)

# --- CONFIGURATION ---
# Map predicted gestures (keys) to PyAutoGUI key names (values)
# PyAutoGUI keys: 'left', 'right', 'up', 'down', 'space', 'enter', 'a', 'b', etc.
KEY_MAPPING = {
    "Left Slip": "left",
    "Right Slip": "right",
    "Left Roll": "a",
    "Right Roll": "d",
    "Pull Back": "down",
    "Idle": None             # Do nothing
}

# Last time each gesture pressed its key
last_execution_times = {}

# Predictions arrive on worker threads; check-then-set of the cooldown is atomic
_cooldown_lock = threading.Lock()


def _pyautogui_press(key):
    # pyautogui needs a display as soon as it is imported
    import pyautogui

    pyautogui.press(key)


def execute_action(predicted_label, press=None, now=None):
    """
    Takes the label from the model and presses the corresponding key.
    Returns True if a key was pressed.
    """
    key_to_press = KEY_MAPPING.get(predicted_label)
    if key_to_press is None:
        logger.debug("Action '%s' has no key bind.", predicted_label)
        return False

    current_time = time.time() if now is None else now
    with _cooldown_lock:
        last_time = last_execution_times.get(predicted_label)
        if last_time is not None and (current_time - last_time) <= COOLDOWN_DURATION:
            return False
        last_execution_times[predicted_label] = current_time

    logger.info("Binder: Pressing '%s' for action '%s'", key_to_press, predicted_label)
    (press or _pyautogui_press)(key_to_press)
    return True
