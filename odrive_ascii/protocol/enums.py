"""
ODrive axis state codes.
"""

from enum import IntEnum


class AxisState(IntEnum):
    """Axis state machine codes as reported by axisN.current_state."""
    UNDEFINED = 0  # Also returned when the state could not be read
    IDLE = 1
    STARTUP_SEQUENCE = 2
    FULL_CALIBRATION_SEQUENCE = 3
    MOTOR_CALIBRATION = 4
    ENCODER_INDEX_SEARCH = 6
    ENCODER_OFFSET_CALIBRATION = 7
    CLOSED_LOOP_CONTROL = 8
    LOCKIN_SPIN = 9
    ENCODER_DIR_FIND = 10
    HOMING = 11
    ENCODER_HALL_POLARITY_CALIBRATION = 12
    ENCODER_HALL_PHASE_CALIBRATION = 13
    ANTICOGGING_CALIBRATION = 14

    @classmethod
    def from_code(cls, code: int) -> "AxisState":
        """
        Map a wire integer to a state, falling back to UNDEFINED.

        Args:
            code: Integer read from the controller.

        Returns:
            Matching AxisState, or AxisState.UNDEFINED for unknown codes.
        """
        try:
            return cls(code)
        except ValueError:
            return cls.UNDEFINED
