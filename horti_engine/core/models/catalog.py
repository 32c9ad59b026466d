from __future__ import annotations

from typing import Dict, Tuple

# Square feet per square metre; turns a per-ft² photon density into per-m².
FEET_TO_METERS_AREA = 10.764

DEFAULT_VOLTAGE = 277.0
DEFAULT_MAX_FIXTURES_PER_CIRCUIT = 20
CONTINUOUS_DUTY_FACTOR = 0.8

# NEC 240.6(A) standard overcurrent device ratings.
DEFAULT_BREAKER_SIZES_A: Tuple[int, ...] = (
    15, 20, 25, 30, 35, 40, 45, 50, 60, 70, 80, 90, 100,
    110, 125, 150, 175, 200, 225, 250, 300, 350, 400,
)

# NEC 310.16 copper conductor ampacity, smallest conductor first.
WIRE_AMPACITY_COPPER: Dict[str, Tuple[Tuple[str, int], ...]] = {
    "60C": (
        ("14 AWG", 15), ("12 AWG", 20), ("10 AWG", 30), ("8 AWG", 40),
        ("6 AWG", 55), ("4 AWG", 70), ("3 AWG", 85), ("2 AWG", 95),
        ("1 AWG", 110), ("1/0 AWG", 125), ("2/0 AWG", 145),
        ("3/0 AWG", 165), ("4/0 AWG", 195),
    ),
    "75C": (
        ("14 AWG", 20), ("12 AWG", 25), ("10 AWG", 35), ("8 AWG", 50),
        ("6 AWG", 65), ("4 AWG", 85), ("3 AWG", 100), ("2 AWG", 115),
        ("1 AWG", 130), ("1/0 AWG", 150), ("2/0 AWG", 175),
        ("3/0 AWG", 200), ("4/0 AWG", 230),
    ),
    "90C": (
        ("14 AWG", 25), ("12 AWG", 30), ("10 AWG", 40), ("8 AWG", 55),
        ("6 AWG", 75), ("4 AWG", 95), ("3 AWG", 115), ("2 AWG", 130),
        ("1 AWG", 145), ("1/0 AWG", 170), ("2/0 AWG", 195),
        ("3/0 AWG", 225), ("4/0 AWG", 260),
    ),
}
DEFAULT_INSULATION_CLASS = "75C"

# EMT trade size for a branch circuit of four conductors (3 ungrounded + ground).
DEFAULT_CONDUIT_SIZES: Dict[str, str] = {
    "14 AWG": '1/2"',
    "12 AWG": '1/2"',
    "10 AWG": '1/2"',
    "8 AWG": '3/4"',
    "6 AWG": '3/4"',
    "4 AWG": '1"',
    "3 AWG": '1-1/4"',
    "2 AWG": '1-1/4"',
    "1 AWG": '1-1/2"',
    "1/0 AWG": '1-1/2"',
    "2/0 AWG": '2"',
    "3/0 AWG": '2"',
    "4/0 AWG": '2"',
}

DEFAULT_PHASES: Tuple[str, ...] = ("A", "B", "C")

# NEC 240.4(D) overcurrent limits for small conductors.
SMALL_CONDUCTOR_LIMITS: Dict[str, int] = {
    "14 AWG": 15,
    "12 AWG": 20,
    "10 AWG": 30,
}
