from __future__ import annotations


class PressureError(Exception):
    """Base class for errors raised by the Pressure core."""


class InvalidMoveError(PressureError, ValueError):
    """Requested move is not among the generated legal moves."""


class SimulationLeakError(PressureError, RuntimeError):
    """A look-ahead (simulated) move tried to reach committed game state."""


class GameNotActiveError(PressureError, RuntimeError):
    pass


class ConfigError(PressureError, ValueError):
    pass
