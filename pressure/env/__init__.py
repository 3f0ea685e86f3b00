from .gym_env import PressureEnv

__all__ = ["PressureEnv"]
