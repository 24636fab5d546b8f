from .gym_env import MorrisEnv

__all__ = ["MorrisEnv"]
