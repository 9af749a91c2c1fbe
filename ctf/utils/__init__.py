from .id_generator import IdGenerator
from .rng import ScriptedRandom

__all__ = ["IdGenerator", "ScriptedRandom"]
