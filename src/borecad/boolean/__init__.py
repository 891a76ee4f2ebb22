from ..errors import EngineError
from . import trimesh_engine as trimesh

__all__ = ['trimesh']

ENGINE_REGISTRY = {'trimesh': trimesh}


def get_engine(name: str):
    engine = ENGINE_REGISTRY.get(name)
    if engine is None:
        raise EngineError(
            f"unknown boolean engine '{name}' (known: {sorted(ENGINE_REGISTRY)})"
        )
    return engine


__all__.extend(['ENGINE_REGISTRY', 'get_engine'])
