# The registry of game mode class
MODE_REGISTRY = {}

# The registry of environment class
ENVIRONMENT_REGISTRY = {}

def register_mode(kind: str):
    def deco(cls):
        MODE_REGISTRY[kind] = cls
        return cls
    return deco

def register_environment(kind: str):
    def deco(cls):
        ENVIRONMENT_REGISTRY[kind] = cls
        return cls
    return deco
