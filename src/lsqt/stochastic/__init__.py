from .random_state import initialize_state, random_state

__all__ = ["initialize_state", "random_state"]
