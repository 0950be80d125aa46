from .store import ResultStore

__all__ = ['ResultStore']
