from .dag import DAG

__all__ = ["DAG"]
