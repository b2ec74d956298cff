"""Editor session model used by the presentation layer."""
from .session import EditorSession

__all__ = ["EditorSession"]
