from .normalize import normalize_line

__all__ = ["normalize_line"]
