from .__http import conversion_error_handler

__all__ = ["conversion_error_handler"]
