from .base import data_view_from_frame, data_view_from_mapping

__all__ = ["data_view_from_frame", "data_view_from_mapping"]
