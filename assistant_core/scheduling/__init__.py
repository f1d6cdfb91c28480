from .service import SchedulingService, collection_path_for

__all__ = ["SchedulingService", "collection_path_for"]
