from kidstreak.services import kid_service, storage_service, task_service


__all__ = [
    "kid_service",
    "storage_service",
    "task_service",
]
