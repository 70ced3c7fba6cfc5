"""Newsletter issue delivery worker.

Run the worker with: python -m src.delivery
"""

from src.delivery.config import DeliveryWorkerConfig, get_delivery_worker_settings
from src.delivery.worker import DeliveryWorker, try_execute_task

__all__ = [
    "DeliveryWorker",
    "DeliveryWorkerConfig",
    "get_delivery_worker_settings",
    "try_execute_task",
]
