"""
Tasks domain package.

Public API:
- Domain models: Task, TaskKind
- Catalog: TaskCatalog, normalize_rows
- Store reader: TaskStoreClient, CatalogLoadError
"""
from .models import Task, TaskKind
from .catalog import TaskCatalog, normalize_rows
from .store_client import TaskStoreClient, CatalogLoadError
from .filters import time_options, filter_by_time_slot

__all__ = ["Task",
           "TaskKind",
             "TaskCatalog",
               "normalize_rows",
               "TaskStoreClient",
               "CatalogLoadError",
               "time_options",
               "filter_by_time_slot",
               ]
