from .status import TaskStatus, STATUS_FILTER_CYCLE, PRIORITIES, next_status_filter
from .task import Task, parent_id, ancestor_ids, walk_tasks, clone_tasks
from .task_index import TaskIndex
from .errors import (
    ErrorCategory,
    AppError,
    OperationCancelled,
    io_error,
    parsing_error,
    operation_error,
    validation_error,
    dependency_error,
    is_cancellation,
    as_app_error,
)
from .validation import (
    ValidationWarning,
    validate_tasks,
    detect_cycles,
    build_dependency_graph,
    build_dependents_map,
)

__all__ = [
    "TaskStatus",
    "STATUS_FILTER_CYCLE",
    "PRIORITIES",
    "next_status_filter",
    "Task",
    "parent_id",
    "ancestor_ids",
    "walk_tasks",
    "clone_tasks",
    "TaskIndex",
    # Errors
    "ErrorCategory",
    "AppError",
    "OperationCancelled",
    "io_error",
    "parsing_error",
    "operation_error",
    "validation_error",
    "dependency_error",
    "is_cancellation",
    "as_app_error",
    # Validation
    "ValidationWarning",
    "validate_tasks",
    "detect_cycles",
    "build_dependency_graph",
    "build_dependents_map",
]
