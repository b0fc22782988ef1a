"""Interface strings. Missing "ru" entries fall back to English at import time."""

from typing import Dict

LANG_PACK: Dict[str, Dict[str, str]] = {
    "en": {
        # buttons
        "BTN_ADJUST_OPTIONS": "Adjust Options",
        "BTN_ANALYZE": "Analyze",
        "BTN_APPLY": "Apply",
        "BTN_BACK": "Back",
        "BTN_CANCEL": "Cancel",
        "BTN_CONTINUE": "Continue",
        "BTN_DELETE": "Delete",
        "BTN_DISMISS": "Dismiss",
        "BTN_EXPAND": "Expand",
        "BTN_IMPORT": "Import",
        "BTN_NEXT": "Next",
        "BTN_REVIEW_IMPACT": "Review Impact",
        "BTN_UNDO": "Undo",
        # status bar
        "STATUS_TASKS_COUNT": "Tasks: {count}",
        "STATUS_FILTER": "Filter",
        "FILTER_ALL": "all",
        "STATUS_VIEW_TREE": "tree",
        "STATUS_VIEW_LIST": "list",
        "STATUS_MARKED": "{count} marked",
        "STATUS_LOADING": "Loading tasks…",
        "STATUS_STALE": "view out of date, press r to refresh",
        "STATUS_REFRESHING": "Refreshing…",
        "STATUS_NO_TASKS": "No tasks. Press i to import a document.",
        "STATUS_NO_MATCHES": "No tasks match the current filter.",
        "STATUS_FILE_CHANGED": "Tasks file changed on disk; reloaded",
        "STATUS_TASK_NOT_FOUND": "Task {task_id} not found",
        "STATUS_NEXT_TASK": "Next: {task_id} {title}",
        "STATUS_NO_NEXT_TASK": "No pending task has all dependencies done",
        "STATUS_CHANGED": "Task {task_id} → {status}",
        "LOAD_FAILED": "Failed to Load Tasks",
        "VALIDATION_WARNINGS": "{count} validation warning(s); see log",
        # details / log panels
        "DETAIL_NONE": "No task selected",
        "DETAIL_STATUS": "Status",
        "DETAIL_PRIORITY": "Priority",
        "DETAIL_COMPLEXITY": "Complexity",
        "DETAIL_DEPENDENCIES": "Depends on",
        "DETAIL_TAGS": "Tags",
        "DETAIL_SUBTASKS": "Subtasks",
        "DETAIL_DESCRIPTION": "Description",
        "DETAIL_DETAILS": "Details",
        "DETAIL_TEST_STRATEGY": "Test strategy",
        "LOG_EMPTY": "No activity yet",
        "LIST_HINT": "↑↓ move · Enter select · Esc close",
        # footer
        "HINT_MOVE": "move",
        "HINT_FOLD": "fold",
        "HINT_MARK": "mark",
        "HINT_STATUS": "status",
        "HINT_NEXT": "next",
        "HINT_COMPLEXITY": "analyze",
        "HINT_IMPORT": "import",
        "HINT_EXPAND": "expand",
        "HINT_DELETE": "delete",
        "HINT_UNDO": "undo",
        "HINT_FILTER": "filter",
        "HINT_SEARCH": "search",
        "HINT_VIEW": "view",
        "HINT_DETAILS": "details",
        "HINT_LOG": "log",
        "HINT_REFRESH": "refresh",
        "HINT_QUIT": "quit",
        "HINT_DIALOG_FOCUS": "next field",
        "HINT_DIALOG_CONFIRM": "confirm",
        "HINT_DIALOG_CANCEL": "cancel",
        "HINT_SEARCH_APPLY": "keep",
        "HINT_SEARCH_CLEAR": "clear",
        # workflows
        "WORKFLOW_STARTED": "{operation} started",
        "WORKFLOW_CANCELLING": "Cancelling {operation}…",
        "WORKFLOW_CANCELLED": "{operation} Cancelled",
        "WORKFLOW_CANCELLED_BODY": "The operation was cancelled. No further changes were made.",
        "WORKFLOW_COMPLETE": "Complete",
        "WORKFLOW_DONE": "{operation} finished",
        "WORKFLOW_FAILED": "{operation} Failed",
        "WORKFLOW_NO_RESULT": "The operation ended without reporting a result.",
        "WORKFLOW_CANCEL_TOO_LATE": "{operation} had already saved its changes; cancel ignored",
        # complexity
        "COMPLEXITY_TITLE": "Complexity Analysis",
        "COMPLEXITY_SCOPE": "Scope",
        "COMPLEXITY_SCOPE_ALL": "All tasks",
        "COMPLEXITY_SCOPE_SELECTED": "Selected task",
        "COMPLEXITY_SCOPE_TAG": "By tag",
        "COMPLEXITY_TAGS": "Tags",
        "COMPLEXITY_NEED_SELECTION": "Select a task first",
        "COMPLEXITY_NEED_TAGS": "Enter at least one tag",
        "COMPLEXITY_PROGRESS_TITLE": "Analyzing Complexity",
        "COMPLEXITY_PREPARING": "Preparing…",
        "COMPLEXITY_PROGRESS": "Analyzed {analyzed} of {total}",
        "COMPLEXITY_CURRENT": "Current: {task_id}",
        "COMPLEXITY_REPORT_TITLE": "Complexity Report",
        "COMPLEXITY_REPORT_HINT": "Enter jump to task · f filter by level · e export JSON · c export CSV · Esc close",
        "COMPLEXITY_FILTER_TITLE": "Filter by Level",
        "COMPLEXITY_FILTER_NONE": "Select at least one level",
        "COMPLEXITY_FILTERED": "Showing {shown} of {total} task(s): {levels}",
        "COMPLEXITY_EXPORTED": "Report exported to {path}",
        "COMPLEXITY_EMPTY": "No tasks were found in the selected scope.",
        # import
        "IMPORT_TITLE": "Import Document",
        "IMPORT_PATH": "Path",
        "IMPORT_PATH_HINT": "Markdown or text document with one heading per task",
        "IMPORT_PATH_REQUIRED": "Enter a document path",
        "IMPORT_OPTIONS_TITLE": "Import Options",
        "IMPORT_MODE": "Mode",
        "IMPORT_MODE_APPEND": "Append to existing tasks",
        "IMPORT_MODE_REPLACE": "Replace existing tasks",
        "IMPORT_SOURCE": "Source: {path}",
        "IMPORT_PROGRESS_TITLE": "Importing Document",
        "IMPORT_STARTING": "Starting…",
        "IMPORT_DONE": "Imported {count} task(s) from {path}",
        "IMPORT_RESULTS_TITLE": "Imported Tasks",
        # expand
        "EXPAND_TITLE": "Expand Tasks",
        "EXPAND_SCOPE": "Scope",
        "EXPAND_SCOPE_SELECTED": "Selected ({count})",
        "EXPAND_SCOPE_PENDING": "All pending tasks",
        "EXPAND_DEPTH": "Depth",
        "EXPAND_COUNT": "Subtasks per task (0 = auto)",
        "EXPAND_FORCE": "Replace existing subtasks",
        "EXPAND_NOTHING": "No tasks to expand in this scope",
        "EXPAND_PROGRESS_TITLE": "Expanding Tasks",
        "EXPAND_PREPARING": "Preparing {count} task(s)…",
        "EXPAND_PROGRESS": "Expanding {task_id}",
        "EXPAND_NONE": "No tasks were expanded.",
        "EXPAND_DONE": "Expanded {tasks} task(s) into {subtasks} subtask(s)",
        "EXPAND_PREVIEW_TITLE": "Preview Subtasks",
        "EXPAND_PREVIEW_SUMMARY": "{subtasks} subtask(s) will be created under {tasks} task(s)",
        "EXPAND_PREVIEW_HINT": "Enter or c continue · Esc cancel",
        # delete
        "DELETE_NOTHING": "Select a task to delete",
        "DELETE_TITLE": "Delete Tasks",
        "DELETE_CONFIRM": "Delete {count} selected task(s)? You will be able to review the impact before anything is removed.",
        "DELETE_OPTIONS_TITLE": "Delete Options",
        "DELETE_RECURSIVE": "Recursive",
        "DELETE_FORCE": "Force",
        "DELETE_REVIEW_TITLE": "Review Impact",
        "DELETE_TOTAL": "Tasks to delete: {count}",
        "DELETE_BLOCKING": "Blocking issue: {reason}",
        "DELETE_PROGRESS_TITLE": "Deleting Tasks",
        "DELETE_PROGRESS": "Deleting {count} task(s)…",
        "DELETE_DONE": "Deleted {count} task(s)",
        # undo
        "UNDO_TITLE": "Undo",
        "UNDO_AVAILABLE": "Undo available for {seconds} seconds",
        "UNDO_EXPIRED": "Undo window expired",
        "UNDO_DISMISSED": "Undo dismissed",
        "UNDO_UNAVAILABLE": "Undo action is no longer available.",
        "UNDO_RUNNING": "Undoing…",
        "UNDO_FAILED": "Undo Failed",
        "UNDO_COMPLETED": "Undo completed successfully",
    },
    "ru": {
        "BTN_ADJUST_OPTIONS": "Изменить параметры",
        "BTN_ANALYZE": "Анализ",
        "BTN_APPLY": "Применить",
        "BTN_BACK": "Назад",
        "BTN_CANCEL": "Отмена",
        "BTN_CONTINUE": "Продолжить",
        "BTN_DELETE": "Удалить",
        "BTN_DISMISS": "Закрыть",
        "BTN_EXPAND": "Развернуть",
        "BTN_IMPORT": "Импорт",
        "BTN_NEXT": "Далее",
        "BTN_REVIEW_IMPACT": "Оценить последствия",
        "BTN_UNDO": "Отменить",
        "STATUS_TASKS_COUNT": "Задач: {count}",
        "STATUS_FILTER": "Фильтр",
        "FILTER_ALL": "все",
        "STATUS_VIEW_TREE": "дерево",
        "STATUS_VIEW_LIST": "список",
        "STATUS_MARKED": "отмечено: {count}",
        "STATUS_LOADING": "Загрузка задач…",
        "STATUS_STALE": "данные устарели, нажмите r",
        "STATUS_REFRESHING": "Обновление…",
        "STATUS_NO_TASKS": "Задач нет. Нажмите i для импорта документа.",
        "STATUS_NO_MATCHES": "Нет задач под текущий фильтр.",
        "STATUS_FILE_CHANGED": "Файл задач изменён на диске; перезагружено",
        "STATUS_TASK_NOT_FOUND": "Задача {task_id} не найдена",
        "STATUS_NEXT_TASK": "Следующая: {task_id} {title}",
        "STATUS_NO_NEXT_TASK": "Нет задач с выполненными зависимостями",
        "LOAD_FAILED": "Не удалось загрузить задачи",
        "DETAIL_NONE": "Задача не выбрана",
        "DETAIL_STATUS": "Статус",
        "DETAIL_PRIORITY": "Приоритет",
        "DETAIL_COMPLEXITY": "Сложность",
        "DETAIL_DEPENDENCIES": "Зависит от",
        "DETAIL_TAGS": "Теги",
        "DETAIL_SUBTASKS": "Подзадачи",
        "DETAIL_DESCRIPTION": "Описание",
        "DETAIL_DETAILS": "Детали",
        "DETAIL_TEST_STRATEGY": "Стратегия тестирования",
        "LOG_EMPTY": "Событий пока нет",
        "HINT_MOVE": "ход",
        "HINT_FOLD": "свернуть",
        "HINT_MARK": "отметить",
        "HINT_STATUS": "статус",
        "HINT_NEXT": "следующая",
        "HINT_COMPLEXITY": "анализ",
        "HINT_IMPORT": "импорт",
        "HINT_EXPAND": "развернуть",
        "HINT_DELETE": "удалить",
        "HINT_UNDO": "отмена",
        "HINT_FILTER": "фильтр",
        "HINT_SEARCH": "поиск",
        "HINT_VIEW": "вид",
        "HINT_DETAILS": "детали",
        "HINT_LOG": "журнал",
        "HINT_REFRESH": "обновить",
        "HINT_QUIT": "выход",
        "WORKFLOW_CANCELLED": "{operation}: отменено",
        "WORKFLOW_CANCELLED_BODY": "Операция отменена. Изменения не вносились.",
        "WORKFLOW_COMPLETE": "Готово",
        "WORKFLOW_FAILED": "{operation}: ошибка",
        "COMPLEXITY_TITLE": "Анализ сложности",
        "COMPLEXITY_SCOPE": "Область",
        "COMPLEXITY_SCOPE_ALL": "Все задачи",
        "COMPLEXITY_SCOPE_SELECTED": "Выбранная задача",
        "COMPLEXITY_SCOPE_TAG": "По тегу",
        "COMPLEXITY_TAGS": "Теги",
        "COMPLEXITY_EMPTY": "В выбранной области задач не найдено.",
        "COMPLEXITY_FILTER_TITLE": "Фильтр по уровню",
        "COMPLEXITY_FILTER_NONE": "Выберите хотя бы один уровень",
        "IMPORT_TITLE": "Импорт документа",
        "IMPORT_PATH": "Путь",
        "IMPORT_MODE": "Режим",
        "IMPORT_MODE_APPEND": "Добавить к задачам",
        "IMPORT_MODE_REPLACE": "Заменить задачи",
        "EXPAND_TITLE": "Развернуть задачи",
        "EXPAND_DONE": "Развернуто задач: {tasks}, подзадач создано: {subtasks}",
        "EXPAND_PREVIEW_TITLE": "Предпросмотр подзадач",
        "DELETE_TITLE": "Удаление задач",
        "DELETE_CONFIRM": "Удалить выбранные задачи ({count})? Перед удалением можно будет оценить последствия.",
        "DELETE_RECURSIVE": "Рекурсивно",
        "DELETE_FORCE": "Принудительно",
        "DELETE_TOTAL": "Будет удалено задач: {count}",
        "DELETE_BLOCKING": "Препятствие: {reason}",
        "DELETE_DONE": "Удалено задач: {count}",
        "UNDO_TITLE": "Отмена",
        "UNDO_AVAILABLE": "Отмена доступна ещё {seconds} с",
        "UNDO_EXPIRED": "Время для отмены истекло",
        "UNDO_UNAVAILABLE": "Отмена больше недоступна.",
        "UNDO_COMPLETED": "Отмена выполнена",
    },
}

__all__ = ["LANG_PACK"]
