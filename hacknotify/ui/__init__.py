from .components import (
    header,
    offline_document,
    offline_banner,
    urgency_label,
    deadline_card,
    task_item,
    no_team_notice,
    save_task,
)

__all__ = [
    "header",
    "offline_document",
    "offline_banner",
    "urgency_label",
    "deadline_card",
    "task_item",
    "no_team_notice",
    "save_task",
]
