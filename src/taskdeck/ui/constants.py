"""Icons and display constants for the taskdeck UI."""

ICON_PROJECT = "📁"
ICON_STAGE = "🗂"
ICON_TASK = "📝"
ICON_USER = "👤"
ICON_DUE = "📅"
ICON_OVERDUE = "⏰"
ICON_COMMENT = "💬"
ICON_LOCK = "🔒"
ICON_DELETE = "🗑"
ICON_CONFIRM = "✅"
ICON_BACK = "🔙"

PRIORITY_ICONS = {"P1": "🔴", "P2": "🟡", "P3": "🟢"}

STATUS_LABELS = {
    "todo": "To do",
    "in_progress": "In progress",
    "done": "Done",
    "cancelled": "Cancelled",
}
