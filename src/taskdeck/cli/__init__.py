"""CLI argument parser and dispatch for taskdeck."""

import argparse

from taskdeck.cli.auth import login, logout, whoami
from taskdeck.cli.comment import comment_add, comment_edit, comment_list, comment_rm
from taskdeck.cli.member import member_add, member_list, member_rm
from taskdeck.cli.project import project_add, project_edit, project_list, project_rm, project_stats
from taskdeck.cli.stage import stage_add, stage_edit, stage_list, stage_reorder, stage_rm
from taskdeck.cli.task import task_add, task_list, task_move, task_rm
from taskdeck.model.records import PROJECT_ROLES, TASK_PRIORITIES, TASK_STATUSES, coerce_id


def build_parser() -> argparse.ArgumentParser:
    """Build the full CLI argument parser."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--api-url", dest="api_url", help="Backend base URL (default: from config)")
    common.add_argument("--json", action="store_true", help="Machine-readable JSON output")
    common.add_argument("-v", "--verbose", action="store_true", help="Log requests and moves to stderr")

    parser = argparse.ArgumentParser(
        prog="taskdeck",
        description="Terminal kanban client. Run without a command to start the TUI.",
        parents=[common],
    )

    nouns = parser.add_subparsers(dest="noun")

    # --- auth ---
    login_p = nouns.add_parser("login", help="Sign in and store the session", parents=[common])
    login_p.add_argument("email", help="Account email")
    login_p.add_argument("--password", help="Password (prompted when omitted)")
    login_p.add_argument("--register", action="store_true", help="Create the account first")
    login_p.add_argument("--username", help="Username, required with --register")
    login_p.set_defaults(func=login)

    logout_p = nouns.add_parser("logout", help="Forget the stored session", parents=[common])
    logout_p.set_defaults(func=logout)

    whoami_p = nouns.add_parser("whoami", help="Show the signed-in user", parents=[common])
    whoami_p.set_defaults(func=whoami)

    # --- project ---
    project_p = nouns.add_parser("project", help="Project operations", parents=[common])
    project_verbs = project_p.add_subparsers(dest="verb")

    project_list_p = project_verbs.add_parser("list", help="List projects", parents=[common])
    project_list_p.set_defaults(func=project_list)

    project_add_p = project_verbs.add_parser("add", help="Create a project", parents=[common])
    project_add_p.add_argument("name", help="Project name")
    project_add_p.add_argument("--description", default="", help="Project description")
    project_add_p.add_argument("--start", help="Start date (YYYY-MM-DD)")
    project_add_p.add_argument("--end", help="End date (YYYY-MM-DD)")
    project_add_p.set_defaults(func=project_add)

    project_rm_p = project_verbs.add_parser("rm", help="Delete a project", parents=[common])
    project_rm_p.add_argument("id", type=coerce_id, help="Project ID")
    project_rm_p.set_defaults(func=project_rm)

    project_edit_p = project_verbs.add_parser("edit", help="Change a project", parents=[common])
    project_edit_p.add_argument("id", type=coerce_id, help="Project ID")
    project_edit_p.add_argument("--name", help="New name")
    project_edit_p.add_argument("--description", help="New description")
    project_edit_p.add_argument("--start", help="Start date (YYYY-MM-DD)")
    project_edit_p.add_argument("--end", help="End date (YYYY-MM-DD)")
    project_edit_p.add_argument("--status", help="Project status, e.g. active or completed")
    project_edit_p.set_defaults(func=project_edit)

    project_stats_p = project_verbs.add_parser("stats", help="Show project analytics", parents=[common])
    project_stats_p.add_argument("id", type=coerce_id, help="Project ID")
    project_stats_p.set_defaults(func=project_stats)

    # project with no verb = list
    project_p.set_defaults(func=project_list)

    # --- member ---
    member_p = nouns.add_parser("member", help="Project membership", parents=[common])
    member_verbs = member_p.add_subparsers(dest="verb")

    member_list_p = member_verbs.add_parser("list", help="List a project's members", parents=[common])
    member_list_p.add_argument("project", type=coerce_id, help="Project ID")
    member_list_p.set_defaults(func=member_list)

    member_add_p = member_verbs.add_parser("add", help="Add a user to a project", parents=[common])
    member_add_p.add_argument("project", type=coerce_id, help="Project ID")
    member_add_p.add_argument("user", type=coerce_id, help="User ID, username or email")
    member_add_p.add_argument("--role", choices=PROJECT_ROLES, default="collaborator", help="Project role")
    member_add_p.set_defaults(func=member_add)

    member_rm_p = member_verbs.add_parser("rm", help="Remove a user from a project", parents=[common])
    member_rm_p.add_argument("project", type=coerce_id, help="Project ID")
    member_rm_p.add_argument("user", type=coerce_id, help="User ID, username or email")
    member_rm_p.set_defaults(func=member_rm)

    # --- stage ---
    stage_p = nouns.add_parser("stage", help="Stage operations", parents=[common])
    stage_verbs = stage_p.add_subparsers(dest="verb")

    stage_list_p = stage_verbs.add_parser("list", help="List a project's stages", parents=[common])
    stage_list_p.add_argument("project", type=coerce_id, help="Project ID")
    stage_list_p.set_defaults(func=stage_list)

    stage_add_p = stage_verbs.add_parser("add", help="Create a stage", parents=[common])
    stage_add_p.add_argument("project", type=coerce_id, help="Project ID")
    stage_add_p.add_argument("name", help="Stage name")
    stage_add_p.add_argument("--description", default="", help="Stage description")
    stage_add_p.add_argument("--color", help="#RRGGBB or a palette name")
    stage_add_p.add_argument("--limit", type=int, help="Maximum number of tasks")
    stage_add_p.set_defaults(func=stage_add)

    stage_rm_p = stage_verbs.add_parser("rm", help="Delete a stage and its tasks", parents=[common])
    stage_rm_p.add_argument("id", type=coerce_id, help="Stage ID")
    stage_rm_p.set_defaults(func=stage_rm)

    stage_edit_p = stage_verbs.add_parser("edit", help="Change a stage", parents=[common])
    stage_edit_p.add_argument("id", type=coerce_id, help="Stage ID")
    stage_edit_p.add_argument("--name", help="New name")
    stage_edit_p.add_argument("--description", help="New description")
    stage_edit_p.add_argument("--color", help="#RRGGBB or a palette name")
    stage_edit_p.add_argument("--limit", type=int, help="Maximum number of tasks")
    stage_edit_p.set_defaults(func=stage_edit)

    stage_reorder_p = stage_verbs.add_parser("reorder", help="Change the order of stages", parents=[common])
    stage_reorder_p.add_argument("project", type=coerce_id, help="Project ID")
    stage_reorder_p.add_argument("ids", type=coerce_id, nargs="+", help="Stage IDs in their new order")
    stage_reorder_p.set_defaults(func=stage_reorder)

    # --- task ---
    task_p = nouns.add_parser("task", help="Task operations", parents=[common])
    task_verbs = task_p.add_subparsers(dest="verb")

    task_list_p = task_verbs.add_parser("list", help="List tasks by stage", parents=[common])
    task_list_p.add_argument("project", type=coerce_id, help="Project ID")
    task_list_p.add_argument("--stage", type=coerce_id, help="Only this stage")
    task_list_p.add_argument(
        "--assignee", action="append", help="Only tasks assigned to this user ID ('unassigned' for none)"
    )
    task_list_p.set_defaults(func=task_list)

    task_add_p = task_verbs.add_parser("add", help="Create a task", parents=[common])
    task_add_p.add_argument("project", type=coerce_id, help="Project ID")
    task_add_p.add_argument("title", help="Task title")
    task_add_p.add_argument("--stage", type=coerce_id, help="Target stage ID (default: first stage)")
    task_add_p.add_argument("--description", default="", help="Task description")
    task_add_p.add_argument("--priority", choices=TASK_PRIORITIES, help="Priority")
    task_add_p.add_argument("--status", choices=TASK_STATUSES, help="Status")
    task_add_p.add_argument("--due", help="Due date (YYYY-MM-DD)")
    task_add_p.add_argument("--hours", type=float, help="Estimated hours")
    task_add_p.add_argument("--assignee", type=coerce_id, help="Assignee user ID")
    task_add_p.set_defaults(func=task_add)

    task_move_p = task_verbs.add_parser("move", help="Move a task to another stage", parents=[common])
    task_move_p.add_argument("project", type=coerce_id, help="Project ID")
    task_move_p.add_argument("id", type=coerce_id, help="Task ID")
    task_move_p.add_argument("--stage", type=coerce_id, required=True, help="Target stage ID")
    task_move_p.set_defaults(func=task_move)

    task_rm_p = task_verbs.add_parser("rm", help="Delete a task", parents=[common])
    task_rm_p.add_argument("id", type=coerce_id, help="Task ID")
    task_rm_p.set_defaults(func=task_rm)

    # --- comment ---
    comment_p = nouns.add_parser("comment", help="Task comments", parents=[common])
    comment_verbs = comment_p.add_subparsers(dest="verb")

    comment_list_p = comment_verbs.add_parser("list", help="List a task's comments", parents=[common])
    comment_list_p.add_argument("task", type=coerce_id, help="Task ID")
    comment_list_p.set_defaults(func=comment_list)

    comment_add_p = comment_verbs.add_parser("add", help="Comment on a task", parents=[common])
    comment_add_p.add_argument("task", type=coerce_id, help="Task ID")
    comment_add_p.add_argument("content", help="Comment text")
    comment_add_p.add_argument("--reply-to", dest="reply_to", type=coerce_id, help="Comment ID to reply to")
    comment_add_p.set_defaults(func=comment_add)

    comment_edit_p = comment_verbs.add_parser("edit", help="Change a comment's text", parents=[common])
    comment_edit_p.add_argument("id", type=coerce_id, help="Comment ID")
    comment_edit_p.add_argument("content", help="New text")
    comment_edit_p.set_defaults(func=comment_edit)

    comment_rm_p = comment_verbs.add_parser("rm", help="Delete a comment", parents=[common])
    comment_rm_p.add_argument("id", type=coerce_id, help="Comment ID")
    comment_rm_p.set_defaults(func=comment_rm)

    return parser
