"""Handlers for 'taskdeck project' commands."""

from taskdeck.cli._common import error, output_json, output_result, run
from taskdeck.model.board import any_overdue
from taskdeck.model.records import Task
from taskdeck.validation import require_valid, validate_project


def project_list(args) -> int:
    """List projects with task counts and overdue markers."""

    async def go(api):
        projects = await api.list_projects()
        items = []
        for project in projects:
            raw = project.extra.get("tasks")
            if isinstance(raw, list):
                tasks = [Task.from_dict(t) for t in raw if isinstance(t, dict)]
            else:
                tasks = await api.list_tasks(project.id)
            items.append(
                {
                    "id": project.id,
                    "name": project.name,
                    "status": project.status,
                    "tasks": len(tasks),
                    "overdue": any_overdue(tasks),
                }
            )

        if args.json:
            output_json(items)
        elif not items:
            print("no projects")
        else:
            for p in items:
                marker = "  OVERDUE" if p["overdue"] else ""
                noun = "task" if p["tasks"] == 1 else "tasks"
                print(f"{p['id']}  {p['name']:<24} {p['tasks']} {noun}{marker}")
        return 0

    return run(args, go)


def project_add(args) -> int:
    """Create a project."""
    fields = {"name": args.name, "description": args.description or ""}
    if args.start:
        fields["start_date"] = args.start
    if args.end:
        fields["end_date"] = args.end

    async def go(api):
        require_valid(validate_project(fields))
        project = await api.create_project(fields)
        output_result(
            {"id": project.id, "name": project.name},
            f"created project {project.id}  {project.name}",
            args.json,
        )
        return 0

    return run(args, go)


def project_rm(args) -> int:
    """Delete a project."""

    async def go(api):
        await api.delete_project(args.id)
        output_result({"id": args.id, "deleted": True}, f"deleted project {args.id}", args.json)
        return 0

    return run(args, go)


def project_edit(args) -> int:
    """Change a project's name, description, dates or status."""
    changes = {}
    for attr, key in (
        ("name", "name"),
        ("description", "description"),
        ("start", "start_date"),
        ("end", "end_date"),
        ("status", "status"),
    ):
        value = getattr(args, attr)
        if value is not None:
            changes[key] = value
    if not changes:
        error("nothing to change", args.json)

    async def go(api):
        current = await api.get_project(args.id)
        merged = {"name": current.name, "start_date": current.start_date, "end_date": current.end_date}
        require_valid(validate_project({**merged, **changes}))
        project = await api.update_project(args.id, changes)
        output_result(
            {"id": project.id, "name": project.name, "status": project.status},
            f"updated project {project.id}  {project.name}",
            args.json,
        )
        return 0

    return run(args, go)


def project_stats(args) -> int:
    """Show the backend's analytics summary for a project."""

    async def go(api):
        stats = await api.project_stats(args.id)
        if args.json:
            output_json(stats)
        else:
            for key, value in stats.items():
                print(f"{key.replace('_', ' ')}: {value}")
        return 0

    return run(args, go)
