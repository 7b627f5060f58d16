"""Handlers for 'taskdeck stage' commands."""

from taskdeck.cli._common import error, output_json, output_result, run
from taskdeck.validation import require_valid, validate_stage


def stage_list(args) -> int:
    """List a project's stages in board order."""

    async def go(api):
        stages = await api.list_stages(args.project)
        tasks = await api.list_tasks(args.project)
        items = [
            {
                "id": s.id,
                "name": s.name,
                "position": s.position,
                "color": s.color,
                "task_limit": s.task_limit,
                "tasks": sum(1 for t in tasks if t.stage_id == s.id),
            }
            for s in stages
        ]
        if args.json:
            output_json(items)
        else:
            for s in items:
                limit = f"/{s['task_limit']}" if s["task_limit"] else ""
                print(f"{s['id']}  {s['name']:<16} {s['tasks']}{limit} tasks")
        return 0

    return run(args, go)


def stage_add(args) -> int:
    """Create a stage at the end of the board."""
    fields = {"project_id": args.project, "name": args.name, "description": args.description or ""}
    if args.color:
        fields["color"] = args.color
    if args.limit is not None:
        fields["task_limit"] = args.limit

    async def go(api):
        require_valid(validate_stage(fields))
        stage = await api.create_stage(fields)
        output_result(
            {"id": stage.id, "name": stage.name, "position": stage.position},
            f"created stage {stage.id}  {stage.name}",
            args.json,
        )
        return 0

    return run(args, go)


def stage_rm(args) -> int:
    """Delete a stage together with its tasks."""

    async def go(api):
        await api.delete_stage(args.id)
        output_result({"id": args.id, "deleted": True}, f"deleted stage {args.id}", args.json)
        return 0

    return run(args, go)


def stage_edit(args) -> int:
    """Change a stage's name, description, color or task limit."""
    changes = {}
    for attr, key in (("name", "name"), ("description", "description"), ("color", "color"), ("limit", "task_limit")):
        value = getattr(args, attr)
        if value is not None:
            changes[key] = value
    if not changes:
        error("nothing to change", args.json)

    errors = validate_stage(changes)
    if "name" not in changes:
        errors.pop("name", None)

    async def go(api):
        require_valid(errors)
        stage = await api.update_stage(args.id, changes)
        output_result(
            {"id": stage.id, "name": stage.name, "color": stage.color, "task_limit": stage.task_limit},
            f"updated stage {stage.id}  {stage.name}",
            args.json,
        )
        return 0

    return run(args, go)


def stage_reorder(args) -> int:
    """Put a project's stages in the given order.

    Stages left off the command line keep their relative order after the
    named ones.
    """

    async def go(api):
        stages = await api.list_stages(args.project)
        known = [s.id for s in stages]
        unknown = [sid for sid in args.ids if sid not in known]
        if unknown:
            error(f"Stage '{unknown[0]}' is not in project {args.project}.", args.json)
        order = list(dict.fromkeys(args.ids))
        order += [sid for sid in known if sid not in order]
        await api.reorder_stages(order)
        by_id = {s.id: s for s in stages}
        output_result(
            [{"id": sid, "name": by_id[sid].name, "position": i} for i, sid in enumerate(order)],
            "stage order: " + ", ".join(by_id[sid].name for sid in order),
            args.json,
        )
        return 0

    return run(args, go)
