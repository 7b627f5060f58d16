"""Handlers for 'taskdeck task' commands."""

from taskdeck.cli._common import error, find_stage, format_task_line, output_json, output_result, run, task_summary
from taskdeck.model.board import filter_by_assignee, group_tasks
from taskdeck.model.records import coerce_id
from taskdeck.model.store import TaskStore
from taskdeck.reorder import DragReorderController
from taskdeck.validation import require_valid, validate_task


def task_list(args) -> int:
    """List tasks grouped by stage."""

    async def go(api):
        stages = await api.list_stages(args.project)
        tasks = await api.list_tasks(args.project)
        if args.assignee:
            tasks = filter_by_assignee(tasks, args.assignee)
        groups = group_tasks(tasks, stages)
        if args.stage is not None:
            stage = find_stage(stages, args.stage, args.json)
            stages = [stage]

        if args.json:
            output_json([task_summary(t, s) for s in stages for t in groups[s.id]])
        else:
            for s in stages:
                print(f"{s.id}  {s.name}")
                for t in groups[s.id]:
                    print(format_task_line(t, indent="  "))
        return 0

    return run(args, go)


def task_add(args) -> int:
    """Create a task, in the first stage unless --stage is given."""
    fields = {"project_id": args.project, "title": args.title, "description": args.description or ""}
    for key, value in (
        ("priority", args.priority),
        ("status", args.status),
        ("due_date", args.due),
        ("estimated_hours", args.hours),
        ("assignee_id", args.assignee),
    ):
        if value is not None:
            fields[key] = value

    async def go(api):
        require_valid(validate_task(fields))
        stages = await api.list_stages(args.project)
        if not stages:
            error(f"Project '{args.project}' has no stages.", args.json)
        stage = find_stage(stages, args.stage, args.json) if args.stage is not None else stages[0]
        if not stage.allow_task_creation:
            error(f"Stage '{stage.name}' does not accept new tasks.", args.json)
        task = await api.create_task(dict(fields, stage_id=stage.id))
        output_result(task_summary(task, stage), f"created task {task.id} in {stage.name}", args.json)
        return 0

    return run(args, go)


def task_move(args) -> int:
    """Move a task to the end of another stage, through the optimistic move protocol."""
    task_id = coerce_id(args.id)

    async def go(api):
        stages = await api.list_stages(args.project)
        stage = find_stage(stages, args.stage, args.json)
        store = TaskStore(await api.list_tasks(args.project))
        if task_id not in store:
            error(f"Task '{args.id}' not found in project {args.project}.", args.json)
        if store.get(task_id).stage_id == stage.id:
            message = f"task {task_id} is already in {stage.name}"
            output_result(task_summary(store.get(task_id), stage), message, args.json)
            return 0

        failures = []
        controller = DragReorderController(store, api, lambda: stages, on_error=failures.append)
        move = controller.move(task_id, stage.id)
        if move is None:
            error(f"Task '{args.id}' cannot be moved out of its stage.", args.json)
        task = await controller.commit(move)
        if task is None:
            error(failures[0] if failures else "move failed", args.json)
        output_result(
            task_summary(task, stage),
            f"moved task {task.id} to {stage.name} (position {task.position})",
            args.json,
        )
        return 0

    return run(args, go)


def task_rm(args) -> int:
    """Delete a task."""

    async def go(api):
        await api.delete_task(args.id)
        output_result({"id": args.id, "deleted": True}, f"deleted task {args.id}", args.json)
        return 0

    return run(args, go)
