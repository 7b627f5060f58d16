"""Handlers for 'taskdeck comment' commands."""

from taskdeck.cli._common import error, output_json, output_result, run


def comment_list(args) -> int:
    """List a task's comments."""

    async def go(api):
        comments = await api.list_comments(args.task)
        if args.json:
            output_json(
                [
                    {
                        "id": c.id,
                        "author": c.author,
                        "content": c.content,
                        "reply_to_id": c.reply_to_id,
                        "created_at": c.created_at,
                    }
                    for c in comments
                ]
            )
        elif not comments:
            print("no comments")
        else:
            for c in comments:
                reply = f" (reply to {c.reply_to_id})" if c.reply_to_id else ""
                print(f"{c.id}  {c.author}{reply}: {c.content}")
        return 0

    return run(args, go)


def comment_add(args) -> int:
    """Add a comment to a task."""

    async def go(api):
        comment = await api.add_comment(args.task, args.content, reply_to_id=args.reply_to)
        output_result(
            {"id": comment.id, "task_id": args.task, "content": comment.content},
            f"added comment {comment.id} to task {args.task}",
            args.json,
        )
        return 0

    return run(args, go)


def comment_edit(args) -> int:
    """Replace a comment's text."""
    content = args.content.strip()
    if not content:
        error("comment text is empty", args.json)

    async def go(api):
        comment = await api.update_comment(args.id, content)
        output_result(
            {"id": comment.id, "content": comment.content},
            f"updated comment {comment.id}",
            args.json,
        )
        return 0

    return run(args, go)


def comment_rm(args) -> int:
    """Delete a comment."""

    async def go(api):
        await api.delete_comment(args.id)
        output_result({"id": args.id, "deleted": True}, f"deleted comment {args.id}", args.json)
        return 0

    return run(args, go)
