"""Handlers for 'taskdeck member' commands."""

from taskdeck.cli._common import error, output_json, output_result, run


async def resolve_user(api, who, json_mode: bool):
    """User id for ``who``: an id as given, else a username or email search."""
    if isinstance(who, int):
        return who
    users = await api.search_users(who)
    exact = [u for u in users if who in (u.username, u.email)]
    matches = exact or users
    if not matches:
        error(f"No user matches '{who}'.", json_mode)
    if len(matches) > 1:
        names = [f"  {u.id}  {u.username} <{u.email}>" for u in matches]
        error(f"'{who}' matches several users:\n" + "\n".join(names), json_mode)
    return matches[0].id


def member_list(args) -> int:
    """List a project's members and their roles."""

    async def go(api):
        members = await api.list_members(args.project)
        if args.json:
            output_json([{"user_id": m.user_id, "username": m.username, "role": m.role} for m in members])
        elif not members:
            print("no members")
        else:
            for m in members:
                print(f"{m.user_id}  {m.username:<16} {m.role}")
        return 0

    return run(args, go)


def member_add(args) -> int:
    """Add a user to a project."""

    async def go(api):
        user_id = await resolve_user(api, args.user, args.json)
        member = await api.add_member(args.project, user_id, args.role)
        output_result(
            {"project_id": args.project, "user_id": member.user_id, "role": member.role},
            f"added {member.username} to project {args.project} as {member.role}",
            args.json,
        )
        return 0

    return run(args, go)


def member_rm(args) -> int:
    """Remove a user from a project."""

    async def go(api):
        user_id = await resolve_user(api, args.user, args.json)
        await api.remove_member(args.project, user_id)
        output_result(
            {"project_id": args.project, "user_id": user_id, "removed": True},
            f"removed user {user_id} from project {args.project}",
            args.json,
        )
        return 0

    return run(args, go)
