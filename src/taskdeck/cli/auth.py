"""Handlers for 'taskdeck login', 'logout' and 'whoami'."""

import getpass

from taskdeck.cli._common import error, load_session, output_json, output_result, run
from taskdeck.validation import require_valid, validate_login


def login(args) -> int:
    """Sign in (or register with --register) and store the session."""
    password = args.password or getpass.getpass("Password: ")
    data = {"email": args.email, "password": password, "username": args.username}

    async def go(api):
        require_valid(validate_login(data, register=args.register))
        if args.register:
            user = await api.register(args.username, args.email, password)
        else:
            user = await api.login(args.email, password)
        output_result(user.to_dict(), f"logged in as {user.username or user.email}", args.json)
        return 0

    return run(args, go, login_required=False)


def logout(args) -> int:
    """Forget the stored session."""
    load_session(args).clear()
    output_result({"logged_in": False}, "logged out", args.json)
    return 0


def whoami(args) -> int:
    """Show the user of the stored session."""
    user = load_session(args).current_user
    if user is None:
        error("not logged in, run `taskdeck login`", args.json)
    if args.json:
        output_json(user.to_dict())
    else:
        print(f"{user.username} <{user.email}>" + ("  (admin)" if user.is_admin else ""))
    return 0
