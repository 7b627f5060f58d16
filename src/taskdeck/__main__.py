"""Entry point for the taskdeck CLI."""

import sys

NOUNS = {"login", "logout", "whoami", "project", "member", "stage", "task", "comment"}


def main():
    from taskdeck.cli import build_parser
    from taskdeck.cli._common import configure_logging

    # No noun = TUI mode; global options like --api-url still apply
    if not any(arg in NOUNS for arg in sys.argv[1:]):
        args = build_parser().parse_args()

        from taskdeck.config import load_settings
        from taskdeck.ui import TaskdeckApp

        settings = load_settings(api_url=args.api_url)
        # the TUI owns the terminal, so verbose logs go to a file
        configure_logging(args.verbose, log_file=settings.home / "taskdeck.log")
        TaskdeckApp(settings).run()
        return

    parser = build_parser()
    args = parser.parse_args()

    if not hasattr(args, "func"):
        parser.print_help()
        sys.exit(1)

    configure_logging(args.verbose)
    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
