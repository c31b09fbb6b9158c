"""Terminal dashboard for the task manager API.

    taskmanager login you@example.com
    taskmanager list --status todo --search report
    taskmanager add "Write report" --priority high --due 2026-11-01
    taskmanager stats
"""

import argparse
import getpass
import logging
import sys

from frontend.api import ApiClient, ApiClientError
from frontend.session import Session

logger = logging.getLogger(__name__)

STATUS_LABELS = {"todo": "To Do", "in-progress": "In Progress", "completed": "Completed"}


def render_stats(stats):
    cards = [
        ("Total Tasks", stats["total"]),
        ("Completed", stats["byStatus"]["completed"]),
        ("In Progress", stats["byStatus"]["inProgress"]),
        ("Overdue", stats["overdue"]),
    ]
    lines = ["  ".join(f"{label}: {value}" for label, value in cards)]
    by_priority = stats["byPriority"]
    lines.append(
        f"Priority  low: {by_priority['low']}  medium: {by_priority['medium']}  high: {by_priority['high']}"
    )
    return "\n".join(lines)


def render_task_table(tasks):
    if not tasks:
        return "No tasks found."
    rows = [("ID", "STATUS", "PRIORITY", "DUE", "TITLE")]
    for task in tasks:
        rows.append((
            task["id"],
            STATUS_LABELS.get(task["status"], task["status"]),
            task["priority"],
            (task.get("dueDate") or "-")[:10],
            task["title"],
        ))
    widths = [max(len(str(row[i])) for row in rows) for i in range(len(rows[0]) - 1)]
    out = []
    for row in rows:
        cells = [str(cell).ljust(width) for cell, width in zip(row, widths)]
        out.append("  ".join(cells + [str(row[-1])]))
    return "\n".join(out)


def render_task_detail(task):
    lines = [
        task["title"],
        "=" * len(task["title"]),
        f"Status:   {STATUS_LABELS.get(task['status'], task['status'])}",
        f"Priority: {task['priority']}",
        f"Due:      {task.get('dueDate') or '-'}",
        f"Created:  {task['createdAt']}",
        f"Updated:  {task['updatedAt']}",
    ]
    if task.get("description"):
        lines += ["", task["description"]]
    return "\n".join(lines)


def _task_fields(args):
    data = {}
    if getattr(args, "title", None) is not None:
        data["title"] = args.title
    if args.description is not None:
        data["description"] = args.description
    if args.status is not None:
        data["status"] = args.status
    if args.priority is not None:
        data["priority"] = args.priority
    if args.due is not None:
        data["dueDate"] = args.due or None
    return data


def cmd_register(client, args):
    password = args.password or getpass.getpass("Password: ")
    user = client.register(args.name, args.email, password)
    return f"Registered and signed in as {user['name']} <{user['email']}>"


def cmd_login(client, args):
    password = args.password or getpass.getpass("Password: ")
    user = client.login(args.email, password)
    return f"Signed in as {user['name']} <{user['email']}>"


def cmd_logout(client, args):
    client.logout()
    return "Signed out."


def cmd_whoami(client, args):
    user = client.me()
    return f"{user['name']} <{user['email']}>"


def cmd_list(client, args):
    tasks = client.list_tasks(
        status=args.status, priority=args.priority, search=args.search,
        sort_by=args.sort_by, order=args.order,
    )
    return render_task_table(tasks)


def cmd_show(client, args):
    return render_task_detail(client.get_task(args.id))


def cmd_add(client, args):
    task = client.create_task(_task_fields(args))
    return f"Created task {task['id']}"


def cmd_update(client, args):
    data = _task_fields(args)
    if not data:
        return "Nothing to update."
    task = client.update_task(args.id, data)
    return render_task_detail(task)


def cmd_done(client, args):
    client.update_task(args.id, {"status": "completed"})
    return f"Task {args.id} marked as completed"


def cmd_delete(client, args):
    return client.delete_task(args.id)["message"]


def cmd_stats(client, args):
    return render_stats(client.get_stats())


def _add_task_options(parser):
    parser.add_argument("--description", "-d")
    parser.add_argument("--status", choices=sorted(STATUS_LABELS))
    parser.add_argument("--priority", choices=["low", "medium", "high"])
    parser.add_argument("--due", help="ISO-8601 due date; empty string clears it")


def build_parser():
    parser = argparse.ArgumentParser(prog="taskmanager", description="Manage your tasks.")
    parser.add_argument("--api-url", help="API base URL (default: $TASKMANAGER_API_URL)")
    parser.add_argument("--session-file", help="Session file (default: $TASKMANAGER_SESSION)")
    parser.add_argument("-v", "--verbose", action="store_true")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("register")
    p.add_argument("name")
    p.add_argument("email")
    p.add_argument("--password")
    p.set_defaults(func=cmd_register, auth=False)

    p = sub.add_parser("login")
    p.add_argument("email")
    p.add_argument("--password")
    p.set_defaults(func=cmd_login, auth=False)

    p = sub.add_parser("logout")
    p.set_defaults(func=cmd_logout, auth=False)

    p = sub.add_parser("whoami")
    p.set_defaults(func=cmd_whoami, auth=True)

    p = sub.add_parser("list")
    p.add_argument("--status", choices=sorted(STATUS_LABELS))
    p.add_argument("--priority", choices=["low", "medium", "high"])
    p.add_argument("--search", "-s")
    p.add_argument("--sort-by", choices=["createdAt", "updatedAt", "dueDate", "title", "status", "priority"])
    p.add_argument("--order", choices=["asc", "desc"])
    p.set_defaults(func=cmd_list, auth=True)

    p = sub.add_parser("show")
    p.add_argument("id")
    p.set_defaults(func=cmd_show, auth=True)

    p = sub.add_parser("add")
    p.add_argument("title")
    _add_task_options(p)
    p.set_defaults(func=cmd_add, auth=True)

    p = sub.add_parser("update")
    p.add_argument("id")
    p.add_argument("--title")
    _add_task_options(p)
    p.set_defaults(func=cmd_update, auth=True)

    p = sub.add_parser("done")
    p.add_argument("id")
    p.set_defaults(func=cmd_done, auth=True)

    p = sub.add_parser("delete")
    p.add_argument("id")
    p.set_defaults(func=cmd_delete, auth=True)

    p = sub.add_parser("stats")
    p.set_defaults(func=cmd_stats, auth=True)

    return parser


def main(argv=None, http=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    session = Session(args.session_file).load()
    if session.is_authenticated and session.is_expired():
        logger.info("Stored token expired; clearing session")
        session.clear()

    if args.auth and not session.is_authenticated:
        print("Not signed in. Run `taskmanager login <email>` first.", file=sys.stderr)
        return 1

    client = ApiClient(session, base_url=args.api_url, http=http)
    try:
        print(args.func(client, args))
    except ApiClientError as exc:
        print(f"Error: {exc.message}", file=sys.stderr)
        for err in exc.errors:
            print(f"  {err.get('field')}: {err.get('message')}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
