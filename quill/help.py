"""
command-line help: the grouped --help listing.

one table per group, groups ordered by priority (ties by name), commands
without a group last under "ungrouped commands". blacklisted groups and
commands without a command-line spelling are left out.
"""
from rich.console import Console, Group as Renderables
from rich.table import Table
from rich.text import Text


def documented_commands(commands, /):
    """
    [(group or None, [command, ...]), ...] in display order.
    """
    buckets = {}
    for command in commands:
        if not command.long:
            continue
        buckets.setdefault(command.group, []).append(command)

    groups = sorted((group for group in buckets if group is not None), key=lambda group: group.sortkey())
    if None in buckets:
        groups.append(None)
    return [
        (group, sorted(buckets[group], key=lambda command: command.long))
        for group in groups
        if group is None or not group.blacklisted
    ]


def render(commands, /, prog="quill"):
    """
    rich renderable listing the command-line options of commands.
    """
    parts = [Text("usage: %s [options]" % prog, "bold")]
    for group, members in documented_commands(commands):
        table = Table(
            title=group.name if group is not None else "ungrouped commands",
            title_justify="left",
            show_header=False,
            box=None,
            padding=(0, 2),
        )
        table.add_column("spellings", style="bold #00E5FF", no_wrap=True)
        table.add_column("arguments", style="#8A8FA3")
        table.add_column("description")
        for command in members:
            arguments = " ".join(argument.name.upper() for argument in command.arguments if not argument.boolean)
            description = command.short_descr or ""
            if command.has_options:
                description += "\noptions: " + " ".join("/" + name for name in sorted(command.options))
            table.add_row(command.option_strings(), arguments, description.strip())
        parts.append(table)
    return Renderables(*parts)


def print_commandline_options(commands, /, prog="quill", console=None):
    (console or Console()).print(render(commands, prog=prog))


__all__ = (
    "documented_commands",
    "render",
    "print_commandline_options",
)
