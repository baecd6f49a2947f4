"""CLI UI related functions"""

import logging
import sys
from traceback import format_exception

import colorful as cf
from texttable import Texttable

UI_COLORS = {
    # --
    "teal": "#027777",
    "grey": "#777777",
    "magenta": "#9510ED",
    "red": "#991010",
}


def init(args):
    """Initialise the UI, including logging"""

    if args["--vverbose"]:
        level = "DEBUG"
    elif args["--verbose"]:
        level = "INFO"
    else:
        level = None

    root_logger = logging.getLogger("toyforth")

    if not args["--no-colours"]:
        import coloredlogs

        cf.use_true_colors()
        cf.use_palette(UI_COLORS)
        cf.update_palette(UI_COLORS)
        if level:
            coloredlogs.install(
                fmt="[%(asctime)s.%(msecs)03d] %(name)-25s %(message)s",
                datefmt="%H:%M:%S",
                level=level,
                logger=root_logger,
                stream=sys.stderr,
            )
    else:
        cf.disable()
        if level:
            logging.basicConfig(
                format="%(name)-25s %(message)s", level=level, stream=sys.stderr
            )


## String colour modifiers


def dim(string):
    return cf.grey(string)


def bad(string):
    return cf.bold_red(string)


def format_source_problem(
    source_filename, source_lineno, source_line, source_column,
):
    if any(
        x is None for x in (source_filename, source_lineno, source_line, source_column)
    ):
        return "<unknown>"

    return (
        f"{source_filename}:{source_lineno}\n...\n{source_lineno}: {source_line}\n"
        + " " * (source_column + len(str(source_lineno)) + 1)
        + "^\n"
    )


def report_error(exc, stream=None):
    """Print a ToyForth error, pointing at the token that caused it"""
    stream = stream or sys.stdout
    if exc.location:
        stream.write("\n" + format_source_problem(*exc.location))
    stream.write(str(bad(f"Error: {exc}".strip())) + "\n")


## graceful exits


def exit_problem(problem: str, suggested_fix: str, location=None):
    """Exit because of a user-correctable problem"""
    if location:
        print("\n" + format_source_problem(*location), end="")
    print("\n" + bad(problem))
    if suggested_fix:
        print(suggested_fix)
    if not suggested_fix.endswith("\n"):
        print("")
    sys.exit(1)


def exit_bug(msg, *, data=None):
    """Something broke unexpectedly while running"""
    print(bad("\nUnexpected error.\n" + str(msg)))

    exc_type, exc_value, exc_traceback = sys.exc_info()

    if exc_type:
        print("\n" + "".join(format_exception(exc_type, exc_value, exc_traceback)))
    else:
        print("No traceback")

    if data:
        print(f"Associated Data:\n{data}")

    sys.exit(1)


## Tables


def print_words(words: dict, stream=None):
    """Print a table of user-defined words and their bodies"""
    stream = stream or sys.stdout
    table = Texttable(max_width=100)
    alignment = ["l", "l"]
    table.set_cols_align(alignment)
    table.set_header_align(alignment)
    table.set_cols_dtype(["t", "t"])
    table.header(["Word", "Definition"])
    table.set_deco(Texttable.HEADER)
    for name, word in words.items():
        table.add_row([name, " ".join(i.as_token() for i in word.body)])
    stream.write("\n" + table.draw() + "\n\n")


def print_events(events: list, stream=None):
    """Print the events recorded by a machine Probe"""
    stream = stream or sys.stderr
    table = Texttable(max_width=100)
    alignment = ["r", "l", "l"]
    table.set_cols_align(alignment)
    table.set_header_align(alignment)
    table.set_cols_dtype(["i", "t", "t"])
    table.header(["#", "Event", "Data"])
    table.set_deco(Texttable.HEADER)
    for idx, e in enumerate(events):
        data = " ".join(f"{k}={v}" for k, v in e.data.items())
        table.add_row([idx, e.event, data])
    stream.write("\n" + table.draw() + "\n")
