"""ToyForth.

Usage:
  toyforth [options] words FILE...
  toyforth [options] [FILE...]
  toyforth --version
  toyforth -h | --help

Commands:
  words    Load files and list the words they define.
  default  Run files, or start the interactive interpreter if there are none.

Options:
  --version       Show version.
  -h, --help      Show this screen.
  -q, --quiet     Be quiet.
  -v, --verbose   Be verbose.
  -V, --vverbose  Be very verbose.
  --no-colours    Disable colours in CLI output.
  --trace         Print the machine events when finished.

  -e SOURCE, --eval=SOURCE  Run SOURCE (after any files).
  --config=CONFIG           Config file to use (default: toyforth.toml)
"""

import logging
import sys
import time
from functools import wraps

from docopt import docopt

from .. import __version__, config
from ..config_classes import BANNER
from ..exceptions import ForthError, UnexpectedError, UserResolvableError
from ..machine.machine import ForthMachine
from . import interface as ui
from .interface import dim, exit_bug, exit_problem, init

LOG = logging.getLogger(__name__)


class SourceFileError(UserResolvableError):
    """Can't read source file"""


def timed(fn):
    """Time execution of fn and print it"""

    @wraps(fn)
    def _wrapped(args, **kwargs):
        start = time.time()
        fn(args, **kwargs)
        end = time.time()
        if not args["--quiet"]:
            sys.stderr.write(str(dim(f"\n-- {int((end - start) * 1000)}ms\n")))

    return _wrapped


def need_cfg(fn):
    """Exec fn with config"""

    @wraps(fn)
    def _wrapped(args):
        cfg = config.load(args)
        return fn(args, cfg=cfg)

    return _wrapped


def _read_source(filename) -> str:
    try:
        with open(filename, "r") as f:
            return f.read()
    except OSError as exc:
        raise SourceFileError(f"{filename}: {exc.strerror}", "Check the path.")


def _new_machine(args, cfg) -> ForthMachine:
    return ForthMachine(trace=args["--trace"] or cfg.machine.trace)


def _feed_all(args, machine: ForthMachine):
    for filename in args["FILE"]:
        LOG.info("Running %s", filename)
        machine.feed(_read_source(filename), filename=filename)
    if args["--eval"]:
        machine.feed(args["--eval"], filename="<eval>")


def _finish(machine: ForthMachine):
    if machine.probe.enabled:
        ui.print_events(machine.probe.events)
        sys.stderr.write(machine.state.to_table() + "\n")


@need_cfg
@timed
def _run(args, cfg):
    machine = _new_machine(args, cfg)
    try:
        _feed_all(args, machine)
    finally:
        sys.stdout.write("\n")
        _finish(machine)
    if machine.compiling:
        LOG.warning("Input ended inside the definition of %s", machine.state.mode.name)


@need_cfg
def _words(args, cfg):
    machine = _new_machine(args, cfg)
    _feed_all(args, machine)
    ui.print_words(machine.dictionary.user_words())
    _finish(machine)


@need_cfg
def _repl(args, cfg):
    """Read lines from stdin and run them, like a classic Forth terminal"""
    machine = _new_machine(args, cfg)
    if cfg.repl.banner and not args["--quiet"]:
        print(BANNER)

    while True:
        try:
            line = input(cfg.repl.prompt)
        except EOFError:
            break
        except KeyboardInterrupt:
            print()
            break

        try:
            machine.feed(line, filename="<stdin>")
        except ForthError as exc:
            # Keep going. The machine is left in whatever state it was in.
            ui.report_error(exc)

        if cfg.repl.acknowledge:
            print(" compiled" if machine.compiling else " ok")
        else:
            sys.stdout.flush()

    _finish(machine)


def dispatch(args):
    if args["words"]:
        _words(args)
    elif args["FILE"] or args["--eval"]:
        _run(args)
    else:
        _repl(args)


def main():
    args = docopt(__doc__, version=__version__)
    init(args)
    LOG.debug("CLI args: %s", args)

    try:
        dispatch(args)
    except UserResolvableError as exc:
        exit_problem(exc.headline(), exc.suggested_fix, exc.location)
    except UnexpectedError as exc:
        exit_bug(str(exc))
    except Exception as exc:
        exit_bug(repr(exc))


if __name__ == "__main__":
    main()
