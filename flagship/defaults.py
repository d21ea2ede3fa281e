"""
Default and environment resolution.

After the command line has been consumed, every option that is still unbound
gets a value from, in order:

1. its declared default literals (all of them, in declaration order: one
   literal for scalars, a list for sequences, 'key:value' entries for maps);
2. the first environment variable among its env names that holds a non-empty
   value (split on env_delim for sequences and mappings when one is set);
3. nothing: the option stays unset and reports its zero value.

Values bound from the command line are never touched, and running the
resolver twice has no further effect.
"""
import logging
import os

from .options import Kind, Source

logger = logging.getLogger(__name__)


def _environment(option, environ, /):
    for name in option.env:
        if value := environ.get(name):
            return name, value
    return None, None


def resolve(command, environ=None, /):
    """
    Fill unbound options of 'command' and of all its subcommands.

    parameters
    - command: Command
      root of the tree to resolve (subcommands are included).
    - environ: Mapping[str, str] | None
      the environment to probe; os.environ when None.

    raises
    - InvalidValueError / InvalidChoiceError: a default literal or environment
      value cannot be converted.
    """
    environ = os.environ if environ is None else environ

    for node in command.traverse():
        for option in node.each_option():
            if option.isset:
                continue

            if option.default:
                logger.debug("binding default %r to %s", option.default, option)
                for literal in option.default:
                    option.bind(literal, source=Source.DEFAULT)
                continue

            name, value = _environment(option, environ)
            if name is None:
                continue

            if option.env_delim is not None and option.kind in (Kind.SEQUENCE, Kind.MAPPING):
                literals = value.split(option.env_delim)
            else:
                literals = [value]
            logger.debug("binding environment variable %s to %s", name, option)
            for literal in literals:
                option.bind(literal, source=Source.ENV, input="%s (from %s)" % (option, name))


__all__ = (
    "resolve",
)
