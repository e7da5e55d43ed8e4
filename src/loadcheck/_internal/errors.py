"""Exception hierarchy for loadcheck."""

from __future__ import annotations


class LoadCheckError(Exception):
    """Base class for errors raised by loadcheck itself.

    Failed checks are never reported through exceptions.
    """


class ScenarioError(LoadCheckError):
    """A scenario file or ``@scenario`` declaration cannot be used.

    Raised for a blank scenario name, a plain ``def`` where a coroutine is
    expected, or a file that is missing, fails to import or does not
    declare exactly one scenario.
    """


class ConfigError(LoadCheckError):
    """An environment value or session argument is out of range."""


class EngineError(LoadCheckError):
    """The session itself broke, as opposed to the target misbehaving."""
