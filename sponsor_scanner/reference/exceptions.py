"""Reference set loading exceptions."""


class ReferenceLoadError(Exception):
    """The sponsor reference set could not be loaded or is empty.

    A run must never filter against an empty reference set, so this always
    fails the run.
    """

    pass
