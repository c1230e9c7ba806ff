"""Fatal export errors. Anything raised from here aborts the run with exit status 1."""


class ExportError(RuntimeError):
    """Base class for errors that abort an export run."""


class SourceNotReadyError(ExportError):
    """The source CMS never answered within the retry budget."""


class MirrorError(ExportError):
    """The mirroring tool failed for a reason other than missing assets."""
