class InternalFailure(Exception):
    """A repository could not be read for a reason other than absence.

    Raised for I/O errors, corrupt objects and malformed descriptor files.
    "Not found" is never reported this way: lookups return ``None`` instead.
    """


class ConfigError(InternalFailure):
    pass


class RepoPathError(ValueError):
    pass
