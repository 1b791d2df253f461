"""Errors raised while preparing a native project.

The access-policy translator never raises; everything here comes from the
file-level collaborators, which stop the whole preparation run on failure.
"""


class PrepareError(Exception):
    """Base error for a failed preparation run."""


class ConfigError(PrepareError):
    """config.xml or the settings file could not be read."""


class ProjectFileError(PrepareError):
    """Info.plist or project.pbxproj could not be read or rewritten."""
