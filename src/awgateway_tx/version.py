"""AW Gateway - a client for the Ecowitt-style weather gateway protocol."""

__version__ = "0.4.2"
VERSION = __version__
