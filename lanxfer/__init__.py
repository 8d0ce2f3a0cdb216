"""Send files and directory trees across a local network over TCP, from the command line or as a library."""

__version__ = "0.1.0"