"""mountctl - lifecycle management for systemd mount units.

Keeps a directory of mount definitions in sync with the units installed
in the systemd unit directory.
"""

__version__ = "0.3.0"
