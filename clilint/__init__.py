"""clilint - lint ctfcli challenge.yml files against a configurable policy."""

__version__ = "0.3.0"
