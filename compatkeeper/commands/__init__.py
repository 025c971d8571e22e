"""Click subcommands for compatkeeper, registered by :mod:`compatkeeper.cli`."""
