"""
Module: wbnoti/commands

Package initializer for the commands module. Registers `/wb` subcommands via decorators.
"""
# === ./wbnoti/commands/__init__.py === #
# No additional code required; commands are registered via decorators in individual files.
