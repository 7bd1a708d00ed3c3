"""Toolkit bindings. Importing a binding module requires its toolkit."""
