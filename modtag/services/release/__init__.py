"""Module release workflow: parse, check, publish, gate."""
