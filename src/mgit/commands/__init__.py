"""Commands run per package: exec, bootstrap and update."""
