"""Domain modules: tenants, balances and token purchases."""
