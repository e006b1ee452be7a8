"""Domain layer: contact model, ports and the reconciliation core."""
