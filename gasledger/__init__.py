"""Gas storage telemetry ledger."""
