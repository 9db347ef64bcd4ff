"""HTTP API for scheduling, payroll and cash handling."""
