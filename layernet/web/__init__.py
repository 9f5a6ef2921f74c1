"""HTTP interface for building, running and training networks."""
