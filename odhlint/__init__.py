"""ODH Lint: upgrade-readiness diagnostics for Open Data Hub clusters."""

__version__ = "0.1.0"
