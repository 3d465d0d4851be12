"""ViewModels hold UI-facing state and validation, never I/O."""
