"""Application wiring: controller, session event relay, and entrypoints."""
