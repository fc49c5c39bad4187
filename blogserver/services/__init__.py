"""Services — stateful orchestration over core and infrastructure."""
