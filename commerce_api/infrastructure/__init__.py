"""Infrastructure layer: async DB pool and credential store implementations."""
