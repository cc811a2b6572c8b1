"""Pure domain types for the stock kernel: models, DTOs, clock."""
