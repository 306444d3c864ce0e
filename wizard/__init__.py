"""Lead wizard: steps, validation, hydration and navigation."""
