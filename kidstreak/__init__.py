"""kidstreak - daily task cycle and streak engine for kids."""
