"""Record import and sample data generation."""
