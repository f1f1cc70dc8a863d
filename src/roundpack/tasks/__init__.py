"""Task model, task files, validation and splitting."""
