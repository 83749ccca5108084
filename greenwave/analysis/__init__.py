"""Level authoring and reporting tools."""
