"""Services for CaseKit Citations."""
