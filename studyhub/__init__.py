"""StudyHub backend API."""
