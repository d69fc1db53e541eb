import os

# must be set before app.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite:///./test_dashboard.db")
os.environ.setdefault("VALIDATION_MODE", "lenient")
