"""WingOps - deployment and operations toolkit for WingCompanion."""

__version__ = "1.0.0"
