"""Authorization core of the Mr. Eggs Nusantara ERP."""

__version__ = "0.1.0"
