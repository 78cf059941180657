"""Signal Desk - crypto market insight journal and newsletter drafting."""

__version__ = "0.1.0"
