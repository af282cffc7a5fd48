"""Lead Dispatch - fair, credit-weighted lead distribution for sales teams."""

__version__ = "1.0.0"
