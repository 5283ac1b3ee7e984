"""SimTrader core package."""
