"""Offer-fill arbitrage bot for GalaSwap token swaps."""
